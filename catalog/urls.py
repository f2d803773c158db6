from django.urls import path
from .views import (
    LatestProductsView,
    PopularProductsView,
    MostReviewedProductsView,
    RecommendedProductsView,
    ProductSearchView,
    ProductDetailView,
    RelatedProductsView,
    ProductReviewsView,
    ReviewStatsView,
    CategoryListView,
    CategoryChildrenView,
    CategoryProductsView,
)

urlpatterns = [
    path("products/latest/", LatestProductsView.as_view(), name="product-latest"),
    path("products/popular/", PopularProductsView.as_view(), name="product-popular"),
    path("products/most-reviewed/", MostReviewedProductsView.as_view(), name="product-most-reviewed"),
    path("products/recommended/", RecommendedProductsView.as_view(), name="product-recommended"),
    path("products/search/", ProductSearchView.as_view(), name="product-search"),
    path("products/<int:pk>/", ProductDetailView.as_view(), name="product-detail"),
    path("products/<int:pk>/related/", RelatedProductsView.as_view(), name="product-related"),
    path("products/<int:pk>/reviews/", ProductReviewsView.as_view(), name="product-reviews"),
    path("products/<int:pk>/reviews/stats/", ReviewStatsView.as_view(), name="product-review-stats"),

    path("categories/", CategoryListView.as_view(), name="category-list"),
    path("categories/<int:pk>/children/", CategoryChildrenView.as_view(), name="category-children"),
    path("categories/<int:pk>/products/", CategoryProductsView.as_view(), name="category-products"),
]
