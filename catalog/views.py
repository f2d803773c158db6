from django.shortcuts import get_object_or_404

from rest_framework.views import APIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from drf_spectacular.utils import extend_schema, OpenApiResponse, OpenApiParameter

from wallets.views import SafePaginator
from . import services
from .models import Category
from .serializers import (
    CategorySerializer,
    ProductSerializer,
    ReviewSerializer,
    ReviewCreateSerializer,
    ReviewStatsSerializer,
)

PAGE_PARAMS = [
    OpenApiParameter(name="page", required=False, type=int),
    OpenApiParameter(name="page_size", required=False, type=int),
]


def _active_product(pk):
    return get_object_or_404(services.active_products(), pk=pk)


class ProductPageView(APIView):
    """Paginated list of products; subclasses pick the queryset."""
    permission_classes = [AllowAny]

    def get_products(self, request, *args, **kwargs):
        raise NotImplementedError

    def get(self, request, *args, **kwargs):
        paginator = SafePaginator()
        page = paginator.paginate_queryset(self.get_products(request, *args, **kwargs), request)
        return paginator.get_paginated_response(ProductSerializer(page, many=True).data)


@extend_schema(description="Newest active products first.", parameters=PAGE_PARAMS,
               responses={200: ProductSerializer(many=True)})
class LatestProductsView(ProductPageView):
    def get_products(self, request):
        return services.latest_products()


@extend_schema(description="Most ordered products first.", parameters=PAGE_PARAMS,
               responses={200: ProductSerializer(many=True)})
class PopularProductsView(ProductPageView):
    def get_products(self, request):
        return services.popular_products()


@extend_schema(description="Products with the most active reviews first.", parameters=PAGE_PARAMS,
               responses={200: ProductSerializer(many=True)})
class MostReviewedProductsView(ProductPageView):
    def get_products(self, request):
        return services.most_reviewed_products()


@extend_schema(
    description="Products from the categories the customer has bought from; latest products otherwise.",
    parameters=PAGE_PARAMS,
    responses={200: ProductSerializer(many=True)},
)
class RecommendedProductsView(ProductPageView):
    def get_products(self, request):
        return services.recommended_products(request.user)


@extend_schema(
    description="Search active products by name or tag. Any keyword may match.",
    parameters=[OpenApiParameter(name="name", required=True, type=str), *PAGE_PARAMS],
    responses={200: ProductSerializer(many=True)},
)
class ProductSearchView(ProductPageView):
    def get_products(self, request):
        return services.search_products(request.query_params.get("name", ""))


@extend_schema(
    description="Active products of a category; `all=1` includes its sub categories.",
    parameters=[OpenApiParameter(name="all", required=False, type=bool), *PAGE_PARAMS],
    responses={200: ProductSerializer(many=True), 404: OpenApiResponse(description="Unknown category")},
)
class CategoryProductsView(ProductPageView):
    def get_products(self, request, pk):
        category = get_object_or_404(Category, pk=pk, status=True)
        include_all = request.query_params.get("all") in {"1", "true", "True"}
        return services.category_products(category, include_descendants=include_all)


@extend_schema(
    description="One active product with its rating.",
    request=None,
    responses={200: ProductSerializer, 404: OpenApiResponse(description="Product not found")},
)
class ProductDetailView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, pk: int):
        return Response(ProductSerializer(_active_product(pk)).data, status=status.HTTP_200_OK)


@extend_schema(
    description="Other products from the same category.",
    request=None,
    responses={200: ProductSerializer(many=True)},
)
class RelatedProductsView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, pk: int):
        products = services.related_products(_active_product(pk))
        return Response(ProductSerializer(products, many=True).data, status=status.HTTP_200_OK)


@extend_schema(
    description="GET lists a product's active reviews; POST submits a review (authenticated).",
    request=ReviewCreateSerializer,
    responses={
        200: ReviewSerializer(many=True),
        201: ReviewSerializer,
        400: OpenApiResponse(description="Validation error"),
        404: OpenApiResponse(description="Product not found"),
    },
)
class ProductReviewsView(APIView):

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated()]
        return [AllowAny()]

    def get(self, request, pk: int):
        product = _active_product(pk)
        qs = product.reviews.filter(status=True).select_related("user")
        paginator = SafePaginator()
        page = paginator.paginate_queryset(qs, request)
        return paginator.get_paginated_response(ReviewSerializer(page, many=True).data)

    def post(self, request, pk: int):
        product = _active_product(pk)
        ser = ReviewCreateSerializer(data=request.data, context={"request": request})
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        review = services.submit_review(
            request.user, product, data["rating"], data["comment"], order=data.get("order"),
        )
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)


@extend_schema(
    description="Review count, average rating and per-star breakdown for a product.",
    request=None,
    responses={200: ReviewStatsSerializer, 404: OpenApiResponse(description="Product not found")},
)
class ReviewStatsView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, pk: int):
        stats = services.review_stats(_active_product(pk))
        return Response(ReviewStatsSerializer(stats).data, status=status.HTTP_200_OK)


@extend_schema(description="Top-level categories.", request=None, responses={200: CategorySerializer(many=True)})
class CategoryListView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(CategorySerializer(services.parent_categories(), many=True).data)


@extend_schema(description="Sub categories of a category.", request=None, responses={200: CategorySerializer(many=True)})
class CategoryChildrenView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, pk: int):
        get_object_or_404(Category, pk=pk, status=True)
        return Response(CategorySerializer(services.child_categories(pk), many=True).data)
