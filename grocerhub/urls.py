from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse

from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

# DRF Spectacular (API docs)
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView


def health_view(_request):
    return JsonResponse({"status": "ok", "app": "GrocerHub", "version": "1.0"})


urlpatterns = [
    # --- Admin ---
    path("admin/", admin.site.urls),

    # --- Allauth (email verification / referral signup) ---
    path("accounts/", include("allauth.urls")),

    # --- JWT Authentication ---
    path("api/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),

    # --- Customers, wallet & loyalty ---
    path("api/users/", include("users.urls")),
    path("api/", include("wallets.urls")),
    path("api/loyalty/", include("rewards.urls")),

    # --- Catalog: products, categories, reviews ---
    path("api/", include("catalog.urls")),

    # --- Coupons & orders ---
    path("api/coupons/", include("coupons.urls")),
    path("api/orders/", include("orders.urls")),

    # --- Payments (Paystack wallet top-up) ---
    path("api/payments/", include("payments.urls")),

    # --- Health ---
    path("api/health/", health_view, name="health"),

    # --- API Schema + Docs ---
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]
