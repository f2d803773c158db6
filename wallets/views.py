from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from rest_framework import status
from rest_framework.pagination import PageNumberPagination

from drf_spectacular.utils import extend_schema, OpenApiResponse, OpenApiParameter

from .filters import WalletTransactionFilter
from .models import WalletTransaction
from .serializers import (
    WalletBalanceSerializer,
    WalletTransactionSerializer,
    AddFundSerializer,
)
from .services import WalletService


# Simple paginator (page & page_size)
class SafePaginator(PageNumberPagination):
    page_size = 25
    page_size_query_param = "page_size"
    max_page_size = 100


@extend_schema(
    description="Get the authenticated user's wallet balance and loyalty points.",
    request=None,
    responses={200: WalletBalanceSerializer},
)
class WalletBalanceView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        request.user.refresh_from_db(fields=["wallet_balance", "loyalty_point"])
        return Response(WalletBalanceSerializer(request.user).data, status=status.HTTP_200_OK)


@extend_schema(
    description="List the authenticated user's wallet transactions (most recent first).",
    request=None,
    parameters=[
        OpenApiParameter(name="page", required=False, type=int),
        OpenApiParameter(name="page_size", required=False, type=int),
        OpenApiParameter(name="transaction_type", required=False, type=str),
        OpenApiParameter(name="created_after", required=False, type=str),
        OpenApiParameter(name="created_before", required=False, type=str),
    ],
    responses={200: WalletTransactionSerializer(many=True)},
)
class WalletTransactionListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = WalletTransaction.objects.filter(user=request.user).order_by("-created_at", "-id")
        qs = WalletTransactionFilter(request.query_params, queryset=qs).qs

        paginator = SafePaginator()
        page = paginator.paginate_queryset(qs, request)
        serializer = WalletTransactionSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)


@extend_schema(
    description="Admin-only credit to a user's wallet (add_fund_by_admin).",
    request=AddFundSerializer,
    responses={
        201: WalletTransactionSerializer,
        400: OpenApiResponse(description="Validation error"),
        409: OpenApiResponse(description="Wallet disabled or write failed"),
    },
)
class AdminAddFundView(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request):
        serializer = AddFundSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        tx = WalletService().credit_or_debit(
            data["user"].pk,
            data["amount"],
            WalletTransaction.Type.ADD_FUND_BY_ADMIN,
            data.get("reference") or f"admin:{request.user.pk}",
        )
        if not tx:
            return Response({"detail": "Wallet transaction declined."}, status=status.HTTP_409_CONFLICT)
        return Response(WalletTransactionSerializer(tx).data, status=status.HTTP_201_CREATED)
