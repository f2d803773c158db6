from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from drf_spectacular.utils import extend_schema, OpenApiResponse, OpenApiParameter

from wallets.views import SafePaginator
from .models import LoyaltyTransaction
from .serializers import LoyaltyTransactionSerializer, PointConversionSerializer
from .services import LoyaltyService


@extend_schema(
    description="List the authenticated user's loyalty point transactions (most recent first).",
    request=None,
    parameters=[
        OpenApiParameter(name="page", required=False, type=int),
        OpenApiParameter(name="page_size", required=False, type=int),
    ],
    responses={200: LoyaltyTransactionSerializer(many=True)},
)
class LoyaltyTransactionListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = LoyaltyTransaction.objects.filter(user=request.user).order_by("-created_at", "-id")
        paginator = SafePaginator()
        page = paginator.paginate_queryset(qs, request)
        return paginator.get_paginated_response(LoyaltyTransactionSerializer(page, many=True).data)


@extend_schema(
    description="Convert loyalty points into wallet balance at the configured exchange rate.",
    request=PointConversionSerializer,
    responses={
        200: OpenApiResponse(description="Converted"),
        400: OpenApiResponse(description="Below minimum or insufficient points"),
        409: OpenApiResponse(description="Loyalty/wallet disabled or write failed"),
    },
)
class PointToWalletView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = PointConversionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        points = serializer.validated_data["point"]

        service = LoyaltyService()
        config = service.config
        if not (config.loyalty_point_status and config.wallet_status):
            return Response({"detail": "Point conversion is not available."}, status=status.HTTP_409_CONFLICT)
        if points < config.loyalty_point_minimum_point:
            return Response(
                {"detail": f"Minimum {config.loyalty_point_minimum_point} points required."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        wallet_amount = service.wallet_amount_for(points)
        try:
            ok = service.convert_points_to_wallet(request.user.pk, points, wallet_amount)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        if not ok:
            return Response({"detail": "Conversion failed."}, status=status.HTTP_409_CONFLICT)

        request.user.refresh_from_db(fields=["wallet_balance", "loyalty_point"])
        return Response({
            "converted_points": points,
            "wallet_amount": str(wallet_amount),
            "wallet_balance": str(request.user.wallet_balance),
            "loyalty_point": request.user.loyalty_point,
        }, status=status.HTTP_200_OK)
