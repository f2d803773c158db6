from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from drf_spectacular.utils import extend_schema, OpenApiParameter

from .evaluator import CouponEvaluator
from .serializers import CouponApplyRequestSerializer, CouponApplyResponseSerializer


@extend_schema(
    description="Discount a coupon is worth for the authenticated customer. "
                "An unknown or ineligible coupon is worth 0.",
    parameters=[
        OpenApiParameter(name="code", required=True, type=str),
        OpenApiParameter(name="amount", required=True, type=str),
        OpenApiParameter(name="delivery_charge", required=False, type=str),
    ],
    responses={200: CouponApplyResponseSerializer},
)
class CouponApplyView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        ser = CouponApplyRequestSerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        discount = CouponEvaluator().evaluate(
            data["code"], data["amount"], request.user.pk, data["delivery_charge"],
        )
        body = CouponApplyResponseSerializer({"code": data["code"], "discount": discount}).data
        return Response(body, status=status.HTTP_200_OK)
