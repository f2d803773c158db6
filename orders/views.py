import logging

from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from drf_spectacular.utils import extend_schema, OpenApiResponse

from coupons.evaluator import CouponEvaluator
from wallets.views import SafePaginator
from .cart import cart_grand_total, price_cart
from .models import Order
from .placement import OrderPlacementService, track_order
from .serializers import PlaceOrderRequestSerializer, OrderSerializer

logger = logging.getLogger(__name__)


@extend_schema(
    description="Place an order from a cart of product ids and quantities. Lines are priced "
                "from the catalog and a coupon code is evaluated server-side; "
                "wallet orders are paid from the wallet right after placement.",
    request=PlaceOrderRequestSerializer,
    responses={
        201: OrderSerializer,
        400: OpenApiResponse(description="Validation error or unknown product"),
        500: OpenApiResponse(description="Order could not be saved"),
    },
)
class PlaceOrderView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        ser = PlaceOrderRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        try:
            cart = price_cart(data["cart"])
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        coupon_code = data.get("coupon_code") or None

        discount = 0
        if coupon_code:
            discount = CouponEvaluator().evaluate(
                coupon_code, cart_grand_total(cart), request.user.pk, data["delivery_charge"],
            )
            if not discount:
                # An ineligible coupon is not recorded as a redemption.
                coupon_code = None

        service = OrderPlacementService()
        order_pk = service.place_order(
            customer_id=request.user.pk,
            email=request.user.email,
            customer_info=data["address"],
            cart=cart,
            payment_method=data["payment_method"],
            discount=discount,
            coupon_code=coupon_code,
            delivery_charge=data["delivery_charge"],
            order_note=data["order_note"],
        )
        if order_pk is None:
            return Response({"detail": "Order could not be placed."}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        payment_error = None
        if data["payment_method"] == "wallet":
            try:
                if not service.pay_with_wallet(order_pk):
                    payment_error = "Wallet payment declined."
            except ValueError as e:
                payment_error = str(e)

        body = OrderSerializer(track_order(order_pk)).data
        if payment_error:
            body["payment_error"] = payment_error
        return Response(body, status=status.HTTP_201_CREATED)


@extend_schema(
    description="List the authenticated customer's orders (most recent first).",
    request=None,
    responses={200: OrderSerializer(many=True)},
)
class OrderListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = Order.objects.filter(user=request.user).prefetch_related("details").order_by("-created_at")
        paginator = SafePaginator()
        page = paginator.paginate_queryset(qs, request)
        return paginator.get_paginated_response(OrderSerializer(page, many=True).data)


@extend_schema(
    description="Track one of the authenticated customer's orders.",
    request=None,
    responses={200: OrderSerializer, 404: OpenApiResponse(description="Order not found.")},
)
class OrderTrackView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk: int):
        order = track_order(pk)
        if order is None or order.user_id != request.user.pk:
            return Response({"detail": "Order not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)
