# payments/views.py
import logging
from decimal import Decimal

from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.utils.decorators import method_decorator
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework import status

from drf_spectacular.utils import extend_schema, OpenApiResponse

from core.uow import UnitOfWork
from wallets.models import WalletTransaction
from wallets.services import WalletService
from .models import PaymentIntent, ProviderLog
from .serializers import PaymentInitRequestSerializer
from .paystack import initialize as ps_initialize, verify as ps_verify, valid_webhook

logger = logging.getLogger(__name__)

# ---- helpers ----------------------------------------------------------------

def _log_provider(user, client_reference, endpoint, req, resp, status_code):
    try:
        ProviderLog.objects.create(
            user=user,
            client_reference=client_reference,
            request_payload=req or {},
            response_payload=resp or {},
            status_code=str(status_code),
            endpoint=endpoint,
        )
    except DatabaseError:
        logger.exception("Could not store provider log for %s", client_reference)


def credit_wallet_once(intent_reference: str) -> bool:
    """
    Credit a successful top-up to the wallet (add_fund) exactly once.
    The intent row is locked so a webhook and a verify call racing on the
    same reference cannot both credit.
    """
    with UnitOfWork():
        intent = PaymentIntent.objects.select_for_update().get(reference=intent_reference)
        if intent.status == "success":
            return False  # already credited

        credited = WalletService().credit_or_debit(
            intent.user_id, intent.amount, WalletTransaction.Type.ADD_FUND, f"paystack:{intent.reference}",
        )
        if not credited:
            logger.error("Top-up %s could not be credited to the wallet", intent.reference)
            return False

        intent.mark_success(when=timezone.now())
    return True

# ---- endpoints ---------------------------------------------------------------

@extend_schema(
    description="Start a Paystack wallet top-up.",
    request=PaymentInitRequestSerializer,
    responses={201: OpenApiResponse(description="Reference and authorization URL")},
)
class PaymentInitView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        ser = PaymentInitRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        amount = Decimal(str(ser.validated_data["amount"]))
        metadata = ser.validated_data.get("metadata") or {}

        reference = f"GH-{request.user.id}-{timezone.now().strftime('%Y%m%d%H%M%S%f')[-10:]}"
        intent = PaymentIntent.objects.create(
            user=request.user,
            amount=amount,
            reference=reference,
            status="initialized",
        )

        code, body = ps_initialize(
            email=request.user.email,
            amount=amount,
            reference=reference,
            metadata=metadata,
        )
        _log_provider(request.user, reference, "/transaction/initialize", {"amount": str(amount)}, body, code)

        data = (body or {}).get("data") or {}
        intent.authorization_url = data.get("authorization_url")
        intent.access_code = data.get("access_code")
        intent.init_response = body
        intent.status = "pending" if code == 200 and body.get("status") else "failed"
        intent.save(update_fields=["authorization_url", "access_code", "init_response", "status", "updated"])

        return Response({
            "reference": intent.reference,
            "authorization_url": intent.authorization_url,
            "status": intent.status,
        }, status=status.HTTP_201_CREATED)


@extend_schema(
    description="Verify a top-up with Paystack and credit the wallet on success.",
    request=None,
    responses={200: OpenApiResponse(description="Top-up status"), 404: OpenApiResponse(description="Unknown reference")},
)
class PaymentVerifyView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, reference: str):
        try:
            intent = PaymentIntent.objects.get(reference=reference, user=request.user)
        except PaymentIntent.DoesNotExist:
            return Response({"detail": "Unknown reference"}, status=404)

        code, body = ps_verify(reference)
        _log_provider(request.user, reference, "/transaction/verify", None, body, code)

        intent.verify_response = body
        intent.save(update_fields=["verify_response", "updated"])

        data = body.get("data") or {}
        status_text = data.get("status")
        currency = data.get("currency")

        if code == 200 and body.get("status") and status_text == "success" and currency == settings.PAYSTACK_CURRENCY:
            credited = credit_wallet_once(intent.reference)
            return Response({
                "reference": reference,
                "status": "success",
                "credited": credited,
            })

        if status_text in {"failed", "abandoned"}:
            intent.status = "failed"
            intent.save(update_fields=["status", "updated"])
            return Response({"reference": reference, "status": "failed"})

        intent.status = "pending"
        intent.save(update_fields=["status", "updated"])
        return Response({"reference": reference, "status": "pending"})


@method_decorator(csrf_exempt, name="dispatch")
class PaystackWebhookView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        sig = request.headers.get("X-Paystack-Signature")
        raw = request.body
        if not valid_webhook(sig, raw):
            return Response({"detail": "Invalid signature"}, status=401)

        payload = request.data
        if not isinstance(payload, dict):
            return Response({"detail": "Malformed payload"}, status=400)
        event = payload.get("event")
        data = payload.get("data") or {}
        reference = data.get("reference")

        try:
            intent = PaymentIntent.objects.select_related("user").get(reference=reference)
        except PaymentIntent.DoesNotExist:
            # Still log for forensic purposes
            _log_provider(None, reference or "-", "webhook", {"event": event}, payload, 200)
            return Response({"detail": "Reference not found"}, status=200)

        events = intent.webhook_events or []
        events.append(payload)
        intent.webhook_events = events
        intent.save(update_fields=["webhook_events", "updated"])

        if event == "charge.success" and data.get("status") == "success":
            _log_provider(intent.user, reference, "webhook:charge.success", None, payload, 200)
            credit_wallet_once(intent.reference)
            return Response({"ok": True})

        if event == "charge.failed":
            intent.status = "failed"
            intent.save(update_fields=["status", "updated"])
            _log_provider(intent.user, reference, "webhook:charge.failed", None, payload, 200)
            return Response({"ok": True})

        # Ignore other events
        _log_provider(intent.user, reference, f"webhook:{event}", None, payload, 200)
        return Response({"ok": True})
