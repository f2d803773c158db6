# payments/paystack.py
import hmac, hashlib, requests
from decimal import Decimal, ROUND_HALF_UP
from django.conf import settings

TIMEOUT = (5, 25)  # connect, read


def _base() -> str:
    return getattr(settings, "PAYSTACK_BASE_URL", "https://api.paystack.co")


def _secret() -> str:
    return getattr(settings, "PAYSTACK_SECRET_KEY", "")


def minor_units(amount: Decimal) -> int:
    """Paystack amounts are in the currency's subunit (kobo, pesewas, cents)."""
    return int((amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) * 100))


def _auth_headers():
    return {"Authorization": f"Bearer {_secret()}", "Content-Type": "application/json"}


def _parse(r):
    if "application/json" in r.headers.get("Content-Type", ""):
        return r.status_code, r.json()
    return r.status_code, {"raw": r.text, "http_status": r.status_code}


def initialize(email: str, amount: Decimal, reference: str, metadata=None, callback_url=None):
    payload = {
        "email": email,
        "amount": minor_units(amount),
        "reference": reference,
        "currency": settings.PAYSTACK_CURRENCY,
    }
    if metadata: payload["metadata"] = metadata
    if callback_url: payload["callback_url"] = callback_url
    r = requests.post(f"{_base()}/transaction/initialize", headers=_auth_headers(), json=payload, timeout=TIMEOUT)
    return _parse(r)


def verify(reference: str):
    r = requests.get(f"{_base()}/transaction/verify/{reference}", headers=_auth_headers(), timeout=TIMEOUT)
    return _parse(r)


def valid_webhook(signature_header: str, raw_body: bytes) -> bool:
    if not signature_header:
        return False
    secret = getattr(settings, "PAYSTACK_WEBHOOK_SECRET", "") or _secret()
    digest = hmac.new(secret.encode(), raw_body, hashlib.sha512).hexdigest()
    return hmac.compare_digest(digest, signature_header)
