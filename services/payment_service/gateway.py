import hashlib
import hmac
import time
from typing import Protocol

import httpx
import structlog

from shared.config.settings import (
    GATEWAY_TIMEOUT_SECONDS,
    RAZORPAY_API_URL,
    RAZORPAY_KEY_ID,
    RAZORPAY_KEY_SECRET,
)
from shared.errors import GatewayError

logger = structlog.get_logger(__name__)


class PaymentGateway(Protocol):
    key_id: str

    async def create_order(self, amount: float, receipt: str, notes: dict) -> dict: ...

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool: ...


def to_paise(amount: float) -> int:
    return int(round(amount * 100))


def make_receipt(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}"


def sign(secret: str, order_id: str, payment_id: str) -> str:
    """Razorpay checkout signature: hex HMAC-SHA256 of "<order_id>|<payment_id>"."""
    body = f"{order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


class RazorpayGateway:
    """Hosted-checkout order creation and signature checks against Razorpay."""

    def __init__(
        self,
        key_id: str = RAZORPAY_KEY_ID,
        key_secret: str = RAZORPAY_KEY_SECRET,
        base_url: str = RAZORPAY_API_URL,
        timeout: float = GATEWAY_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.key_id = key_id
        self._key_secret = key_secret
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _require_credentials(self) -> None:
        if not self.key_id or not self._key_secret:
            raise GatewayError("Razorpay credentials not configured")

    async def create_order(self, amount: float, receipt: str, notes: dict) -> dict:
        self._require_credentials()
        payload = {
            "amount": to_paise(amount),
            "currency": "INR",
            "receipt": receipt,
            "notes": {k: str(v) for k, v in notes.items()},
        }
        try:
            async with httpx.AsyncClient(
                auth=(self.key_id, self._key_secret), timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(f"{self._base_url}/orders", json=payload)
        except httpx.HTTPError as e:
            logger.error("gateway_unreachable", error=str(e))
            raise GatewayError("Failed to create Razorpay order") from e

        if resp.status_code >= 400:
            logger.error("gateway_order_rejected", status=resp.status_code, body=resp.text)
            raise GatewayError("Failed to create Razorpay order")

        order = resp.json()
        logger.info("gateway_order_created", gateway_order_id=order.get("id"), receipt=receipt)
        return order

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        self._require_credentials()
        if not order_id or not payment_id or not signature:
            return False
        expected = sign(self._key_secret, order_id, payment_id)
        return hmac.compare_digest(expected, signature)


def get_payment_gateway() -> PaymentGateway:
    """FastAPI dependency; tests override it with a fake gateway."""
    return RazorpayGateway()
