# freshgrupo/services/payment_gateway.py
"""
Razorpay integration

- Remote order creation (amounts in paise)
- Checkout signature verification (HMAC-SHA256 over "order_id|payment_id")
"""

import hashlib
import hmac
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Raised when the gateway cannot mint a remote order."""


def to_minor_units(amount) -> int:
    """Rupees to paise, rounded half up."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def generate_signature(gateway_order_id: str, gateway_payment_id: str, secret: str) -> str:
    message = f"{gateway_order_id}|{gateway_payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def verify_signature(gateway_order_id: str, gateway_payment_id: str, signature: str, secret: str) -> bool:
    if not signature or not secret:
        return False
    expected = generate_signature(gateway_order_id, gateway_payment_id, secret)
    return hmac.compare_digest(expected, signature)


class RazorpayGateway:
    def __init__(self, key_id: Optional[str], key_secret: Optional[str], currency: str = "INR", client=None):
        self.key_id = key_id
        self.key_secret = key_secret
        self.currency = currency
        self._client = client

    @property
    def client(self):
        if self._client is None:
            if not self.key_id or not self.key_secret:
                raise PaymentGatewayError("Razorpay credentials are not configured")
            import razorpay

            self._client = razorpay.Client(auth=(self.key_id, self.key_secret))
        return self._client

    def create_order(self, amount, receipt: str, notes: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Mint a remote order for ``amount`` rupees and return the gateway's payload."""
        payload = {
            "amount": to_minor_units(amount),
            "currency": self.currency,
            "receipt": receipt,
            "payment_capture": 1,
        }
        if notes:
            payload["notes"] = notes

        try:
            remote_order = self.client.order.create(payload)
        except PaymentGatewayError:
            raise
        except Exception as e:
            logger.error(f"Razorpay order creation failed for {receipt}: {e}")
            raise PaymentGatewayError(str(e)) from e

        if not remote_order or "id" not in remote_order:
            raise PaymentGatewayError(f"Unexpected gateway response for {receipt}")

        logger.info(f"Razorpay order {remote_order['id']} created for {receipt} ({payload['amount']} paise)")
        return remote_order

    def verify_signature(self, gateway_order_id: str, gateway_payment_id: str, signature: str) -> bool:
        return verify_signature(gateway_order_id, gateway_payment_id, signature, self.key_secret or "")
