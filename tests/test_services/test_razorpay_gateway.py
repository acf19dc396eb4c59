import hashlib
import hmac
from decimal import Decimal

import pytest

from freshgrupo.services.payment_gateway import (
    PaymentGatewayError,
    RazorpayGateway,
    generate_signature,
    to_minor_units,
    verify_signature,
)


def test_signature_is_hex_hmac_sha256_of_order_and_payment_ids():
    expected = hmac.new(b"secret", b"order_abc|pay_xyz", hashlib.sha256).hexdigest()
    assert generate_signature("order_abc", "pay_xyz", "secret") == expected
    assert verify_signature("order_abc", "pay_xyz", expected, "secret")


def test_any_other_signature_is_rejected():
    good = generate_signature("order_abc", "pay_xyz", "secret")
    assert not verify_signature("order_abc", "pay_xyz", good.upper(), "secret")
    assert not verify_signature("order_abc", "pay_other", good, "secret")
    assert not verify_signature("order_abc", "pay_xyz", "", "secret")
    assert not verify_signature("order_abc", "pay_xyz", good, "")


def test_amounts_are_sent_in_paise():
    assert to_minor_units(Decimal("1000.00")) == 100000
    assert to_minor_units(Decimal("249.99")) == 24999
    assert to_minor_units(Decimal("10.005")) == 1001
    assert to_minor_units(12.5) == 1250


def test_create_order_sends_receipt_and_capture_flag(gateway):
    client = gateway.client

    remote = gateway.create_order(Decimal("1000.00"), receipt="order_7", notes={"order_id": "7"})

    assert remote["id"] == "order_test1"
    assert client.order.calls == [
        {
            "amount": 100000,
            "currency": "INR",
            "receipt": "order_7",
            "payment_capture": 1,
            "notes": {"order_id": "7"},
        }
    ]


def test_client_errors_become_gateway_errors(gateway):
    gateway.client.order.error = RuntimeError("connection reset")

    with pytest.raises(PaymentGatewayError):
        gateway.create_order(Decimal("10.00"), receipt="order_1")


def test_missing_credentials_fail_before_any_call():
    gateway = RazorpayGateway(None, None)
    with pytest.raises(PaymentGatewayError):
        gateway.create_order(Decimal("10.00"), receipt="order_1")


def test_gateway_verifies_with_its_own_secret(gateway):
    signature = generate_signature("order_abc", "pay_xyz", "test_secret")
    assert gateway.verify_signature("order_abc", "pay_xyz", signature)
    assert not gateway.verify_signature("order_abc", "pay_xyz", "forged")
