from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import Field

from freshgrupo.models.order import PaymentMethod, PaymentStatus
from freshgrupo.schemas.base import CamelModel


class PaymentOut(CamelModel):
    id: int
    order_id: int
    user_id: Optional[int] = None
    amount: float
    currency: str
    payment_method: Optional[PaymentMethod] = None
    status: PaymentStatus
    transaction_id: Optional[str] = None
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PaymentCreate(CamelModel):
    order_id: int
    payment_method: PaymentMethod
    transaction_id: Optional[str] = Field(None, max_length=255)


class PaymentUpdate(CamelModel):
    razorpay_payment_id: Optional[str] = Field(None, max_length=255)
    razorpay_order_id: Optional[str] = Field(None, max_length=255)
    status: PaymentStatus


class GatewayOrderCreate(CamelModel):
    order_id: int
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)


class GatewayOrderOut(CamelModel):
    order_id: str
    amount: int
    currency: str
    key_id: Optional[str] = None


class PaymentVerification(CamelModel):
    order_id: int
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str


class PaymentVerificationResult(CamelModel):
    status: str
    message: Optional[str] = None
    payment: Optional[PaymentOut] = None


class PaymentAdminOut(PaymentOut):
    gateway_response: Optional[Any] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
