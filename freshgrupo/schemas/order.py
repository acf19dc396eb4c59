from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, model_validator

from freshgrupo.models.order import OrderStatus, PaymentMethod, PaymentStatus
from freshgrupo.schemas.base import CamelModel
from freshgrupo.schemas.pack import PackBrief
from freshgrupo.schemas.payment import PaymentOut
from freshgrupo.schemas.user import UserBrief


class OrderCreate(CamelModel):
    pack_id: Optional[int] = None
    quantity: int = Field(1, ge=1)
    delivery_address: Optional[str] = None
    address_id: Optional[int] = None
    payment_method: PaymentMethod = PaymentMethod.cod
    # Ignored for catalog packs, whose price is read from the pack
    total_amount: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    unit_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    is_custom: bool = False
    custom_pack_name: Optional[str] = Field(None, max_length=255)
    custom_pack_items: Optional[str] = None
    cart_item_id: Optional[int] = None

    @model_validator(mode="after")
    def check_order_kind(self):
        if self.is_custom:
            if self.total_amount is None and self.unit_price is None:
                raise ValueError("totalAmount or unitPrice is required for custom packs")
        elif self.pack_id is None:
            raise ValueError("packId is required unless isCustom is true")
        if not self.address_id and not (self.delivery_address or "").strip():
            raise ValueError("deliveryAddress or addressId is required")
        return self


class OrderPackContentOut(CamelModel):
    id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: float


class OrderOut(CamelModel):
    id: int
    user_id: int
    pack_id: Optional[int] = None
    quantity: int
    delivery_address: str
    payment_method: PaymentMethod
    total_amount: float
    unit_price: Optional[float] = None
    is_custom: bool
    custom_pack_name: Optional[str] = None
    custom_pack_items: Optional[str] = None
    status: OrderStatus
    payment_status: PaymentStatus
    order_date: datetime
    delivery_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class OrderDetailOut(OrderOut):
    user: Optional[UserBrief] = None
    pack: Optional[PackBrief] = None
    payments: List[PaymentOut] = []
    pack_contents: List[OrderPackContentOut] = []


class OrderCreated(OrderDetailOut):
    razorpay_order_id: Optional[str] = None
    razorpay_key_id: Optional[str] = None


class OrderStatusUpdate(CamelModel):
    status: OrderStatus
