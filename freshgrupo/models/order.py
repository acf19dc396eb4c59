import enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, Numeric, String, Text
from sqlalchemy.orm import relationship

from freshgrupo.db.session import Base
from freshgrupo.models.base import TimestampMixin, enum_type, utcnow


class OrderStatus(str, enum.Enum):
    pending = "pending"
    processing = "processing"
    confirmed = "confirmed"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


class PaymentMethod(str, enum.Enum):
    cod = "cod"
    card = "card"
    upi = "upi"
    net_banking = "net_banking"
    wallet = "wallet"
    razorpay = "razorpay"


# Settled when the order is placed
PAY_ON_DELIVERY_METHODS = {PaymentMethod.cod}
# Need a remote order minted by the payment gateway
GATEWAY_METHODS = {PaymentMethod.razorpay}

ORDER_TRANSITIONS = {
    OrderStatus.pending: {OrderStatus.processing, OrderStatus.confirmed, OrderStatus.cancelled},
    OrderStatus.processing: {OrderStatus.confirmed, OrderStatus.cancelled},
    OrderStatus.confirmed: {OrderStatus.shipped, OrderStatus.cancelled},
    OrderStatus.shipped: {OrderStatus.delivered, OrderStatus.cancelled},
    OrderStatus.delivered: set(),
    OrderStatus.cancelled: set(),
}

PAYMENT_TRANSITIONS = {
    PaymentStatus.pending: {PaymentStatus.processing, PaymentStatus.completed, PaymentStatus.failed},
    PaymentStatus.processing: {PaymentStatus.completed, PaymentStatus.failed},
    PaymentStatus.completed: {PaymentStatus.refunded},
    PaymentStatus.failed: {PaymentStatus.refunded},
    PaymentStatus.refunded: set(),
}


class Order(TimestampMixin, Base):
    __tablename__ = "Orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("Users.id"), nullable=False, index=True)
    pack_id = Column(Integer, ForeignKey("Packs.id"), nullable=True)
    quantity = Column(Integer, nullable=False)
    delivery_address = Column(Text, nullable=False)
    payment_method = Column(enum_type(PaymentMethod, "payment_method"), default=PaymentMethod.cod, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=True)
    is_custom = Column(Boolean, default=False, nullable=False)
    custom_pack_name = Column(String(255), nullable=True)
    custom_pack_items = Column(Text, nullable=True)
    status = Column(enum_type(OrderStatus, "order_status"), default=OrderStatus.processing, nullable=False, index=True)
    payment_status = Column(enum_type(PaymentStatus, "order_payment_status"), default=PaymentStatus.pending, nullable=False)
    order_date = Column(DateTime, default=utcnow, nullable=False)
    delivery_date = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="orders")
    pack = relationship("Pack")
    payments = relationship("Payment", back_populates="order", order_by="Payment.id")
    pack_contents = relationship("OrderPackContent", back_populates="order", order_by="OrderPackContent.id")

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        return new_status in ORDER_TRANSITIONS[self.status]

    def __repr__(self):
        return f"<Order {self.id}: user={self.user_id} {self.status} / {self.payment_status}>"


class OrderPackContent(TimestampMixin, Base):
    """Copy of a pack line at order time; later pack edits never reach it."""

    __tablename__ = "OrderPackContents"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("Orders.id"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="pack_contents")


class Payment(TimestampMixin, Base):
    __tablename__ = "Payments"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("Orders.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("Users.id"), nullable=True, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(10), default="INR", nullable=False)
    payment_method = Column(enum_type(PaymentMethod, "payment_payment_method"), nullable=True)
    status = Column(enum_type(PaymentStatus, "payment_status"), default=PaymentStatus.pending, nullable=False)
    transaction_id = Column(String(255), nullable=True)
    razorpay_order_id = Column(String(255), nullable=True, index=True)
    razorpay_payment_id = Column(String(255), nullable=True)
    razorpay_signature = Column(String(255), nullable=True)
    gateway_response = Column(JSON, nullable=True)

    order = relationship("Order", back_populates="payments")
    user = relationship("User")

    @property
    def user_name(self):
        return self.user.name if self.user else None

    @property
    def user_email(self):
        return self.user.email if self.user else None
