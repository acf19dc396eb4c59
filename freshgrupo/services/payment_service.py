import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload

from freshgrupo.models.order import (
    Order,
    OrderStatus,
    PAYMENT_TRANSITIONS,
    Payment,
    PaymentMethod,
    PaymentStatus,
)
from freshgrupo.schemas.payment import PaymentCreate, PaymentVerification
from freshgrupo.services.payment_gateway import PaymentGatewayError, RazorpayGateway, to_minor_units

logger = logging.getLogger(__name__)


def list_payments(db: Session) -> List[Payment]:
    return (
        db.query(Payment)
        .options(joinedload(Payment.user), joinedload(Payment.order))
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .all()
    )


def _pending_gateway_payment(order: Order, gateway_order_id: Optional[str] = None) -> Optional[Payment]:
    for payment in order.payments:
        if payment.status not in (PaymentStatus.pending, PaymentStatus.processing):
            continue
        if gateway_order_id is None or payment.razorpay_order_id in (None, gateway_order_id):
            return payment
    return None


def create_gateway_order(
    db: Session, order: Order, gateway: RazorpayGateway, amount: Optional[Decimal] = None
) -> Tuple[str, int]:
    """Mint a remote order for an existing order. Returns (remote id, amount in paise)."""
    if order.payment_status == PaymentStatus.completed:
        raise HTTPException(status_code=400, detail="Order is already paid")

    amount = Decimal(amount) if amount is not None else Decimal(order.total_amount)
    try:
        remote_order = gateway.create_order(
            amount, receipt=f"order_{order.id}", notes={"order_id": str(order.id)}
        )
    except PaymentGatewayError as e:
        logger.error(f"Could not create gateway order for order {order.id}: {e}")
        raise HTTPException(status_code=502, detail="Payment gateway error")

    payment = _pending_gateway_payment(order)
    if payment is None:
        payment = Payment(
            order_id=order.id,
            user_id=order.user_id,
            amount=amount,
            currency=gateway.currency,
            payment_method=PaymentMethod.razorpay,
            status=PaymentStatus.pending,
        )
        db.add(payment)
    payment.razorpay_order_id = remote_order["id"]
    payment.gateway_response = remote_order
    order.payment_status = PaymentStatus.processing
    db.commit()

    return remote_order["id"], remote_order.get("amount", to_minor_units(amount))


def verify_payment(db: Session, order: Order, data: PaymentVerification, gateway: RazorpayGateway) -> Payment:
    """Check the checkout signature and settle or fail the payment.

    A bad signature is not an exception: a failed Payment row is stored and returned,
    and the order is left as it was.
    """
    minted = [p for p in order.payments if p.gateway_response and p.razorpay_order_id == data.razorpay_order_id]
    if not minted:
        raise HTTPException(status_code=400, detail="Razorpay order does not belong to this order")

    if not gateway.verify_signature(data.razorpay_order_id, data.razorpay_payment_id, data.razorpay_signature):
        logger.warning(f"Signature mismatch for order {order.id} ({data.razorpay_order_id})")
        payment = Payment(
            order_id=order.id,
            user_id=order.user_id,
            amount=order.total_amount,
            currency=gateway.currency,
            payment_method=PaymentMethod.razorpay,
            status=PaymentStatus.failed,
            razorpay_order_id=data.razorpay_order_id,
            razorpay_payment_id=data.razorpay_payment_id,
            razorpay_signature=data.razorpay_signature,
        )
        db.add(payment)
        db.commit()
        db.refresh(payment)
        return payment

    completed = next((p for p in minted if p.status == PaymentStatus.completed), None)
    if completed is not None:
        return completed

    payment = next((p for p in minted if PaymentStatus.completed in PAYMENT_TRANSITIONS[p.status]), None)
    if payment is None:
        payment = Payment(
            order_id=order.id,
            user_id=order.user_id,
            amount=order.total_amount,
            currency=gateway.currency,
            payment_method=PaymentMethod.razorpay,
            razorpay_order_id=data.razorpay_order_id,
        )
        db.add(payment)

    payment.status = PaymentStatus.completed
    payment.razorpay_payment_id = data.razorpay_payment_id
    payment.razorpay_signature = data.razorpay_signature
    payment.transaction_id = data.razorpay_payment_id

    order.payment_status = PaymentStatus.completed
    if order.can_transition_to(OrderStatus.confirmed):
        order.status = OrderStatus.confirmed

    db.commit()
    db.refresh(payment)
    logger.info(f"Payment {data.razorpay_payment_id} verified for order {order.id}")
    return payment


def record_payment(db: Session, order: Order, data: PaymentCreate) -> Payment:
    """Store a completed payment taken outside the gateway and settle the order."""
    if order.payment_status == PaymentStatus.completed:
        raise HTTPException(status_code=400, detail="Order is already paid")

    payment = Payment(
        order_id=order.id,
        user_id=order.user_id,
        amount=order.total_amount,
        payment_method=data.payment_method,
        status=PaymentStatus.completed,
        transaction_id=data.transaction_id,
    )
    db.add(payment)
    order.payment_status = PaymentStatus.completed
    db.commit()
    db.refresh(payment)
    return payment
