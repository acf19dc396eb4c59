import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload, selectinload

from freshgrupo.models.base import utcnow
from freshgrupo.models.order import (
    Order,
    OrderStatus,
    PAYMENT_TRANSITIONS,
    PaymentStatus,
)
from freshgrupo.models.pack import Pack
from freshgrupo.schemas.payment import PaymentUpdate

logger = logging.getLogger(__name__)


def _order_query(db: Session):
    return db.query(Order).options(
        joinedload(Order.user),
        joinedload(Order.pack).joinedload(Pack.category),
        joinedload(Order.pack).joinedload(Pack.pack_type),
        selectinload(Order.payments),
        selectinload(Order.pack_contents),
    )


def list_orders(db: Session, user_id: Optional[int] = None) -> List[Order]:
    query = _order_query(db)
    if user_id is not None:
        query = query.filter(Order.user_id == user_id)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def get_order(db: Session, order_id: int) -> Optional[Order]:
    return _order_query(db).filter(Order.id == order_id).first()


def update_order_status(db: Session, order: Order, new_status: OrderStatus) -> Order:
    if order.status == new_status:
        return order
    if not order.can_transition_to(new_status):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot move order from {order.status.value} to {new_status.value}",
        )
    order.status = new_status
    if new_status == OrderStatus.delivered:
        order.delivery_date = utcnow()
    db.commit()
    db.refresh(order)
    logger.info("Order %s moved to %s", order.id, new_status.value)
    return order


def cancel_order(db: Session, order: Order) -> Order:
    if order.status == OrderStatus.cancelled:
        raise HTTPException(status_code=400, detail="Order is already cancelled")
    if not order.can_transition_to(OrderStatus.cancelled):
        raise HTTPException(status_code=400, detail="Delivered orders cannot be cancelled")
    return update_order_status(db, order, OrderStatus.cancelled)


def update_payment(db: Session, order: Order, data: PaymentUpdate) -> Order:
    """Apply a gateway status report to the order's payments.

    Payments whose current status cannot move to the reported one are left alone. A
    completed report also settles the order itself.
    """
    updated = 0
    for payment in order.payments:
        if payment.status != data.status and data.status not in PAYMENT_TRANSITIONS[payment.status]:
            continue
        payment.status = data.status
        if data.razorpay_payment_id is not None:
            payment.razorpay_payment_id = data.razorpay_payment_id
        if data.razorpay_order_id is not None and payment.razorpay_order_id is None:
            payment.razorpay_order_id = data.razorpay_order_id
        updated += 1

    if updated == 0:
        raise HTTPException(status_code=400, detail="No payment of this order can move to that status")

    if data.status == PaymentStatus.completed:
        order.payment_status = PaymentStatus.completed
    elif data.status == PaymentStatus.failed and order.payment_status != PaymentStatus.completed:
        order.payment_status = PaymentStatus.failed

    db.commit()
    db.refresh(order)
    return order
