# freshgrupo/services/order_service.py
"""
Order placement

One database transaction covers the Order, its first Payment, the pack-content
snapshot and the cart lines the order consumes. Gateway-paid orders mint the remote
order inside that transaction, before commit.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from freshgrupo.crud import cart as crud_cart
from freshgrupo.models.order import (
    GATEWAY_METHODS,
    PAY_ON_DELIVERY_METHODS,
    Order,
    OrderPackContent,
    OrderStatus,
    Payment,
    PaymentStatus,
)
from freshgrupo.models.pack import Pack
from freshgrupo.models.user import Address, User
from freshgrupo.schemas.order import OrderCreate
from freshgrupo.services.payment_gateway import PaymentGatewayError, RazorpayGateway

logger = logging.getLogger(__name__)


@dataclass
class PlacedOrder:
    order: Order
    gateway_order_id: Optional[str] = None


@dataclass
class PriceQuote:
    pack: Optional[Pack]
    unit_price: Optional[Decimal]
    total: Decimal


def quote(db: Session, data: OrderCreate) -> PriceQuote:
    """Resolve the price of an order; catalog packs are always priced server-side."""
    if data.is_custom:
        unit_price = Decimal(data.unit_price) if data.unit_price is not None else None
        if data.total_amount is not None:
            total = Decimal(data.total_amount)
        else:
            total = unit_price * data.quantity
        return PriceQuote(pack=None, unit_price=unit_price, total=total)

    pack = db.get(Pack, data.pack_id)
    if pack is None:
        raise HTTPException(status_code=404, detail="Pack not found")
    if not pack.is_purchasable():
        raise HTTPException(status_code=400, detail="Pack is not available")
    unit_price = Decimal(pack.final_price)
    return PriceQuote(pack=pack, unit_price=unit_price, total=unit_price * data.quantity)


def resolve_delivery_address(db: Session, user: User, data: OrderCreate) -> str:
    if data.address_id is not None:
        address = db.get(Address, data.address_id)
        if address is None or (address.user_id != user.id and not user.is_admin):
            raise HTTPException(status_code=404, detail="Address not found")
        return address.address
    return data.delivery_address.strip()


def snapshot_pack_contents(db: Session, order: Order, pack: Pack) -> List[OrderPackContent]:
    """Copy the pack's current lines onto the order."""
    contents = []
    for line in pack.pack_products:
        content = OrderPackContent(
            order_id=order.id,
            product_id=line.product_id,
            product_name=line.product_name,
            quantity=line.quantity,
            unit_price=line.unit_price,
        )
        db.add(content)
        contents.append(content)
    return contents


def place_order(db: Session, user: User, data: OrderCreate, gateway: RazorpayGateway) -> PlacedOrder:
    """Create an order with its payment and snapshot, all or nothing.

    Raises HTTPException: 404/400 for unknown or unavailable packs and addresses,
    502 when the payment gateway fails, 500 for anything else. Nothing is persisted
    in any of those cases.
    """
    gateway_order_id = None
    try:
        price = quote(db, data)
        delivery_address = resolve_delivery_address(db, user, data)

        order = Order(
            user_id=user.id,
            pack_id=price.pack.id if price.pack else None,
            quantity=data.quantity,
            delivery_address=delivery_address,
            payment_method=data.payment_method,
            total_amount=price.total,
            unit_price=price.unit_price,
            is_custom=data.is_custom,
            custom_pack_name=data.custom_pack_name,
            custom_pack_items=data.custom_pack_items,
            status=OrderStatus.processing,
            payment_status=PaymentStatus.pending,
        )
        db.add(order)
        db.flush()

        gateway_response = None
        if data.payment_method in GATEWAY_METHODS:
            gateway_response = gateway.create_order(
                price.total,
                receipt=f"order_{order.id}",
                notes={"order_id": str(order.id), "user_id": str(user.id)},
            )
            gateway_order_id = gateway_response["id"]
            order.payment_status = PaymentStatus.processing

        settled = data.payment_method in PAY_ON_DELIVERY_METHODS
        if settled:
            order.payment_status = PaymentStatus.completed

        db.add(
            Payment(
                order_id=order.id,
                user_id=user.id,
                amount=price.total,
                currency=gateway.currency,
                payment_method=data.payment_method,
                status=PaymentStatus.completed if settled else PaymentStatus.pending,
                razorpay_order_id=gateway_order_id,
                gateway_response=gateway_response,
            )
        )

        if price.pack is not None:
            snapshot_pack_contents(db, order, price.pack)

        crud_cart.deactivate_consumed_lines(
            db,
            user.id,
            pack_id=price.pack.id if price.pack else None,
            cart_item_id=data.cart_item_id if data.is_custom else None,
        )

        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except PaymentGatewayError as e:
        db.rollback()
        logger.error(f"Payment gateway failed while creating order for user {user.id}: {e}")
        raise HTTPException(status_code=502, detail="Payment gateway error")
    except Exception as e:
        db.rollback()
        if gateway_order_id:
            logger.error(f"Orphaned gateway order {gateway_order_id}: local transaction failed")
        logger.exception(f"Failed to create order for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create order")

    db.refresh(order)
    logger.info(
        f"Order {order.id} created for user {user.id}: {order.total_amount} via {order.payment_method.value}"
    )
    return PlacedOrder(order=order, gateway_order_id=gateway_order_id)
