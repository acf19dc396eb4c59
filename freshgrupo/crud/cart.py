from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload

from freshgrupo.models.cart import Cart
from freshgrupo.models.pack import Pack
from freshgrupo.schemas.cart import CartItemCreate


def get_cart(db: Session, user_id: int) -> List[Cart]:
    return (
        db.query(Cart)
        .options(joinedload(Cart.pack).joinedload(Pack.category), joinedload(Cart.pack).joinedload(Pack.pack_type))
        .filter(Cart.user_id == user_id, Cart.is_active.is_(True))
        .order_by(Cart.id.asc())
        .all()
    )


def get_active_item(db: Session, item_id: int) -> Optional[Cart]:
    return db.query(Cart).filter(Cart.id == item_id, Cart.is_active.is_(True)).first()


def add_to_cart(db: Session, user_id: int, data: CartItemCreate) -> Cart:
    """Add a line to the user's cart.

    Catalog packs must be purchasable and are merged into an existing active line for
    the same pack; the merged line keeps its own unit price. Custom lines always get a
    fresh row priced from the client-supplied unit price.
    """
    if data.is_custom:
        unit_price = Decimal(data.unit_price)
        item = Cart(
            user_id=user_id,
            pack_id=None,
            unit_price=unit_price,
            is_custom=True,
            custom_pack_name=data.custom_pack_name,
            custom_pack_items=data.custom_pack_items,
            is_active=True,
        )
        item.set_quantity(data.quantity)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    pack = db.get(Pack, data.pack_id)
    if pack is None:
        raise HTTPException(status_code=404, detail="Pack not found")
    if not pack.is_purchasable():
        raise HTTPException(status_code=400, detail="Pack is not available")

    # Not atomic across requests; two concurrent adds may each read the old quantity
    existing = (
        db.query(Cart)
        .filter(
            Cart.user_id == user_id,
            Cart.pack_id == pack.id,
            Cart.is_custom.is_(False),
            Cart.is_active.is_(True),
        )
        .first()
    )
    if existing:
        existing.set_quantity(existing.quantity + data.quantity)
        item = existing
    else:
        item = Cart(user_id=user_id, pack_id=pack.id, unit_price=Decimal(pack.final_price), is_active=True)
        item.set_quantity(data.quantity)
        db.add(item)

    db.commit()
    db.refresh(item)
    return item


def update_quantity(db: Session, item: Cart, quantity: int) -> Cart:
    item.set_quantity(quantity)
    db.commit()
    db.refresh(item)
    return item


def remove_item(db: Session, item: Cart) -> Cart:
    item.is_active = False
    db.commit()
    db.refresh(item)
    return item


def clear_cart(db: Session, user_id: int) -> int:
    count = (
        db.query(Cart)
        .filter(Cart.user_id == user_id, Cart.is_active.is_(True))
        .update({Cart.is_active: False}, synchronize_session="fetch")
    )
    db.commit()
    return count


def deactivate_consumed_lines(
    db: Session, user_id: int, pack_id: Optional[int] = None, cart_item_id: Optional[int] = None
) -> int:
    """Flag the cart lines an order consumed as inactive. Does not commit."""
    query = db.query(Cart).filter(Cart.user_id == user_id, Cart.is_active.is_(True))
    if cart_item_id is not None:
        query = query.filter(Cart.id == cart_item_id)
    elif pack_id is not None:
        query = query.filter(Cart.pack_id == pack_id, Cart.is_custom.is_(False))
    else:
        return 0
    return query.update({Cart.is_active: False}, synchronize_session="fetch")
