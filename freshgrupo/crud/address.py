import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from freshgrupo.models.order import Order
from freshgrupo.models.user import Address, AddressType
from freshgrupo.schemas.address import AddressCreate, AddressUpdate

logger = logging.getLogger(__name__)

IMPORTED_ADDRESS_NAME = "Imported from Order"


def list_addresses(db: Session, user_id: int) -> List[Address]:
    return (
        db.query(Address)
        .filter(Address.user_id == user_id)
        .order_by(Address.is_default.desc(), Address.created_at.desc(), Address.id.desc())
        .all()
    )


def get_address(db: Session, address_id: int) -> Optional[Address]:
    return db.get(Address, address_id)


def _clear_default(db: Session, user_id: int) -> None:
    # Flushed before the new default is written so the partial index never sees two
    db.query(Address).filter(
        Address.user_id == user_id, Address.is_default.is_(True)
    ).update({Address.is_default: False}, synchronize_session="fetch")
    db.flush()


def create_address(db: Session, user_id: int, data: AddressCreate) -> Address:
    """Create an address; a default one replaces the user's previous default."""
    try:
        if data.is_default:
            _clear_default(db, user_id)
        address = Address(
            user_id=user_id,
            type=data.type,
            name=data.name,
            address=data.address,
            is_default=data.is_default,
        )
        db.add(address)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(address)
    return address


def update_address(db: Session, address: Address, data: AddressUpdate) -> Address:
    update_data = data.model_dump(exclude_unset=True)
    try:
        if update_data.get("is_default"):
            _clear_default(db, address.user_id)
        for key, value in update_data.items():
            if value is not None:
                setattr(address, key, value)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(address)
    return address


def delete_address(db: Session, address: Address) -> None:
    db.delete(address)
    db.commit()


def import_addresses_from_orders(db: Session, user_id: Optional[int] = None) -> int:
    """Turn distinct order delivery addresses into saved (non-default) addresses.

    Addresses a user already has, compared on the trimmed text, are skipped.
    Returns the number of rows created.
    """
    query = db.query(Order.user_id, Order.delivery_address).distinct()
    if user_id is not None:
        query = query.filter(Order.user_id == user_id)

    existing = {
        (row.user_id, row.address.strip())
        for row in db.query(Address.user_id, Address.address).all()
    }

    created = 0
    for order_user_id, delivery_address in query.all():
        text = (delivery_address or "").strip()
        if not text or (order_user_id, text) in existing:
            continue
        db.add(
            Address(
                user_id=order_user_id,
                type=AddressType.home,
                name=IMPORTED_ADDRESS_NAME,
                address=text,
                is_default=False,
            )
        )
        existing.add((order_user_id, text))
        created += 1

    db.commit()
    logger.info("Imported %s addresses from orders", created)
    return created
