import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload, selectinload

from freshgrupo.models.base import apply_changes, utcnow
from freshgrupo.models.catalog import Category, Product
from freshgrupo.models.pack import Pack, PackProduct, PackType
from freshgrupo.schemas.pack import (
    PackCreate,
    PackProductIn,
    PackTypeCreate,
    PackTypeUpdate,
    PackUpdate,
)

logger = logging.getLogger(__name__)


# 👇 Pack types
def list_pack_types(db: Session, active_only: bool = False) -> List[PackType]:
    query = db.query(PackType)
    if active_only:
        query = query.filter(PackType.is_active.is_(True))
    return query.order_by(PackType.id.asc()).all()


def get_pack_type(db: Session, pack_type_id: int) -> Optional[PackType]:
    return db.get(PackType, pack_type_id)


def create_pack_type(db: Session, data: PackTypeCreate) -> PackType:
    pack_type = PackType(**data.model_dump())
    db.add(pack_type)
    db.commit()
    db.refresh(pack_type)
    return pack_type


def update_pack_type(db: Session, pack_type: PackType, data: PackTypeUpdate) -> PackType:
    apply_changes(pack_type, data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(pack_type)
    return pack_type


# 👇 Packs
def _pack_query(db: Session, with_products: bool = False):
    options = [joinedload(Pack.category), joinedload(Pack.pack_type)]
    if with_products:
        options.append(selectinload(Pack.pack_products).joinedload(PackProduct.product))
    return db.query(Pack).options(*options)


def _purchasable_filter(query, now: datetime):
    return query.filter(
        Pack.is_active.is_(True),
        Pack.valid_from <= now,
        Pack.valid_until >= now,
    )


def list_packs(
    db: Session,
    purchasable_only: bool = False,
    category_id: Optional[int] = None,
    with_products: bool = False,
) -> List[Pack]:
    query = _pack_query(db, with_products)
    if purchasable_only:
        query = _purchasable_filter(query, utcnow())
    if category_id is not None:
        query = query.filter(Pack.category_id == category_id)
    return query.order_by(Pack.id.asc()).all()


def get_pack(db: Session, pack_id: int, purchasable_only: bool = False) -> Optional[Pack]:
    query = _pack_query(db, with_products=True).filter(Pack.id == pack_id)
    if purchasable_only:
        query = _purchasable_filter(query, utcnow())
    return query.first()


def _check_pack_refs(db: Session, category_id: Optional[int], pack_type_id: Optional[int]) -> None:
    if category_id is not None and db.get(Category, category_id) is None:
        raise HTTPException(status_code=400, detail="Category not found")
    if pack_type_id is not None and db.get(PackType, pack_type_id) is None:
        raise HTTPException(status_code=400, detail="Pack type not found")


def create_pack(db: Session, data: PackCreate) -> Pack:
    _check_pack_refs(db, data.category_id, data.pack_type_id)
    pack = Pack(**data.model_dump())
    db.add(pack)
    db.commit()
    db.refresh(pack)
    return pack


def update_pack(db: Session, pack: Pack, data: PackUpdate) -> Pack:
    _check_pack_refs(db, data.category_id, data.pack_type_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(pack, key, value)
    if pack.valid_until < pack.valid_from:
        db.rollback()
        raise HTTPException(status_code=400, detail="validUntil must not be before validFrom")
    db.commit()
    db.refresh(pack)
    return pack


# 👇 Pack composition
def recalculate_pack_price(pack: Pack) -> Decimal:
    """Assign the composed price to both base and final price; caller commits."""
    total = pack.composed_price()
    pack.base_price = total
    pack.final_price = total
    return total


def get_pack_products(db: Session, pack_id: int) -> List[PackProduct]:
    return (
        db.query(PackProduct)
        .options(joinedload(PackProduct.product))
        .filter(PackProduct.pack_id == pack_id)
        .order_by(PackProduct.id.asc())
        .all()
    )


def replace_pack_products(db: Session, pack: Pack, lines: List[PackProductIn]) -> Pack:
    """Swap the pack's product lines for `lines` and recompute its price."""
    product_ids = {line.product_id for line in lines}
    found = set()
    if product_ids:
        found = {row.id for row in db.query(Product.id).filter(Product.id.in_(product_ids)).all()}
    missing = sorted(product_ids - found)
    if missing:
        raise HTTPException(status_code=400, detail=f"Unknown product ids: {missing}")

    try:
        pack.pack_products.clear()
        db.flush()
        for line in lines:
            pack.pack_products.append(
                PackProduct(product_id=line.product_id, quantity=line.quantity, unit_price=line.unit_price)
            )
        db.flush()
        recalculate_pack_price(pack)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Pack %s recomposed with %s products, price %s", pack.id, len(lines), pack.final_price)
    db.refresh(pack)
    return pack


def clear_pack_products(db: Session, pack: Pack) -> int:
    removed = len(pack.pack_products)
    pack.pack_products.clear()
    db.flush()
    recalculate_pack_price(pack)
    db.commit()
    return removed
