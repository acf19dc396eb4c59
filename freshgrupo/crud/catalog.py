from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from freshgrupo.models.base import apply_changes
from freshgrupo.models.catalog import Category, Product, UnitType
from freshgrupo.schemas.catalog import (
    CategoryCreate,
    CategoryUpdate,
    ProductCreate,
    ProductUpdate,
    UnitTypeCreate,
    UnitTypeUpdate,
)


def _save(db: Session, instance, duplicate_detail: str):
    db.add(instance)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail=duplicate_detail)
    db.refresh(instance)
    return instance


def _apply(instance, data) -> None:
    apply_changes(instance, data.model_dump(exclude_unset=True))


# 👇 Categories
def list_categories(db: Session, active_only: bool = False) -> List[Category]:
    query = db.query(Category)
    if active_only:
        query = query.filter(Category.is_active.is_(True))
    return query.order_by(Category.name.asc()).all()


def get_category(db: Session, category_id: int, active_only: bool = False) -> Optional[Category]:
    query = db.query(Category).filter(Category.id == category_id)
    if active_only:
        query = query.filter(Category.is_active.is_(True))
    return query.first()


def create_category(db: Session, data: CategoryCreate) -> Category:
    return _save(db, Category(**data.model_dump()), "Category with this name already exists")


def update_category(db: Session, category: Category, data: CategoryUpdate) -> Category:
    _apply(category, data)
    return _save(db, category, "Category with this name already exists")


# 👇 Unit types
def list_unit_types(db: Session, active_only: bool = False) -> List[UnitType]:
    query = db.query(UnitType)
    if active_only:
        query = query.filter(UnitType.is_active.is_(True))
    return query.order_by(UnitType.id.asc()).all()


def get_unit_type(db: Session, unit_type_id: int) -> Optional[UnitType]:
    return db.get(UnitType, unit_type_id)


def create_unit_type(db: Session, data: UnitTypeCreate) -> UnitType:
    return _save(db, UnitType(**data.model_dump()), "Unit type with this name or abbreviation already exists")


def update_unit_type(db: Session, unit_type: UnitType, data: UnitTypeUpdate) -> UnitType:
    _apply(unit_type, data)
    return _save(db, unit_type, "Unit type with this name or abbreviation already exists")


# 👇 Products
def _product_query(db: Session):
    return db.query(Product).options(joinedload(Product.category), joinedload(Product.unit_type))


def list_products(
    db: Session, available_only: bool = False, category_id: Optional[int] = None
) -> List[Product]:
    query = _product_query(db)
    if available_only:
        query = query.filter(Product.is_available.is_(True))
    if category_id is not None:
        query = query.filter(Product.category_id == category_id)
    return query.order_by(Product.id.asc()).all()


def get_product(db: Session, product_id: int, available_only: bool = False) -> Optional[Product]:
    query = _product_query(db).filter(Product.id == product_id)
    if available_only:
        query = query.filter(Product.is_available.is_(True))
    return query.first()


def _check_product_refs(db: Session, category_id: Optional[int], unit_type_id: Optional[int]) -> None:
    if category_id is not None and db.get(Category, category_id) is None:
        raise HTTPException(status_code=400, detail="Category not found")
    if unit_type_id is not None and db.get(UnitType, unit_type_id) is None:
        raise HTTPException(status_code=400, detail="Unit type not found")


def create_product(db: Session, data: ProductCreate) -> Product:
    _check_product_refs(db, data.category_id, data.unit_type_id)
    return _save(db, Product(**data.model_dump()), "Product could not be saved")


def update_product(db: Session, product: Product, data: ProductUpdate) -> Product:
    _check_product_refs(db, data.category_id, data.unit_type_id)
    _apply(product, data)
    return _save(db, product, "Product could not be saved")


def deactivate(db: Session, instance, flag: str = "is_active"):
    """Soft delete: flip the row's active/available flag off."""
    setattr(instance, flag, False)
    db.commit()
    db.refresh(instance)
    return instance
