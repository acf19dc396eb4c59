# Storefront reads: no token, only active categories, available products and packs
# that can be bought right now.
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from freshgrupo.crud import catalog as crud_catalog
from freshgrupo.crud import pack as crud_pack
from freshgrupo.db.deps import get_db
from freshgrupo.schemas.catalog import CategoryOut, ProductOut, UnitTypeOut
from freshgrupo.schemas.pack import PackDetailOut, PackTypeOut

router = APIRouter()


def _get_active_category_or_404(db: Session, category_id: int):
    category = crud_catalog.get_category(db, category_id, active_only=True)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("/categories", response_model=List[CategoryOut])
def public_categories(db: Session = Depends(get_db)):
    return crud_catalog.list_categories(db, active_only=True)


@router.get("/categories/{category_id}", response_model=CategoryOut)
def public_category(category_id: int, db: Session = Depends(get_db)):
    return _get_active_category_or_404(db, category_id)


@router.get("/categories/{category_id}/products", response_model=List[ProductOut])
def public_category_products(category_id: int, db: Session = Depends(get_db)):
    _get_active_category_or_404(db, category_id)
    return crud_catalog.list_products(db, available_only=True, category_id=category_id)


@router.get("/categories/{category_id}/packs", response_model=List[PackDetailOut])
def public_category_packs(category_id: int, db: Session = Depends(get_db)):
    _get_active_category_or_404(db, category_id)
    return crud_pack.list_packs(db, purchasable_only=True, category_id=category_id, with_products=True)


@router.get("/products", response_model=List[ProductOut])
def public_products(category_id: Optional[int] = Query(None, alias="categoryId"), db: Session = Depends(get_db)):
    return crud_catalog.list_products(db, available_only=True, category_id=category_id)


@router.get("/products/{product_id}", response_model=ProductOut)
def public_product(product_id: int, db: Session = Depends(get_db)):
    product = crud_catalog.get_product(db, product_id, available_only=True)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/packs", response_model=List[PackDetailOut])
def public_packs(category_id: Optional[int] = Query(None, alias="categoryId"), db: Session = Depends(get_db)):
    return crud_pack.list_packs(db, purchasable_only=True, category_id=category_id, with_products=True)


@router.get("/packs/{pack_id}", response_model=PackDetailOut)
def public_pack(pack_id: int, db: Session = Depends(get_db)):
    pack = crud_pack.get_pack(db, pack_id, purchasable_only=True)
    if not pack:
        raise HTTPException(status_code=404, detail="Pack not found")
    return pack


@router.get("/pack-types", response_model=List[PackTypeOut])
def public_pack_types(db: Session = Depends(get_db)):
    return crud_pack.list_pack_types(db, active_only=True)


@router.get("/unit-types", response_model=List[UnitTypeOut])
def public_unit_types(db: Session = Depends(get_db)):
    return crud_catalog.list_unit_types(db, active_only=True)
