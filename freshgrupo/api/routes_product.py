from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from freshgrupo.crud import catalog as crud_catalog
from freshgrupo.db.deps import get_db, require_admin
from freshgrupo.models.user import User
from freshgrupo.schemas.base import Message
from freshgrupo.schemas.catalog import ProductCreate, ProductOut, ProductUpdate

router = APIRouter()


def _get_product_or_404(db: Session, product_id: int):
    product = crud_catalog.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/", response_model=List[ProductOut])
def list_products(category_id: Optional[int] = Query(None, alias="categoryId"), db: Session = Depends(get_db)):
    return crud_catalog.list_products(db, category_id=category_id)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return _get_product_or_404(db, product_id)


@router.post("/", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(data: ProductCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    product = crud_catalog.create_product(db, data)
    return crud_catalog.get_product(db, product.id)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    product = _get_product_or_404(db, product_id)
    crud_catalog.update_product(db, product, data)
    return crud_catalog.get_product(db, product_id)


@router.delete("/{product_id}", response_model=Message)
def delete_product(product_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    product = _get_product_or_404(db, product_id)
    crud_catalog.deactivate(db, product, flag="is_available")
    return Message(message="Product marked unavailable")
