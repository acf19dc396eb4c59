from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from freshgrupo.crud import catalog as crud_catalog
from freshgrupo.db.deps import get_db, require_admin
from freshgrupo.models.user import User
from freshgrupo.schemas.base import Message
from freshgrupo.schemas.catalog import CategoryCreate, CategoryOut, CategoryUpdate, ProductOut

router = APIRouter()


def _get_category_or_404(db: Session, category_id: int):
    category = crud_catalog.get_category(db, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("/", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return crud_catalog.list_categories(db)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return _get_category_or_404(db, category_id)


@router.get("/{category_id}/products", response_model=List[ProductOut])
def list_category_products(category_id: int, db: Session = Depends(get_db)):
    _get_category_or_404(db, category_id)
    return crud_catalog.list_products(db, category_id=category_id)


@router.post("/", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(data: CategoryCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return crud_catalog.create_category(db, data)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    data: CategoryUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    category = _get_category_or_404(db, category_id)
    return crud_catalog.update_category(db, category, data)


@router.delete("/{category_id}", response_model=Message)
def delete_category(category_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    category = _get_category_or_404(db, category_id)
    crud_catalog.deactivate(db, category)
    return Message(message="Category deactivated successfully")
