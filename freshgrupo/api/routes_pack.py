from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from freshgrupo.crud import catalog as crud_catalog
from freshgrupo.crud import pack as crud_pack
from freshgrupo.db.deps import get_db, require_admin
from freshgrupo.models.user import User
from freshgrupo.schemas.base import Message
from freshgrupo.schemas.pack import (
    PackCreate,
    PackDetailOut,
    PackOut,
    PackProductLine,
    PackProductsBulk,
    PackUpdate,
)

router = APIRouter()
pack_products_router = APIRouter()


def _get_pack_or_404(db: Session, pack_id: int):
    pack = crud_pack.get_pack(db, pack_id)
    if not pack:
        raise HTTPException(status_code=404, detail="Pack not found")
    return pack


@router.get("/", response_model=List[PackDetailOut])
def list_packs(category_id: Optional[int] = Query(None, alias="categoryId"), db: Session = Depends(get_db)):
    return crud_pack.list_packs(db, category_id=category_id, with_products=True)


@router.get("/{pack_id}", response_model=PackDetailOut)
def get_pack(pack_id: int, db: Session = Depends(get_db)):
    return _get_pack_or_404(db, pack_id)


@router.get("/{pack_id}/products", response_model=List[PackProductLine])
def get_pack_products(pack_id: int, db: Session = Depends(get_db)):
    _get_pack_or_404(db, pack_id)
    return crud_pack.get_pack_products(db, pack_id)


@router.post("/", response_model=PackOut, status_code=status.HTTP_201_CREATED)
def create_pack(data: PackCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return crud_pack.create_pack(db, data)


@router.put("/{pack_id}", response_model=PackOut)
def update_pack(
    pack_id: int,
    data: PackUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    pack = _get_pack_or_404(db, pack_id)
    return crud_pack.update_pack(db, pack, data)


@router.delete("/{pack_id}", response_model=Message)
def delete_pack(pack_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    pack = _get_pack_or_404(db, pack_id)
    crud_catalog.deactivate(db, pack)
    return Message(message="Pack deactivated successfully")


@router.delete("/{pack_id}/products", response_model=Message)
def clear_pack_products(pack_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    pack = _get_pack_or_404(db, pack_id)
    removed = crud_pack.clear_pack_products(db, pack)
    return Message(message=f"Removed {removed} products from pack")


# 👇 /api/pack-products
@pack_products_router.post("/bulk", response_model=PackDetailOut)
def replace_pack_products(
    data: PackProductsBulk,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    pack = _get_pack_or_404(db, data.pack_id)
    crud_pack.replace_pack_products(db, pack, data.products)
    return crud_pack.get_pack(db, data.pack_id)
