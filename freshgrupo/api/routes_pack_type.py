from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from freshgrupo.crud import catalog as crud_catalog
from freshgrupo.crud import pack as crud_pack
from freshgrupo.db.deps import get_db, require_admin
from freshgrupo.models.user import User
from freshgrupo.schemas.base import Message
from freshgrupo.schemas.pack import PackTypeCreate, PackTypeOut, PackTypeUpdate

router = APIRouter()


def _get_pack_type_or_404(db: Session, pack_type_id: int):
    pack_type = crud_pack.get_pack_type(db, pack_type_id)
    if not pack_type:
        raise HTTPException(status_code=404, detail="Pack type not found")
    return pack_type


@router.get("/", response_model=List[PackTypeOut])
def list_pack_types(db: Session = Depends(get_db)):
    return crud_pack.list_pack_types(db)


@router.get("/{pack_type_id}", response_model=PackTypeOut)
def get_pack_type(pack_type_id: int, db: Session = Depends(get_db)):
    return _get_pack_type_or_404(db, pack_type_id)


@router.post("/", response_model=PackTypeOut, status_code=status.HTTP_201_CREATED)
def create_pack_type(data: PackTypeCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return crud_pack.create_pack_type(db, data)


@router.put("/{pack_type_id}", response_model=PackTypeOut)
def update_pack_type(
    pack_type_id: int,
    data: PackTypeUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    pack_type = _get_pack_type_or_404(db, pack_type_id)
    return crud_pack.update_pack_type(db, pack_type, data)


@router.delete("/{pack_type_id}", response_model=Message)
def delete_pack_type(pack_type_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    pack_type = _get_pack_type_or_404(db, pack_type_id)
    crud_catalog.deactivate(db, pack_type)
    return Message(message="Pack type deactivated successfully")
