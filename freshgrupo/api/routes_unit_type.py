from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from freshgrupo.crud import catalog as crud_catalog
from freshgrupo.db.deps import get_db, require_admin
from freshgrupo.models.user import User
from freshgrupo.schemas.base import Message
from freshgrupo.schemas.catalog import UnitTypeCreate, UnitTypeOut, UnitTypeUpdate

router = APIRouter()


def _get_unit_type_or_404(db: Session, unit_type_id: int):
    unit_type = crud_catalog.get_unit_type(db, unit_type_id)
    if not unit_type:
        raise HTTPException(status_code=404, detail="Unit type not found")
    return unit_type


@router.get("/", response_model=List[UnitTypeOut])
def list_unit_types(db: Session = Depends(get_db)):
    return crud_catalog.list_unit_types(db)


@router.get("/{unit_type_id}", response_model=UnitTypeOut)
def get_unit_type(unit_type_id: int, db: Session = Depends(get_db)):
    return _get_unit_type_or_404(db, unit_type_id)


@router.post("/", response_model=UnitTypeOut, status_code=status.HTTP_201_CREATED)
def create_unit_type(data: UnitTypeCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return crud_catalog.create_unit_type(db, data)


@router.put("/{unit_type_id}", response_model=UnitTypeOut)
def update_unit_type(
    unit_type_id: int,
    data: UnitTypeUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    unit_type = _get_unit_type_or_404(db, unit_type_id)
    return crud_catalog.update_unit_type(db, unit_type, data)


@router.delete("/{unit_type_id}", response_model=Message)
def delete_unit_type(unit_type_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    unit_type = _get_unit_type_or_404(db, unit_type_id)
    crud_catalog.deactivate(db, unit_type)
    return Message(message="Unit type deactivated successfully")
