from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from freshgrupo.crud import address as crud_address
from freshgrupo.db.deps import ensure_owner_or_admin, get_current_user, get_db
from freshgrupo.models.user import User
from freshgrupo.schemas.address import AddressCreate, AddressOut, AddressUpdate
from freshgrupo.schemas.base import Message

router = APIRouter()

DEFAULT_CONFLICT = "Another default address was set at the same time, please retry"


def _get_owned_address(db: Session, address_id: int, current_user: User):
    address = crud_address.get_address(db, address_id)
    if not address:
        raise HTTPException(status_code=404, detail="Address not found")
    ensure_owner_or_admin(current_user, address.user_id)
    return address


@router.get("/", response_model=List[AddressOut])
def list_addresses(
    user_id: Optional[int] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    target_user_id = current_user.id
    if user_id is not None:
        ensure_owner_or_admin(current_user, user_id)
        target_user_id = user_id
    return crud_address.list_addresses(db, target_user_id)


@router.post("/", response_model=AddressOut, status_code=status.HTTP_201_CREATED)
def create_address(
    data: AddressCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = data.user_id or current_user.id
    ensure_owner_or_admin(current_user, user_id)
    if user_id != current_user.id and db.get(User, user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    try:
        return crud_address.create_address(db, user_id, data)
    except IntegrityError:
        raise HTTPException(status_code=400, detail=DEFAULT_CONFLICT)


@router.put("/{address_id}", response_model=AddressOut)
def update_address(
    address_id: int,
    data: AddressUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    address = _get_owned_address(db, address_id, current_user)
    try:
        return crud_address.update_address(db, address, data)
    except IntegrityError:
        raise HTTPException(status_code=400, detail=DEFAULT_CONFLICT)


@router.delete("/{address_id}", response_model=Message)
def delete_address(address_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    address = _get_owned_address(db, address_id, current_user)
    crud_address.delete_address(db, address)
    return Message(message="Address deleted successfully")
