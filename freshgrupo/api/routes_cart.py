from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from freshgrupo.crud import cart as crud_cart
from freshgrupo.db.deps import ensure_owner_or_admin, get_current_user, get_db
from freshgrupo.models.user import User
from freshgrupo.schemas.base import Message
from freshgrupo.schemas.cart import CartItemCreate, CartItemOut, CartItemUpdate

router = APIRouter()


def _get_item_or_404(db: Session, item_id: int, current_user: User):
    item = crud_cart.get_active_item(db, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Cart item not found")
    ensure_owner_or_admin(current_user, item.user_id)
    return item


@router.get("/", response_model=List[CartItemOut])
def get_my_cart(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_cart.get_cart(db, current_user.id)


@router.get("/{user_id}", response_model=List[CartItemOut])
def get_user_cart(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_owner_or_admin(current_user, user_id)
    return crud_cart.get_cart(db, user_id)


@router.post("/", response_model=CartItemOut, status_code=status.HTTP_201_CREATED)
def add_to_cart(data: CartItemCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user_id = data.user_id or current_user.id
    ensure_owner_or_admin(current_user, user_id)
    return crud_cart.add_to_cart(db, user_id, data)


@router.put("/{item_id}", response_model=CartItemOut)
def update_cart_item(
    item_id: int,
    data: CartItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = _get_item_or_404(db, item_id, current_user)
    return crud_cart.update_quantity(db, item, data.quantity)


@router.delete("/{item_id}", response_model=Message)
def remove_cart_item(item_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    item = _get_item_or_404(db, item_id, current_user)
    crud_cart.remove_item(db, item)
    return Message(message="Item removed from cart")


@router.delete("/", response_model=Message)
def clear_my_cart(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    removed = crud_cart.clear_cart(db, current_user.id)
    return Message(message=f"Removed {removed} items from cart")
