from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from freshgrupo.crud import user as crud_user
from freshgrupo.db.deps import ensure_owner_or_admin, get_current_user, get_db, require_admin
from freshgrupo.models.user import User, UserRole
from freshgrupo.schemas.base import Message
from freshgrupo.schemas.user import UserOut, UserUpdate, UserUpdateResult

router = APIRouter()


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = crud_user.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/", response_model=List[UserOut])
def list_users(
    role: Optional[UserRole] = Query(None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return crud_user.list_users(db, role=role)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_owner_or_admin(current_user, user_id)
    return _get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserUpdateResult)
def update_user(
    user_id: int,
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_owner_or_admin(current_user, user_id)
    user = _get_user_or_404(db, user_id)

    if not current_user.is_admin and (data.role is not None or data.is_active is not None):
        raise HTTPException(status_code=403, detail="Only admins can change role or status")
    if data.email and data.email.lower() != user.email:
        if crud_user.get_user_by_email(db, data.email):
            raise HTTPException(status_code=400, detail="Email already in use")

    user = crud_user.update_user(db, user, data)
    return UserUpdateResult(message="User updated successfully", user=UserOut.model_validate(user))


@router.delete("/{user_id}", response_model=Message)
def delete_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    user = _get_user_or_404(db, user_id)
    if user.id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")
    crud_user.set_active(db, user, False)
    return Message(message="User deactivated successfully")


@router.patch("/{user_id}/status", response_model=UserUpdateResult)
def toggle_user_status(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    user = _get_user_or_404(db, user_id)
    user = crud_user.set_active(db, user, not user.is_active)
    state = "activated" if user.is_active else "deactivated"
    return UserUpdateResult(message=f"User {state} successfully", user=UserOut.model_validate(user))
