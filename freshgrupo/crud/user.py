from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from freshgrupo.core.security import hash_password
from freshgrupo.models.base import apply_changes
from freshgrupo.models.user import User, UserRole
from freshgrupo.schemas.user import UserRegister, UserUpdate


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def create_user(db: Session, user_data: UserRegister, role: UserRole = UserRole.customer) -> User:
    new_user = User(
        name=user_data.name,
        email=user_data.email.lower(),
        phone=user_data.phone,
        password=hash_password(user_data.password),
        role=role,
        is_active=True,
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent registration took the email between lookup and insert
        db.rollback()
        raise HTTPException(status_code=400, detail="User already exists with this email")
    db.refresh(new_user)
    return new_user


def list_users(db: Session, role: Optional[UserRole] = None) -> List[User]:
    query = db.query(User)
    if role is not None:
        query = query.filter(User.role == role)
    return query.order_by(User.created_at.desc(), User.id.desc()).all()


def update_user(db: Session, user: User, data: UserUpdate) -> User:
    update_data = data.model_dump(exclude_unset=True)
    if "email" in update_data and update_data["email"] is not None:
        update_data["email"] = update_data["email"].lower()
    apply_changes(user, update_data)
    db.commit()
    db.refresh(user)
    return user


def set_active(db: Session, user: User, is_active: bool) -> User:
    user.is_active = is_active
    db.commit()
    db.refresh(user)
    return user
