from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from freshgrupo.models.user import UserRole
from freshgrupo.schemas.base import CamelModel


class UserRegister(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")
    phone: Optional[str] = None


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class UserBrief(CamelModel):
    id: int
    name: str
    email: str
    role: UserRole


class UserOut(UserBrief):
    phone: Optional[str] = None
    address: Optional[str] = None
    is_active: bool
    created_at: datetime


class Token(CamelModel):
    message: Optional[str] = None
    token: str
    token_type: str = "bearer"
    user: UserBrief


class UserUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserUpdateResult(CamelModel):
    message: str
    user: UserOut
