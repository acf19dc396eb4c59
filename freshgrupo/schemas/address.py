from datetime import datetime
from typing import Optional

from pydantic import Field

from freshgrupo.models.user import AddressType
from freshgrupo.schemas.base import CamelModel


class AddressCreate(CamelModel):
    user_id: Optional[int] = None  # admins may create on behalf of a user
    type: AddressType = AddressType.home
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1)
    is_default: bool = False


class AddressUpdate(CamelModel):
    type: Optional[AddressType] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = Field(None, min_length=1)
    is_default: Optional[bool] = None


class AddressOut(CamelModel):
    id: int
    user_id: int
    type: AddressType
    name: str
    address: str
    is_default: bool
    created_at: datetime
    updated_at: datetime
