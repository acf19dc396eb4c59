from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, model_validator

from freshgrupo.schemas.base import CamelModel
from freshgrupo.schemas.pack import PackBrief


class CartItemCreate(CamelModel):
    user_id: Optional[int] = None  # defaults to the authenticated user
    pack_id: Optional[int] = None
    quantity: int = Field(1, ge=1)
    is_custom: bool = False
    custom_pack_name: Optional[str] = Field(None, max_length=255)
    custom_pack_items: Optional[str] = None
    unit_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)

    @model_validator(mode="after")
    def check_line_kind(self):
        if self.is_custom:
            if self.unit_price is None:
                raise ValueError("unitPrice is required for custom packs")
        elif self.pack_id is None:
            raise ValueError("packId is required unless isCustom is true")
        return self


class CartItemUpdate(CamelModel):
    quantity: int = Field(..., ge=1)


class CartItemOut(CamelModel):
    id: int
    user_id: int
    pack_id: Optional[int] = None
    quantity: int
    unit_price: float
    total_price: float
    is_active: bool
    is_custom: bool
    custom_pack_name: Optional[str] = None
    custom_pack_items: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    pack: Optional[PackBrief] = None
