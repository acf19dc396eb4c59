from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from freshgrupo.models.pack import PackDuration
from freshgrupo.schemas.base import CamelModel
from freshgrupo.schemas.catalog import CategoryBrief


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# 👇 Pack types
class PackTypeCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    duration: PackDuration
    base_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    is_active: bool = True


class PackTypeUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    duration: Optional[PackDuration] = None
    base_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None


class PackTypeBrief(CamelModel):
    id: int
    name: str
    duration: PackDuration


class PackTypeOut(PackTypeBrief):
    base_price: float
    is_active: bool
    created_at: datetime
    updated_at: datetime


# 👇 Packs
class PackCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: int
    pack_type_id: int
    base_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    final_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_active: bool = True
    valid_from: datetime
    valid_until: datetime

    @field_validator("valid_from", "valid_until")
    @classmethod
    def normalize_dates(cls, value):
        return _naive_utc(value)

    @model_validator(mode="after")
    def check_window(self):
        if self.valid_until < self.valid_from:
            raise ValueError("validUntil must not be before validFrom")
        if self.final_price is None:
            self.final_price = self.base_price
        return self


class PackUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: Optional[int] = None
    pack_type_id: Optional[int] = None
    base_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    final_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None

    @field_validator("valid_from", "valid_until")
    @classmethod
    def normalize_dates(cls, value):
        return _naive_utc(value)


class PackProductIn(CamelModel):
    product_id: int
    quantity: int = Field(1, ge=1)
    unit_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class PackProductsBulk(CamelModel):
    pack_id: int
    products: List[PackProductIn]


class PackProductLine(CamelModel):
    """A product as it appears inside a pack."""

    id: int
    product_id: int
    quantity: int
    unit_price: float
    product_name: str
    product_price: float


class PackBrief(CamelModel):
    id: int
    name: str
    final_price: float
    category: Optional[CategoryBrief] = None
    pack_type: Optional[PackTypeBrief] = None


class PackOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    category_id: int
    pack_type_id: int
    base_price: float
    final_price: float
    is_active: bool
    valid_from: datetime
    valid_until: datetime
    created_at: datetime
    updated_at: datetime
    category: Optional[CategoryBrief] = None
    pack_type: Optional[PackTypeBrief] = None


class PackDetailOut(PackOut):
    products: List[PackProductLine] = []
