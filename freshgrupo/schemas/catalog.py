from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from freshgrupo.schemas.base import CamelModel


# 👇 Categories
class CategoryBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = None
    is_active: bool = True


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = None
    is_active: Optional[bool] = None


class CategoryBrief(CamelModel):
    id: int
    name: str


class CategoryOut(CategoryBase):
    id: int
    created_at: datetime
    updated_at: datetime


# 👇 Unit types
class UnitTypeBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    abbreviation: str = Field(..., min_length=1, max_length=32)
    description: Optional[str] = None
    is_active: bool = True


class UnitTypeCreate(UnitTypeBase):
    pass


class UnitTypeUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    abbreviation: Optional[str] = Field(None, min_length=1, max_length=32)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class UnitTypeBrief(CamelModel):
    id: int
    name: str
    abbreviation: str


class UnitTypeOut(UnitTypeBase):
    id: int
    created_at: datetime
    updated_at: datetime


# 👇 Products
class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = None
    category_id: int
    unit_type_id: Optional[int] = None
    is_available: bool = True
    stock: int = Field(0, ge=0)


class ProductCreate(ProductBase):
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    quantity: Decimal = Field(Decimal("1"), gt=0, max_digits=10, decimal_places=2)


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    image: Optional[str] = None
    category_id: Optional[int] = None
    unit_type_id: Optional[int] = None
    quantity: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    is_available: Optional[bool] = None
    stock: Optional[int] = Field(None, ge=0)


class ProductOut(ProductBase):
    id: int
    price: float
    quantity: float
    created_at: datetime
    updated_at: datetime
    category: Optional[CategoryBrief] = None
    unit_type: Optional[UnitTypeBrief] = None
