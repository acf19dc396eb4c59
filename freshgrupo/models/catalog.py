from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from freshgrupo.db.session import Base
from freshgrupo.models.base import TimestampMixin


class Category(TimestampMixin, Base):
    __tablename__ = "Categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String(512), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    products = relationship("Product", back_populates="category")
    packs = relationship("Pack", back_populates="category")


class UnitType(TimestampMixin, Base):
    __tablename__ = "UnitTypes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    abbreviation = Column(String(32), unique=True, nullable=False)
    description = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    products = relationship("Product", back_populates="unit_type")


class Product(TimestampMixin, Base):
    __tablename__ = "Products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    image = Column(String(512), nullable=True)
    category_id = Column(Integer, ForeignKey("Categories.id"), nullable=False, index=True)
    unit_type_id = Column(Integer, ForeignKey("UnitTypes.id"), nullable=True)
    quantity = Column(Numeric(10, 2), default=1, nullable=False)  # pack-size multiplier
    is_available = Column(Boolean, default=True, nullable=False)
    stock = Column(Integer, default=0, nullable=False)

    category = relationship("Category", back_populates="products")
    unit_type = relationship("UnitType", back_populates="products")
    pack_products = relationship("PackProduct", back_populates="product")
