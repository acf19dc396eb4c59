import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from freshgrupo.db.session import Base
from freshgrupo.models.base import TimestampMixin, enum_type, utcnow


class PackDuration(str, enum.Enum):
    weekly = "weekly"
    bi_weekly = "bi-weekly"
    monthly = "monthly"


class PackType(TimestampMixin, Base):
    __tablename__ = "PackTypes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    duration = Column(enum_type(PackDuration, "pack_duration"), nullable=False)
    base_price = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    packs = relationship("Pack", back_populates="pack_type")


class Pack(TimestampMixin, Base):
    __tablename__ = "Packs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("Categories.id"), nullable=False, index=True)
    pack_type_id = Column(Integer, ForeignKey("PackTypes.id"), nullable=False, index=True)
    base_price = Column(Numeric(10, 2), nullable=False)
    final_price = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    valid_from = Column(DateTime, nullable=False)
    valid_until = Column(DateTime, nullable=False)

    category = relationship("Category", back_populates="packs")
    pack_type = relationship("PackType", back_populates="packs")
    pack_products = relationship(
        "PackProduct",
        back_populates="pack",
        order_by="PackProduct.id",
        cascade="all, delete-orphan",
    )

    @property
    def products(self):
        return self.pack_products

    def is_purchasable(self, now: Optional[datetime] = None) -> bool:
        now = now or utcnow()
        return bool(self.is_active) and self.valid_from <= now <= self.valid_until

    def composed_price(self) -> Decimal:
        """Sum of unit price x quantity over the pack's product lines."""
        return sum(
            (Decimal(line.unit_price) * line.quantity for line in self.pack_products),
            Decimal("0.00"),
        )

    def __repr__(self):
        return f"<Pack {self.id}: {self.name} - {self.final_price}>"


class PackProduct(TimestampMixin, Base):
    __tablename__ = "PackProducts"

    id = Column(Integer, primary_key=True, index=True)
    pack_id = Column(Integer, ForeignKey("Packs.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("Products.id"), nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)  # locked in at composition time

    pack = relationship("Pack", back_populates="pack_products")
    product = relationship("Product", back_populates="pack_products")

    @property
    def product_name(self) -> str:
        return self.product.name if self.product else ""

    @property
    def product_price(self) -> Decimal:
        return self.product.price if self.product else Decimal("0.00")
