from decimal import Decimal

from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from freshgrupo.db.session import Base
from freshgrupo.models.base import TimestampMixin


class Cart(TimestampMixin, Base):
    __tablename__ = "Carts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("Users.id"), nullable=False, index=True)
    pack_id = Column(Integer, ForeignKey("Packs.id"), nullable=True)  # null for custom packs
    quantity = Column(Integer, default=1, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_custom = Column(Boolean, default=False, nullable=False)
    custom_pack_name = Column(String(255), nullable=True)
    custom_pack_items = Column(Text, nullable=True)  # opaque client payload

    user = relationship("User", back_populates="cart_items")
    pack = relationship("Pack")

    def set_quantity(self, quantity: int) -> None:
        self.quantity = quantity
        self.total_price = Decimal(self.unit_price) * quantity
