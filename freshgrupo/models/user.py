import enum

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import relationship

from freshgrupo.db.session import Base
from freshgrupo.models.base import TimestampMixin, enum_type


class UserRole(str, enum.Enum):
    customer = "customer"
    admin = "admin"
    delivery = "delivery"


class AddressType(str, enum.Enum):
    home = "home"
    work = "work"
    other = "other"


class User(TimestampMixin, Base):
    __tablename__ = "Users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(32), nullable=True)
    address = Column(Text, nullable=True)
    password = Column(String(255), nullable=False)
    role = Column(enum_type(UserRole, "user_role"), default=UserRole.customer, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    addresses = relationship("Address", back_populates="user")
    cart_items = relationship("Cart", back_populates="user")
    orders = relationship("Order", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    def __repr__(self):
        return f"<User {self.id}: {self.email} ({self.role})>"


class Address(TimestampMixin, Base):
    __tablename__ = "Addresses"
    # Storage-level guard for the single default address per user
    __table_args__ = (
        Index(
            "uq_addresses_user_default",
            "user_id",
            unique=True,
            postgresql_where=text("is_default"),
            sqlite_where=text("is_default = 1"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("Users.id"), nullable=False, index=True)
    type = Column(enum_type(AddressType, "address_type"), default=AddressType.home, nullable=False)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="addresses")
