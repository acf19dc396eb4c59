"""Every mapped entity, imported in one place so the metadata is complete."""

from freshgrupo.db.session import Base
from freshgrupo.models.cart import Cart
from freshgrupo.models.catalog import Category, Product, UnitType
from freshgrupo.models.order import Order, OrderPackContent, Payment
from freshgrupo.models.pack import Pack, PackProduct, PackType
from freshgrupo.models.user import Address, User

MODELS = (
    User,
    Address,
    Category,
    UnitType,
    Product,
    PackType,
    Pack,
    PackProduct,
    Cart,
    Order,
    OrderPackContent,
    Payment,
)

metadata = Base.metadata


def create_tables(bind) -> None:
    metadata.create_all(bind=bind)


def drop_tables(bind) -> None:
    metadata.drop_all(bind=bind)
