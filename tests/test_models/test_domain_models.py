from datetime import timedelta
from decimal import Decimal

from freshgrupo.models.base import utcnow
from freshgrupo.models.cart import Cart
from freshgrupo.models.order import Order, OrderStatus, PaymentStatus
from freshgrupo.models.pack import Pack, PackProduct
from freshgrupo.models.registry import MODELS, metadata


def _order(status):
    return Order(status=status, payment_status=PaymentStatus.pending)


def test_order_moves_forward_through_fulfilment():
    assert _order(OrderStatus.processing).can_transition_to(OrderStatus.confirmed)
    assert _order(OrderStatus.confirmed).can_transition_to(OrderStatus.shipped)
    assert _order(OrderStatus.shipped).can_transition_to(OrderStatus.delivered)


def test_order_cannot_skip_or_leave_terminal_states():
    assert not _order(OrderStatus.processing).can_transition_to(OrderStatus.delivered)
    assert not _order(OrderStatus.delivered).can_transition_to(OrderStatus.cancelled)
    assert not _order(OrderStatus.cancelled).can_transition_to(OrderStatus.processing)


def test_order_can_be_cancelled_before_delivery():
    for status in (OrderStatus.pending, OrderStatus.processing, OrderStatus.confirmed, OrderStatus.shipped):
        assert _order(status).can_transition_to(OrderStatus.cancelled)


def test_cart_total_follows_quantity():
    line = Cart(unit_price=Decimal("250.00"))
    line.set_quantity(2)
    assert line.total_price == Decimal("500.00")
    line.set_quantity(5)
    assert line.total_price == Decimal("1250.00")


def test_pack_is_purchasable_only_inside_window_and_active():
    now = utcnow()
    pack = Pack(is_active=True, valid_from=now - timedelta(days=1), valid_until=now + timedelta(days=1))
    assert pack.is_purchasable(now)
    assert not pack.is_purchasable(now + timedelta(days=2))
    assert not pack.is_purchasable(now - timedelta(days=2))

    pack.is_active = False
    assert not pack.is_purchasable(now)


def test_pack_composed_price_sums_locked_unit_prices():
    pack = Pack()
    pack.pack_products.append(PackProduct(quantity=2, unit_price=Decimal("40.00")))
    pack.pack_products.append(PackProduct(quantity=1, unit_price=Decimal("19.50")))
    assert pack.composed_price() == Decimal("99.50")
    assert Pack().composed_price() == Decimal("0.00")


def test_registry_covers_every_table():
    assert {model.__tablename__ for model in MODELS} == set(metadata.tables)
    assert "Orders" in metadata.tables and "OrderPackContents" in metadata.tables


def test_single_default_address_index_is_partial_unique():
    index = next(i for i in metadata.tables["Addresses"].indexes if i.name == "uq_addresses_user_default")
    assert index.unique
    assert [column.name for column in index.columns] == ["user_id"]
