import os

# Settings are read at import time, so the environment is fixed before the app loads
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "test_secret"
os.environ.pop("REDIS_URL", None)

from datetime import timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from freshgrupo.core.security import create_access_token, hash_password  # noqa: E402
from freshgrupo.db.deps import get_db, get_payment_gateway  # noqa: E402
from freshgrupo.main import app  # noqa: E402
from freshgrupo.models.base import utcnow  # noqa: E402
from freshgrupo.models.catalog import Category, Product, UnitType  # noqa: E402
from freshgrupo.models.pack import Pack, PackDuration, PackProduct, PackType  # noqa: E402
from freshgrupo.models.registry import create_tables, drop_tables  # noqa: E402
from freshgrupo.models.user import User, UserRole  # noqa: E402
from freshgrupo.services.payment_gateway import RazorpayGateway  # noqa: E402

GATEWAY_KEY_ID = "rzp_test_key"
GATEWAY_SECRET = "test_secret"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeOrderResource:
    """Records the payloads razorpay's ``client.order.create`` would receive."""

    def __init__(self):
        self.calls = []
        self.error = None

    def create(self, payload):
        self.calls.append(payload)
        if self.error is not None:
            raise self.error
        return {
            "id": f"order_test{len(self.calls)}",
            "entity": "order",
            "amount": payload["amount"],
            "currency": payload["currency"],
            "receipt": payload["receipt"],
            "status": "created",
        }


class FakeRazorpayClient:
    def __init__(self):
        self.order = FakeOrderResource()


@pytest.fixture
def db_session():
    create_tables(engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_tables(engine)


@pytest.fixture
def gateway():
    return RazorpayGateway(GATEWAY_KEY_ID, GATEWAY_SECRET, currency="INR", client=FakeRazorpayClient())


@pytest.fixture
def client(db_session, gateway):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


# 👇 Users
def _make_user(db, name, email, role=UserRole.customer, is_active=True):
    user = User(
        name=name,
        email=email,
        phone="+911234567890",
        password=hash_password("password123"),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def make_user(db_session):
    def _make(name, email, role=UserRole.customer, is_active=True):
        return _make_user(db_session, name, email, role=role, is_active=is_active)

    return _make


@pytest.fixture
def customer(db_session):
    return _make_user(db_session, "Asha Customer", "asha@example.com")


@pytest.fixture
def other_customer(db_session):
    return _make_user(db_session, "Ravi Customer", "ravi@example.com")


@pytest.fixture
def admin(db_session):
    return _make_user(db_session, "Admin User", "admin@example.com", role=UserRole.admin)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def other_headers(other_customer):
    return auth_headers(other_customer)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


# 👇 Catalog
@pytest.fixture
def catalog(db_session):
    """One category with two products (100.00 and 50.00) and a weekly pack type."""
    unit = UnitType(name="Kilogram", abbreviation="KG")
    category = Category(name="Vegetables Pack", description="Fresh vegetables")
    pack_type = PackType(name="Weekly Pack", duration=PackDuration.weekly, base_price=Decimal("250.00"))
    db_session.add_all([unit, category, pack_type])
    db_session.flush()

    tomatoes = Product(name="Tomatoes", price=Decimal("100.00"), category_id=category.id, unit_type_id=unit.id, stock=10)
    onions = Product(name="Onions", price=Decimal("50.00"), category_id=category.id, unit_type_id=unit.id, stock=10)
    db_session.add_all([tomatoes, onions])
    db_session.commit()
    return {
        "unit": unit,
        "category": category,
        "pack_type": pack_type,
        "products": [tomatoes, onions],
    }


@pytest.fixture
def make_pack(db_session, catalog):
    """Build a pack from (product, quantity, unit price) lines; price is the line sum."""

    def _make_pack(lines=None, name="Vegetables Weekly Pack", is_active=True, valid_days=30, starts_in_days=-1):
        tomatoes, onions = catalog["products"]
        if lines is None:
            # 1 x 100.00 + 3 x 50.00 = 250.00
            lines = [(tomatoes, 1, Decimal("100.00")), (onions, 3, Decimal("50.00"))]
        now = utcnow()
        total = sum((price * qty for _, qty, price in lines), Decimal("0.00"))
        pack = Pack(
            name=name,
            category_id=catalog["category"].id,
            pack_type_id=catalog["pack_type"].id,
            base_price=total,
            final_price=total,
            is_active=is_active,
            valid_from=now + timedelta(days=starts_in_days),
            valid_until=now + timedelta(days=valid_days),
        )
        for product, quantity, unit_price in lines:
            pack.pack_products.append(PackProduct(product_id=product.id, quantity=quantity, unit_price=unit_price))
        db_session.add(pack)
        db_session.commit()
        db_session.refresh(pack)
        return pack

    return _make_pack


@pytest.fixture
def pack(make_pack):
    return make_pack()
