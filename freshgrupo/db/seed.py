"""Demo data: users, catalog, pack types and one pack per category and duration."""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Dict

from sqlalchemy import func
from sqlalchemy.orm import Session

from freshgrupo.core.security import hash_password
from freshgrupo.crud.pack import recalculate_pack_price
from freshgrupo.models.base import utcnow
from freshgrupo.models.catalog import Category, Product, UnitType
from freshgrupo.models.pack import Pack, PackDuration, PackProduct, PackType
from freshgrupo.models.registry import MODELS, create_tables, drop_tables
from freshgrupo.models.user import User, UserRole

logger = logging.getLogger(__name__)

PACK_VALIDITY = timedelta(days=30)

SEED_USERS = [
    ("John Doe", "john@example.com", "+1234567890", "password123", UserRole.customer),
    ("Admin User", "admin@freshgrupo.com", "+1234567891", "admin12345", UserRole.admin),
    ("Delivery Person", "delivery@freshgrupo.com", "+1234567892", "delivery123", UserRole.delivery),
]

SEED_UNIT_TYPES = [
    ("Kilogram", "KG", "Weight in kilograms"),
    ("500 Grams", "500G", "500 grams pack"),
    ("250 Grams", "250G", "250 grams pack"),
    ("Piece", "PC", "Individual pieces"),
    ("Bunch", "BUNCH", "Bunches or bundles"),
    ("Liter", "L", "Volume in liters"),
    ("Packet", "PKT", "Packaged items"),
    ("Bottle", "BTL", "Bottled items"),
]

# duration -> how many weekly portions the pack carries
SEED_PACK_TYPES = [
    ("Weekly Pack", PackDuration.weekly, Decimal("2500.00"), 1),
    ("Bi-Weekly Pack", PackDuration.bi_weekly, Decimal("5000.00"), 2),
    ("Monthly Pack", PackDuration.monthly, Decimal("10000.00"), 4),
]

# category name, description, [(product, description, price, unit abbreviation, stock)]
SEED_CATALOG = [
    ("Fruits Pack", "Fresh fruits and seasonal produce", [
        ("Apples", "Crisp Shimla apples", "180.00", "KG", 80),
        ("Bananas", "Ripe yellow bananas", "60.00", "BUNCH", 120),
        ("Oranges", "Juicy Nagpur oranges", "90.00", "KG", 90),
    ]),
    ("Vegetables Pack", "Fresh vegetables and greens", [
        ("Spinach", "Organic baby spinach leaves", "50.00", "BUNCH", 100),
        ("Tomatoes", "Vine-ripened red tomatoes", "30.00", "KG", 150),
        ("Potatoes", "Fresh farm potatoes", "25.00", "KG", 200),
        ("Onions", "Red and white onions", "60.00", "KG", 180),
    ]),
    ("Grocery Pack", "Essential grocery items and staples", [
        ("Basmati Rice", "Long grain aged rice", "120.00", "KG", 100),
        ("Toor Dal", "Split pigeon peas", "140.00", "KG", 90),
        ("Sunflower Oil", "Refined sunflower oil", "160.00", "L", 70),
    ]),
    ("Juices Pack", "Fresh fruit juices and beverages", [
        ("Orange Juice", "Cold pressed orange juice", "110.00", "BTL", 60),
        ("Pomegranate Juice", "Cold pressed pomegranate juice", "150.00", "BTL", 50),
    ]),
    ("Millets Pack", "Healthy millets and grains", [
        ("Foxtail Millet", "Unpolished foxtail millet", "95.00", "500G", 80),
        ("Ragi Flour", "Stone ground finger millet", "70.00", "500G", 80),
    ]),
    ("Dry Fruit Pack", "Dried fruits and nuts", [
        ("Almonds", "California almonds", "450.00", "250G", 40),
        ("Cashews", "Whole W320 cashews", "400.00", "250G", 40),
    ]),
    ("Sprouts Pack", "Fresh sprouts and microgreens", [
        ("Moong Sprouts", "Green gram sprouts", "40.00", "PKT", 60),
        ("Mixed Sprouts", "Moong, chana and matki", "55.00", "PKT", 60),
    ]),
]


def table_counts(db: Session) -> Dict[str, int]:
    return {model.__tablename__: db.query(func.count(model.id)).scalar() for model in MODELS}


def seed_database(db: Session, force: bool = False) -> Dict[str, int]:
    """Populate an empty database.

    Does nothing when users already exist, unless ``force`` is set, in which case every
    table is dropped and recreated first. Returns the row counts after seeding.
    """
    bind = db.get_bind()
    if force:
        logger.warning("Force seeding: dropping and recreating all tables")
        db.close()
        drop_tables(bind)
    create_tables(bind)

    if db.query(User).count() > 0:
        logger.info("Data already exists, skipping seeding")
        return table_counts(db)

    logger.info("Seeding database...")
    try:
        for name, email, phone, password, role in SEED_USERS:
            db.add(User(name=name, email=email, phone=phone, password=hash_password(password), role=role))

        unit_types = {}
        for name, abbreviation, description in SEED_UNIT_TYPES:
            unit_types[abbreviation] = UnitType(name=name, abbreviation=abbreviation, description=description)
            db.add(unit_types[abbreviation])

        pack_types = []
        for name, duration, base_price, portions in SEED_PACK_TYPES:
            pack_type = PackType(name=name, duration=duration, base_price=base_price)
            db.add(pack_type)
            pack_types.append((pack_type, portions))

        now = utcnow()
        packs = []
        for category_name, description, product_rows in SEED_CATALOG:
            category = Category(
                name=category_name,
                description=description,
                image=category_name.lower().replace(" ", "-") + ".jpg",
            )
            db.add(category)

            products = []
            for product_name, product_description, price, unit, stock in product_rows:
                product = Product(
                    name=product_name,
                    description=product_description,
                    price=Decimal(price),
                    image=product_name.lower().replace(" ", "-") + ".png",
                    category=category,
                    unit_type=unit_types[unit],
                    quantity=Decimal("1"),
                    stock=stock,
                )
                db.add(product)
                products.append(product)

            base_name = category_name[: -len(" Pack")]
            for pack_type, portions in pack_types:
                pack = Pack(
                    name=f"{base_name} {pack_type.name}",
                    description=f"{description} ({pack_type.duration.value})",
                    category=category,
                    pack_type=pack_type,
                    base_price=pack_type.base_price,
                    final_price=pack_type.base_price,
                    valid_from=now,
                    valid_until=now + PACK_VALIDITY,
                )
                for product in products:
                    pack.pack_products.append(
                        PackProduct(product=product, quantity=portions, unit_price=product.price)
                    )
                db.add(pack)
                packs.append(pack)

        db.flush()
        for pack in packs:
            recalculate_pack_price(pack)
        db.commit()
    except Exception:
        db.rollback()
        raise

    counts = table_counts(db)
    logger.info(f"Seeding complete: {counts}")
    return counts
