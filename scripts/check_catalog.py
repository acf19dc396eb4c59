# scripts/check_catalog.py - Print table counts, categories and pack compositions

from dotenv import load_dotenv

load_dotenv()

from freshgrupo.crud import catalog as crud_catalog  # noqa: E402
from freshgrupo.crud import pack as crud_pack  # noqa: E402
from freshgrupo.db.seed import table_counts  # noqa: E402
from freshgrupo.db.session import SessionLocal  # noqa: E402


def main():
    db = SessionLocal()
    try:
        print("🔍 Tables")
        print("=" * 50)
        for table, count in table_counts(db).items():
            print(f"{table:<20} {count}")

        print("\n🔍 Categories")
        print("=" * 50)
        for category in crud_catalog.list_categories(db):
            flag = "" if category.is_active else " (inactive)"
            print(f"[{category.id}] {category.name}{flag}: {len(category.products)} products")

        print("\n🔍 Packs")
        print("=" * 50)
        for pack in crud_pack.list_packs(db, with_products=True):
            state = "purchasable" if pack.is_purchasable() else "not purchasable"
            print(f"[{pack.id}] {pack.name} - {pack.final_price} ({state})")
            for line in pack.pack_products:
                print(f"     {line.quantity} x {line.product_name} @ {line.unit_price}")
            if pack.composed_price() != pack.final_price:
                print(f"   ⚠️  final price differs from composed price {pack.composed_price()}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
