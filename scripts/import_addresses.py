# scripts/import_addresses.py - Save past order delivery addresses to the address book
#
#   python scripts/import_addresses.py            # every user
#   python scripts/import_addresses.py --user 12  # one user

import argparse

from dotenv import load_dotenv

load_dotenv()

from freshgrupo.core.logging import configure_logging  # noqa: E402
from freshgrupo.crud.address import import_addresses_from_orders  # noqa: E402
from freshgrupo.db.session import SessionLocal  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Import addresses from existing orders")
    parser.add_argument("--user", type=int, default=None, help="only import for this user id")
    args = parser.parse_args()

    configure_logging()
    db = SessionLocal()
    try:
        created = import_addresses_from_orders(db, user_id=args.user)
    finally:
        db.close()
    print(f"✅ Imported {created} addresses")


if __name__ == "__main__":
    main()
