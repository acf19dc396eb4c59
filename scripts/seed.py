# scripts/seed.py - Create tables and load the demo catalog
#
#   python scripts/seed.py           # skip when users already exist
#   python scripts/seed.py --force   # drop every table first

import argparse

from dotenv import load_dotenv

load_dotenv()

from freshgrupo.core.logging import configure_logging  # noqa: E402
from freshgrupo.db.seed import seed_database  # noqa: E402
from freshgrupo.db.session import SessionLocal  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Seed the FreshGrupo database")
    parser.add_argument("--force", action="store_true", help="drop and recreate all tables first")
    args = parser.parse_args()

    configure_logging()
    db = SessionLocal()
    try:
        counts = seed_database(db, force=args.force)
    finally:
        db.close()

    print("✅ Seeding finished")
    for table, count in counts.items():
        print(f"   {table}: {count}")


if __name__ == "__main__":
    main()
