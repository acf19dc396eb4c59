# scripts/add_admin.py - Create an admin account, or promote an existing user
#
#   python scripts/add_admin.py admin@freshgrupo.com 'S3cret!pass' --name "Admin User"

import argparse
import sys

from dotenv import load_dotenv

load_dotenv()

from freshgrupo.core.security import hash_password  # noqa: E402
from freshgrupo.crud import user as crud_user  # noqa: E402
from freshgrupo.db.session import SessionLocal, engine  # noqa: E402
from freshgrupo.models.registry import create_tables  # noqa: E402
from freshgrupo.models.user import User, UserRole  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Create a FreshGrupo admin user")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default="Admin User")
    parser.add_argument("--phone", default=None)
    args = parser.parse_args()

    if len(args.password) < 6:
        print("❌ Password must be at least 6 characters")
        sys.exit(1)

    create_tables(engine)
    db = SessionLocal()
    try:
        existing = crud_user.get_user_by_email(db, args.email)
        if existing:
            if existing.is_admin:
                print(f"ℹ️  {existing.email} is already an admin")
                return
            existing.role = UserRole.admin
            existing.is_active = True
            db.commit()
            print(f"✅ Promoted {existing.email} to admin")
            return

        admin = User(
            name=args.name,
            email=args.email.lower(),
            phone=args.phone,
            password=hash_password(args.password),
            role=UserRole.admin,
            is_active=True,
        )
        db.add(admin)
        db.commit()
        print(f"✅ Admin user created: id={admin.id} email={admin.email}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
