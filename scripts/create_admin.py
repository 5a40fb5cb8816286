"""
scripts/create_admin.py

Run this from your project root to create an admin user:

    python -m scripts.create_admin

You will be prompted for name, email and password. The email must use the
reserved admin domain. The account is created already verified and approved,
so it can log in straight away.

    python -m scripts.create_admin --main

only makes sure the main admin account from the settings exists.
"""

import sys
import os

# Make sure estatehub is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from estatehub.core.config import settings
from estatehub.core.database import SessionLocal, init_db
from estatehub.core.exceptions import MarketplaceError
from estatehub.models.user import UserRole
from estatehub.services import auth_service


def create_admin():
    print("\n── Create Admin User ─────────────────────")
    print(f"Admin emails must end with {settings.ADMIN_EMAIL_DOMAIN}")

    name     = input("Full name: ").strip()
    email    = input("Email:     ").strip()
    password = input("Password:  ").strip()

    if not all([name, email, password]):
        print("❌ All fields are required.")
        sys.exit(1)

    init_db()
    db = SessionLocal()
    try:
        admin = auth_service.register(
            db, name, email, password, UserRole.ADMIN.value, send_code=False
        )
        admin = auth_service.verify_user(db, admin.id)

        print(f"\n✅ Admin user created successfully!")
        print(f"   ID:    {admin.id}")
        print(f"   Name:  {admin.name}")
        print(f"   Email: {admin.email}")
        print(f"\nYou can now log in.\n")

    except MarketplaceError as e:
        db.rollback()
        print(f"❌ Failed: {e.message}")
        sys.exit(1)
    finally:
        db.close()


def create_main_admin():
    init_db()
    db = SessionLocal()
    try:
        admin = auth_service.ensure_main_admin(db)
        print(f"✅ Main admin ready: {admin.email}")
    finally:
        db.close()


if __name__ == "__main__":
    if "--main" in sys.argv[1:]:
        create_main_admin()
    else:
        create_admin()
