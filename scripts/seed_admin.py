"""
Seed Admin User

Creates the platform admin account. Admins cannot register through the
API, so run this once per environment.

Usage:
    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD=... python scripts/seed_admin.py
    python scripts/seed_admin.py --email admin@example.com --name "Site Admin"

The password is read from ADMIN_PASSWORD, or prompted for when unset.
"""

import argparse
import asyncio
import getpass
import os
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from eduportal.core.database import async_session_maker, close_db
from eduportal.core.security import hash_password
from eduportal.modules.users.models import AccountStatus, UserRole
from eduportal.modules.users.repository import UserRepository


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the platform admin account.")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"))
    parser.add_argument("--name", default=os.getenv("ADMIN_NAME", "Platform Admin"))
    return parser.parse_args()


async def seed_admin(email: str, name: str, password: str) -> None:
    """Create the admin user if the email is not registered yet."""
    try:
        async with async_session_maker() as db:
            existing_user = await UserRepository.get_by_email(db, email)

            if existing_user:
                print(f"User already exists: {email}")
                print(f"  ID: {existing_user.id}")
                print(f"  Role: {existing_user.role.value}")
                return

            admin_user = await UserRepository.create(
                db,
                role=UserRole.ADMIN,
                email=email,
                password_hash=hash_password(password),
                name=name,
                status=AccountStatus.APPROVED,
                profile={},
            )

            print("Admin created successfully!")
            print(f"  Email: {admin_user.email}")
            print(f"  Name: {admin_user.name}")
            print(f"  ID: {admin_user.id}")
    finally:
        await close_db()


def main() -> None:
    args = parse_args()
    if not args.email:
        sys.exit("An email is required: pass --email or set ADMIN_EMAIL")

    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Admin password: ")
    if not 8 <= len(password) <= 32:
        sys.exit("The password must be 8 to 32 characters long")

    asyncio.run(seed_admin(args.email, args.name, password))


if __name__ == "__main__":
    main()
