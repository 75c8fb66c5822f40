#!/usr/bin/env python3
"""
Create (or promote) an HR admin account

Creates the Firebase account if it does not exist, sets the `admin` custom
claim and writes a profile with role=admin.

Usage:
    python scripts/create_admin.py hr@example.com 'S3cret-pass'
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.config import settings  # noqa: E402
from app.core.errors import AlreadyExists  # noqa: E402
from app.core.logging import setup_logging  # noqa: E402
from app.db.mongo import MongoDocumentStore  # noqa: E402
from app.db.store import USERS  # noqa: E402
from app.models.status import Role  # noqa: E402
from app.models.user import UserProfile  # noqa: E402
from app.services.identity import FirebaseIdentityProvider  # noqa: E402
from app.utils.helpers import normalize_email, utc_now  # noqa: E402


async def create_admin(email: str, password: str, display_name: str) -> str:
    identity = FirebaseIdentityProvider.from_settings(settings)
    store = MongoDocumentStore.from_settings(settings)
    email = normalize_email(email)

    try:
        try:
            uid = await identity.create_account(email, password, email_verified=True)
            print(f"✅ Created account {email} ({uid})")
        except AlreadyExists:
            uid = await identity.get_uid_by_email(email)
            print(f"ℹ️  Account {email} already exists ({uid}), promoting")

        await identity.grant_admin(uid)

        now = utc_now()
        existing = await store.get(USERS, uid)
        profile = UserProfile(
            uid=uid,
            email=email,
            display_name=display_name,
            role=Role.ADMIN,
            email_verified=True,
            created_at=existing.get("createdAt", now) if existing else now,
            updated_at=now,
        )
        await store.set(USERS, uid, profile.to_document())
        print("✅ Admin claim and profile written")
        return uid
    finally:
        await store.close()


def main():
    parser = argparse.ArgumentParser(description="Create or promote an HR admin account")
    parser.add_argument("email")
    parser.add_argument("password", help="Used only when the account does not exist yet")
    parser.add_argument("--name", default="HR Admin", help="Display name for the profile")
    args = parser.parse_args()

    setup_logging(fmt="console")
    asyncio.run(create_admin(args.email, args.password, args.name))


if __name__ == "__main__":
    main()
