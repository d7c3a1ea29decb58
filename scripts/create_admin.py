#!/usr/bin/env python3
"""
Create the admin account.

Uses ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME from the environment unless
overridden on the command line. An existing account with that email is
promoted to admin and its password reset.
"""
import argparse
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import settings
from src.realty.api.auth import get_password_hash
from src.realty.db.repository import UserRepository
from src.realty.db.session import create_all_tables, get_db_session
from src.realty.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def main():
    """Main entry point for admin creation."""
    parser = argparse.ArgumentParser(description="Create or promote the admin account")
    parser.add_argument('--email', default=settings.admin_email, help='Admin login email')
    parser.add_argument('--password', default=settings.admin_password, help='Admin password')
    parser.add_argument('--name', default=settings.admin_name, help='Display name')
    args = parser.parse_args()

    setup_logging()

    if not args.password or len(args.password) < MIN_PASSWORD_LENGTH:
        print(f"❌ Admin password must be at least {MIN_PASSWORD_LENGTH} characters "
              "(set ADMIN_PASSWORD or pass --password)")
        sys.exit(1)

    create_all_tables()
    users = UserRepository()
    email = args.email.strip().lower()

    with get_db_session() as session:
        user = users.get_by_email(session, email)
        if user:
            user.role = "admin"
            user.is_active = True
            user.password_hash = get_password_hash(args.password)
            action = "promoted"
        else:
            user = users.create(
                session,
                name=args.name,
                email=email,
                password_hash=get_password_hash(args.password),
                role="admin",
            )
            action = "created"

        logger.info("admin_account_ready", user_id=user.id, email=email, action=action)

    print("=" * 60)
    print(f"✅ Admin account {action}: {email}")
    print("=" * 60)


if __name__ == "__main__":
    main()
