#!/usr/bin/env python3
"""
Verify the admin account can log in.
"""
import argparse
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import settings
from src.realty.api.auth import verify_password
from src.realty.db.repository import UserRepository
from src.realty.db.session import get_db_session


def main():
    parser = argparse.ArgumentParser(description="Check the admin account")
    parser.add_argument('--email', default=settings.admin_email, help='Admin login email')
    parser.add_argument('--password', default=settings.admin_password, help='Password to check')
    args = parser.parse_args()

    print('Admin Account Verification')
    print('=' * 60)

    with get_db_session() as session:
        user = UserRepository().get_by_email(session, args.email.strip())

        if not user:
            print(f'❌ No account found for {args.email}')
            sys.exit(1)

        print(f'Email:     {user.email}')
        print(f'Name:      {user.name}')
        print(f'Role:      {user.role}')
        print(f'Active:    {user.is_active}')

        problems = []
        if user.role != "admin":
            problems.append('account is not an admin')
        if not user.is_active:
            problems.append('account is deactivated')
        if args.password and not verify_password(args.password, user.password_hash):
            problems.append('password does not match')

    if problems:
        for problem in problems:
            print(f'❌ {problem}')
        sys.exit(1)

    print('\n✅ Admin account can log in')


if __name__ == "__main__":
    main()
