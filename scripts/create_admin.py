#!/usr/bin/env python3
"""
Create an admin account, or reset an existing one.

Usage:
    python scripts/create_admin.py                       # interactive
    python scripts/create_admin.py --username admin --email admin@college.edu --password secret123

ADMIN_USERNAME / ADMIN_EMAIL / ADMIN_PASSWORD env vars are used when the flags are omitted,
so the script can run unattended in production. Type 'q' at any prompt to quit.
"""

import argparse
import os
import re
import sys

from sqlalchemy import or_

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from campusvault.core.config import settings
from campusvault.core.database import SessionLocal, engine, Base
from campusvault.core.security import get_password_hash
from campusvault.models.user import User


def create_or_reset_admin(username: str, email: str, password: str, full_name: str = None) -> User:
    """Create an admin, or reset password and admin flag of a matching user (by username or email)"""
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        user = db.query(User).filter(or_(User.username == username, User.email == email)).first()

        if user:
            user.password = get_password_hash(password)
            user.is_admin = True
            if full_name:
                user.full_name = full_name
            db.commit()
            print(f"✅ Existing user {user.username} reset and promoted to admin")
            return user

        user = User(
            username=username,
            email=email,
            password=get_password_hash(password),
            full_name=full_name or "Administrator",
            year=4,
            branch=settings.DEFAULT_BRANCH,
            is_admin=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        print("\n" + "=" * 50)
        print("✅ Admin account created!")
        print(f"   Username: {username}")
        print(f"   Email:    {email}")
        print(f"   ID:       {user.id}")
        print("=" * 50 + "\n")
        return user
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


# --- Validators ---

def validate_username(username: str) -> bool:
    if len(username) < 3 or len(username) > 100:
        print("🚨 Username must be 3-100 characters.")
        return False
    return True


def validate_email(email: str) -> bool:
    if not re.match(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$", email):
        print("🚨 Please enter a valid email address (e.g. admin@college.edu).")
        return False
    return True


def validate_password(password: str) -> bool:
    if len(password) < 6:
        print("🚨 Password must be at least 6 characters.")
        return False
    return True


def prompt(label: str, validator) -> str:
    while True:
        value = input(f"{label} (q to quit): ").strip()
        if value.lower() in ("q", "quit"):
            print("\n👋 Bye.")
            sys.exit(0)
        if not value:
            print("🚨 Input cannot be empty.")
            continue
        if validator(value):
            return value


def main():
    parser = argparse.ArgumentParser(description="Create or reset a CampusVault admin")
    parser.add_argument("--username", default=os.getenv("ADMIN_USERNAME"))
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"))
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"))
    parser.add_argument("--full-name", default=os.getenv("ADMIN_FULL_NAME"))
    args = parser.parse_args()

    username = args.username or prompt("1. Username", validate_username)
    email = args.email or prompt("2. Email", validate_email)
    password = args.password or prompt("3. Password (min 6 chars)", validate_password)

    if not (validate_username(username) and validate_email(email) and validate_password(password)):
        sys.exit(1)

    try:
        create_or_reset_admin(username, email, password, args.full_name)
    except Exception as e:
        print(f"\n❌ Failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
