# scripts/setup/create_admin.py
"""
Create an ADMIN account, or promote an existing account to ADMIN.
ADMIN cannot self-register through the API, so the first one is made here.
Usage: python scripts/setup/create_admin.py admin@example.com --nickname Admin
"""

import argparse
import getpass
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from datetime import datetime
from app.database import SessionLocal
from app.models.user import Role, User
from app.services.auth_service import hash_password


def main():
    parser = argparse.ArgumentParser(description="Create or promote a ZeroQ ADMIN account")
    parser.add_argument("email")
    parser.add_argument("--nickname", default="Admin")
    args = parser.parse_args()
    email = args.email.strip().lower()

    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()
        if user:
            user.role = Role.ADMIN
            user.updated_at = datetime.utcnow()
            db.commit()
            print(f"✅ {email} promoted to ADMIN (id={user.id})")
            return

        password = getpass.getpass("Password (min 8 chars): ")
        if len(password) < 8:
            print("❌ Password too short")
            sys.exit(1)
        user = User(email=email, password_hash=hash_password(password), nickname=args.nickname,
                    role=Role.ADMIN, created_at=datetime.utcnow())
        db.add(user)
        db.commit()
        print(f"✅ ADMIN {email} created (id={user.id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
