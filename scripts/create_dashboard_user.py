"""
Create (or reset the password of) a dashboard operator account.

    python -m scripts.create_dashboard_user owner@example.com 's3cret!' --name "Melody"
"""
import argparse

from app.core.security import hash_password
from app.db.crud.user import UserRepository
from app.db.session import SessionLocal, init_db


def upsert_user(db, email: str, password: str, full_name: str | None = None):
    repo = UserRepository(db)
    existing = repo.get_by_email(email)
    if existing:
        existing.password_hash = hash_password(password)
        existing.is_active = True
        if full_name:
            existing.full_name = full_name
        db.commit()
        return existing, False
    return repo.create(email, password, full_name), True


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create a dashboard user")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default=None)
    args = parser.parse_args(argv)

    init_db()
    db = SessionLocal()
    try:
        user, created = upsert_user(db, args.email, args.password, args.name)
        print(f"✅ {'Created' if created else 'Updated'} dashboard user {user.email} (id={user.id})")
    except Exception as e:
        db.rollback()
        print("❌ Failed:", e)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
