# app/db/crud/user.py
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceException
from app.core.security import hash_password
from app.db.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        normalized = (email or "").strip().lower()
        try:
            return self.db.execute(
                select(User).where(User.email == normalized)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceException(f"Error loading user by email: {e}") from e

    def create(self, email: str, password: str, full_name: Optional[str] = None) -> User:
        user = User(
            email=email.strip().lower(),
            full_name=full_name or None,
            password_hash=hash_password(password),
            is_active=True,
        )
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceException(f"Error creating user: {e}") from e
        return user

    def touch_login(self, user: User) -> None:
        try:
            user.last_login_at = datetime.now(timezone.utc)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceException(f"Error updating last login: {e}") from e
