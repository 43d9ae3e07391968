from __future__ import annotations
from typing import Optional
from datetime import datetime
from sqlalchemy import String, Boolean, DateTime, Integer, true
from sqlalchemy.orm import Mapped, mapped_column
from app.db.mixins import Base, TimestampMixin


class User(TimestampMixin, Base):
    """Dashboard operator who reviews order inquiries."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(100))

    password_hash: Mapped[Optional[str]] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, server_default=true(), nullable=False, default=True)

    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
