# app/db/models/submission_rate_limit.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.mixins import Base, utcnow


class SubmissionRateLimit(Base):
    __tablename__ = "submission_rate_limits"
    __table_args__ = (
        Index("ix_submission_rate_limits_hash_time", "ip_hash", "submitted_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ip_hash: Mapped[str] = mapped_column(String(16), nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )
