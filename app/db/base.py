# app/db/base.py
# Base with every table registered, for Alembic autogenerate
from app.db.mixins import Base
from app.db.models import OrderInquiry, SubmissionRateLimit, User  # noqa: F401

__all__ = ["Base", "OrderInquiry", "SubmissionRateLimit", "User"]
