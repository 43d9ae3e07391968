# app/db/crud/rate_limit.py
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceException
from app.db.models.submission_rate_limit import SubmissionRateLimit


class RateLimitRepository:
    """Timestamped submission entries keyed by IP hash."""

    def __init__(self, db: Session):
        self.db = db

    def purge_older_than(self, cutoff: datetime) -> int:
        try:
            result = self.db.execute(
                delete(SubmissionRateLimit)
                .where(SubmissionRateLimit.submitted_at < cutoff)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceException(f"Error purging rate limit entries: {e}") from e
        return result.rowcount or 0

    def count_since(self, ip_hash: str, since: datetime) -> int:
        try:
            return self.db.execute(
                select(func.count())
                .select_from(SubmissionRateLimit)
                .where(
                    SubmissionRateLimit.ip_hash == ip_hash,
                    SubmissionRateLimit.submitted_at >= since,
                )
            ).scalar_one()
        except SQLAlchemyError as e:
            raise PersistenceException(f"Error counting rate limit entries: {e}") from e

    def add(self, ip_hash: str, submitted_at: datetime) -> SubmissionRateLimit:
        entry = SubmissionRateLimit(ip_hash=ip_hash, submitted_at=submitted_at)
        try:
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceException(f"Error recording rate limit entry: {e}") from e
        return entry
