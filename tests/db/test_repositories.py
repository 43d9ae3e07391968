"""
Tests for the inquiry, rate limit and user repositories.

Run:
    pytest tests/db/test_repositories.py -v
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.core.enums import InquiryStatus
from app.core.exceptions import NotFoundException, PersistenceException
from app.db.crud.inquiry import InquiryRepository
from app.db.crud.rate_limit import RateLimitRepository
from app.db.crud.user import UserRepository

SANITIZED = {
    "name": "Jane Doe",
    "contact": "0821234567",
    "cake_type": "Birthday",
    "event_type": None,
    "delivery_option": "pickup",
    "delivery_location": None,
    "date_needed": "2025-03-01",
    "additional_notes": None,
}


def _broken_session():
    db = MagicMock()
    error = OperationalError("SELECT 1", {}, Exception("database is locked"))
    db.commit.side_effect = error
    db.execute.side_effect = error
    db.get.side_effect = error
    return db


class TestInquiryRepository:

    def test_insert_assigns_id_status_and_time(self, db_session):
        inquiry = InquiryRepository(db_session).insert(SANITIZED)

        assert len(inquiry.id) == 36
        assert inquiry.status == InquiryStatus.NEW.value
        assert inquiry.created_at is not None

    def test_ids_are_unique(self, db_session):
        repo = InquiryRepository(db_session)
        assert repo.insert(SANITIZED).id != repo.insert(SANITIZED).id

    def test_update_status_unknown_id(self, db_session):
        with pytest.raises(NotFoundException):
            InquiryRepository(db_session).update_status("missing", InquiryStatus.CONTACTED)

    def test_update_status_accepts_plain_string(self, db_session):
        repo = InquiryRepository(db_session)
        inquiry = repo.insert(SANITIZED)

        assert repo.update_status(inquiry.id, "completed").status == "completed"

    def test_stats_on_empty_table(self, db_session):
        assert InquiryRepository(db_session).stats() == {
            "total": 0,
            "new": 0,
            "confirmed": 0,
            "completed": 0,
        }

    def test_insert_failure_rolls_back(self):
        db = _broken_session()

        with pytest.raises(PersistenceException):
            InquiryRepository(db).insert(SANITIZED)

        db.rollback.assert_called_once()

    def test_list_failure_is_wrapped(self):
        with pytest.raises(PersistenceException):
            InquiryRepository(_broken_session()).list()


class TestRateLimitRepository:

    def test_count_and_purge(self, db_session):
        repo = RateLimitRepository(db_session)
        now = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
        repo.add("61", now - timedelta(hours=2))
        repo.add("61", now - timedelta(minutes=5))
        repo.add("62", now - timedelta(minutes=5))

        cutoff = now - timedelta(hours=1)
        assert repo.count_since("61", cutoff) == 1
        assert repo.purge_older_than(cutoff) == 1
        assert repo.count_since("61", now - timedelta(hours=3)) == 1

    def test_errors_are_wrapped(self):
        repo = RateLimitRepository(_broken_session())

        with pytest.raises(PersistenceException):
            repo.count_since("61", datetime.now(timezone.utc))
        with pytest.raises(PersistenceException):
            repo.purge_older_than(datetime.now(timezone.utc))


class TestUserRepository:

    def test_email_is_normalized(self, db_session):
        repo = UserRepository(db_session)
        created = repo.create("  Owner@Example.COM ", "pw-123456")

        assert created.email == "owner@example.com"
        assert repo.get_by_email("OWNER@example.com").id == created.id

    def test_unknown_email(self, db_session):
        assert UserRepository(db_session).get_by_email("nobody@example.com") is None
