"""
Tests for the intake pipeline (honeypot -> rate limit -> validation -> insert -> record).

Run:
    pytest tests/services/test_intake.py -v
"""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import func, select

from app.core.exceptions import (
    InvalidSubmissionException,
    PersistenceException,
    RateLimitExceededException,
)
from app.db.models.order_inquiry import OrderInquiry
from app.db.models.submission_rate_limit import SubmissionRateLimit
from app.services.intake import submit_inquiry
from app.services.rate_limit import hash_ip

CLIENT = "203.0.113.9"


def _count(db, model) -> int:
    return db.execute(select(func.count()).select_from(model)).scalar_one()


class TestSubmitInquiry:

    def test_stores_sanitized_inquiry_as_new(self, db_session, valid_payload):
        inquiry = submit_inquiry(
            db_session,
            valid_payload(name="  Jane Doe ", status="completed", event_type=""),
            CLIENT,
        )

        assert inquiry.id
        assert inquiry.name == "Jane Doe"
        assert inquiry.status == "new"
        assert inquiry.event_type is None
        assert inquiry.created_at is not None

    def test_records_one_rate_limit_entry(self, db_session, valid_payload):
        submit_inquiry(db_session, valid_payload(), CLIENT)

        entry = db_session.execute(select(SubmissionRateLimit)).scalar_one()
        assert entry.ip_hash == hash_ip(CLIENT)

    def test_non_object_payload_is_invalid(self, db_session):
        with pytest.raises(InvalidSubmissionException) as exc_info:
            submit_inquiry(db_session, ["not", "an", "object"], CLIENT)

        assert exc_info.value.message == "Invalid submission"

    def test_honeypot_skips_rate_limit_and_storage(self, db_session, valid_payload):
        limiter = MagicMock()

        with pytest.raises(InvalidSubmissionException):
            submit_inquiry(db_session, valid_payload(honeypot="I am a bot"), CLIENT, limiter)

        limiter.check.assert_not_called()
        assert _count(db_session, OrderInquiry) == 0
        assert _count(db_session, SubmissionRateLimit) == 0

    def test_validation_failure_costs_no_quota(self, db_session, valid_payload):
        with pytest.raises(InvalidSubmissionException) as exc_info:
            submit_inquiry(db_session, valid_payload(name="J"), CLIENT)

        assert exc_info.value.message == "Name must be at least 2 characters"
        assert _count(db_session, SubmissionRateLimit) == 0

    def test_sixth_submission_is_rate_limited(self, db_session, valid_payload):
        for _ in range(5):
            submit_inquiry(db_session, valid_payload(), CLIENT)

        with pytest.raises(RateLimitExceededException) as exc_info:
            submit_inquiry(db_session, valid_payload(), CLIENT)

        assert exc_info.value.status_code == 429
        assert exc_info.value.details == {"rateLimited": True}
        assert _count(db_session, OrderInquiry) == 5

    def test_rate_limit_is_checked_before_validation(self, db_session, valid_payload):
        for _ in range(5):
            submit_inquiry(db_session, valid_payload(), CLIENT)

        with pytest.raises(RateLimitExceededException):
            submit_inquiry(db_session, valid_payload(name=""), CLIENT)

    def test_insert_failure_costs_no_quota(self, db_session, valid_payload):
        with patch(
            "app.services.intake.InquiryRepository.insert",
            side_effect=PersistenceException("insert failed"),
        ):
            with pytest.raises(PersistenceException):
                submit_inquiry(db_session, valid_payload(), CLIENT)

        assert _count(db_session, SubmissionRateLimit) == 0

    def test_record_failure_still_returns_inquiry(self, db_session, valid_payload):
        limiter = MagicMock()
        limiter.check.return_value = MagicMock(allowed=True, ip_hash="61")
        limiter.record.side_effect = PersistenceException("record failed")

        inquiry = submit_inquiry(db_session, valid_payload(), CLIENT, limiter)

        assert inquiry.id
        assert _count(db_session, OrderInquiry) == 1
        limiter.record.assert_called_once_with("61")
