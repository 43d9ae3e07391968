# app/services/intake.py
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.config import intake_logger
from app.core.exceptions import (
    InvalidSubmissionException,
    PersistenceException,
    RateLimitExceededException,
)
from app.db.crud.inquiry import InquiryRepository
from app.db.crud.rate_limit import RateLimitRepository
from app.db.models.order_inquiry import OrderInquiry
from app.services.rate_limit import RateLimiter
from app.services.validation import is_honeypot_tripped, validate_inquiry


def submit_inquiry(
    db: Session,
    payload: Any,
    client_id: str,
    limiter: Optional[RateLimiter] = None,
) -> OrderInquiry:
    """
    Run one submission through the intake pipeline and return the stored row.

    Steps: honeypot -> rate limit -> validation -> insert -> rate limit record.
    The first three raise InvalidSubmissionException / RateLimitExceededException,
    the insert raises PersistenceException. A failure to record the rate limit
    entry is logged only; the inquiry is already stored at that point.
    """
    if not isinstance(payload, dict):
        raise InvalidSubmissionException("Invalid submission")

    if is_honeypot_tripped(payload):
        intake_logger.info("Honeypot triggered - rejecting submission")
        raise InvalidSubmissionException("Invalid submission")

    limiter = limiter or RateLimiter(RateLimitRepository(db))
    rate = limiter.check(client_id)
    intake_logger.info(f"Processing order inquiry from IP hash: {rate.ip_hash}")
    if not rate.allowed:
        raise RateLimitExceededException()

    result = validate_inquiry(payload)
    if not result.valid:
        intake_logger.info(f"Validation failed: {result.error}")
        raise InvalidSubmissionException(result.error)

    inquiry = InquiryRepository(db).insert(result.sanitized)

    try:
        limiter.record(rate.ip_hash)
    except PersistenceException as e:
        intake_logger.error(
            f"Inquiry {inquiry.id} stored but rate limit record failed: {e}"
        )

    intake_logger.info(f"Order inquiry submitted successfully: {inquiry.id}")
    return inquiry
