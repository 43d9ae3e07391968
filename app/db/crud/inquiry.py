# app/db/crud/inquiry.py
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.enums import InquiryStatus
from app.core.exceptions import NotFoundException, PersistenceException
from app.db.models.order_inquiry import OrderInquiry


class InquiryRepository:
    """Insert / select / update access to the ``order_inquiries`` table."""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, data: dict) -> OrderInquiry:
        """
        Persist a sanitized inquiry. ``id``, ``status`` and ``created_at``
        are always assigned here, never taken from the caller.
        """
        inquiry = OrderInquiry(
            name=data["name"],
            contact=data["contact"],
            cake_type=data["cake_type"],
            event_type=data.get("event_type"),
            delivery_option=data["delivery_option"],
            delivery_location=data.get("delivery_location"),
            date_needed=data["date_needed"],
            additional_notes=data.get("additional_notes"),
            status=InquiryStatus.NEW.value,
        )
        try:
            self.db.add(inquiry)
            self.db.commit()
            self.db.refresh(inquiry)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceException(f"Error inserting order inquiry: {e}") from e
        return inquiry

    def get(self, inquiry_id: str) -> Optional[OrderInquiry]:
        try:
            return self.db.get(OrderInquiry, inquiry_id)
        except SQLAlchemyError as e:
            raise PersistenceException(f"Error loading order inquiry {inquiry_id}: {e}") from e

    def list(self, status: Optional[InquiryStatus] = None) -> Sequence[OrderInquiry]:
        """Newest first; ``status=None`` means all."""
        stmt = select(OrderInquiry)
        if status is not None:
            stmt = stmt.where(OrderInquiry.status == InquiryStatus(status).value)
        stmt = stmt.order_by(OrderInquiry.created_at.desc(), OrderInquiry.id.desc())
        try:
            return self.db.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceException(f"Error listing order inquiries: {e}") from e

    def update_status(self, inquiry_id: str, status: InquiryStatus) -> OrderInquiry:
        """
        Set one inquiry's status. Any status may follow any other and there is
        no version check, so concurrent edits are last-write-wins.
        """
        new_status = InquiryStatus(status).value
        inquiry = self.get(inquiry_id)
        if inquiry is None:
            raise NotFoundException("Inquiry not found.")
        try:
            inquiry.status = new_status
            self.db.commit()
            self.db.refresh(inquiry)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceException(f"Error updating status of {inquiry_id}: {e}") from e
        return inquiry

    def stats(self) -> dict:
        try:
            rows = self.db.execute(
                select(OrderInquiry.status, func.count()).group_by(OrderInquiry.status)
            ).all()
        except SQLAlchemyError as e:
            raise PersistenceException(f"Error counting order inquiries: {e}") from e
        counts = {status: count for status, count in rows}
        return {
            "total": sum(counts.values()),
            "new": counts.get(InquiryStatus.NEW.value, 0),
            "confirmed": counts.get(InquiryStatus.CONFIRMED.value, 0),
            "completed": counts.get(InquiryStatus.COMPLETED.value, 0),
        }
