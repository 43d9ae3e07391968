# app/db/models/order_inquiry.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.enums import DeliveryOption, InquiryStatus
from app.db.mixins import Base, utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class OrderInquiry(Base):
    __tablename__ = "order_inquiries"
    __table_args__ = (
        CheckConstraint(
            "status IN ('new', 'contacted', 'confirmed', 'completed', 'cancelled')",
            name="ck_order_inquiries_status",
        ),
        CheckConstraint(
            "delivery_option IN ('pickup', 'delivery')",
            name="ck_order_inquiries_delivery_option",
        ),
        Index("ix_order_inquiries_status_created_at", "status", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    contact: Mapped[str] = mapped_column(String(50), nullable=False)
    cake_type: Mapped[str] = mapped_column(String(100), nullable=False)
    event_type: Mapped[Optional[str]] = mapped_column(String(100))

    delivery_option: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DeliveryOption.PICKUP.value
    )
    delivery_location: Mapped[Optional[str]] = mapped_column(String(200))

    # kept as the submitted YYYY-MM-DD string; only its shape is validated
    date_needed: Mapped[str] = mapped_column(String(10), nullable=False)
    additional_notes: Mapped[Optional[str]] = mapped_column(Text)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InquiryStatus.NEW.value, index=True
    )

    # set in Python so ordering has sub-second precision on every backend
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
