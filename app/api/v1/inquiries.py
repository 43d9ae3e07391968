# app/api/v1/inquiries.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import dashboard_logger
from app.core.deps import get_current_user, get_db
from app.core.enums import InquiryStatus
from app.db.crud.inquiry import InquiryRepository
from app.db.models.user import User
from app.schemas.inquiry import InquiryOut, InquiryStats, InquiryStatusUpdate

router = APIRouter(prefix="/inquiries", tags=["inquiries"])


@router.get("", response_model=List[InquiryOut])
def list_inquiries(
    status: Optional[InquiryStatus] = Query(None, description="Exact status match; omit for all"),
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    """
    List order inquiries, newest first.
    """
    return InquiryRepository(db).list(status)


@router.get("/stats", response_model=InquiryStats)
def inquiry_stats(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    return InquiryRepository(db).stats()


@router.patch("/{inquiry_id}/status", response_model=InquiryOut)
def update_inquiry_status(
    inquiry_id: str,
    payload: InquiryStatusUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    """
    Move an inquiry to any status. No transition rules, last write wins.
    Unknown id -> 404 (NotFoundException).
    """
    inquiry = InquiryRepository(db).update_status(inquiry_id, payload.status)
    dashboard_logger.info(
        f"User {current.id} set inquiry {inquiry.id} to {inquiry.status}"
    )
    return inquiry
