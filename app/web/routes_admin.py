# app/web/routes_admin.py
from __future__ import annotations

from typing import Optional, Union
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from app.core.config import dashboard_logger
from app.core.deps import get_db
from app.core.enums import InquiryStatus
from app.core.exceptions import NotFoundException
from app.db.crud.inquiry import InquiryRepository
from app.db.models.user import User
from app.services.auth import is_dashboard_user
from app.web.context import ctx as _ctx
from app.web.deps import flash, get_current_user_from_cookie, require_csrf

router = APIRouter()
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

STATUS_FILTERS = ["all"] + [s.value for s in InquiryStatus]


# ---------------------------
# Helpers
# ---------------------------

def _dashboard_guard(request: Request, db: Session) -> Union[User, RedirectResponse]:
    """
    Return the signed-in operator, otherwise a RedirectResponse to /login.
    """
    user = get_current_user_from_cookie(request, db)
    if not user:
        return RedirectResponse("/login", status_code=303)
    if not is_dashboard_user(user):
        flash(request, "Your account cannot view order inquiries.", "error")
        return RedirectResponse("/login", status_code=303)
    return user


def _parse_status(raw: Optional[str]) -> Optional[InquiryStatus]:
    value = (raw or "all").strip().lower()
    if value == "all":
        return None
    try:
        return InquiryStatus(value)
    except ValueError:
        return None


# ---------------------------
# Dashboard: inquiries list
# ---------------------------
@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(
    request: Request,
    status: str = "all",
    db: Session = Depends(get_db),
):
    user_or_redirect = _dashboard_guard(request, db)
    if isinstance(user_or_redirect, RedirectResponse):
        return user_or_redirect

    repo = InquiryRepository(db)
    selected = _parse_status(status)
    items = repo.list(selected)

    response = templates.TemplateResponse(
        request,
        "dashboard/inquiries.html",
        _ctx(
            request,
            db,
            title="Order Dashboard",
            items=items,
            stats=repo.stats(),
            status_filter=selected.value if selected else "all",
            status_filters=STATUS_FILTERS,
            statuses=[s.value for s in InquiryStatus],
        ),
    )
    response.headers["Cache-Control"] = "no-store"
    return response


# ---------------------------
# Dashboard: change status
# ---------------------------
@router.post("/dashboard/inquiries/{inquiry_id}/status")
def dashboard_update_status(
    inquiry_id: str,
    request: Request,
    status: str = Form(...),
    status_filter: str = Form("all"),
    csrf_token: str = Form(...),
    db: Session = Depends(get_db),
):
    require_csrf(request, csrf_token)

    user_or_redirect = _dashboard_guard(request, db)
    if isinstance(user_or_redirect, RedirectResponse):
        return user_or_redirect

    selected = _parse_status(status_filter)
    back = f"/dashboard?status={selected.value if selected else 'all'}"

    try:
        new_status = InquiryStatus((status or "").strip().lower())
    except ValueError:
        flash(request, "Unknown status.", "error")
        return RedirectResponse(url=back, status_code=303)

    try:
        inquiry = InquiryRepository(db).update_status(inquiry_id, new_status)
    except NotFoundException:
        flash(request, "Inquiry not found.", "error")
        return RedirectResponse(url=back, status_code=303)

    dashboard_logger.info(
        f"User {user_or_redirect.id} set inquiry {inquiry.id} to {inquiry.status}"
    )
    flash(request, f"Order marked as {inquiry.status}", "success")
    return RedirectResponse(url=back, status_code=303)
