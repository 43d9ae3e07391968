from __future__ import annotations

from datetime import date
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_db
from app.core.exceptions import (
    AuthenticationException,
    InvalidSubmissionException,
    PersistenceException,
    RateLimitExceededException,
)
from app.services import quotation
from app.services.auth import set_access_cookie, sign_in, sign_out
from app.services.intake import submit_inquiry
from app.services.quotation import QuotationSurvey
from app.services.rate_limit import client_identifier
from app.services.whatsapp import build_whatsapp_url
from app.web.context import ctx as _ctx
from app.web.deps import flash, get_current_user_from_cookie, require_csrf

router = APIRouter()
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

QUOTE_SESSION_KEY = "quote"


# ----------------- Small helpers -----------------

def _load_survey(request: Request) -> QuotationSurvey:
    return QuotationSurvey.from_dict(request.session.get(QUOTE_SESSION_KEY))


def _save_survey(request: Request, survey: QuotationSurvey) -> None:
    request.session[QUOTE_SESSION_KEY] = survey.to_dict()


def _to_quote() -> RedirectResponse:
    return RedirectResponse(url="/quote", status_code=303)


# ----------------- Auth -----------------

@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request, db: Session = Depends(get_db)):
    if get_current_user_from_cookie(request, db):
        return RedirectResponse(url="/dashboard", status_code=303)
    return templates.TemplateResponse(request, "auth/login.html", _ctx(request, db, title="Sign in"))


@router.post("/login")
def login_submit(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    csrf_token: str = Form(...),
    db: Session = Depends(get_db),
):
    require_csrf(request, csrf_token)

    try:
        _, access = sign_in(db, email, password)
    except AuthenticationException as e:
        flash(request, e.message, "error")
        return RedirectResponse(url="/login", status_code=303)

    resp = RedirectResponse(url="/dashboard", status_code=303)
    set_access_cookie(resp, access)
    flash(request, "Signed in. Welcome back!", "success")
    return resp


@router.post("/logout")
def logout(request: Request, csrf_token: str = Form(...)):
    require_csrf(request, csrf_token)
    resp = RedirectResponse(url="/login", status_code=303)
    sign_out(resp)
    return resp


# ----------------- Quotation survey -----------------

@router.get("/quote", response_class=HTMLResponse)
def quote_page(
    request: Request,
    cake_type: str = "",
    occasion: str = "",
    timeframe: str = "",
    db: Session = Depends(get_db),
):
    """
    Current step of the survey. The order form can deep-link here with
    cake_type / occasion / timeframe to pre-fill step 1.
    """
    survey = _load_survey(request)
    if survey.step == 1 and not survey.disqualified and not survey.submitted:
        survey.update({
            k: v for k, v in
            {"cake_type": cake_type, "occasion": occasion, "timeframe": timeframe}.items()
            if v
        })
        _save_survey(request, survey)

    whatsapp_url = None
    if survey.submitted:
        whatsapp_url = build_whatsapp_url(settings.BAKERY_WHATSAPP_NUMBER, survey.whatsapp_form())

    return templates.TemplateResponse(
        request,
        "quote/survey.html",
        _ctx(
            request,
            db,
            title=survey.title,
            survey=survey,
            options=quotation,
            whatsapp_url=whatsapp_url,
        ),
    )


@router.post("/quote/next")
async def quote_next(request: Request):
    form = await request.form()
    require_csrf(request, form.get("csrf_token"))

    survey = _load_survey(request)
    survey.update({k: v for k, v in form.items() if isinstance(v, str)})
    if not survey.next() and not survey.disqualified:
        if survey.step == 1 and survey.budget_too_low:
            flash(
                request,
                "Our custom cakes start from R850. Please select a higher budget range to continue.",
                "error",
            )
        else:
            flash(request, "Please answer all required questions to continue.", "error")
    _save_survey(request, survey)
    return _to_quote()


@router.post("/quote/back")
def quote_back(request: Request, csrf_token: str = Form(...)):
    require_csrf(request, csrf_token)
    survey = _load_survey(request)
    survey.back()
    _save_survey(request, survey)
    return _to_quote()


@router.post("/quote/reconsider")
def quote_reconsider(request: Request, csrf_token: str = Form(...)):
    require_csrf(request, csrf_token)
    survey = _load_survey(request)
    survey.reconsider()
    _save_survey(request, survey)
    return _to_quote()


@router.post("/quote/reset")
def quote_reset(request: Request, csrf_token: str = Form(...)):
    require_csrf(request, csrf_token)
    request.session.pop(QUOTE_SESSION_KEY, None)
    return _to_quote()


@router.post("/quote/submit")
async def quote_submit(request: Request, db: Session = Depends(get_db)):
    """
    Final step: the survey goes through the same intake pipeline as the
    public JSON endpoint (rate limit, validation, insert).
    """
    form = await request.form()
    require_csrf(request, form.get("csrf_token"))

    survey = _load_survey(request)
    survey.update({k: v for k, v in form.items() if isinstance(v, str)})
    if not survey.ready_to_submit:
        flash(request, "Please fill in your name, contact number and email.", "error")
        _save_survey(request, survey)
        return _to_quote()

    payload = survey.to_inquiry(date.today())
    # the wizard's own hidden bot trap feeds the intake honeypot check
    payload["honeypot"] = form.get("website") or ""

    try:
        submit_inquiry(db, payload, client_identifier(request.headers))
    except (InvalidSubmissionException, RateLimitExceededException) as e:
        flash(request, e.message, "error")
        _save_survey(request, survey)
        return _to_quote()
    except PersistenceException:
        flash(request, "Something went wrong. Please try again or call us directly.", "error")
        _save_survey(request, survey)
        return _to_quote()

    survey.submitted = True
    _save_survey(request, survey)
    flash(request, "Thank you! We'll send you a quotation within 24 hours.", "success")
    return _to_quote()
