# app/web/deps.py
"""
Session helpers for the HTML pages: flash messages, the per-session CSRF
token and the cookie sign-in used by the dashboard.
"""
import hmac
import secrets
from typing import Optional

from fastapi import HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.security import decode_token
from app.db.models.user import User
from app.services.auth import COOKIE_NAME

FLASH_SESSION_KEY = "flashes"
CSRF_SESSION_KEY = "csrf_token"


# ---- Flash messages ----

def flash(request: Request, text: str, type_: str = "info") -> None:
    request.session.setdefault(FLASH_SESSION_KEY, []).append({"text": text, "type": type_})


def pop_flashes(request: Request) -> list[dict]:
    return request.session.pop(FLASH_SESSION_KEY, [])


# ---- CSRF ----

def get_csrf_token(request: Request) -> str:
    """Token rendered into every form as the hidden ``csrf_token`` field."""
    token = request.session.get(CSRF_SESSION_KEY)
    if not token:
        token = secrets.token_urlsafe(32)
        request.session[CSRF_SESSION_KEY] = token
    return token


def require_csrf(request: Request, token_from_form: Optional[str]) -> None:
    """Raise 400 unless the posted token matches the session's."""
    expected = request.session.get(CSRF_SESSION_KEY)
    if not token_from_form or not expected:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Missing CSRF token")
    if not hmac.compare_digest(expected.encode(), str(token_from_form).encode()):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Invalid CSRF token")


# ---- Cookie sign-in ----

def _token_from_cookie(request: Request) -> Optional[str]:
    scheme, _, token = (request.cookies.get(COOKIE_NAME) or "").partition(" ")
    if scheme != "Bearer" or not token:
        return None
    return token


def get_current_user_from_cookie(request: Request, db: Session) -> Optional[User]:
    """The signed-in operator, or None for a missing, bad or stale cookie."""
    token = _token_from_cookie(request)
    if token is None:
        return None
    try:
        user_id = int(decode_token(token)["sub"])
    except ValueError:
        return None

    user = db.get(User, user_id)
    if not user or not user.is_active:
        return None
    return user
