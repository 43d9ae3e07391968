# app/services/auth.py
from typing import Optional

from fastapi import Response
from sqlalchemy.orm import Session

from app.core.config import auth_logger, settings
from app.core.exceptions import AuthenticationException
from app.core.security import create_access_token, verify_password
from app.db.crud.user import UserRepository
from app.db.models.user import User

# Cookie that stores the dashboard access token
COOKIE_NAME = "access_token"

INVALID_CREDENTIALS = "Incorrect email or password. Please try again."


def auth_error_message(error: Optional[object]) -> str:
    """
    Map a raw authentication error to a message that is safe to show users.
    Internal details never leak; unknown errors get a generic fallback.
    """
    message = str(error or "").lower()

    if "invalid login" in message or "invalid credentials" in message:
        return INVALID_CREDENTIALS
    if "already registered" in message or "user already exists" in message:
        return "An account with this email already exists. Please sign in instead."
    if "email not confirmed" in message:
        return "Please confirm your email address before signing in."
    if "too many requests" in message or "rate limit" in message:
        return "Too many attempts. Please wait a moment and try again."
    if "password" in message and ("weak" in message or "short" in message):
        return "Password is too weak. Please use at least 6 characters."
    if "invalid email" in message or "email format" in message:
        return "Please enter a valid email address."
    if any(word in message for word in ("network", "fetch", "connection")):
        return "Unable to connect. Please check your internet connection and try again."

    return "Authentication failed. Please try again."


def sign_in(db: Session, email: str, password: str) -> tuple[User, str]:
    """
    Check credentials and return the user with a fresh access token.
    Raises AuthenticationException with a non-revealing message.
    """
    repo = UserRepository(db)
    user = repo.get_by_email(email)
    if not user or not user.is_active or not verify_password(password, user.password_hash):
        auth_logger.warning("Dashboard sign-in failed: invalid login credentials")
        raise AuthenticationException(auth_error_message("invalid login credentials"))

    repo.touch_login(user)
    auth_logger.info(f"Dashboard user {user.id} signed in")
    return user, create_access_token(user.id)


def set_access_cookie(resp: Response, token: str) -> None:
    resp.set_cookie(
        key=COOKIE_NAME,
        value=f"Bearer {token}",
        httponly=True,
        samesite="lax",
        secure=settings.ENV == "prod",
        path="/",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def sign_out(resp: Response) -> None:
    """Tokens are stateless; signing out just drops the cookie."""
    resp.delete_cookie(COOKIE_NAME, path="/")


def is_dashboard_user(user: Optional[User]) -> bool:
    """
    Any active account may moderate inquiries unless ADMIN_EMAILS is set,
    in which case only those addresses may.
    """
    if not user or not user.is_active:
        return False
    allowed = {(e or "").strip().lower() for e in settings.ADMIN_EMAILS}
    if not allowed:
        return True
    return (user.email or "").strip().lower() in allowed
