# app/core/security.py
"""
Password hashing and the signed access tokens used by the dashboard.

The same token serves both the bearer API and the ``access_token`` cookie
behind the HTML pages.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings

ACCESS_TOKEN_TYPE = "access"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    # accounts without a hash can never sign in
    return bool(password_hash) and pwd_context.verify(plain_password, password_hash)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(user_id),
        "type": ACCESS_TOKEN_TYPE,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + lifetime).timestamp()),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGO)


def decode_token(token: str) -> dict:
    """
    Verify signature and expiry, then the claims this app relies on.
    Raises ValueError for anything that is not a usable access token.
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGO])
    except JWTError as e:
        raise ValueError("Invalid token") from e

    if claims.get("type") != ACCESS_TOKEN_TYPE:
        raise ValueError("Wrong token type")
    if "sub" not in claims:
        raise ValueError("Invalid token payload (missing 'sub')")
    return claims
