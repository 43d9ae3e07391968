# app/core/deps.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.security import decode_token
from app.db.models.user import User
from app.db.session import get_db
from app.services.auth import is_dashboard_user

# tells Swagger which URL to use for the "Authorize" password flow
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    """
    Dependency used by protected API routes:
    - reads Authorization: Bearer <access_token>
    - verifies signature & expiry
    - loads the user from DB and returns it
    """
    try:
        payload = decode_token(token)
        user_id = int(payload.get("sub", "0"))
    except ValueError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid or expired token")

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "User not found or inactive")
    if not is_dashboard_user(user):
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Not allowed to view inquiries")
    return user
