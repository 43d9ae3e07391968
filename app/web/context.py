# app/web/context.py
from fastapi import Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.services.auth import is_dashboard_user
from app.web.deps import get_csrf_token, get_current_user_from_cookie, pop_flashes


def ctx(request: Request, db: Session, **extra) -> dict:
    """
    Context every page template gets. Reading it consumes pending flashes,
    so call it once per rendered response. Keys in ``extra`` win.
    """
    user = get_current_user_from_cookie(request, db)
    return {
        "request": request,
        "app_name": settings.APP_NAME,
        "user": user,
        "can_moderate": is_dashboard_user(user),
        "flashes": pop_flashes(request),
        "csrf_token": get_csrf_token(request),
        **extra,
    }
