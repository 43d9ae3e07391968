# app/core/handlers.py
from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import app_logger
from app.core.exceptions import AppException, PersistenceException


async def app_exception_handler(request: Request, exc: AppException):
    """
    Render an AppException as ``{"error": message}`` plus any extra details.
    """
    app_logger.warning(
        f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}"
    )
    content = {"error": exc.message}
    if exc.details:
        content.update(exc.details)
    return JSONResponse(status_code=exc.status_code, content=content)


async def persistence_exception_handler(request: Request, exc: PersistenceException):
    """
    Database failures are logged in full; the client only gets a generic message.
    """
    app_logger.error(
        f"PersistenceException on {request.method} {request.url.path}: {exc.message}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "An unexpected error occurred"},
    )
