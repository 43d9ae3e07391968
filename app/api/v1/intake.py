# app/api/v1/intake.py
from fastapi import APIRouter, Depends, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import intake_logger
from app.core.deps import get_db
from app.core.exceptions import (
    InvalidSubmissionException,
    PersistenceException,
    RateLimitExceededException,
)
from app.schemas.inquiry import IntakeError, IntakeSuccess
from app.services.intake import submit_inquiry
from app.services.rate_limit import client_identifier

router = APIRouter(tags=["intake"])

INTAKE_PATH = "/submit-order-inquiry"

# Sent on every response of this route, including errors
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _json(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


@router.options(INTAKE_PATH, include_in_schema=False)
def intake_preflight():
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


async def intake_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Any method other than POST or OPTIONS on the intake path gets a 405 in the
    route's own shape, CORS headers included. Other paths keep the default.
    """
    if (
        exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        and request.url.path.rstrip("/").endswith(INTAKE_PATH)
    ):
        return _json(status.HTTP_405_METHOD_NOT_ALLOWED, {"error": "Method not allowed"})
    return await http_exception_handler(request, exc)


@router.post(
    INTAKE_PATH,
    response_model=IntakeSuccess,
    responses={
        400: {"model": IntakeError},
        429: {"model": IntakeError},
        500: {"model": IntakeError},
    },
)
async def submit_order_inquiry(request: Request, db: Session = Depends(get_db)):
    """
    Public order form endpoint.

    - 200 ``{success, id, message}`` when stored
    - 400 ``{error}`` for bad input (or a tripped honeypot)
    - 429 ``{error, rateLimited: true}`` once the client's quota is used up
    - 500 ``{error}`` for anything on our side
    """
    try:
        payload = await request.json()
    except ValueError:
        intake_logger.info("Rejected submission with an unreadable JSON body")
        return _json(status.HTTP_400_BAD_REQUEST, {"error": "Invalid request body"})

    try:
        inquiry = await run_in_threadpool(
            submit_inquiry, db, payload, client_identifier(request.headers)
        )
    except RateLimitExceededException as e:
        return _json(e.status_code, {"error": e.message, "rateLimited": True})
    except InvalidSubmissionException as e:
        return _json(e.status_code, {"error": e.message})
    except PersistenceException as e:
        intake_logger.error(f"Insert error: {e}")
        return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, {"error": "Failed to submit inquiry"})
    except Exception:
        intake_logger.exception("Unexpected error while handling order inquiry")
        return _json(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"error": "An unexpected error occurred"},
        )

    return _json(
        status.HTTP_200_OK,
        IntakeSuccess(id=inquiry.id).model_dump(),
    )
