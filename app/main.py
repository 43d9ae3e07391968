from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from starlette.middleware.sessions import SessionMiddleware
from sqlalchemy.orm import Session
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import app_logger, settings
from app.core.deps import get_db
from app.core.exceptions import AppException, PersistenceException
from app.core.handlers import app_exception_handler, persistence_exception_handler
from app.db.session import dispose_db, init_db

# Routers
from app.api.v1.auth import router as auth_router
from app.api.v1.inquiries import router as inquiries_router
from app.api.v1.intake import intake_http_exception_handler, router as intake_router
from app.web.routes import router as ui_router
from app.web.routes_admin import router as dashboard_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    app_logger.info(f"{settings.APP_NAME} started (env={settings.ENV})")
    yield
    dispose_db()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# Middleware
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    same_site="lax",
    https_only=settings.ENV == "prod",
)

# Exception handlers
app.add_exception_handler(PersistenceException, persistence_exception_handler)
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, intake_http_exception_handler)

# Routers
app.include_router(intake_router, prefix="/api/v1")
app.include_router(auth_router, prefix="/api/v1")
app.include_router(inquiries_router, prefix="/api/v1")
app.include_router(ui_router)
app.include_router(dashboard_router)


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.APP_NAME}


@app.get("/health/db")
def db_ping(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"db": "ok"}
