# app/db/session.py
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import app_logger, settings
from app.db.mixins import Base

DATABASE_URL = settings.DATABASE_URL.strip()


def _engine_options(url: str) -> dict:
    # SQLite is used for local runs and tests; everything else gets a real pool
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": 5,
        "max_overflow": 10,
    }


engine = create_engine(DATABASE_URL, future=True, **_engine_options(DATABASE_URL))

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    future=True,
)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Create any missing tables. Alembic owns real schema changes; this only
    lets a fresh SQLite database work without running migrations first.
    """
    import app.db.models  # noqa: F401  (registers the tables on Base.metadata)

    Base.metadata.create_all(bind=engine)
    app_logger.info(f"Database ready. Tables: {sorted(Base.metadata.tables)}")


def dispose_db() -> None:
    engine.dispose()
