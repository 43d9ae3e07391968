"""
Pytest configuration and shared fixtures.

Every test gets its own in-memory SQLite database; the app's ``get_db``
dependency is overridden to hand out sessions bound to it.
"""

import os
import re
import tempfile

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

CSRF_RE = re.compile(r'name="csrf_token" value="([^"]+)"')

TEST_PASSWORD = "bakery-pass-123"


def pytest_configure(config):
    """Point the app at throwaway settings before anything imports it."""
    os.environ["ENV"] = "test"
    os.environ["DATABASE_URL"] = "sqlite://"
    os.environ["SECRET_KEY"] = "test-secret-key"
    os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="bakery-logs-")
    os.environ["LOG_LEVEL"] = "WARNING"
    os.environ["BAKERY_WHATSAPP_NUMBER"] = "27821234567"


def _valid_payload(**overrides) -> dict:
    payload = {
        "name": "Jane Doe",
        "contact": "0821234567",
        "cake_type": "Birthday",
        "date_needed": "2025-03-01",
        "delivery_option": "pickup",
        "honeypot": "",
    }
    payload.update(overrides)
    return payload


def _extract_csrf(html: str) -> str:
    match = CSRF_RE.search(html)
    assert match, "page has no csrf_token field"
    return match.group(1)


@pytest.fixture
def engine():
    from app.db.mixins import Base
    import app.db.models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    """TestClient wired to the per-test database (lifespan is not run)."""
    from fastapi.testclient import TestClient

    from app.db.session import get_db
    from app.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def dashboard_user(db_session):
    from app.db.crud.user import UserRepository

    return UserRepository(db_session).create(
        "owner@example.com", TEST_PASSWORD, "Bakery Owner"
    )


@pytest.fixture
def auth_headers(dashboard_user):
    from app.core.security import create_access_token

    return {"Authorization": f"Bearer {create_access_token(dashboard_user.id)}"}


@pytest.fixture
def make_inquiry(db_session):
    """Insert an inquiry straight through the repository."""
    from app.db.crud.inquiry import InquiryRepository
    from app.services.validation import validate_inquiry

    def _make(**overrides):
        result = validate_inquiry(_valid_payload(**overrides))
        assert result.valid, result.error
        return InquiryRepository(db_session).insert(result.sanitized)

    return _make


@pytest.fixture
def valid_payload():
    """Factory for a submission that passes every validation rule."""
    return _valid_payload


@pytest.fixture
def extract_csrf():
    return _extract_csrf
