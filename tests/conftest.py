# tests/conftest.py

import os

# Settings are read at import time, so the test environment goes in first.
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("INTERNAL_API_KEY", "test-internal-key")
os.environ.setdefault("DATABASE_URL_LOCAL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from starlette.testclient import TestClient
from unittest.mock import MagicMock

from app.main import app
from app.db.session import build_engine, build_session_factory, get_db
from app.db.base_class import Base



# --- E2E Test Database Setup ---
# A throw-away in-memory SQLite database per test, created from the models.
@pytest.fixture(scope="function")
def db_session():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = build_session_factory(engine)()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


# --- Test Client Fixtures ---
@pytest.fixture(scope="function")
def test_client():
    """
    Provides a TestClient where the database session is a MagicMock.
    Services or crud objects are patched per test with `monkeypatch`.
    """
    app.dependency_overrides[get_db] = lambda: MagicMock()

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def test_client_e2e(db_session):
    """
    Provides a TestClient bound to the in-memory test database.
    Authentication is real: pass headers from `tests.utils.auth`.
    """

    def override_get_db_e2e():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db_e2e

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
