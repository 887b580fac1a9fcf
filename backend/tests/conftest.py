"""Test configuration and fixtures for ACADNET backend tests."""

import os
import sys
import pathlib
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

BACKEND_DIR = pathlib.Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# Set test environment before importing backend modules
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING_MODE"] = "True"
os.environ["API_PREFIX"] = ""


def _create_tables(engine):
    # Ensure models are imported so tables are registered in SQLModel.metadata
    import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


@pytest.fixture(autouse=True)
def test_engine():
    """Create a test database engine."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """A file-backed database, each session gets its own connection.

    Used where two callers must not share a connection to race on a row.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.sqlite'}",
        connect_args={"check_same_thread": False},
    )
    _create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def test_session(test_engine):
    """Create a test database session."""
    with Session(test_engine) as session:
        yield session


@pytest.fixture
def override_get_session(test_session):
    """Override the get_session dependency for testing."""

    def _override_get_session():
        yield test_session

    return _override_get_session


@pytest.fixture
def test_app(override_get_session):
    """Create a test FastAPI application."""
    # Patch update_database to skip migrations in tests
    with patch("app.update_database"):
        from app import create_app

        app = create_app()
    from models.common import get_session

    app.dependency_overrides[get_session] = override_get_session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client."""
    with patch("app.update_database"):
        with TestClient(test_app) as client:
            yield client


@pytest.fixture
def make_profile(test_session):
    """Factory storing a profile in the test database."""
    from models.profile import Profile

    def _make_profile(id: str, full_name: str | None = None, **fields):
        profile = Profile(id=id, full_name=full_name or id.title(), **fields)
        test_session.add(profile)
        test_session.commit()
        return profile

    return _make_profile


@pytest.fixture
def alice(make_profile):
    return make_profile(
        "alice",
        "Alice Andrade",
        avatar_url="https://example.com/alice.png",
        institution="USP",
        course="Physics",
    )


@pytest.fixture
def bob(make_profile):
    return make_profile("bob", "Bob Barros", institution="USP", course="History")


@pytest.fixture
def carol(make_profile):
    return make_profile("carol", "Carol Costa", institution="UFRJ", course="Physics")


@pytest.fixture
def auth():
    """Headers authenticating a request as the given profile."""
    import settings

    def _auth(user):
        return {settings.USER_ID_HEADER: user.id}

    return _auth
