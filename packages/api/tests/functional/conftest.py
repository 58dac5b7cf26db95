# This project was developed with assistance from AI tools.
"""Route-test fixtures: the real app with the caller and session swapped out."""

import pytest
from db import get_db
from fastapi.testclient import TestClient

from src.main import app as leasedesk_app
from src.middleware.auth import get_current_user


@pytest.fixture
def app():
    yield leasedesk_app
    leasedesk_app.dependency_overrides.clear()


@pytest.fixture
def make_client(app):
    """``make_client(user, session)`` -> TestClient acting as ``user``."""

    def _make(user, session) -> TestClient:
        async def _as_user():
            return user

        async def _session():
            yield session

        app.dependency_overrides[get_current_user] = _as_user
        app.dependency_overrides[get_db] = _session
        return TestClient(app)

    return _make
