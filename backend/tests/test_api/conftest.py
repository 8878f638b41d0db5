"""
Fixtures for the API tests

The app is exercised through TestClient with the auth dependency and the
service / repository factories overridden, so no database or Supabase
project is needed.
"""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from app.core.auth import get_current_user
from app.main import app


@pytest.fixture
def fastapi_app():
    app.dependency_overrides.clear()
    yield app
    # Clean up overrides
    app.dependency_overrides.clear()


@pytest.fixture
def client(fastapi_app):
    return TestClient(fastapi_app)


@pytest.fixture
def login(fastapi_app):
    """login(user) makes every request run as that TokenUser"""
    def _login(user):
        fastapi_app.dependency_overrides[get_current_user] = lambda: user
        return user
    return _login


@pytest.fixture
def override(fastapi_app):
    """override(factory) replaces a Depends factory with a MagicMock and returns it"""
    def _override(factory, value=None):
        value = value if value is not None else MagicMock()
        fastapi_app.dependency_overrides[factory] = lambda: value
        return value
    return _override
