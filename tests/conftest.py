"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from api.config import APIConfig
from api.database import BookStore
from api.main import create_app


TEST_TOKEN = "test-token-456"


@pytest.fixture
def api_settings():
    """Create API settings for testing."""
    return APIConfig(bearer_token=TEST_TOKEN, auth_realm="test-realm")


@pytest.fixture
def book_store():
    """Create a freshly seeded book store."""
    return BookStore()


@pytest.fixture
def app(api_settings, book_store):
    """Create an application with its own store."""
    return create_app(settings=api_settings, store=book_store)


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def auth_headers():
    """Authorization header carrying the valid test token."""
    return {"Authorization": f"Bearer {TEST_TOKEN}"}
