"""
Shared fixtures for storefront tests.
"""

import pytest
from fastapi.testclient import TestClient

from storefront.core.audit import clear_audit_hooks
from storefront.core.config import Settings
from storefront.core.security.csrf import InMemoryCsrfTokenStore
from storefront.core.security.session import Role, SessionCodec, SessionIdentity
from storefront.main import create_app

TEST_SECRET = "test-secret-key-for-session-signing"


def make_settings(**overrides) -> Settings:
    """Settings isolated from the environment and any .env file"""
    values = {"RATE_LIMIT_ENABLED": False}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def _clear_audit_hooks():
    clear_audit_hooks()
    yield
    clear_audit_hooks()


@pytest.fixture
def settings():
    """Signed-cookie settings (URL-safe cookie values)"""
    return make_settings(SESSION_SECRET_KEY=TEST_SECRET)


@pytest.fixture
def plain_settings():
    """Unsigned JSON cookie settings"""
    return make_settings()


@pytest.fixture
def csrf_store():
    return InMemoryCsrfTokenStore()


@pytest.fixture
def app(settings, csrf_store):
    return create_app(settings, csrf_store=csrf_store)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def plain_client(plain_settings):
    return TestClient(create_app(plain_settings, csrf_store=InMemoryCsrfTokenStore()))


@pytest.fixture
def codec(settings):
    return SessionCodec(settings.SESSION_SECRET_KEY)


@pytest.fixture
def buyer_identity():
    return SessionIdentity(userId="u-buyer", role=Role.BUYER, sessionId="s-buyer")


@pytest.fixture
def admin_identity():
    return SessionIdentity(userId="u-admin", role=Role.ADMIN, sessionId="s-admin")


def login(client: TestClient, email: str = "buyer@example.com") -> dict:
    """Log in through the API; the client keeps the cookies"""
    response = client.post("/api/auth/login", json={"email": email})
    assert response.status_code == 200, response.text
    return response.json()["data"]
