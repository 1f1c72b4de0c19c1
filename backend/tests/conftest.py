"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import patch
import jwt  # PyJWT

from api.dependencies import reset_container
from shared.config import Settings


# Test JWT secrets (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"
TEST_JWT_REFRESH_SECRET = "test-refresh-secret-for-testing-only"
TEST_ADMIN_EMAIL = "admin@example.com"


def make_test_settings(**overrides) -> Settings:
    """Settings with test secrets, ignoring any local .env file."""
    values = {
        "jwt_secret": TEST_JWT_SECRET,
        "jwt_refresh_secret": TEST_JWT_REFRESH_SECRET,
        "admin_emails": [TEST_ADMIN_EMAIL],
        "frontend_url": "http://localhost:5173",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    token_type: str = "access",
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        token_type: Value of the "type" claim

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "type": token_type,
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    secret = TEST_JWT_REFRESH_SECRET if token_type == "refresh" else TEST_JWT_SECRET
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def reset_services():
    """Reset the service container before and after each test."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def test_settings() -> Settings:
    return make_test_settings()


@pytest.fixture(autouse=True)
def auth_settings(test_settings: Settings):
    """Make the request auth dependencies verify tokens with the test secrets."""
    with patch("api.middleware.auth.get_settings", return_value=test_settings):
        yield test_settings


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Authorization headers for a user listed in ADMIN_EMAILS."""
    token = create_test_token(user_id="admin-user-1", email=TEST_ADMIN_EMAIL)
    return {"Authorization": f"Bearer {token}"}
