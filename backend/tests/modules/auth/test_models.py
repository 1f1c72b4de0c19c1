"""Tests for auth module models."""

import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from modules.auth.models import (
    AuthProvider,
    RegisterRequest,
    TokenPayload,
    TokenType,
    User,
    UserProfile,
)


def make_user(**overrides) -> User:
    now = datetime.now(timezone.utc)
    data = {
        "id": "user-123",
        "email": "test@example.com",
        "password_hash": "$2b$12$abcdefghijklmnopqrstuv",
        "verification_token": "verify-me",
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return User(**data)


class TestUser:
    def test_defaults(self):
        user = make_user()
        assert user.auth_provider == AuthProvider.EMAIL
        assert user.subscription_tier == "student"
        assert user.subscription_status == "active"
        assert user.is_active is True
        assert user.email_verified is False


class TestUserProfile:
    def test_from_user_drops_credentials(self):
        profile = UserProfile.from_user(make_user(name="Test"))

        data = profile.model_dump()
        assert "password_hash" not in data
        assert "verification_token" not in data
        assert data["name"] == "Test"
        assert data["email"] == "test@example.com"


class TestRegisterRequest:
    def test_valid(self):
        request = RegisterRequest(email="a@example.com", password="password123")
        assert request.name is None

    def test_short_password(self):
        with pytest.raises(ValidationError):
            RegisterRequest(email="a@example.com", password="short")

    def test_password_over_bcrypt_limit(self):
        with pytest.raises(ValidationError):
            RegisterRequest(email="a@example.com", password="x" * 73)

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            RegisterRequest(email="not-an-email", password="password123")


class TestTokenPayload:
    def test_parse(self):
        payload = TokenPayload(
            sub="user-123",
            email="test@example.com",
            type="refresh",
            exp=1704067200,
            iat=1704063600,
        )
        assert payload.type == TokenType.REFRESH

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            TokenPayload(sub="u", email="e@example.com", type="session", exp=1, iat=0)
