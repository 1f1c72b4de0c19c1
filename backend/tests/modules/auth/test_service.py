"""Tests for the auth service against an in-memory user store."""

import pytest
from unittest.mock import AsyncMock

from modules.audit.models import LoginMethod
from modules.auth.models import AuthProvider, GoogleProfile, TokenType
from modules.auth.service import AuthService
from modules.auth.tokens import create_token, decode_token, hash_password
from modules.auth.exceptions import (
    EmailAlreadyRegisteredError,
    EmailAlreadyVerifiedError,
    InactiveAccountError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
)

from tests.fakes import InMemoryUserRepository


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr("modules.auth.tokens.BCRYPT_ROUNDS", 4)


@pytest.fixture
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def audit() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(users, audit, test_settings) -> AuthService:
    return AuthService(users=users, audit=audit, settings=test_settings)


@pytest.fixture
def member(users):
    return users.add(email="member@example.com", name="Member", password_hash=hash_password("s3cret-pass"))


def recorded(audit: AsyncMock):
    """The LoginAttempt passed to each log_login call."""
    return [c.args[0] for c in audit.log_login.await_args_list]


class TestRegister:
    @pytest.mark.asyncio
    async def test_register(self, service, users, test_settings):
        result = await service.register("New@Example.com ", "password123", "New User")

        assert result.user.email == "new@example.com"
        assert result.user.name == "New User"
        assert result.user.email_verified is False
        assert result.user.subscription_tier == "student"

        stored = users.get_by_email("new@example.com")
        assert stored.password_hash != "password123"
        assert stored.verification_token == result.verification_token

        payload = decode_token(result.tokens.access_token, TokenType.ACCESS, test_settings)
        assert payload.sub == result.user.id

    @pytest.mark.asyncio
    async def test_name_defaults_to_local_part(self, service):
        result = await service.register("jane.doe@example.com", "password123")
        assert result.user.name == "jane.doe"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, service, member):
        with pytest.raises(EmailAlreadyRegisteredError):
            await service.register("MEMBER@example.com", "password123")


class TestLogin:
    @pytest.mark.asyncio
    async def test_success_is_audited(self, service, member, audit):
        response = await service.login("member@example.com", "s3cret-pass", "10.0.0.1", "pytest")

        assert response.user.id == member.id
        assert response.user.last_login_at is not None
        assert response.tokens.token_type == "bearer"

        [attempt] = recorded(audit)
        assert attempt.success is True
        assert attempt.user_id == member.id
        assert attempt.login_method == LoginMethod.EMAIL
        assert attempt.ip_address == "10.0.0.1"
        assert attempt.user_agent == "pytest"

    @pytest.mark.asyncio
    async def test_wrong_password(self, service, member, audit):
        with pytest.raises(InvalidCredentialsError):
            await service.login("member@example.com", "wrong")

        [attempt] = recorded(audit)
        assert attempt.success is False
        assert attempt.user_id == member.id
        assert attempt.error_message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_unknown_email_is_audited_without_user(self, service, audit):
        with pytest.raises(InvalidCredentialsError):
            await service.login("ghost@example.com", "whatever")

        [attempt] = recorded(audit)
        assert attempt.user_id is None
        assert attempt.email == "ghost@example.com"

    @pytest.mark.asyncio
    async def test_account_without_password(self, service, users):
        users.add(email="google@example.com", auth_provider="google")
        with pytest.raises(InvalidCredentialsError):
            await service.login("google@example.com", "anything")

    @pytest.mark.asyncio
    async def test_inactive_account(self, service, users, audit):
        users.add(email="gone@example.com", password_hash=hash_password("s3cret-pass"), is_active=False)

        with pytest.raises(InactiveAccountError):
            await service.login("gone@example.com", "s3cret-pass")

        [attempt] = recorded(audit)
        assert attempt.error_message == "Account is inactive"

    @pytest.mark.asyncio
    async def test_works_without_audit(self, users, member, test_settings):
        service = AuthService(users=users, settings=test_settings)
        response = await service.login("member@example.com", "s3cret-pass")
        assert response.user.id == member.id


class TestLoginWithGoogle:
    @pytest.mark.asyncio
    async def test_creates_verified_user(self, service, users, audit):
        profile = GoogleProfile(id="g-1", email="new@example.com", display_name="New", avatar_url="http://img")

        response = await service.login_with_google(profile)

        stored = users.get_by_email("new@example.com")
        assert response.user.id == stored.id
        assert stored.auth_provider == AuthProvider.GOOGLE
        assert stored.auth_provider_id == "g-1"
        assert stored.email_verified is True
        assert recorded(audit)[0].login_method == LoginMethod.GOOGLE

    @pytest.mark.asyncio
    async def test_links_existing_user(self, service, users, member):
        await service.login_with_google(GoogleProfile(id="g-2", email="member@example.com"))

        stored = users.get_by_id(member.id)
        assert stored.auth_provider_id == "g-2"
        assert stored.email_verified is True
        assert len(users.users) == 1

    @pytest.mark.asyncio
    async def test_inactive_user(self, service, users):
        users.add(email="gone@example.com", is_active=False)
        with pytest.raises(InactiveAccountError):
            await service.login_with_google(GoogleProfile(id="g-3", email="gone@example.com"))


class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh(self, service, member, test_settings):
        refresh_token = create_token(member.id, member.email, TokenType.REFRESH, test_settings)

        access_token = await service.refresh_access_token(refresh_token)

        payload = decode_token(access_token, TokenType.ACCESS, test_settings)
        assert payload.sub == member.id

    @pytest.mark.asyncio
    async def test_access_token_is_not_a_refresh_token(self, service, member, test_settings):
        access_token = create_token(member.id, member.email, TokenType.ACCESS, test_settings)
        with pytest.raises(InvalidTokenError):
            await service.refresh_access_token(access_token)

    @pytest.mark.asyncio
    async def test_inactive_user(self, service, users, test_settings):
        user = users.add(email="gone@example.com", is_active=False)
        refresh_token = create_token(user.id, user.email, TokenType.REFRESH, test_settings)
        with pytest.raises(InvalidTokenError, match="inactive"):
            await service.refresh_access_token(refresh_token)


class TestVerifyEmail:
    @pytest.mark.asyncio
    async def test_verify(self, service, users):
        result = await service.register("new@example.com", "password123")

        profile = await service.verify_email(result.verification_token)

        assert profile.email_verified is True
        assert users.get_by_email("new@example.com").verification_token is None

    @pytest.mark.asyncio
    async def test_already_verified(self, service, users):
        result = await service.register("new@example.com", "password123")
        await service.verify_email(result.verification_token)

        with pytest.raises(EmailAlreadyVerifiedError):
            await service.verify_email(result.verification_token)


class TestValidateToken:
    @pytest.mark.asyncio
    async def test_valid(self, service, test_settings):
        token = create_token("user-1", "a@example.com", TokenType.ACCESS, test_settings)
        user = await service.validate_token(token)
        assert user.id == "user-1"
        assert user.email == "a@example.com"

    @pytest.mark.asyncio
    async def test_missing(self, service):
        with pytest.raises(MissingTokenError):
            await service.validate_token("")


class TestLookups:
    @pytest.mark.asyncio
    async def test_profile_has_no_credentials(self, service, member):
        profile = await service.get_user_by_id(member.id)

        assert profile.email == "member@example.com"
        assert not hasattr(profile, "password_hash")

    @pytest.mark.asyncio
    async def test_unknown(self, service):
        assert await service.get_user_by_id("ghost") is None
        assert await service.get_user_by_email("ghost@example.com") is None
