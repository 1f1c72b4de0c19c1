"""
Password hashing and JWT helpers.

Access and refresh tokens are signed with separate secrets so a leaked
refresh secret cannot mint access tokens and vice versa.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from shared.config import Settings, get_settings

from .models import TokenPayload, TokenType
from .exceptions import InvalidTokenError, ExpiredTokenError

BCRYPT_ROUNDS = 12


def hash_password(password: str) -> str:
    """Hash a password with bcrypt and a fresh salt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed hash in the store
        return False


def _secret_for(token_type: TokenType, settings: Settings) -> str:
    if token_type == TokenType.REFRESH:
        return settings.jwt_refresh_secret
    return settings.jwt_secret


def _lifetime_for(token_type: TokenType, settings: Settings) -> timedelta:
    if token_type == TokenType.ACCESS:
        return timedelta(minutes=settings.access_token_expire_minutes)
    if token_type == TokenType.REFRESH:
        return timedelta(days=settings.refresh_token_expire_days)
    return timedelta(hours=settings.verification_token_expire_hours)


def create_token(
    subject: str,
    email: str,
    token_type: TokenType,
    settings: Optional[Settings] = None,
) -> str:
    """
    Sign a token of the given type.

    Args:
        subject: User ID (or email for verification tokens)
        email: User's email
        token_type: Purpose, which selects the secret and lifetime
        settings: Settings override (defaults to the cached settings)

    Returns:
        Encoded JWT string
    """
    settings = settings or get_settings()
    secret = _secret_for(token_type, settings)
    if not secret:
        raise RuntimeError("JWT secrets are not configured. Set JWT_SECRET and JWT_REFRESH_SECRET.")

    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "email": email,
        "type": token_type.value,
        "iat": int(now.timestamp()),
        "exp": int((now + _lifetime_for(token_type, settings)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def decode_token(
    token: str,
    token_type: TokenType,
    settings: Optional[Settings] = None,
) -> TokenPayload:
    """
    Verify and decode a token of the given type.

    Raises:
        ExpiredTokenError: If the token has expired
        InvalidTokenError: If the signature, claims or type are wrong
    """
    settings = settings or get_settings()
    secret = _secret_for(token_type, settings)
    if not secret:
        raise InvalidTokenError("Server authentication not configured")

    try:
        claims = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError()
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid token: {str(e)}")

    payload = TokenPayload(**claims)
    if payload.type != token_type:
        raise InvalidTokenError(f"Expected a {token_type.value} token")
    return payload
