"""Password hashing and access tokens.

Tokens are short-lived JWTs whose ``sub`` claim is the username; there
are no refresh tokens. Every money book request re-resolves the user from
that claim, so a deleted or renamed user's tokens stop working at once.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from pwdlib import PasswordHash

from moneybook.core.config import settings
from moneybook.schemas.auth import TokenData

# Argon2 via pwdlib's recommended settings
password_hash = PasswordHash.recommended()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a login password against the stored hash."""
    return password_hash.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password for storage."""
    return password_hash.hash(password)


def create_access_token(username: str, expires_delta: timedelta | None = None) -> str:
    """
    Issue a signed access token for a user.

    Args:
        username: Stored as the ``sub`` claim
        expires_delta: Lifetime of the token; defaults to
            ``ACCESS_TOKEN_EXPIRE_MINUTES``

    Returns:
        The encoded JWT
    """
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims: dict[str, Any] = {"sub": username, "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        jwt.InvalidTokenError: If the token is malformed, tampered with or expired
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def read_access_token(token: str) -> TokenData:
    """
    Extract the username an access token was issued for.

    Raises:
        jwt.InvalidTokenError: If the token is invalid or has no ``sub`` claim
    """
    username = decode_token(token).get("sub")
    if not isinstance(username, str) or not username:
        raise jwt.InvalidTokenError("Token has no subject")
    return TokenData(username=username)
