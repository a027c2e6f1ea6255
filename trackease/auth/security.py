"""Mini README: Password hashing and access tokens for TrackEase.

Structure:
    * AuthenticationError - raised for unusable credentials or tokens.
    * TokenPayload - identity recovered from a verified token.
    * hash_password / verify_password - salted bcrypt hashing.
    * create_access_token / decode_access_token - signed, expiring JWTs.

Handlers derive the acting user exclusively from a verified token; any
user id supplied by the client is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from ..configuration import TrackEaseSettings
from ..logging_utils import get_logger
from ..storage import User

LOGGER = get_logger(__name__)


class AuthenticationError(Exception):
    """Raised when a token is missing, malformed, forged or expired."""


@dataclass(slots=True, frozen=True)
class TokenPayload:
    """Identity embedded in an access token."""

    user_id: str
    email: str
    expires_at: datetime


def _password_bytes(password: str) -> bytes:
    # bcrypt only considers the first 72 bytes; newer releases reject longer input.
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""

    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored bcrypt hash."""

    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        LOGGER.warning("Stored password hash is not a valid bcrypt hash")
        return False


def create_access_token(
    user: User,
    settings: TrackEaseSettings,
    *,
    now: Optional[datetime] = None,
) -> str:
    """Issue a token embedding the user's identity, valid for the configured lifetime."""

    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(minutes=settings.token_expiry_minutes)
    claims = {
        "sub": user.user_id,
        "email": user.email,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: TrackEaseSettings) -> TokenPayload:
    """Verify signature and expiry, returning the embedded identity."""

    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as error:
        raise AuthenticationError(f"Invalid token: {error}") from error
    user_id = claims.get("sub")
    if not user_id:
        raise AuthenticationError("Token does not identify a user")
    expires = claims.get("exp")
    if expires is None:
        raise AuthenticationError("Token has no expiry")
    return TokenPayload(
        user_id=str(user_id),
        email=str(claims.get("email", "")),
        expires_at=datetime.fromtimestamp(int(expires), tz=timezone.utc),
    )


def bearer_token(header_value: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""

    if not header_value:
        raise AuthenticationError("No token provided")
    scheme, _, token = header_value.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Malformed authorization header")
    return token.strip()
