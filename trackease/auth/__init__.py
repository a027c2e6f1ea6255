"""Mini README: Authentication helpers for the token-gated deployment."""

from .security import (
    AuthenticationError,
    TokenPayload,
    bearer_token,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

__all__ = [
    "AuthenticationError",
    "TokenPayload",
    "bearer_token",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
]
