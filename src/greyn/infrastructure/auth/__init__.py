"""Authentication infrastructure components.

This module provides password hashing, session token services, and
other authentication-related utilities.
"""

from greyn.infrastructure.auth.password_hasher import (
    hash_password,
    needs_rehash,
    verify_password,
)
from greyn.infrastructure.auth.session_token_codec import (
    InvalidTokenError,
    JWTError,
    SessionTokenCodec,
    TokenExpiredError,
    read_unverified_claims,
    session_token_codec,
)

__all__ = [
    "InvalidTokenError",
    "JWTError",
    "SessionTokenCodec",
    "TokenExpiredError",
    "hash_password",
    "needs_rehash",
    "read_unverified_claims",
    "session_token_codec",
    "verify_password",
]
