"""Session token codec.

Issues and validates the signed, time-bounded JWTs that prove a user's
identity and role. Tokens are stateless: the server keeps no list of
active sessions, so a token stays usable until it expires.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from greyn.core.config import Settings, get_settings
from greyn.core.logging import get_logger
from greyn.domain.entities import SessionClaims, UserRole
from greyn.domain.exceptions import InvalidRoleError

logger = get_logger(__name__)

ALGORITHM = "HS256"
ISSUER = "greyn"


class JWTError(Exception):
    """Base exception for JWT-related errors."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is malformed, tampered with or carries bad claims."""

    pass


def _claims_from_payload(payload: dict[str, Any]) -> SessionClaims:
    """Extract session claims from a decoded payload."""
    user_id = payload.get("userId")
    if not isinstance(user_id, str) or not user_id:
        raise InvalidTokenError("Token carries no user id")
    try:
        role = UserRole.parse(payload.get("role", ""))
    except InvalidRoleError as e:
        raise InvalidTokenError("Token carries an unknown role") from e

    expires_at = None
    if "exp" in payload:
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    return SessionClaims(user_id=user_id, role=role, expires_at=expires_at)


class SessionTokenCodec:
    """Service for issuing and validating session tokens."""

    def __init__(
        self,
        secret_key: str | None = None,
        expires_delta: timedelta | None = None,
    ) -> None:
        """Initialize the codec.

        Args:
            secret_key: Secret key for signing tokens. If not provided,
                        uses the configured secret from settings.
            expires_delta: Token lifetime. Defaults to the configured days.
        """
        self._secret_key = secret_key
        self._expires_delta = expires_delta

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionTokenCodec":
        """Build a codec bound to the given settings instead of the cached ones."""
        return cls(settings.jwt_secret, timedelta(days=settings.token_expire_days))

    @property
    def secret_key(self) -> str:
        """Get the secret key for signing tokens."""
        if self._secret_key:
            return self._secret_key
        return get_settings().jwt_secret

    @property
    def expires_delta(self) -> timedelta:
        """Get the token lifetime."""
        if self._expires_delta is not None:
            return self._expires_delta
        return timedelta(days=get_settings().token_expire_days)

    def issue(self, user_id: str, role: UserRole, expires_delta: timedelta | None = None) -> str:
        """Issue a session token.

        Args:
            user_id: The account's unique identifier.
            role: The account's role partition.
            expires_delta: Custom lifetime. Defaults to the codec's lifetime.

        Returns:
            Encoded JWT.
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self.expires_delta)

        payload = {
            "iss": ISSUER,
            "sub": user_id,
            "iat": now,
            "exp": expire,
            "userId": user_id,
            "role": UserRole.parse(role).value,
        }

        return jwt.encode(payload, self.secret_key, algorithm=ALGORITHM)

    def decode(self, token: str) -> dict[str, Any]:
        """Decode and verify a session token.

        Args:
            token: The encoded JWT.

        Returns:
            Decoded token payload.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is malformed or the signature is wrong.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[ALGORITHM],
                issuer=ISSUER,
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

    def claims(self, token: str) -> SessionClaims:
        """Decode a token into session claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is unusable for any other reason.
        """
        return _claims_from_payload(self.decode(token))

    def validate(self, token: str) -> SessionClaims | None:
        """Validate a token, collapsing every failure into None.

        Args:
            token: The encoded JWT.

        Returns:
            The session claims, or None if the token is not usable.
        """
        try:
            return self.claims(token)
        except TokenExpiredError:
            logger.info("Session token rejected: expired")
        except InvalidTokenError as e:
            logger.info("Session token rejected: invalid", reason=str(e))
        return None


def read_unverified_claims(token: str | None) -> SessionClaims | None:
    """Read claims without checking the signature.

    For the client side, which does not hold the signing secret. Only the
    token structure and expiry are checked; the server verifies signatures
    on every authenticated request.

    Args:
        token: The encoded JWT, or None.

    Returns:
        The session claims, or None if the token is absent, malformed or expired.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": True, "require": ["exp"]},
            algorithms=[ALGORITHM],
        )
        return _claims_from_payload(payload)
    except jwt.ExpiredSignatureError:
        logger.debug("Stored session token is expired")
    except (jwt.InvalidTokenError, InvalidTokenError) as e:
        logger.debug("Stored session token is malformed", reason=str(e))
    return None


# Default codec instance
session_token_codec = SessionTokenCodec()
