"""FastAPI dependencies for authentication.

Provides dependencies for extracting and validating session tokens from requests.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from greyn.core.config import Settings, get_settings
from greyn.core.logging import get_logger
from greyn.domain.entities import SessionClaims
from greyn.infrastructure.auth import (
    InvalidTokenError,
    SessionTokenCodec,
    TokenExpiredError,
)

logger = get_logger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_account(
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> SessionClaims:
    """Extract and validate the current account from the Authorization header.

    The token alone identifies the caller; the account record is loaded by
    whichever service acts on it.

    Args:
        settings: Settings holding the signing secret.
        authorization: The Authorization header value (e.g., "Bearer <token>").

    Returns:
        SessionClaims: The authenticated account's id and role.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired.
    """
    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise _unauthorized("No token provided, authorization denied")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise _unauthorized("Invalid authorization header")

    try:
        return SessionTokenCodec.from_settings(settings).claims(parts[1])
    except TokenExpiredError:
        logger.info("Authentication failed: token expired")
        raise _unauthorized("Token has expired")
    except InvalidTokenError as e:
        logger.info("Authentication failed: invalid token", error=str(e))
        raise _unauthorized("Token is not valid")


# Type alias for dependency injection
AuthenticatedAccount = Annotated[SessionClaims, Depends(get_current_account)]
