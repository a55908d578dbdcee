"""Session claims carried by a session token."""

from dataclasses import dataclass
from datetime import datetime

from greyn.domain.entities.role import UserRole


@dataclass(frozen=True)
class SessionClaims:
    """Identity proven by a valid session token.

    Attributes:
        user_id: ID of the account in its role partition.
        role: Role partition of the account.
        expires_at: When the token stops being valid.
    """

    user_id: str
    role: UserRole
    expires_at: datetime | None = None
