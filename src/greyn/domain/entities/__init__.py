"""Domain entities for Greyn.

Entities are pure Python dataclasses and enums that represent core business
concepts. They have no dependencies on infrastructure or external frameworks.
"""

from greyn.domain.entities.account import AccountProfile, AccountStatus
from greyn.domain.entities.role import UserRole
from greyn.domain.entities.session import SessionClaims

__all__ = [
    "AccountProfile",
    "AccountStatus",
    "SessionClaims",
    "UserRole",
]
