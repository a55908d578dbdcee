"""User role entity.

Roles are a closed set. Every account lives in exactly one role partition,
and the role string travels inside session tokens and URL paths.
"""

from enum import Enum

from greyn.domain.exceptions import InvalidRoleError


class UserRole(str, Enum):
    """The five user roles of the platform."""

    SIMPLE_USER = "simple-user"
    NGO = "ngo"
    CORPORATE = "corporate"
    CARBON = "carbon"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: "str | UserRole") -> "UserRole":
        """Parse a role string.

        Args:
            value: Role string as received from a client or token.

        Returns:
            The matching role.

        Raises:
            InvalidRoleError: If the value is not one of the enumerated roles.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidRoleError() from e

    @property
    def is_organization(self) -> bool:
        """NGO and corporate accounts represent organizations."""
        return self in (UserRole.NGO, UserRole.CORPORATE)

    @property
    def is_deletable(self) -> bool:
        """Admin accounts can never be deleted through self-service."""
        return self is not UserRole.ADMIN
