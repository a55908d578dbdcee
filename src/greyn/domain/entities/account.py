"""Account entity.

An account is the credential record of one user in one role partition.
The profile is the public view of it that travels to clients next to the
session token.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from greyn.domain.entities.role import UserRole


class AccountStatus(str, Enum):
    """Lifecycle status of an account."""

    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class AccountProfile:
    """Public, display-oriented view of an account.

    Attributes:
        id: Account ID (UUID string).
        role: Role partition the account lives in.
        email: Normalized email address.
        status: Current lifecycle status.
        name: Person name (simple-user, carbon, admin).
        organization_name: NGO name.
        company_name: Corporate name.
        contact_person: Contact person of an organization.
    """

    id: str
    role: UserRole
    email: str
    status: AccountStatus = AccountStatus.ACTIVE
    name: str | None = None
    organization_name: str | None = None
    company_name: str | None = None
    contact_person: str | None = None

    @classmethod
    def from_model(cls, account: Any) -> "AccountProfile":
        """Build a profile from any role partition model."""
        return cls(
            id=account.id,
            role=account.role,
            email=account.email,
            status=AccountStatus(account.status),
            name=getattr(account, "name", None),
            organization_name=getattr(account, "organization_name", None),
            company_name=getattr(account, "company_name", None),
            contact_person=getattr(account, "contact_person", None),
        )

    @property
    def display_name(self) -> str | None:
        """Best available human-readable name."""
        return self.name or self.organization_name or self.company_name or self.contact_person

    def to_public_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase user blob sent to clients.

        Role-specific fields that are not set are omitted.
        """
        data: dict[str, Any] = {
            "id": self.id,
            "email": self.email,
            "role": self.role.value,
            "status": self.status.value,
        }
        optional = {
            "name": self.name,
            "organizationName": self.organization_name,
            "companyName": self.company_name,
            "contactPerson": self.contact_person,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data
