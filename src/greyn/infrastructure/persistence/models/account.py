"""SQLAlchemy models for the role partition tables.

Each role stores its accounts in a table of its own. The shared credential
columns come from AccountColumnsMixin; role-specific profile columns are
declared on each model.
"""

import uuid
from datetime import datetime
from typing import ClassVar

from sqlalchemy import Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from greyn.domain.entities import AccountStatus, UserRole
from greyn.infrastructure.persistence.database import Base


def _new_account_id() -> str:
    return str(uuid.uuid4())


class AccountColumnsMixin:
    """Credential and lifecycle columns shared by every partition.

    Attributes:
        id: Primary key (UUID string).
        email: Lower-cased email address (unique within the partition).
        password_hash: Argon2 password hash.
        status: Lifecycle status (pending, active, suspended, inactive).
        created_at: Timestamp when the account was created.
        updated_at: Timestamp when the account was last updated.
        last_login: Timestamp of last successful login.
    """

    ROLE: ClassVar[UserRole]

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=_new_account_id,
        comment="Account ID (UUID)",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Account email address",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Hashed password (argon2)",
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AccountStatus.ACTIVE.value,
        comment="Lifecycle status",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    @property
    def role(self) -> UserRole:
        """Role partition this account lives in."""
        return self.ROLE

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id}, email={self.email}, status={self.status})>"


class SimpleUserModel(AccountColumnsMixin, Base):
    """Individual investors."""

    __tablename__ = "simple_users"
    ROLE = UserRole.SIMPLE_USER

    name: Mapped[str] = mapped_column(String(255), nullable=False)


class NGOModel(AccountColumnsMixin, Base):
    """Non-governmental organizations launching projects."""

    __tablename__ = "ngos"
    ROLE = UserRole.NGO

    organization_name: Mapped[str] = mapped_column(String(255), nullable=False)
    registration_number: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Government registration number",
    )
    contact_person: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class CorporateModel(AccountColumnsMixin, Base):
    """Companies funding projects."""

    __tablename__ = "corporates"
    ROLE = UserRole.CORPORATE

    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    tax_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Company tax identifier",
    )
    contact_person: Mapped[str] = mapped_column(String(255), nullable=False)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class CarbonUserModel(AccountColumnsMixin, Base):
    """Carbon credit traders."""

    __tablename__ = "carbon_users"
    ROLE = UserRole.CARBON

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class AdminModel(AccountColumnsMixin, Base):
    """Platform administrators."""

    __tablename__ = "admins"
    ROLE = UserRole.ADMIN

    name: Mapped[str] = mapped_column(String(255), nullable=False)


AccountModel = SimpleUserModel | NGOModel | CorporateModel | CarbonUserModel | AdminModel

ACCOUNT_MODELS: dict[UserRole, type[AccountColumnsMixin]] = {
    model.ROLE: model
    for model in (SimpleUserModel, NGOModel, CorporateModel, CarbonUserModel, AdminModel)
}

if set(ACCOUNT_MODELS) != set(UserRole):
    raise RuntimeError(
        f"Role partitions out of sync with UserRole: "
        f"{sorted(r.value for r in set(UserRole) ^ set(ACCOUNT_MODELS))}"
    )


def model_for_role(role: UserRole | str) -> type[AccountColumnsMixin]:
    """Return the partition model for a role.

    Raises:
        InvalidRoleError: If the role string is not enumerated.
    """
    return ACCOUNT_MODELS[UserRole.parse(role)]
