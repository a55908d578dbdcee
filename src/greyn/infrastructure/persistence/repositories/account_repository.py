"""Account repository for the role-partitioned credential store."""

import asyncio
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from greyn.domain.entities import UserRole
from greyn.infrastructure.auth.password_hasher import (
    DUMMY_PASSWORD_HASH,
    hash_password,
    needs_rehash,
    verify_password,
)
from greyn.infrastructure.persistence.models import AccountModel, model_for_role


def normalize_email(email: str) -> str:
    """Lower-case and trim an email address."""
    return email.strip().lower()


class AccountRepository:
    """Repository for account database operations.

    Every lookup names the role partition it searches. Password hashing and
    verification run in a worker thread so the event loop is not blocked.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, account: AccountModel) -> AccountModel:
        """Create a new account.

        Args:
            account: Partition model to create.

        Returns:
            Created account model.
        """
        account.email = normalize_email(account.email)
        self.session.add(account)
        await self.session.flush()
        return account

    async def get_by_id(self, role: UserRole | str, account_id: str) -> AccountModel | None:
        """Get an account by ID within its role partition.

        Args:
            role: Role partition to search.
            account_id: Account ID (UUID string).

        Returns:
            Account model if found, None otherwise.

        Raises:
            InvalidRoleError: If the role is not enumerated.
        """
        model = model_for_role(role)
        result = await self.session.execute(select(model).where(model.id == account_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, role: UserRole | str, email: str) -> AccountModel | None:
        """Get an account by email within its role partition.

        Args:
            role: Role partition to search.
            email: Email address, normalized before the lookup.

        Returns:
            Account model if found, None otherwise.
        """
        model = model_for_role(role)
        result = await self.session.execute(
            select(model).where(model.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def exists(self, role: UserRole | str, **unique_fields: Any) -> bool:
        """Check whether any account matches one of the given unique fields.

        Args:
            role: Role partition to search.
            **unique_fields: Column name to value, matched with OR.

        Returns:
            True if at least one account matches.

        Example:
            await repo.exists(UserRole.NGO, email=email, registration_number=number)
        """
        model = model_for_role(role)
        if "email" in unique_fields:
            unique_fields["email"] = normalize_email(unique_fields["email"])
        conditions = [getattr(model, column) == value for column, value in unique_fields.items()]
        result = await self.session.execute(
            select(model.id).where(or_(*conditions)).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def verify_password(self, account: AccountModel | None, candidate: str) -> bool:
        """Verify a candidate password against an account's stored hash.

        A missing account is checked against a dummy hash so the call takes
        the same time either way, and then reported as a mismatch.

        Args:
            account: Account to check, or None.
            candidate: Plaintext password.

        Returns:
            True only if the account exists and the password matches.
        """
        stored = account.password_hash if account is not None else DUMMY_PASSWORD_HASH
        matches = await asyncio.to_thread(verify_password, candidate, stored)
        return matches and account is not None

    async def set_password(self, account: AccountModel, new_password: str) -> None:
        """Replace an account's password hash.

        Args:
            account: Account to update.
            new_password: New plaintext password. Hashed exactly once.
        """
        account.password_hash = await asyncio.to_thread(hash_password, new_password)
        await self.session.flush()

    async def rehash_if_needed(self, account: AccountModel, password: str) -> bool:
        """Upgrade a hash created with outdated argon2 parameters.

        Must only be called after the password has been verified.

        Returns:
            True if the hash was replaced.
        """
        if not needs_rehash(account.password_hash):
            return False
        await self.set_password(account, password)
        return True

    async def record_login(self, account: AccountModel) -> None:
        """Update the last_login timestamp of an account."""
        account.last_login = datetime.now(timezone.utc)
        await self.session.flush()

    async def delete(self, account: AccountModel) -> None:
        """Hard-delete an account.

        Args:
            account: Account to remove.
        """
        await self.session.delete(account)
        await self.session.flush()
