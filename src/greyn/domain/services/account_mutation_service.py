"""Account mutation service.

Changes and deletes accounts on behalf of their authenticated owner. Each
operation validates its input before touching the store, resolves the
role partition, verifies the owner's password and commits in one unit of
work. A failed operation leaves the stored record untouched.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from greyn.core.logging import get_logger
from greyn.domain.entities import UserRole
from greyn.domain.exceptions import (
    AccountNotFoundError,
    AccountValidationError,
    FieldError,
    ForbiddenError,
    UnauthorizedError,
    UnexpectedAccountError,
)
from greyn.domain.services.password_validator import PasswordValidator, required_field_errors
from greyn.infrastructure.persistence.models import AccountModel
from greyn.infrastructure.persistence.repositories import AccountRepository

logger = get_logger(__name__)


class AccountMutationService:
    """Service for self-service password changes and account deletion."""

    def __init__(
        self,
        session: AsyncSession,
        repository: AccountRepository | None = None,
        password_validator: PasswordValidator | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session that owns the unit of work.
            repository: Account repository. Defaults to one bound to the session.
            password_validator: Policy for new passwords.
        """
        self.session = session
        self.repository = repository or AccountRepository(session)
        self.password_validator = password_validator or PasswordValidator()

    async def _load_owner(self, role: UserRole, user_id: str) -> AccountModel:
        account = await self.repository.get_by_id(role, user_id)
        if account is None:
            logger.info("Account not found", role=role.value, user_id=user_id)
            raise AccountNotFoundError()
        return account

    async def _commit(self, action: str, role: UserRole, user_id: str) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to persist account change",
                action=action,
                role=role.value,
                user_id=user_id,
                error=str(e),
            )
            raise UnexpectedAccountError(f"Server error while {action}") from e

    async def change_password(
        self,
        user_id: str,
        role: UserRole | str,
        current_password: str,
        new_password: str,
        confirm_new_password: str,
    ) -> None:
        """Replace an account's password after verifying the current one.

        Args:
            user_id: ID of the account, taken from the session token.
            role: Role partition, taken from the session token.
            current_password: Password the owner logs in with today.
            new_password: Replacement password.
            confirm_new_password: Replacement password repeated.

        Raises:
            AccountValidationError: If the input breaks the password policy.
            InvalidRoleError: If the role is not enumerated.
            AccountNotFoundError: If no account has this ID in the partition.
            UnauthorizedError: If the current password does not match.
            UnexpectedAccountError: If the change cannot be persisted.
        """
        errors = required_field_errors(
            {"currentPassword": current_password},
            {"currentPassword": "Current password"},
        )
        errors += self.password_validator.validate(
            new_password,
            confirm_new_password,
            field="newPassword",
            confirmation_field="confirmNewPassword",
            label="New password",
        )
        if errors:
            raise AccountValidationError(errors)

        role = UserRole.parse(role)
        account = await self._load_owner(role, user_id)

        if not await self.repository.verify_password(account, current_password):
            logger.info("Password change rejected: wrong current password", role=role.value, user_id=user_id)
            raise UnauthorizedError("Current password is incorrect")

        try:
            await self.repository.set_password(account, new_password)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to update password", role=role.value, user_id=user_id, error=str(e))
            raise UnexpectedAccountError("Server error while changing password") from e
        await self._commit("changing password", role, user_id)

        logger.info("Password changed", role=role.value, user_id=user_id)

    async def delete_account(self, user_id: str, role: UserRole | str, password: str) -> None:
        """Permanently remove an account after verifying its password.

        Admin accounts are refused before the password is looked at.

        Args:
            user_id: ID of the account, taken from the session token.
            role: Role partition, taken from the session token.
            password: The owner's password, as confirmation.

        Raises:
            InvalidRoleError: If the role is not enumerated.
            ForbiddenError: If the account is an admin account.
            AccountValidationError: If the password is blank.
            AccountNotFoundError: If no account has this ID in the partition.
            UnauthorizedError: If the password does not match.
            UnexpectedAccountError: If the deletion cannot be persisted.
        """
        role = UserRole.parse(role)
        if not role.is_deletable:
            logger.warning("Admin account deletion refused", user_id=user_id)
            raise ForbiddenError("Admin accounts cannot be deleted through this endpoint")

        if not password:
            raise AccountValidationError(
                [FieldError("password", "Password is required to confirm deletion", "required")]
            )

        account = await self._load_owner(role, user_id)

        if not await self.repository.verify_password(account, password):
            logger.info("Account deletion rejected: wrong password", role=role.value, user_id=user_id)
            raise UnauthorizedError("Password is incorrect")

        try:
            await self.repository.delete(account)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to delete account", role=role.value, user_id=user_id, error=str(e))
            raise UnexpectedAccountError("Server error while deleting account") from e
        await self._commit("deleting account", role, user_id)

        logger.info("Account deleted", role=role.value, user_id=user_id)
