"""Authentication service.

Signs accounts up and logs them in, one role partition at a time. The
per-role differences (profile fields, uniqueness rules, status gates and
messages) live in ROLE_POLICIES so the flow itself is shared.
"""

import secrets
from collections.abc import Mapping
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from greyn.core.config import Settings, get_settings
from greyn.core.logging import get_logger
from greyn.domain.entities import AccountProfile, AccountStatus, UserRole
from greyn.domain.exceptions import (
    AccountValidationError,
    DuplicateAccountError,
    FieldError,
    ForbiddenError,
    UnauthorizedError,
    UnexpectedAccountError,
)
from greyn.domain.services.password_validator import PasswordValidator, required_field_errors
from greyn.infrastructure.auth.session_token_codec import SessionTokenCodec, session_token_codec
from greyn.infrastructure.persistence.models import AccountModel, model_for_role
from greyn.infrastructure.persistence.repositories import AccountRepository, normalize_email

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProfileField:
    """A role-specific signup field.

    Attributes:
        column: Model attribute the value is stored in.
        field: Name the client sends the value under.
        label: Human label used in validation messages.
        required: Whether a blank value is rejected.
    """

    column: str
    field: str
    label: str
    required: bool = True


@dataclass(frozen=True)
class RolePolicy:
    """How signup and login differ for one role."""

    profile_fields: tuple[ProfileField, ...]
    duplicate_message: str
    signup_message: str
    unique_columns: tuple[str, ...] = ()
    inactive_message: str = "Account is suspended or inactive"
    # Organizations may log in while pending unless approval is required
    gates_pending_only_on_approval: bool = False
    joins_validation_messages: bool = False


_NAME = ProfileField("name", "name", "Name")
_CONTACT_PERSON = ProfileField("contact_person", "contactPerson", "Contact person")

ROLE_POLICIES: dict[UserRole, RolePolicy] = {
    UserRole.SIMPLE_USER: RolePolicy(
        profile_fields=(_NAME,),
        duplicate_message="User with this email already exists",
        signup_message="Account created successfully!",
    ),
    UserRole.NGO: RolePolicy(
        profile_fields=(
            ProfileField("organization_name", "organizationName", "Organization name"),
            ProfileField("registration_number", "registrationNumber", "Registration number"),
            _CONTACT_PERSON,
            ProfileField("location", "location", "Location", required=False),
        ),
        unique_columns=("registration_number",),
        duplicate_message="NGO with this email or registration number already exists",
        signup_message="NGO registration successful! You can now login.",
        gates_pending_only_on_approval=True,
        joins_validation_messages=True,
    ),
    UserRole.CORPORATE: RolePolicy(
        profile_fields=(
            ProfileField("company_name", "companyName", "Company name"),
            ProfileField("tax_id", "taxId", "Tax ID"),
            _CONTACT_PERSON,
        ),
        unique_columns=("tax_id",),
        duplicate_message="Corporate with this email or tax ID already exists",
        signup_message="Corporate registration successful!",
        gates_pending_only_on_approval=True,
        joins_validation_messages=True,
    ),
    UserRole.CARBON: RolePolicy(
        profile_fields=(_NAME,),
        duplicate_message="User with this email already exists",
        signup_message="Account created successfully!",
    ),
    UserRole.ADMIN: RolePolicy(
        profile_fields=(_NAME,),
        duplicate_message="Admin with this email already exists",
        signup_message="Admin account created successfully!",
        inactive_message="Admin account is suspended or inactive",
    ),
}


@dataclass(frozen=True)
class AuthenticationResult:
    """Outcome of a successful signup or login.

    Attributes:
        profile: Public view of the account.
        message: Message shown to the user.
        token: Session token, or None when the account awaits approval.
    """

    profile: AccountProfile
    message: str
    token: str | None = None


class AuthenticationService:
    """Service for per-role signup and login."""

    def __init__(
        self,
        session: AsyncSession,
        repository: AccountRepository | None = None,
        token_codec: SessionTokenCodec | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session that owns the unit of work.
            repository: Account repository. Defaults to one bound to the session.
            token_codec: Codec that issues session tokens. Defaults to one bound
                to ``settings`` when they are given.
            settings: Application settings (admin code, password policy, approval mode).
        """
        self.session = session
        self.repository = repository or AccountRepository(session)
        self.settings = settings or get_settings()
        if token_codec is None:
            token_codec = SessionTokenCodec.from_settings(settings) if settings else session_token_codec
        self.token_codec = token_codec
        self.password_validator = PasswordValidator(min_length=self.settings.password_min_length)

    def _check_admin_code(self, role: UserRole, admin_code: str | None) -> None:
        if role is not UserRole.ADMIN:
            return
        if not admin_code:
            raise AccountValidationError(
                [FieldError("adminCode", "Admin code is required", "required")]
            )
        if not secrets.compare_digest(admin_code.encode(), self.settings.admin_code.encode()):
            logger.warning("Admin code rejected")
            raise ForbiddenError("Invalid admin code")

    def _initial_status(self, role: UserRole) -> AccountStatus:
        if role.is_organization and self.settings.organization_approval_required:
            return AccountStatus.PENDING
        return AccountStatus.ACTIVE

    def _check_status(self, role: UserRole, account: AccountModel) -> None:
        policy = ROLE_POLICIES[role]
        status = AccountStatus(account.status)
        if not policy.gates_pending_only_on_approval:
            if status is not AccountStatus.ACTIVE:
                raise ForbiddenError(policy.inactive_message)
            return
        if status in (AccountStatus.SUSPENDED, AccountStatus.INACTIVE):
            raise ForbiddenError(f"Account is {status.value}. Please contact support.")
        if status is AccountStatus.PENDING and self.settings.organization_approval_required:
            raise ForbiddenError("Account is pending approval. Please contact support.")

    def _raise_validation(self, policy: RolePolicy, errors: list[FieldError]) -> None:
        message = None
        if policy.joins_validation_messages:
            message = ", ".join(error.message for error in errors)
        raise AccountValidationError(errors, message)

    async def signup(
        self,
        role: UserRole | str,
        email: str,
        password: str,
        confirm_password: str | None,
        profile: Mapping[str, str | None],
        admin_code: str | None = None,
    ) -> AuthenticationResult:
        """Create an account in a role partition.

        Args:
            role: Role partition to create the account in.
            email: Email address. Normalized before storage.
            password: Plaintext password.
            confirm_password: Password repeated. Skipped when None.
            profile: Role-specific fields keyed by model column.
            admin_code: Shared admin code, required for admin signups.

        Returns:
            The new account's profile, the signup message and, unless the
            account awaits approval, a session token.

        Raises:
            InvalidRoleError: If the role is not enumerated.
            AccountValidationError: If a field is missing or the password is weak.
            ForbiddenError: If the admin code does not match.
            DuplicateAccountError: If the email or another unique field is taken.
            UnexpectedAccountError: If the account cannot be persisted.
        """
        role = UserRole.parse(role)
        policy = ROLE_POLICIES[role]

        errors = required_field_errors(
            {f.field: profile.get(f.column) for f in policy.profile_fields},
            {f.field: f.label for f in policy.profile_fields if f.required},
        )
        errors += required_field_errors({"email": email}, {"email": "Email"})
        errors += self.password_validator.validate(password, confirm_password)
        if errors:
            self._raise_validation(policy, errors)

        self._check_admin_code(role, admin_code)

        email = normalize_email(email)
        values = {
            f.column: (profile.get(f.column) or "").strip() or None
            for f in policy.profile_fields
        }
        unique_fields = {"email": email}
        unique_fields.update({column: values[column] for column in policy.unique_columns})
        if await self.repository.exists(role, **unique_fields):
            logger.info("Signup rejected: duplicate account", role=role.value, email=email)
            raise DuplicateAccountError(policy.duplicate_message)

        model = model_for_role(role)
        status = self._initial_status(role)
        if hasattr(model, "verified"):
            values["verified"] = role.is_organization and status is AccountStatus.ACTIVE

        try:
            account = model(email=email, password_hash="", status=status.value, **values)
            await self.repository.set_password(account, password)
            await self.repository.create(account)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("Signup rejected: concurrent duplicate", role=role.value, email=email)
            raise DuplicateAccountError(policy.duplicate_message) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to create account", role=role.value, email=email, error=str(e))
            raise UnexpectedAccountError("Server error during signup") from e

        logger.info("Account created", role=role.value, user_id=account.id, status=status.value)

        profile_view = AccountProfile.from_model(account)
        if status is AccountStatus.PENDING:
            return AuthenticationResult(
                profile=profile_view,
                message="Registration received. Your account is pending approval.",
            )
        return AuthenticationResult(
            profile=profile_view,
            message=policy.signup_message,
            token=self.token_codec.issue(account.id, role),
        )

    async def login(
        self,
        role: UserRole | str,
        email: str,
        password: str,
        admin_code: str | None = None,
    ) -> AuthenticationResult:
        """Log an account in.

        Args:
            role: Role partition to look the email up in.
            email: Email address.
            password: Plaintext password.
            admin_code: Shared admin code, required for admin logins.

        Returns:
            The account's profile, the login message and a session token.

        Raises:
            InvalidRoleError: If the role is not enumerated.
            AccountValidationError: If email or password is blank.
            ForbiddenError: If the admin code does not match or the status forbids login.
            UnauthorizedError: If the email is unknown or the password does not match.
            UnexpectedAccountError: If the login bookkeeping cannot be persisted.
        """
        role = UserRole.parse(role)

        errors = required_field_errors(
            {"email": email, "password": password},
            {"email": "Email", "password": "Password"},
        )
        if errors:
            raise AccountValidationError(errors)

        self._check_admin_code(role, admin_code)

        account = await self.repository.get_by_email(role, email)
        if not await self.repository.verify_password(account, password):
            logger.info("Login failed", role=role.value, email=normalize_email(email))
            raise UnauthorizedError("Invalid email or password")

        self._check_status(role, account)

        try:
            await self.repository.record_login(account)
            if await self.repository.rehash_if_needed(account, password):
                logger.info("Password hash upgraded", role=role.value, user_id=account.id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to record login", role=role.value, user_id=account.id, error=str(e))
            raise UnexpectedAccountError("Server error during login") from e

        logger.info("Login successful", role=role.value, user_id=account.id)

        return AuthenticationResult(
            profile=AccountProfile.from_model(account),
            message="Login successful!",
            token=self.token_codec.issue(account.id, role),
        )
