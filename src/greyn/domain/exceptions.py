"""Error taxonomy for account operations.

Every outcome other than success is one of these exceptions. Each carries
the HTTP status the API layer answers with, so routes never translate
errors themselves.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single field validation failure.

    Attributes:
        field: Name of the offending field as the client sent it.
        message: Human-readable error message.
        code: Machine-readable error code.
    """

    field: str
    message: str
    code: str


class AccountError(Exception):
    """Base class for all account operation failures."""

    status_code: int = 500
    default_message: str = "Account operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AccountValidationError(AccountError):
    """Malformed or missing input, detected before any store access."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: list[FieldError], message: str | None = None) -> None:
        self.errors = errors
        super().__init__(message)


class DuplicateAccountError(AccountError):
    """An account with the same unique identity already exists."""

    status_code = 400
    default_message = "User with this email already exists"


class InvalidRoleError(AccountError):
    """Role string outside the enumerated set."""

    status_code = 400
    default_message = "Invalid user role"


class UnauthorizedError(AccountError):
    """Credential mismatch."""

    status_code = 401
    default_message = "Invalid email or password"


class ForbiddenError(AccountError):
    """Operation not allowed for this role or account state."""

    status_code = 403
    default_message = "Operation not permitted"


class AccountNotFoundError(AccountError):
    """No record for the id in the target partition."""

    status_code = 404
    default_message = "User not found"


class UnexpectedAccountError(AccountError):
    """Persistence failure. The message is safe to show to clients."""

    status_code = 500
    default_message = "Server error"
