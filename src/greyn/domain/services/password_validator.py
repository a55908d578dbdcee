"""Password validation service.

Validates a new password against the policy before anything touches the
credential store:
- Minimum length
- Confirmation must match
"""

from greyn.domain.exceptions import FieldError


class PasswordValidator:
    """Validates new passwords and their confirmation.

    Default policy:
    - Minimum 6 characters
    - Confirmation equal to the password
    """

    def __init__(self, min_length: int = 6) -> None:
        """Initialize the password validator.

        Args:
            min_length: Minimum password length (default 6).
        """
        self.min_length = min_length

    def validate(
        self,
        password: str,
        confirmation: str | None = None,
        field: str = "password",
        confirmation_field: str = "confirmPassword",
        label: str = "Password",
    ) -> list[FieldError]:
        """Validate a password against the policy.

        Args:
            password: The password to validate.
            confirmation: The repeated password. Skipped when None.
            field: Client-facing name of the password field.
            confirmation_field: Client-facing name of the confirmation field.
            label: Word used at the start of the length message.

        Returns:
            List of validation errors. Empty list if password is valid.
        """
        errors: list[FieldError] = []

        if len(password) < self.min_length:
            errors.append(
                FieldError(
                    field=field,
                    message=f"{label} must be at least {self.min_length} characters",
                    code="password_too_short",
                )
            )

        if confirmation is not None and confirmation != password:
            errors.append(
                FieldError(
                    field=confirmation_field,
                    message="Passwords do not match",
                    code="password_mismatch",
                )
            )

        return errors


def required_field_errors(values: dict[str, str | None], labels: dict[str, str]) -> list[FieldError]:
    """Report blank required fields.

    Args:
        values: Field name to submitted value.
        labels: Field name to the human label used in the message.

    Returns:
        One error per blank field, in the order of ``labels``.
    """
    return [
        FieldError(field=field, message=f"{label} is required", code="required")
        for field, label in labels.items()
        if not (values.get(field) or "").strip()
    ]
