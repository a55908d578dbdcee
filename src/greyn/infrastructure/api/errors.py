"""Error envelope shared by the exception handlers and routes."""

from collections.abc import Iterable, Sequence
from typing import Any

from fastapi.responses import JSONResponse

from greyn.domain.exceptions import AccountError, AccountValidationError, FieldError

EMAIL_FORMAT_MESSAGE = "Valid email is required"


def field_errors_from_pydantic(errors: Iterable[Any]) -> list[FieldError]:
    """Convert pydantic error dicts into field errors.

    Args:
        errors: Items of ``ValidationError.errors()`` or ``RequestValidationError.errors()``.

    Returns:
        One field error per pydantic error, located by client field name.
    """
    converted: list[FieldError] = []
    for error in errors:
        loc: Sequence[Any] = error.get("loc", ())
        if loc and loc[0] == "body":
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        if field == "email":
            message = EMAIL_FORMAT_MESSAGE
        converted.append(FieldError(field=field, message=message, code=error.get("type")))
    return converted


def error_content(
    message: str,
    errors: list[FieldError] | None = None,
    error: str | None = None,
) -> dict[str, Any]:
    """Build the ``{success: false, ...}`` body."""
    content: dict[str, Any] = {"success": False, "message": message}
    if errors:
        content["errors"] = [
            {"field": e.field, "msg": e.message, "code": e.code} for e in errors
        ]
    if error is not None:
        content["error"] = error
    return content


def account_error_response(exc: AccountError, error: str | None = None) -> JSONResponse:
    """Render a domain error as JSON with its HTTP status.

    Args:
        exc: The domain error.
        error: Opaque reference for server-side failures, usually the
            request's correlation id.
    """
    errors = exc.errors if isinstance(exc, AccountValidationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_content(exc.message, errors, error=error),
    )
