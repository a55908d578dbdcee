"""Authentication API routes.

Provides endpoints for per-role signup and login, password changes and
account deletion. Domain errors raised by the services are rendered by the
application's exception handlers.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from greyn.core.config import Settings, get_settings
from greyn.domain.entities import UserRole
from greyn.domain.exceptions import AccountValidationError
from greyn.domain.services import (
    AccountMutationService,
    AuthenticationService,
    PasswordValidator,
)
from greyn.infrastructure.api.dependencies import AuthenticatedAccount
from greyn.infrastructure.api.errors import field_errors_from_pydantic
from greyn.infrastructure.api.schemas import (
    SIGNUP_SCHEMAS,
    AuthResponse,
    ChangePasswordRequest,
    DeleteAccountRequest,
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    SessionData,
)
from greyn.infrastructure.persistence.database import get_db_session

router = APIRouter()

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
SettingsDep = Annotated[Settings, Depends(get_settings)]

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Validation error or unknown role"},
    401: {"model": ErrorResponse, "description": "Credential mismatch"},
    403: {"model": ErrorResponse, "description": "Operation not permitted"},
    404: {"model": ErrorResponse, "description": "Account not found"},
    500: {"model": ErrorResponse, "description": "Server error"},
}


@router.post(
    "/signup/{role}",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def signup(
    role: str,
    session: SessionDep,
    settings: SettingsDep,
    payload: Annotated[dict[str, Any], Body()],
) -> AuthResponse:
    """Create an account in the role's partition.

    Flow:
    1. Parse the role (400 if unknown)
    2. Validate the role's signup form
    3. Create the account (admin code, duplicates and password policy checked)
    4. Return the profile and, unless approval is pending, a session token
    """
    user_role = UserRole.parse(role)
    try:
        request = SIGNUP_SCHEMAS[user_role].model_validate(payload)
    except ValidationError as e:
        raise AccountValidationError(field_errors_from_pydantic(e.errors())) from e

    service = AuthenticationService(session, settings=settings)
    result = await service.signup(
        user_role,
        email=request.email,
        password=request.password,
        confirm_password=request.confirm_password,
        profile=request.profile_fields(),
        admin_code=getattr(request, "admin_code", None),
    )
    return AuthResponse(
        message=result.message,
        data=SessionData(token=result.token, user=result.profile.to_public_dict()),
    )


@router.post(
    "/login/{role}",
    status_code=status.HTTP_200_OK,
    response_model=AuthResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def login(
    role: str,
    session: SessionDep,
    settings: SettingsDep,
    payload: Annotated[dict[str, Any], Body()],
) -> AuthResponse:
    """Log in to the role's partition and return a session token."""
    user_role = UserRole.parse(role)
    try:
        request = LoginRequest.model_validate(payload)
    except ValidationError as e:
        raise AccountValidationError(field_errors_from_pydantic(e.errors())) from e

    service = AuthenticationService(session, settings=settings)
    result = await service.login(
        user_role,
        email=request.email,
        password=request.password,
        admin_code=request.admin_code,
    )
    return AuthResponse(
        message=result.message,
        data=SessionData(token=result.token, user=result.profile.to_public_dict()),
    )


@router.post(
    "/change-password",
    response_model=MessageResponse,
    responses=_ERROR_RESPONSES,
)
async def change_password(
    request: ChangePasswordRequest,
    current: AuthenticatedAccount,
    session: SessionDep,
    settings: SettingsDep,
) -> MessageResponse:
    """Change the caller's password.

    The account is identified by the session token; the current password
    must be supplied again.
    """
    service = AccountMutationService(
        session, password_validator=PasswordValidator(min_length=settings.password_min_length)
    )
    await service.change_password(
        current.user_id,
        current.role,
        current_password=request.current_password,
        new_password=request.new_password,
        confirm_new_password=request.confirm_new_password,
    )
    return MessageResponse(message="Password changed successfully!")


@router.delete(
    "/delete-account",
    response_model=MessageResponse,
    responses=_ERROR_RESPONSES,
)
async def delete_account(
    request: DeleteAccountRequest,
    current: AuthenticatedAccount,
    session: SessionDep,
) -> MessageResponse:
    """Permanently delete the caller's account. Admin accounts are refused."""
    service = AccountMutationService(session)
    await service.delete_account(current.user_id, current.role, password=request.password)
    return MessageResponse(message="Account deleted successfully")
