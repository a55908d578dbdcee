"""Pydantic schemas for authentication endpoints.

Request bodies use camelCase on the wire. Type and email format checks
happen here; required fields and the password policy are checked by the
domain services so every client gets the same messages.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from greyn.domain.entities import UserRole


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignupRequest(CamelModel):
    """Fields shared by every signup form."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field("", description="Password")
    confirm_password: str | None = Field(None, description="Password repeated")

    def profile_fields(self) -> dict[str, str | None]:
        """Role-specific fields keyed by model column."""
        return self.model_dump(exclude={"email", "password", "confirm_password", "admin_code"})


class SimpleUserSignupRequest(SignupRequest):
    """Signup form for investors."""

    name: str = Field("", max_length=255)


class NGOSignupRequest(SignupRequest):
    """Signup form for NGOs."""

    organization_name: str = Field("", max_length=255)
    registration_number: str = Field("", max_length=100)
    contact_person: str = Field("", max_length=255)
    location: str | None = Field(None, max_length=255)


class CorporateSignupRequest(SignupRequest):
    """Signup form for corporates."""

    company_name: str = Field("", max_length=255)
    tax_id: str = Field("", max_length=100)
    contact_person: str = Field("", max_length=255)


class CarbonSignupRequest(SignupRequest):
    """Signup form for carbon credit traders."""

    name: str = Field("", max_length=255)


class AdminSignupRequest(SignupRequest):
    """Signup form for administrators."""

    name: str = Field("", max_length=255)
    admin_code: str = Field("", description="Shared admin code")


SIGNUP_SCHEMAS: dict[UserRole, type[SignupRequest]] = {
    UserRole.SIMPLE_USER: SimpleUserSignupRequest,
    UserRole.NGO: NGOSignupRequest,
    UserRole.CORPORATE: CorporateSignupRequest,
    UserRole.CARBON: CarbonSignupRequest,
    UserRole.ADMIN: AdminSignupRequest,
}


class LoginRequest(CamelModel):
    """Request body for login."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field("", description="Password")
    admin_code: str | None = Field(None, description="Shared admin code (admin only)")


class ChangePasswordRequest(CamelModel):
    """Request body for changing the password."""

    current_password: str = Field("", description="Current password")
    new_password: str = Field("", description="New password")
    confirm_new_password: str = Field("", description="New password repeated")


class DeleteAccountRequest(CamelModel):
    """Request body for deleting the account."""

    password: str = Field("", description="Password, as confirmation")


class SessionData(BaseModel):
    """Session issued by signup or login."""

    token: str | None = Field(None, description="Session token, absent while pending approval")
    user: dict[str, Any] = Field(..., description="Public profile of the account")


class AuthResponse(BaseModel):
    """Response for successful signup or login."""

    success: bool = True
    message: str
    data: SessionData


class MessageResponse(BaseModel):
    """Response carrying only a message."""

    success: bool = True
    message: str


class ErrorDetail(BaseModel):
    """Detail for a single validation error."""

    field: str = Field(..., description="Field name that failed validation")
    msg: str = Field(..., description="Human-readable error message")
    code: str | None = Field(None, description="Machine-readable error code")


class ErrorResponse(BaseModel):
    """Response for any failed request."""

    success: bool = False
    message: str
    errors: list[ErrorDetail] | None = None
    error: str | None = None
