"""Pydantic schemas for API request/response validation."""

from greyn.infrastructure.api.schemas.auth_schemas import (
    SIGNUP_SCHEMAS,
    AdminSignupRequest,
    AuthResponse,
    CarbonSignupRequest,
    ChangePasswordRequest,
    CorporateSignupRequest,
    DeleteAccountRequest,
    ErrorDetail,
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    NGOSignupRequest,
    SessionData,
    SignupRequest,
    SimpleUserSignupRequest,
)

__all__ = [
    "SIGNUP_SCHEMAS",
    "AdminSignupRequest",
    "AuthResponse",
    "CarbonSignupRequest",
    "ChangePasswordRequest",
    "CorporateSignupRequest",
    "DeleteAccountRequest",
    "ErrorDetail",
    "ErrorResponse",
    "LoginRequest",
    "MessageResponse",
    "NGOSignupRequest",
    "SessionData",
    "SignupRequest",
    "SimpleUserSignupRequest",
]
