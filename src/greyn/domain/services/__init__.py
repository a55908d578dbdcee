"""Domain services for Greyn.

Services contain the account business logic: password policy, per-role
signup and login, and self-service account mutations.
"""

from greyn.domain.services.account_mutation_service import AccountMutationService
from greyn.domain.services.authentication_service import (
    ROLE_POLICIES,
    AuthenticationResult,
    AuthenticationService,
    ProfileField,
    RolePolicy,
)
from greyn.domain.services.password_validator import PasswordValidator, required_field_errors

__all__ = [
    "AccountMutationService",
    "AuthenticationResult",
    "AuthenticationService",
    "PasswordValidator",
    "ProfileField",
    "ROLE_POLICIES",
    "RolePolicy",
    "required_field_errors",
]
