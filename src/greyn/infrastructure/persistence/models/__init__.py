"""SQLAlchemy models for the Greyn role partitions.

All models inherit from the Base class defined in database.py and are
automatically created on application startup in development mode.
"""

from greyn.infrastructure.persistence.models.account import (
    ACCOUNT_MODELS,
    AccountColumnsMixin,
    AccountModel,
    AdminModel,
    CarbonUserModel,
    CorporateModel,
    NGOModel,
    SimpleUserModel,
    model_for_role,
)

__all__ = [
    "ACCOUNT_MODELS",
    "AccountColumnsMixin",
    "AccountModel",
    "AdminModel",
    "CarbonUserModel",
    "CorporateModel",
    "NGOModel",
    "SimpleUserModel",
    "model_for_role",
]
