"""Repositories for database operations."""

from greyn.infrastructure.persistence.repositories.account_repository import (
    AccountRepository,
    normalize_email,
)

__all__ = ["AccountRepository", "normalize_email"]
