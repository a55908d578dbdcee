"""Configuration management for Greyn.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded at application
startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal
from urllib.parse import urlparse

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-me-in-production-use-openssl-rand-hex-32"
DEFAULT_ADMIN_CODE = "change-me-admin-code"


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GREYN_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "Greyn"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api"
    frontend_url: str = "http://localhost:3000"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = Field(default=5000, ge=1, le=65535)
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./greyn_data/greyn.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Security Settings
    jwt_secret: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="Secret key for session token signing",
    )
    token_expire_days: int = Field(default=30, ge=1)
    admin_code: str = Field(
        default=DEFAULT_ADMIN_CODE,
        description="Secret code required for admin registration and login",
    )
    password_min_length: int = Field(default=6, ge=1)
    organization_approval_required: bool = Field(
        default=False,
        description="When enabled, NGO and corporate signups start as pending and get no token",
    )

    # CORS Settings
    cors_origins: list[str] = Field(default=["http://localhost:3000"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("frontend_url")
    @classmethod
    def validate_frontend_url(cls, v: str) -> str:
        """Validate the frontend URL uses http or https."""
        if not v.strip():
            return "http://localhost:3000"
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(
                "frontend_url must be a valid http:// or https:// URL "
                "(e.g., http://localhost:3000)"
            )
        return v

    @field_validator("jwt_secret", "admin_code")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty secrets."""
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @model_validator(mode="after")
    def include_frontend_origin(self) -> "Settings":
        """Make sure the frontend URL is an allowed CORS origin."""
        origin = self.frontend_url.rstrip("/")
        if origin not in self.cors_origins:
            self.cors_origins = [*self.cors_origins, origin]
        return self

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or switch to PostgreSQL."
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    def configuration_warnings(self) -> list[str]:
        """Report weak but accepted configuration values.

        Returns:
            Human-readable warnings. Empty when the configuration is strong.
        """
        warnings: list[str] = []
        if len(self.jwt_secret) < 32:
            warnings.append("jwt_secret should be at least 32 characters for production security")
        if self.jwt_secret == DEFAULT_JWT_SECRET and self.is_production:
            warnings.append("jwt_secret is still the default value")
        if len(self.admin_code) < 8:
            warnings.append("admin_code should be at least 8 characters")
        if self.admin_code == DEFAULT_ADMIN_CODE and self.is_production:
            warnings.append("admin_code is still the default value")
        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
