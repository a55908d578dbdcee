"""Core Greyn utilities.

This module exports core utilities for use throughout the application.
"""

from greyn.core.config import Settings, get_settings
from greyn.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_correlation_id,
    get_logger,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "bind_correlation_id",
    "clear_context",
    "get_correlation_id",
]
