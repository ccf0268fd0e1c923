"""Core console utilities.

This module exports core utilities for use throughout the console.
"""

from motebase_admin.core.config import Settings, get_settings
from motebase_admin.core.logging import (
    LoggingContext,
    bind_operator,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggingContext",
    "bind_operator",
    "clear_context",
]
