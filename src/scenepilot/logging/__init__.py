"""Logging module for scenepilot."""

from .logger import (
    LogContext,
    NavigationLogger,
    get_logger,
    mark_logging_initialized,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "mark_logging_initialized",
    "LogContext",
    "NavigationLogger",
]
