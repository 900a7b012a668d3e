"""Configuration exceptions.

This module contains exceptions for scene catalog loading and
invalid settings.
"""

from .base_exceptions import ScenePilotException


class ConfigurationException(ScenePilotException):
    """Base exception for configuration errors."""

    pass


class CatalogLoadError(ConfigurationException):
    """Raised when the scene catalog cannot be read or fails validation."""

    def __init__(self, source: str, reason: str, **kwargs) -> None:
        """Initialize with catalog source and failure reason."""
        super().__init__(
            f"Failed to load scene catalog '{source}': {reason}",
            error_code="CATALOG_INVALID",
            context={"source": source, "reason": reason, **kwargs},
        )
