"""Exception hierarchy for scenepilot.

This module re-exports all exceptions from domain-specific modules
for convenience.
"""

from .base_exceptions import ScenePilotException
from .config_exceptions import CatalogLoadError, ConfigurationException
from .hardware_exceptions import (
    ActuationError,
    HardwareException,
    KeyMappingError,
    ScreenCaptureError,
    SerialLinkError,
    actuation_error_context,
)
from .state_exceptions import SceneNotFoundError, StateException

__all__ = [
    "ScenePilotException",
    "ConfigurationException",
    "CatalogLoadError",
    "HardwareException",
    "ActuationError",
    "SerialLinkError",
    "KeyMappingError",
    "ScreenCaptureError",
    "actuation_error_context",
    "StateException",
    "SceneNotFoundError",
]
