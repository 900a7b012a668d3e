"""Hardware and HAL exceptions.

This module contains exceptions for the actuation layer (serial link and
OS input injection) and for screen capture.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from .base_exceptions import ScenePilotException


class HardwareException(ScenePilotException):
    """Base exception for hardware/system errors."""

    pass


class ActuationError(HardwareException):
    """Raised when an input event could not be delivered."""

    def __init__(self, operation: str, reason: str, **kwargs) -> None:
        """Initialize with operation details."""
        super().__init__(
            f"Actuation '{operation}' failed: {reason}",
            error_code="ACTUATION_FAILED",
            context={"operation": operation, "reason": reason, **kwargs},
        )


class SerialLinkError(ActuationError):
    """Raised when the serial link cannot be opened or written."""

    def __init__(self, operation: str, reason: str, port: str | None = None, **kwargs) -> None:
        """Initialize with link details."""
        super().__init__(operation, reason, port=port, **kwargs)
        self.error_code = "SERIAL_LINK_FAILED"


class KeyMappingError(HardwareException):
    """Raised when a character has no keyboard mapping."""

    def __init__(self, char: str, **kwargs) -> None:
        """Initialize with the unmapped character."""
        super().__init__(
            f"No key mapping for character {char!r}",
            error_code="KEY_UNMAPPED",
            context={"char": char, **kwargs},
        )


class ScreenCaptureError(HardwareException):
    """Raised when screen capture fails."""

    def __init__(self, reason: str, monitor: int | None = None, **kwargs) -> None:
        """Initialize with capture details."""
        message = "Screen capture failed"
        if monitor is not None:
            message += f" on monitor {monitor}"
        message += f": {reason}"

        super().__init__(
            message,
            error_code="CAPTURE_FAILED",
            context={"reason": reason, "monitor": monitor, **kwargs},
        )


@contextmanager
def actuation_error_context(operation: str, **details: Any) -> Iterator[None]:
    """Context manager that wraps backend failures in ActuationError.

    Usage:
        with actuation_error_context("mouse_down", left=True):
            controller.press(Button.left)

    Args:
        operation: Actuation operation being performed
        **details: Additional details about the operation

    Raises:
        ActuationError: Wraps exceptions with operation context
    """
    try:
        yield
    except ScenePilotException:
        raise
    except Exception as e:
        raise ActuationError(operation, str(e), **details) from e
