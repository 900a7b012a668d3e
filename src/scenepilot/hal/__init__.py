"""Hardware Abstraction Layer for scenepilot.

Provides the actuation port (serial HID bridge or OS injection), screen
capture and OCR behind small interfaces selected once at startup.
"""

from .container import HALContainer
from .initialization import HALInitializationError, initialize_hal, shutdown_hal
from .interfaces import IActuationPort, IOCREngine, IScreenCapture
from .shared_port import HeartbeatWorker, SharedPort

__all__ = [
    "HALContainer",
    "HALInitializationError",
    "initialize_hal",
    "shutdown_hal",
    "IActuationPort",
    "IOCREngine",
    "IScreenCapture",
    "HeartbeatWorker",
    "SharedPort",
]
