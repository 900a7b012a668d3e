"""HAL interface definitions."""

from .actuation_port import IActuationPort
from .ocr_engine import IOCREngine
from .screen_capture import IScreenCapture

__all__ = [
    "IActuationPort",
    "IOCREngine",
    "IScreenCapture",
]
