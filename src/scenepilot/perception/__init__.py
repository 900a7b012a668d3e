"""Perception: captured frames queried by OCR and pixel probes."""

from .sample import FrameSample, PerceptionSample
from .screen import IPerception, ScreenPerception

__all__ = [
    "PerceptionSample",
    "FrameSample",
    "IPerception",
    "ScreenPerception",
]
