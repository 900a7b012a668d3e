"""ScenePilot: scene-graph UI navigation driven through a serial HID bridge.

Recognizes the current screen from OCR text and pixel-color anchors,
walks a catalog of scenes toward a target by clicking transitions, and
delivers input either as 11-byte frames to a USB HID bridge or through
OS-level injection.
"""

from .exceptions import (
    ActuationError,
    CatalogLoadError,
    KeyMappingError,
    SceneNotFoundError,
    ScenePilotException,
    SerialLinkError,
)
from .human import MotionHumanizer
from .model import Point, Rect, Rgb, Scene, Transition
from .navigation import NavigationEngine, NavOutcome, NavResult, SceneGraph
from .supervisor import Supervisor

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ScenePilotException",
    "ActuationError",
    "SerialLinkError",
    "KeyMappingError",
    "CatalogLoadError",
    "SceneNotFoundError",
    "MotionHumanizer",
    "Point",
    "Rect",
    "Rgb",
    "Scene",
    "Transition",
    "NavigationEngine",
    "NavOutcome",
    "NavResult",
    "SceneGraph",
    "Supervisor",
]
