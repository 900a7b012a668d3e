"""Scene recognition and navigation."""

from .engine import NavigationEngine, NavOutcome, NavResult
from .evidence import identify_scene, scene_active
from .scene_graph import SceneGraph

__all__ = [
    "NavigationEngine",
    "NavOutcome",
    "NavResult",
    "SceneGraph",
    "identify_scene",
    "scene_active",
]
