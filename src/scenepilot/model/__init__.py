"""Scene model and catalog loading."""

from .geometry import Point, Rect, Rgb
from .scene import Anchor, ColorAnchor, Combinator, Scene, TextAnchor, Transition

__all__ = [
    "Point",
    "Rect",
    "Rgb",
    "Anchor",
    "TextAnchor",
    "ColorAnchor",
    "Combinator",
    "Scene",
    "Transition",
]
