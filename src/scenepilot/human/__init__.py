"""Humanized input on top of the actuation port."""

from .humanizer import MotionHumanizer, VirtualCursor

__all__ = ["MotionHumanizer", "VirtualCursor"]
