"""Configuration package.

Usage:
    from scenepilot.config import get_settings

    settings = get_settings()
    settings.max_rounds
"""

from .settings import ScenePilotSettings, get_settings, reset_settings, set_settings

__all__ = [
    "ScenePilotSettings",
    "get_settings",
    "set_settings",
    "reset_settings",
]
