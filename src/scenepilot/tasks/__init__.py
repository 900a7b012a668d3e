"""Task modules run after a navigation handover."""

from .base import Task, TaskContext, TaskRegistry
from .daily_routine import DailyRoutineTask, TaskSlot


def default_registry() -> TaskRegistry:
    """Registry with the built-in task modules."""
    registry = TaskRegistry()
    registry.register("daily", DailyRoutineTask)
    return registry


__all__ = [
    "Task",
    "TaskContext",
    "TaskRegistry",
    "DailyRoutineTask",
    "TaskSlot",
    "default_registry",
]
