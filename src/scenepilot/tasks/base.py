"""Task module interface and registry.

A task module takes over once navigation reports a handover. Modules are
looked up by the handover tag carried in the scene catalog.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from ..human.humanizer import MotionHumanizer
from ..logging import get_logger
from ..navigation.engine import NavigationEngine

logger = get_logger(__name__)


@dataclass(frozen=True)
class TaskContext:
    """What a task module gets to work with.

    Attributes:
        scene_id: Scene that triggered the handover
        humanizer: Input intents
        engine: Navigation engine, for OCR and re-navigation
    """

    scene_id: str
    humanizer: MotionHumanizer
    engine: NavigationEngine


class Task(ABC):
    """A gameplay-specific routine run after a handover."""

    name: str = "task"

    @abstractmethod
    def run(self, context: TaskContext) -> None:
        """Run the routine to completion.

        Args:
            context: Handover context
        """
        pass


TaskFactory = Callable[[], Task]


class TaskRegistry:
    """Maps handover tags to task factories."""

    def __init__(self) -> None:
        self._factories: dict[str, TaskFactory] = {}

    def register(self, tag: str, factory: TaskFactory) -> None:
        """Register a factory for ``tag``, replacing any previous one.

        Args:
            tag: Handover tag from the catalog
            factory: Zero-argument callable returning a fresh Task
        """
        self._factories[tag] = factory

    def __contains__(self, tag: object) -> bool:
        return tag in self._factories

    @property
    def tags(self) -> list[str]:
        return sorted(self._factories)

    def dispatch(self, tag: str, context: TaskContext) -> bool:
        """Run the task registered for ``tag``.

        Args:
            tag: Handover tag
            context: Handover context

        Returns:
            True if a task ran, False if no task is registered for ``tag``
        """
        factory = self._factories.get(tag)
        if factory is None:
            logger.warning("task_handler_missing", tag=tag, scene=context.scene_id)
            return False

        task = factory()
        logger.info("task_started", tag=tag, task=task.name, scene=context.scene_id)
        task.run(context)
        logger.info("task_finished", tag=tag, task=task.name)
        return True
