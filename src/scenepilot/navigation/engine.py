"""NavigationEngine - drives the UI from whatever scene is showing to a target.

Each round captures the screen once, identifies the current scene, and
either reports arrival or clicks the transition that leads toward the
target. The round cap is the only timeout.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..hardware_exceptions import ActuationError, ScreenCaptureError
from ..human.humanizer import MotionHumanizer
from ..logging import NavigationLogger, get_logger
from ..model.geometry import Rect
from ..model.scene import Scene
from ..perception.screen import IPerception
from ..state_exceptions import SceneNotFoundError
from .evidence import identify_scene
from .scene_graph import SceneGraph

logger = get_logger(__name__)

DEFAULT_MAX_ROUNDS = 15
DEFAULT_IDLE_WAIT = 0.5


class NavOutcome(Enum):
    """Terminal outcome of one navigate call."""

    SUCCESS = "success"
    HANDOVER = "handover"
    FAILED = "failed"


@dataclass(frozen=True)
class NavResult:
    """Result of one navigate call.

    Attributes:
        outcome: Terminal outcome
        scene_id: Reached scene for SUCCESS and HANDOVER
        handler_tag: Task module tag for HANDOVER, if the scene names one
        rounds: Rounds used
    """

    outcome: NavOutcome
    scene_id: str | None = None
    handler_tag: str | None = None
    rounds: int = 0

    @classmethod
    def success(cls, scene_id: str, rounds: int = 0) -> "NavResult":
        return cls(NavOutcome.SUCCESS, scene_id=scene_id, rounds=rounds)

    @classmethod
    def handover(cls, scene_id: str, handler_tag: str | None, rounds: int = 0) -> "NavResult":
        return cls(NavOutcome.HANDOVER, scene_id=scene_id, handler_tag=handler_tag, rounds=rounds)

    @classmethod
    def failed(cls, rounds: int = 0) -> "NavResult":
        return cls(NavOutcome.FAILED, rounds=rounds)

    @property
    def arrived(self) -> bool:
        return self.outcome is not NavOutcome.FAILED


class NavigationEngine:
    """State-machine orchestrator over a SceneGraph.

    Example:
        >>> engine = NavigationEngine(graph, perception, human)
        >>> result = engine.navigate("lobby")
        >>> if result.outcome is NavOutcome.HANDOVER:
        ...     run_task(result.handler_tag)
    """

    def __init__(
        self,
        graph: SceneGraph,
        perception: IPerception,
        humanizer: MotionHumanizer,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        idle_wait: float = DEFAULT_IDLE_WAIT,
        move_duration: float = 0.5,
        confirm_rounds: int = 1,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the engine.

        Args:
            graph: Scene catalog
            perception: Source of screen samples
            humanizer: Input intents used to click transitions
            max_rounds: Round cap for one navigate call
            idle_wait: Wait before resampling when nothing actionable happened
            move_duration: Cursor travel time for transition clicks
            confirm_rounds: Rounds to wait for a clicked transition to take
                effect before clicking it again
            sleep: Sleep function (injectable for tests)
        """
        if max_rounds < 1:
            raise ValueError(f"max_rounds must be at least 1, got {max_rounds}")
        self.graph = graph
        self.perception = perception
        self.humanizer = humanizer
        self.max_rounds = max_rounds
        self.idle_wait = idle_wait
        self.move_duration = move_duration
        self.confirm_rounds = confirm_rounds
        self._sleep = sleep
        self.nav_logger = NavigationLogger(logger)

    def current_scene(self) -> Scene | None:
        """Identify the scene on screen right now."""
        return identify_scene(self.graph, self.perception.sample())

    def ocr_area(self, rect: Rect) -> str:
        """Capture the screen and recognize one rectangle.

        Args:
            rect: Region to read

        Returns:
            Recognized text
        """
        return self.perception.ocr_area(rect)

    def _arrived(self, scene: Scene, rounds: int) -> NavResult:
        if scene.is_handover:
            logger.info("navigation_handover", scene=scene.id, handler=scene.handover_tag)
            return NavResult.handover(scene.id, scene.handover_tag, rounds)
        logger.info("navigation_succeeded", scene=scene.id, rounds=rounds)
        return NavResult.success(scene.id, rounds)

    def _wait(self, seconds: float) -> None:
        if seconds > 0:
            self._sleep(seconds)

    def navigate(self, target: str) -> NavResult:
        """Drive the UI to ``target``.

        Args:
            target: Target scene id

        Returns:
            SUCCESS or HANDOVER on arrival, FAILED when the round cap is
            exhausted or the current scene has no route to the target

        Raises:
            SceneNotFoundError: If ``target`` is not in the catalog
        """
        if target not in self.graph:
            raise SceneNotFoundError(target)

        # Scene a transition was last clicked from, and rounds spent waiting on it
        pending_from: str | None = None
        pending_rounds = 0

        for round_no in range(1, self.max_rounds + 1):
            try:
                sample = self.perception.sample()
            except ScreenCaptureError as e:
                logger.warning("capture_failed", round=round_no, error=str(e))
                self._wait(self.idle_wait)
                continue
            current = identify_scene(self.graph, sample)
            self.nav_logger.log_scene(round_no, current.id if current else None, target)

            if current is None:
                self._wait(self.idle_wait)
                continue

            if current.id == target:
                return self._arrived(current, round_no)

            if current.id == pending_from and pending_rounds < self.confirm_rounds:
                pending_rounds += 1
                logger.debug("transition_pending", scene=current.id, waited=pending_rounds)
                self._wait(self.idle_wait)
                continue

            transition = self.graph.next_hop(current.id, target)
            if transition is None:
                logger.warning("navigation_dead_end", scene=current.id, target=target)
                return NavResult.failed(round_no)

            point = transition.click_point
            try:
                self.humanizer.click_at(point.x, point.y, duration=self.move_duration)
            except ActuationError as e:
                self.nav_logger.log_transition(
                    current.id, transition.target, point.to_tuple(), success=False, error=str(e)
                )
                pending_from = None
                self._wait(self.idle_wait)
                continue

            self.nav_logger.log_transition(current.id, transition.target, point.to_tuple())
            pending_from = current.id
            pending_rounds = 0
            self._wait(transition.settle_delay)

        logger.warning("navigation_failed", target=target, rounds=self.max_rounds)
        return NavResult.failed(self.max_rounds)
