"""Supervisory loop: navigate, hand over to task modules, recover on failure."""

import threading
import time
from collections.abc import Callable

from .config import ScenePilotSettings
from .hardware_exceptions import HardwareException
from .human.humanizer import MotionHumanizer
from .logging import LogContext, get_logger
from .navigation.engine import NavigationEngine, NavOutcome, NavResult
from .tasks.base import TaskContext, TaskRegistry

logger = get_logger(__name__)

ESCAPE = "\x1b"


class Supervisor:
    """Keeps the UI driven toward a target scene.

    On a handover the task module registered for the scene's tag takes
    over; on failure an Escape hold backs out of whatever dialog is open
    before the next attempt. Hardware errors raised while reacting to an
    outcome are logged and the loop carries on with the next cycle.

    Example:
        >>> supervisor = Supervisor(engine, human, default_registry())
        >>> supervisor.run("lobby")
    """

    def __init__(
        self,
        engine: NavigationEngine,
        humanizer: MotionHumanizer,
        registry: TaskRegistry,
        default_handler: str = "td",
        reset_hold: float = 0.1,
        reset_cooldown: float = 3.0,
        success_rest: float = 5.0,
        handover_rest: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.engine = engine
        self.humanizer = humanizer
        self.registry = registry
        self.default_handler = default_handler
        self.reset_hold = reset_hold
        self.reset_cooldown = reset_cooldown
        self.success_rest = success_rest
        self.handover_rest = handover_rest
        self._sleep = sleep
        self._stop_event = threading.Event()

    @classmethod
    def from_settings(
        cls,
        engine: NavigationEngine,
        humanizer: MotionHumanizer,
        registry: TaskRegistry,
        settings: ScenePilotSettings,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "Supervisor":
        return cls(
            engine,
            humanizer,
            registry,
            default_handler=settings.default_handler,
            reset_hold=settings.reset_hold,
            reset_cooldown=settings.reset_cooldown,
            success_rest=settings.success_rest,
            handover_rest=settings.handover_rest,
            sleep=sleep,
        )

    def stop(self) -> None:
        """Ask the loop to exit after the current cycle."""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def _sync_cursor(self) -> None:
        try:
            self.humanizer.sync_cursor()
        except HardwareException as e:
            logger.warning("cursor_sync_failed", error=str(e), error_code=e.error_code)

    def run_cycle(self, target: str) -> NavResult:
        """Run one navigate call and react to its outcome.

        Args:
            target: Target scene id

        Returns:
            The navigation result

        Raises:
            SceneNotFoundError: If ``target`` is not in the catalog
        """
        self._sync_cursor()
        result = self.engine.navigate(target)

        if result.outcome is NavOutcome.HANDOVER:
            tag = result.handler_tag or self.default_handler
            context = TaskContext(
                scene_id=result.scene_id or target,
                humanizer=self.humanizer,
                engine=self.engine,
            )
            try:
                self.registry.dispatch(tag, context)
            except HardwareException as e:
                logger.error("task_aborted", tag=tag, error=str(e), error_code=e.error_code)
            self._sleep(self.handover_rest)
        elif result.outcome is NavOutcome.FAILED:
            logger.warning("navigation_reset", target=target, rounds=result.rounds)
            try:
                self.humanizer.key_hold(ESCAPE, self.reset_hold)
            except HardwareException as e:
                logger.error("navigation_reset_failed", error=str(e), error_code=e.error_code)
            self._sleep(self.reset_cooldown)
        else:
            self._sleep(self.success_rest)

        return result

    def run(self, target: str, max_cycles: int | None = None) -> int:
        """Loop until stopped or ``max_cycles`` cycles have run.

        Args:
            target: Target scene id
            max_cycles: Cycle limit, or None to run until ``stop()``

        Returns:
            Number of cycles run
        """
        self._stop_event.clear()
        cycles = 0
        logger.info("supervisor_started", target=target, max_cycles=max_cycles)

        while not self.stopped and (max_cycles is None or cycles < max_cycles):
            cycles += 1
            with LogContext(logger, cycle=cycles, target=target) as log:
                result = self.run_cycle(target)
                log.info("cycle_finished", outcome=result.outcome.value, scene=result.scene_id)

        logger.info("supervisor_stopped", cycles=cycles)
        return cycles
