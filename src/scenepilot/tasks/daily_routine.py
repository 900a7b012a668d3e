"""Daily task scanner.

The daily task board shows a row of task slots, each with a status label
and a refresh button. Claimable rewards are claimed, unfinished tasks are
rerolled with the refresh button, and the board is rescanned until no slot
needs attention or the round limit is reached.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..logging import get_logger
from ..model.geometry import Point, Rect
from ..model.scene import strip_whitespace
from .base import Task, TaskContext

logger = get_logger(__name__)

# Status labels, checked in this order: "已领取" contains "领取"
DONE_LABELS = ("已完成", "已领取")
CLAIM_LABEL = "领取"
PENDING_LABELS = ("去完成", "未完成")


class SlotStatus(Enum):
    DONE = "done"
    CLAIMABLE = "claimable"
    PENDING = "pending"
    EMPTY = "empty"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TaskSlot:
    """One slot on the task board.

    Attributes:
        index: 1-based slot number, for logs
        status_rect: Region holding the status label (also the claim button)
        refresh_point: Position of the slot's refresh button
    """

    index: int
    status_rect: Rect
    refresh_point: Point


DEFAULT_SLOTS = (
    TaskSlot(1, Rect(559, 914, 768, 963), Point(784, 311)),
    TaskSlot(2, Rect(899, 901, 1104, 977), Point(1124, 314)),
    TaskSlot(3, Rect(1238, 901, 1439, 968), Point(1465, 318)),
    TaskSlot(4, Rect(1560, 895, 1792, 968), Point(1804, 316)),
)


def classify_status(text: str) -> SlotStatus:
    """Classify a slot's OCR'd status label.

    Args:
        text: Raw OCR output

    Returns:
        Slot status
    """
    cleaned = strip_whitespace(text)
    if not cleaned:
        return SlotStatus.EMPTY
    if any(label in cleaned for label in DONE_LABELS):
        return SlotStatus.DONE
    if CLAIM_LABEL in cleaned:
        return SlotStatus.CLAIMABLE
    if any(label in cleaned for label in PENDING_LABELS):
        return SlotStatus.PENDING
    return SlotStatus.UNKNOWN


class DailyRoutineTask(Task):
    """Claims finished daily tasks and rerolls unfinished ones."""

    name = "daily_routine"

    def __init__(
        self,
        slots: tuple[TaskSlot, ...] = DEFAULT_SLOTS,
        max_rounds: int = 10,
        move_duration: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the task.

        Args:
            slots: Task board layout
            max_rounds: Scan limit, so rerolls cannot go on forever
            move_duration: Cursor travel time per click
            sleep: Sleep function (injectable for tests)
        """
        self.slots = slots
        self.max_rounds = max_rounds
        self.move_duration = move_duration
        self._sleep = sleep

    def run(self, context: TaskContext) -> None:
        logger.info("daily_routine_started", slots=len(self.slots), max_rounds=self.max_rounds)

        for round_no in range(1, self.max_rounds + 1):
            acted = False
            for slot in self.slots:
                if self.process_slot(slot, context):
                    acted = True
                self._sleep(0.5)

            if not acted:
                logger.info("daily_routine_complete", rounds=round_no)
                return

            # Let the board animate before rescanning
            self._sleep(2.0)

        logger.warning("daily_routine_round_limit", rounds=self.max_rounds)

    def process_slot(self, slot: TaskSlot, context: TaskContext) -> bool:
        """Inspect one slot and act on it.

        Args:
            slot: Slot to process
            context: Handover context

        Returns:
            True if the slot was clicked and the board needs a rescan
        """
        text = context.engine.ocr_area(slot.status_rect)
        status = classify_status(text)
        logger.info("daily_slot_scanned", slot=slot.index, text=strip_whitespace(text), status=status.value)

        human = context.humanizer
        if status is SlotStatus.CLAIMABLE:
            center = slot.status_rect.center
            human.move_to(center.x, center.y, self.move_duration)
            human.click()
            # Two presses in case the first lands before the reward popup
            self._sleep(1.0)
            human.key_click(" ")
            self._sleep(1.0)
            human.key_click(" ")
            return True

        if status is SlotStatus.PENDING:
            point = slot.refresh_point
            human.move_to(point.x, point.y, self.move_duration)
            human.click()
            self._sleep(0.5)
            return True

        return False
