"""MotionHumanizer - semantic input intents with human-like timing.

Moves are broken into many small relative steps along an ease-in-out
curve with a little positional jitter, and every press is held for a
randomized interval. The humanizer keeps its own estimate of the cursor
position so relative deltas never require asking the OS where the
pointer is.
"""

import math
import random
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..hal.interfaces.actuation_port import IActuationPort
from ..hal.keymap import char_to_hid
from ..logging import get_logger

logger = get_logger(__name__)

STEPS_PER_SECOND = 60
WHEEL_STEP = 127


@dataclass
class VirtualCursor:
    """Estimated pointer position."""

    x: int
    y: int

    def to_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)


class MotionHumanizer:
    """Translates intents into timed actuation port calls.

    Example:
        >>> human = MotionHumanizer(port, 1920, 1080)
        >>> human.move_to(500, 400, 0.5)
        >>> human.click()
        >>> human.type_text("hello")
    """

    def __init__(
        self,
        port: IActuationPort,
        screen_width: int,
        screen_height: int,
        start: tuple[int, int] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
        jitter: int = 1,
        typing_rate: float = 60.0,
    ) -> None:
        """Initialize the humanizer.

        Args:
            port: Actuation port (normally the shared, lock-guarded handle)
            screen_width: Screen width in pixels
            screen_height: Screen height in pixels
            start: Initial cursor estimate, defaults to the screen center
            sleep: Sleep function (injectable for tests)
            rng: Random source (injectable for tests)
            jitter: Maximum per-step positional jitter in pixels
            typing_rate: Default characters per second for ``type_text``
        """
        self.port = port
        self.screen_width = screen_width
        self.screen_height = screen_height
        if start is None:
            start = (screen_width // 2, screen_height // 2)
        self.cursor = VirtualCursor(*start)
        self._sleep = sleep
        self._rng = rng or random.Random()
        self.jitter = jitter
        self.typing_rate = typing_rate

    def _clamp(self, x: int, y: int) -> tuple[int, int]:
        return (
            max(0, min(self.screen_width - 1, x)),
            max(0, min(self.screen_height - 1, y)),
        )

    def _pause(self, seconds: float) -> None:
        if seconds > 0:
            self._sleep(seconds)

    # Mouse

    def move_to(self, x: int, y: int, duration: float = 0.5) -> None:
        """Move the cursor to ``(x, y)`` over roughly ``duration`` seconds.

        Args:
            x: Target X coordinate
            y: Target Y coordinate
            duration: Approximate movement time in seconds
        """
        target_x, target_y = self._clamp(x, y)
        start_x, start_y = self.cursor.x, self.cursor.y
        if (target_x, target_y) == (start_x, start_y):
            return

        steps = max(1, int(duration * STEPS_PER_SECOND))
        step_delay = duration / steps if duration > 0 else 0.0
        cur_x, cur_y = start_x, start_y

        for i in range(1, steps + 1):
            if i == steps:
                next_x, next_y = target_x, target_y
            else:
                eased = 0.5 - 0.5 * math.cos(math.pi * i / steps)
                next_x = round(start_x + (target_x - start_x) * eased)
                next_y = round(start_y + (target_y - start_y) * eased)
                if self.jitter:
                    next_x += self._rng.randint(-self.jitter, self.jitter)
                    next_y += self._rng.randint(-self.jitter, self.jitter)
                next_x, next_y = self._clamp(next_x, next_y)

            dx, dy = next_x - cur_x, next_y - cur_y
            if dx or dy:
                self.port.mouse_move(dx, dy)
                cur_x, cur_y = next_x, next_y
                self.cursor.x, self.cursor.y = cur_x, cur_y
            if i < steps:
                self._pause(step_delay * self._rng.uniform(0.8, 1.2))

        logger.debug("cursor_moved", to=(target_x, target_y), steps=steps)

    def move_to_absolute(self, x: int, y: int) -> None:
        """Jump to ``(x, y)`` with one absolute event and resync the estimate.

        Args:
            x: Target X coordinate
            y: Target Y coordinate
        """
        x, y = self._clamp(x, y)
        self.port.mouse_abs(x, y)
        self.cursor.x, self.cursor.y = x, y

    def sync_cursor(self) -> None:
        """Jump the pointer to the screen center and resync the estimate."""
        self.move_to_absolute(self.screen_width // 2, self.screen_height // 2)
        logger.debug("cursor_synced", at=self.cursor.to_tuple())

    def click(self, left: bool = True, right: bool = False, extra_delay: float = 0.0) -> None:
        """Press and release buttons at the current position.

        Args:
            left: Click the left button
            right: Click the right button
            extra_delay: Additional hold time in seconds
        """
        self.port.mouse_down(left, right)
        self._pause(self._rng.uniform(0.05, 0.12) + extra_delay)
        self.port.mouse_up()

    def click_at(self, x: int, y: int, duration: float = 0.5, left: bool = True) -> None:
        """Move to a point and click it.

        Args:
            x: Target X coordinate
            y: Target Y coordinate
            duration: Movement time in seconds
            left: Left button if True, right button otherwise
        """
        self.move_to(x, y, duration)
        self.click(left=left, right=not left)

    def scroll(self, amount: int) -> None:
        """Turn the wheel by ``amount`` notches (positive=up, negative=down).

        Args:
            amount: Signed notch count
        """
        remaining = amount
        while remaining != 0:
            step = max(-WHEEL_STEP, min(WHEEL_STEP, remaining))
            self.port.mouse_move(0, 0, step)
            remaining -= step

    # Keyboard

    def key_hold(self, char: str, duration: float) -> None:
        """Hold the key for ``char`` for ``duration`` seconds.

        Args:
            char: Character to press
            duration: Hold time in seconds

        Raises:
            KeyMappingError: If the character has no mapping
        """
        keycode, modifier = char_to_hid(char)
        self.port.key_down(keycode, modifier)
        self._pause(duration)
        self.port.key_up()

    def key_click(self, char: str) -> None:
        """Tap the key for ``char`` with a short random hold.

        Args:
            char: Character to press

        Raises:
            KeyMappingError: If the character has no mapping
        """
        self.key_hold(char, self._rng.uniform(0.04, 0.09))

    def type_text(self, text: str, rate: float | None = None) -> None:
        """Type ``text`` at about ``rate`` characters per second.

        Args:
            text: Text to type
            rate: Characters per second, defaults to ``typing_rate``

        Raises:
            KeyMappingError: If a character has no mapping
        """
        if rate is None:
            rate = self.typing_rate
        if rate <= 0:
            raise ValueError(f"Typing rate must be positive, got {rate}")
        interval = 1.0 / rate
        for char in text:
            self.key_click(char)
            self._pause(interval * self._rng.uniform(0.7, 1.3))
