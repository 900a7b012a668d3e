"""Pynput-based injection driver.

Used when no HID bridge is attached. Input goes through the OS injection
API, so heartbeat and identity switching have nothing to do.
"""

from typing import Any

from pynput import keyboard, mouse
from pynput.keyboard import Key as PynputKey
from pynput.mouse import Button as PynputButton

from ...hardware_exceptions import actuation_error_context
from ...logging import get_logger
from ..interfaces.actuation_port import IActuationPort
from ..keymap import (
    HID_BACKSPACE,
    HID_ENTER,
    HID_ESCAPE,
    HID_LEFT_ALT,
    HID_LEFT_CTRL,
    HID_LEFT_SHIFT,
    HID_SPACE,
    HID_TAB,
    SHIFT_MASK,
    hid_to_char,
)

logger = get_logger(__name__)


class InjectionDriver(IActuationPort):
    """Actuation port implementation using Pynput.

    Keyboard handling follows the bridge's one-key-at-a-time model: key_up
    releases whatever key_down pressed last, and always releases Shift so
    a shifted character can never leave the modifier stuck.
    """

    def __init__(
        self,
        mouse_controller: Any | None = None,
        keyboard_controller: Any | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            mouse_controller: Pynput mouse controller (created if omitted)
            keyboard_controller: Pynput keyboard controller (created if omitted)
        """
        self.mouse_controller = mouse_controller or mouse.Controller()
        self.keyboard_controller = keyboard_controller or keyboard.Controller()
        self._last_key: Any | None = None
        self._special_keys = {
            HID_ENTER: PynputKey.enter,
            HID_ESCAPE: PynputKey.esc,
            HID_BACKSPACE: PynputKey.backspace,
            HID_TAB: PynputKey.tab,
            HID_SPACE: PynputKey.space,
            HID_LEFT_CTRL: PynputKey.ctrl,
            HID_LEFT_SHIFT: PynputKey.shift,
            HID_LEFT_ALT: PynputKey.alt,
        }

        logger.info("injection_driver_initialized")

    def _hid_to_pynput(self, keycode: int) -> Any | None:
        """Convert a HID usage code to a Pynput key or character.

        Args:
            keycode: HID usage code

        Returns:
            Pynput key, single-character string, or None if unsupported
        """
        if keycode in self._special_keys:
            return self._special_keys[keycode]
        return hid_to_char(keycode)

    def heartbeat(self) -> None:
        pass

    def switch_identity(self, index: int) -> None:
        pass

    def mouse_abs(self, x: int, y: int) -> None:
        with actuation_error_context("mouse_abs", x=x, y=y):
            self.mouse_controller.position = (x, y)

    def mouse_move(self, dx: int, dy: int, wheel: int = 0) -> None:
        with actuation_error_context("mouse_move", dx=dx, dy=dy, wheel=wheel):
            if dx != 0 or dy != 0:
                self.mouse_controller.move(dx, dy)
            if wheel != 0:
                self.mouse_controller.scroll(0, wheel)

    def mouse_down(self, left: bool, right: bool) -> None:
        with actuation_error_context("mouse_down", left=left, right=right):
            if left:
                self.mouse_controller.press(PynputButton.left)
            if right:
                self.mouse_controller.press(PynputButton.right)

    def mouse_up(self) -> None:
        with actuation_error_context("mouse_up"):
            self.mouse_controller.release(PynputButton.left)
            self.mouse_controller.release(PynputButton.right)

    def key_down(self, keycode: int, modifier: int = 0) -> None:
        with actuation_error_context("key_down", keycode=keycode, modifier=modifier):
            if modifier & SHIFT_MASK:
                self.keyboard_controller.press(PynputKey.shift)

            key = self._hid_to_pynput(keycode)
            if key is None:
                logger.warning("unsupported_keycode", keycode=keycode)
                return
            self.keyboard_controller.press(key)
            self._last_key = key

    def key_up(self) -> None:
        with actuation_error_context("key_up"):
            if self._last_key is not None:
                self.keyboard_controller.release(self._last_key)
                self._last_key = None
            self.keyboard_controller.release(PynputKey.shift)
