"""Serial wire driver for the HID bridge device.

The bridge is a microcontroller that replays each frame as a real USB HID
report, so the host application sees hardware input rather than OS-level
injection.
"""

import time
from collections.abc import Callable
from typing import Protocol

import serial

from ...hardware_exceptions import SerialLinkError
from ...logging import get_logger
from ..frame import (
    BUTTON_LEFT,
    BUTTON_RIGHT,
    InputFrame,
    SystemCommand,
    fragment_motion,
    fragment_wheel,
    scale_absolute,
)
from ..interfaces.actuation_port import IActuationPort

logger = get_logger(__name__)

DEFAULT_BAUD_RATE = 115200
DEFAULT_FRAME_SETTLE = 0.004


class SerialLink(Protocol):
    """The subset of ``serial.Serial`` the driver writes through."""

    def write(self, data: bytes) -> int | None: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...


class WireDriver(IActuationPort):
    """Actuation port that encodes every call as 11-byte frames.

    Frames are written synchronously; after each one the driver pauses for
    ``frame_settle`` seconds so the microcontroller keeps up.
    """

    def __init__(
        self,
        link: SerialLink,
        screen_width: int,
        screen_height: int,
        frame_settle: float = DEFAULT_FRAME_SETTLE,
        sleep: Callable[[float], None] = time.sleep,
        port_name: str | None = None,
    ) -> None:
        """Initialize the driver over an open link.

        Args:
            link: Open serial link
            screen_width: Screen width in pixels, for absolute scaling
            screen_height: Screen height in pixels, for absolute scaling
            frame_settle: Pause after each frame in seconds
            sleep: Sleep function (injectable for tests)
            port_name: Port name for log and error context
        """
        if screen_width <= 0 or screen_height <= 0:
            raise ValueError(f"Invalid screen size: {screen_width}x{screen_height}")
        self._link = link
        self.screen_width = screen_width
        self.screen_height = screen_height
        self.frame_settle = frame_settle
        self._sleep = sleep
        self.port_name = port_name

    @classmethod
    def open(
        cls,
        port: str,
        screen_width: int,
        screen_height: int,
        baud_rate: int = DEFAULT_BAUD_RATE,
        timeout: float = 0.1,
        frame_settle: float = DEFAULT_FRAME_SETTLE,
    ) -> "WireDriver":
        """Open a serial port and wrap it in a driver.

        Args:
            port: Port name (e.g. "COM3" or "/dev/ttyACM0")
            screen_width: Screen width in pixels
            screen_height: Screen height in pixels
            baud_rate: Link baud rate
            timeout: Read/write timeout in seconds
            frame_settle: Pause after each frame in seconds

        Returns:
            Connected WireDriver

        Raises:
            SerialLinkError: If the port cannot be opened
        """
        try:
            link = serial.Serial(port, baud_rate, timeout=timeout, write_timeout=timeout)
        except (serial.SerialException, OSError, ValueError) as e:
            raise SerialLinkError("open", str(e), port=port) from e

        logger.info("wire_driver_opened", port=port, baud_rate=baud_rate)
        return cls(
            link,
            screen_width,
            screen_height,
            frame_settle=frame_settle,
            port_name=port,
        )

    def send_frame(self, frame: InputFrame) -> None:
        """Write one frame and wait for the device to settle.

        Args:
            frame: Frame to send

        Raises:
            SerialLinkError: If the write or flush fails
        """
        data = frame.encode()
        try:
            self._link.write(data)
            self._link.flush()
        except (serial.SerialException, OSError) as e:
            raise SerialLinkError(
                "write", str(e), port=self.port_name, event_type=frame.event_type.name
            ) from e
        if self.frame_settle > 0:
            self._sleep(self.frame_settle)

    def heartbeat(self) -> None:
        self.send_frame(InputFrame.system(SystemCommand.HEARTBEAT))

    def switch_identity(self, index: int) -> None:
        if not 0 <= index <= 0xFF:
            raise ValueError(f"Identity index out of range: {index}")
        self.send_frame(InputFrame.system(SystemCommand.SET_ID, index))
        logger.info("device_identity_switched", index=index)

    def mouse_abs(self, x: int, y: int) -> None:
        tx = scale_absolute(x, self.screen_width)
        ty = scale_absolute(y, self.screen_height)
        self.send_frame(InputFrame.mouse_abs(tx, ty))

    def mouse_move(self, dx: int, dy: int, wheel: int = 0) -> None:
        for notches in fragment_wheel(wheel):
            self.send_frame(InputFrame.mouse_wheel(notches))
        for step_x, step_y in fragment_motion(dx, dy):
            self.send_frame(InputFrame.mouse_motion(step_x, step_y))

    def mouse_down(self, left: bool, right: bool) -> None:
        mask = 0
        if left:
            mask |= BUTTON_LEFT
        if right:
            mask |= BUTTON_RIGHT
        self.send_frame(InputFrame.mouse_buttons(mask))

    def mouse_up(self) -> None:
        self.send_frame(InputFrame.mouse_buttons(0))

    def key_down(self, keycode: int, modifier: int = 0) -> None:
        self.send_frame(InputFrame.key_down(keycode, modifier))

    def key_up(self) -> None:
        self.send_frame(InputFrame.key_up())

    def close(self) -> None:
        try:
            self._link.close()
        except (serial.SerialException, OSError) as e:
            logger.warning("wire_driver_close_failed", port=self.port_name, error=str(e))
        else:
            logger.info("wire_driver_closed", port=self.port_name)
