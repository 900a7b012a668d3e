"""Actuation port interface definition.

The capability set mirrors a hardware HID bridge: one key active at a time,
one combined button mask, and relative motion with a wheel channel.
"""

from abc import ABC, abstractmethod


class IActuationPort(ABC):
    """Interface for low-level input delivery.

    Implementations raise ActuationError when an event cannot be delivered.
    """

    @abstractmethod
    def heartbeat(self) -> None:
        """Keep the device link alive."""
        pass

    @abstractmethod
    def switch_identity(self, index: int) -> None:
        """Select the device identity the bridge presents to the host.

        Args:
            index: Identity slot (0-255)
        """
        pass

    @abstractmethod
    def mouse_abs(self, x: int, y: int) -> None:
        """Move the pointer to an absolute screen position.

        Args:
            x: Target X coordinate in pixels
            y: Target Y coordinate in pixels
        """
        pass

    @abstractmethod
    def mouse_move(self, dx: int, dy: int, wheel: int = 0) -> None:
        """Move the pointer relatively and/or turn the wheel.

        Args:
            dx: X offset in pixels
            dy: Y offset in pixels
            wheel: Wheel notches (positive=up, negative=down), signed byte range
        """
        pass

    @abstractmethod
    def mouse_down(self, left: bool, right: bool) -> None:
        """Press the requested buttons.

        Args:
            left: Press the left button
            right: Press the right button
        """
        pass

    @abstractmethod
    def mouse_up(self) -> None:
        """Release all buttons."""
        pass

    @abstractmethod
    def key_down(self, keycode: int, modifier: int = 0) -> None:
        """Press a key.

        Args:
            keycode: HID usage code
            modifier: HID modifier mask
        """
        pass

    @abstractmethod
    def key_up(self) -> None:
        """Release the key pressed by the last key_down."""
        pass

    def close(self) -> None:
        """Release backend resources."""
        pass
