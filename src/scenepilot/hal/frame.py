"""Wire frame codec for the HID bridge device.

Every input event travels as one fixed 11-byte frame::

    offset  field
    0       head (0xAA)
    1       event type
    2-7     payload (6 bytes, event specific)
    8-9     extra post-send delay in ms, u16 little-endian
    10      tail (0x55)
"""

import struct
from dataclasses import dataclass
from enum import IntEnum

FRAME_HEAD = 0xAA
FRAME_TAIL = 0x55
FRAME_SIZE = 11
PAYLOAD_SIZE = 6

ABS_RANGE = 32767
ABS_MIN = 10
ABS_MAX = 32757

MAX_REL_STEP = 127

BUTTON_LEFT = 0x01
BUTTON_RIGHT = 0x02

KEY_RELEASE = 0x80

_FRAME_STRUCT = struct.Struct("<BB6sHB")


class EventType(IntEnum):
    """Frame event type byte."""

    KEYBOARD = 0x01
    MOUSE_REL = 0x02
    MOUSE_ABS = 0x03
    SYSTEM = 0x04


class SystemCommand(IntEnum):
    """Sub-command byte of a SYSTEM frame."""

    SET_ID = 0x10
    HEARTBEAT = 0xFF


@dataclass(frozen=True)
class InputFrame:
    """One wire frame."""

    event_type: EventType
    payload: bytes
    delay_ms: int = 0

    def __post_init__(self) -> None:
        if len(self.payload) != PAYLOAD_SIZE:
            raise ValueError(f"Payload must be {PAYLOAD_SIZE} bytes, got {len(self.payload)}")
        if not 0 <= self.delay_ms <= 0xFFFF:
            raise ValueError(f"Delay out of range: {self.delay_ms}")

    def encode(self) -> bytes:
        """Serialize to the 11-byte wire form."""
        return _FRAME_STRUCT.pack(
            FRAME_HEAD, int(self.event_type), self.payload, self.delay_ms, FRAME_TAIL
        )

    @classmethod
    def decode(cls, data: bytes) -> "InputFrame":
        """Parse an 11-byte frame.

        Raises:
            ValueError: If size, head or tail are wrong
        """
        if len(data) != FRAME_SIZE:
            raise ValueError(f"Frame must be {FRAME_SIZE} bytes, got {len(data)}")
        head, event_type, payload, delay_ms, tail = _FRAME_STRUCT.unpack(data)
        if head != FRAME_HEAD or tail != FRAME_TAIL:
            raise ValueError(f"Bad frame markers: head={head:#04x} tail={tail:#04x}")
        return cls(EventType(event_type), payload, delay_ms)

    # Constructors for each event

    @classmethod
    def key_down(cls, keycode: int, modifier: int) -> "InputFrame":
        return cls(EventType.KEYBOARD, bytes([keycode & 0xFF, 0x00, modifier & 0xFF, 0, 0, 0]))

    @classmethod
    def key_up(cls) -> "InputFrame":
        return cls(EventType.KEYBOARD, bytes([0, KEY_RELEASE, 0, 0, 0, 0]))

    @classmethod
    def mouse_abs(cls, tx: int, ty: int) -> "InputFrame":
        return cls(EventType.MOUSE_ABS, struct.pack("<HHH", 0, tx, ty))

    @classmethod
    def mouse_buttons(cls, mask: int) -> "InputFrame":
        """Button state frame; a zero mask releases all buttons."""
        return cls(EventType.MOUSE_REL, bytes([mask & 0xFF, 0, 0, 0, 0, 0]))

    @classmethod
    def mouse_wheel(cls, wheel: int) -> "InputFrame":
        if not -128 <= wheel <= 127:
            raise ValueError(f"Wheel out of signed byte range: {wheel}")
        return cls(EventType.MOUSE_REL, bytes([0, wheel & 0xFF, 0, 0, 0, 0]))

    @classmethod
    def mouse_motion(cls, dx: int, dy: int) -> "InputFrame":
        if abs(dx) > MAX_REL_STEP or abs(dy) > MAX_REL_STEP:
            raise ValueError(f"Motion step out of range: ({dx}, {dy})")
        return cls(EventType.MOUSE_REL, struct.pack("<BBhh", 0, 0, dx, dy))

    @classmethod
    def system(cls, command: SystemCommand, arg: int = 0) -> "InputFrame":
        return cls(EventType.SYSTEM, bytes([int(command), arg & 0xFF, 0, 0, 0, 0]))


def scale_absolute(value: int, extent: int) -> int:
    """Rescale a pixel coordinate into the 15-bit absolute space.

    Args:
        value: Pixel coordinate
        extent: Screen extent along the same axis

    Returns:
        Coordinate clamped to [ABS_MIN, ABS_MAX]
    """
    if extent <= 0:
        raise ValueError(f"Screen extent must be positive, got {extent}")
    scaled = round(value / extent * ABS_RANGE)
    return max(ABS_MIN, min(ABS_MAX, scaled))


def fragment_motion(dx: int, dy: int, max_step: int = MAX_REL_STEP) -> list[tuple[int, int]]:
    """Split a relative displacement into steps within ``[-max_step, max_step]``.

    Each axis moves by the largest allowed step until exhausted, so the
    steps always sum to exactly ``(dx, dy)``.

    Args:
        dx: Horizontal displacement
        dy: Vertical displacement
        max_step: Largest magnitude per step

    Returns:
        Ordered (step_x, step_y) pairs; empty for a zero displacement
    """
    steps: list[tuple[int, int]] = []
    rem_x, rem_y = dx, dy
    while rem_x != 0 or rem_y != 0:
        step_x = max(-max_step, min(max_step, rem_x))
        step_y = max(-max_step, min(max_step, rem_y))
        steps.append((step_x, step_y))
        rem_x -= step_x
        rem_y -= step_y
    return steps


def fragment_wheel(wheel: int, max_step: int = MAX_REL_STEP) -> list[int]:
    """Split a wheel turn into notch counts within ``[-max_step, max_step]``."""
    return [step for step, _ in fragment_motion(wheel, 0, max_step)]
