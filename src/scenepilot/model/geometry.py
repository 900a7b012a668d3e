"""Pixel geometry and color primitives used by scene anchors."""

import string
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A pixel coordinate on the screen."""

    x: int
    y: int

    def to_tuple(self) -> tuple[int, int]:
        """Convert to an (x, y) tuple."""
        return (self.x, self.y)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned pixel rectangle.

    ``(x1, y1)`` is the top-left corner (inclusive) and ``(x2, y2)`` the
    bottom-right corner (exclusive), matching PIL's crop box convention.
    """

    x1: int
    y1: int
    x2: int
    y2: int

    def __post_init__(self) -> None:
        """Validate corner ordering."""
        if self.x2 <= self.x1 or self.y2 <= self.y1:
            raise ValueError(f"Degenerate rectangle: {self.to_tuple()}")

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1

    @property
    def center(self) -> Point:
        """Center point, rounded toward the top-left."""
        return Point((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def to_tuple(self) -> tuple[int, int, int, int]:
        """Convert to an (x1, y1, x2, y2) box."""
        return (self.x1, self.y1, self.x2, self.y2)


@dataclass(frozen=True)
class Rgb:
    """24-bit RGB color, each channel 0-255."""

    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        """Validate channel range."""
        for channel in (self.red, self.green, self.blue):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel}")

    @classmethod
    def from_hex(cls, hex_string: str) -> "Rgb":
        """Create a color from a hex string.

        Args:
            hex_string: Hex color string (e.g., "#FF0000" or "ff0000")

        Returns:
            Rgb instance

        Raises:
            ValueError: If the string is not six hex digits
        """
        digits = hex_string.strip().lstrip("#")
        if len(digits) != 6 or any(c not in string.hexdigits for c in digits):
            raise ValueError(f"Invalid hex color: {hex_string}")
        value = int(digits, 16)
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    def to_hex(self) -> str:
        """Convert to an upper-case ``#RRGGBB`` string."""
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"

    def to_tuple(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    def within(self, other: "Rgb", tolerance: int) -> bool:
        """Check that every channel differs from ``other`` by at most ``tolerance``."""
        return (
            abs(self.red - other.red) <= tolerance
            and abs(self.green - other.green) <= tolerance
            and abs(self.blue - other.blue) <= tolerance
        )
