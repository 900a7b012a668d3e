"""Scene model: the recognizable UI states of the driven application.

A scene is identified by a set of anchors (OCR text probes and pixel color
probes) combined with AND/OR logic, and leaves through transitions that
click a point and wait for the UI to settle.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from .geometry import Point, Rect, Rgb


class Combinator(Enum):
    """How a scene's anchor results are combined."""

    AND = "and"
    OR = "or"

    def combine(self, results: Iterable[bool]) -> bool:
        """Combine anchor results, stopping at the first decisive one.

        An empty sequence never matches.

        Args:
            results: Individual anchor results, evaluated lazily

        Returns:
            True if the scene is active
        """
        seen = False
        for result in results:
            seen = True
            if self is Combinator.AND and not result:
                return False
            if self is Combinator.OR and result:
                return True
        return seen and self is Combinator.AND


def strip_whitespace(text: str) -> str:
    """Remove every whitespace character from ``text``."""
    return "".join(text.split())


@dataclass(frozen=True)
class TextAnchor:
    """OCR probe: the text recognized in ``rect`` must contain ``expected``."""

    rect: Rect
    expected: str

    def matches(self, recognized: str | None) -> bool:
        """Whitespace-insensitive substring test against OCR output.

        Args:
            recognized: Text recognized in ``rect``; None or empty never matches

        Returns:
            True if the expected text is present
        """
        if not recognized:
            return False
        cleaned = strip_whitespace(recognized)
        if not cleaned:
            return False
        return strip_whitespace(self.expected) in cleaned


@dataclass(frozen=True)
class ColorAnchor:
    """Pixel probe: the color at ``point`` must be within ``tolerance`` of ``expected``."""

    point: Point
    expected: Rgb
    tolerance: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.tolerance <= 255:
            raise ValueError(f"Tolerance out of range: {self.tolerance}")

    def matches(self, sampled: Rgb | None) -> bool:
        if sampled is None:
            return False
        return sampled.within(self.expected, self.tolerance)


Anchor = TextAnchor | ColorAnchor


@dataclass(frozen=True)
class Transition:
    """Directed edge: clicking ``click_point`` is expected to lead to ``target``."""

    target: str
    click_point: Point
    settle_delay: float = 0.0
    """Seconds to wait after the click."""


@dataclass(frozen=True)
class Scene:
    """A named UI state with its evidence rule and outgoing transitions."""

    id: str
    display_name: str
    combinator: Combinator = Combinator.AND
    anchors: tuple[Anchor, ...] = field(default_factory=tuple)
    transitions: tuple[Transition, ...] = field(default_factory=tuple)
    handover: bool = False
    handover_tag: str | None = None

    @property
    def is_handover(self) -> bool:
        """True if reaching this scene hands control to a task module."""
        return self.handover or self.handover_tag is not None

    @property
    def text_anchors(self) -> tuple[TextAnchor, ...]:
        return tuple(a for a in self.anchors if isinstance(a, TextAnchor))

    @property
    def color_anchors(self) -> tuple[ColorAnchor, ...]:
        return tuple(a for a in self.anchors if isinstance(a, ColorAnchor))

    def transition_to(self, target: str) -> Transition | None:
        """Get the first transition leading directly to ``target``.

        Args:
            target: Target scene id

        Returns:
            Transition or None
        """
        for transition in self.transitions:
            if transition.target == target:
                return transition
        return None
