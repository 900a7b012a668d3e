"""Perception samples: one captured frame, queried many times.

Every anchor evaluated in a navigation round reads from the same sample so
that UI animation between probes cannot produce an inconsistent picture.
"""

from abc import ABC, abstractmethod

from PIL import Image

from ..hal.interfaces.ocr_engine import IOCREngine
from ..logging import get_logger
from ..model.geometry import Point, Rect, Rgb

logger = get_logger(__name__)


class PerceptionSample(ABC):
    """A frozen view of the screen."""

    @abstractmethod
    def text_in(self, rect: Rect) -> str:
        """Recognize the text inside ``rect``.

        Args:
            rect: Region to read

        Returns:
            Recognized text, empty when nothing could be read
        """
        pass

    @abstractmethod
    def color_at(self, point: Point) -> Rgb | None:
        """Sample one pixel.

        Args:
            point: Pixel coordinate

        Returns:
            Pixel color, or None if the point is off-frame
        """
        pass


class FrameSample(PerceptionSample):
    """Sample backed by a captured PIL frame and an OCR engine.

    OCR results are cached per rectangle for the lifetime of the sample.
    """

    def __init__(self, frame: Image.Image, ocr_engine: IOCREngine) -> None:
        self.frame = frame if frame.mode == "RGB" else frame.convert("RGB")
        self.ocr_engine = ocr_engine
        self._text_cache: dict[Rect, str] = {}

    def text_in(self, rect: Rect) -> str:
        if rect in self._text_cache:
            return self._text_cache[rect]

        box = self._clip(rect)
        if box is None:
            text = ""
        else:
            try:
                text = self.ocr_engine.extract_text(self.frame.crop(box)) or ""
            except Exception as e:
                # An unreadable region is an unrecognized region
                logger.warning("ocr_failed", rect=rect.to_tuple(), error=str(e))
                text = ""

        self._text_cache[rect] = text
        return text

    def color_at(self, point: Point) -> Rgb | None:
        width, height = self.frame.size
        if not (0 <= point.x < width and 0 <= point.y < height):
            return None
        r, g, b = self.frame.getpixel((point.x, point.y))[:3]
        return Rgb(r, g, b)

    def _clip(self, rect: Rect) -> tuple[int, int, int, int] | None:
        width, height = self.frame.size
        x1, y1 = max(0, rect.x1), max(0, rect.y1)
        x2, y2 = min(width, rect.x2), min(height, rect.y2)
        if x2 <= x1 or y2 <= y1:
            return None
        return (x1, y1, x2, y2)
