"""Screen perception: capture a frame and wrap it for anchor queries."""

from abc import ABC, abstractmethod

from ..hal.interfaces.ocr_engine import IOCREngine
from ..hal.interfaces.screen_capture import IScreenCapture
from ..model.geometry import Rect
from .sample import FrameSample, PerceptionSample


class IPerception(ABC):
    """Source of perception samples."""

    @abstractmethod
    def sample(self) -> PerceptionSample:
        """Capture the screen once.

        Returns:
            Sample shared by every probe of one navigation round
        """
        pass

    def ocr_area(self, rect: Rect) -> str:
        """Capture and recognize a single rectangle.

        Args:
            rect: Region to read

        Returns:
            Recognized text
        """
        return self.sample().text_in(rect)


class ScreenPerception(IPerception):
    """Perception over the live screen."""

    def __init__(
        self,
        screen_capture: IScreenCapture,
        ocr_engine: IOCREngine,
        monitor: int | None = None,
    ) -> None:
        self.screen_capture = screen_capture
        self.ocr_engine = ocr_engine
        self.monitor = monitor

    def sample(self) -> PerceptionSample:
        frame = self.screen_capture.capture_screen(self.monitor)
        return FrameSample(frame, self.ocr_engine)
