"""Screen capture interface definition."""

from abc import ABC, abstractmethod

from PIL import Image


class IScreenCapture(ABC):
    """Interface for screen capture operations."""

    @abstractmethod
    def capture_screen(self, monitor: int | None = None) -> Image.Image:
        """Capture a monitor.

        Args:
            monitor: Monitor index (0-based), None for the primary monitor

        Returns:
            RGB PIL Image of the screenshot
        """
        pass

    @abstractmethod
    def get_screen_size(self) -> tuple[int, int]:
        """Get screen size.

        Returns:
            Tuple of (width, height) in pixels
        """
        pass

    def save_screenshot(self, filepath: str, monitor: int | None = None) -> str:
        """Capture and save a screenshot.

        Args:
            filepath: Path to save screenshot
            monitor: Optional monitor to capture

        Returns:
            Path where screenshot was saved
        """
        self.capture_screen(monitor).save(filepath)
        return filepath

    def close(self) -> None:
        """Release capture resources."""
        pass
