"""MSS-based screen capture implementation."""

import threading

import mss
from mss.exception import ScreenShotError
from PIL import Image

from ...hardware_exceptions import ScreenCaptureError
from ...logging import get_logger
from ..interfaces.screen_capture import IScreenCapture

logger = get_logger(__name__)


class MSSScreenCapture(IScreenCapture):
    """Fast screen capture implementation using MSS."""

    def __init__(self, default_monitor: int = 0) -> None:
        """Initialize MSS screen capture.

        Args:
            default_monitor: Monitor index (0-based) used when none is given
        """
        self.default_monitor = default_monitor
        self._thread_local = threading.local()

        logger.info("mss_capture_initialized", default_monitor=default_monitor)

    @property
    def sct(self) -> mss.mss:
        """Get or create thread-local mss instance.

        Each thread needs its own mss instance because of thread-local
        storage in the platform backends.
        """
        if not hasattr(self._thread_local, "sct"):
            self._thread_local.sct = mss.mss()
            logger.debug("mss_instance_created", thread_id=threading.current_thread().ident)

        return self._thread_local.sct

    def _monitor_dict(self, monitor: int | None) -> dict[str, int]:
        index = self.default_monitor if monitor is None else monitor
        # mss index 0 is the combined virtual screen
        monitors = self.sct.monitors
        if not 0 <= index < len(monitors) - 1:
            raise ValueError(f"Invalid monitor index: {index}")
        return monitors[index + 1]

    def capture_screen(self, monitor: int | None = None) -> Image.Image:
        """Capture a monitor.

        Args:
            monitor: Monitor index (0-based), None for the default monitor

        Returns:
            RGB PIL Image of screenshot

        Raises:
            ScreenCaptureError: If capture fails
        """
        try:
            sct_img = self.sct.grab(self._monitor_dict(monitor))
            image = Image.frombytes(
                "RGB", (sct_img.width, sct_img.height), sct_img.bgra, "raw", "BGRX"
            )
        except (ScreenShotError, ValueError, OSError) as e:
            raise ScreenCaptureError(str(e), monitor=monitor) from e

        logger.debug("screen_captured", monitor=monitor, size=(image.width, image.height))
        return image

    def get_screen_size(self) -> tuple[int, int]:
        mon = self._monitor_dict(None)
        return (mon["width"], mon["height"])

    def close(self) -> None:
        """Close the calling thread's mss instance."""
        sct = getattr(self._thread_local, "sct", None)
        if sct is not None:
            sct.close()
            del self._thread_local.sct
        logger.debug("mss_capture_closed")
