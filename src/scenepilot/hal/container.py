"""HAL container holding the backend instances created at startup."""

from dataclasses import dataclass

from ..config import ScenePilotSettings
from .interfaces import IOCREngine, IScreenCapture
from .shared_port import HeartbeatWorker, SharedPort


@dataclass
class HALContainer:
    """Container for all HAL component instances.

    Components are created once at application startup and shared across
    the application lifetime.

    Attributes:
        port: Lock-guarded actuation handle
        heartbeat: Background heartbeat worker for ``port``
        screen_capture: Screen capture implementation
        ocr_engine: OCR text recognition implementation
        hardware_mode: True when ``port`` drives the serial HID bridge
    """

    port: SharedPort
    heartbeat: HeartbeatWorker
    screen_capture: IScreenCapture
    ocr_engine: IOCREngine
    hardware_mode: bool

    @classmethod
    def create_from_settings(cls, settings: ScenePilotSettings) -> "HALContainer":
        """Create HAL container from settings.

        Args:
            settings: Settings selecting port and screen geometry

        Returns:
            HALContainer with all components initialized
        """
        from .initialization import create_actuation_port, create_ocr_engine, create_screen_capture

        driver, hardware_mode = create_actuation_port(settings)
        port = SharedPort(driver)
        return cls(
            port=port,
            heartbeat=HeartbeatWorker(port, settings.heartbeat_interval),
            screen_capture=create_screen_capture(settings),
            ocr_engine=create_ocr_engine(settings),
            hardware_mode=hardware_mode,
        )

    def cleanup(self) -> None:
        """Stop the heartbeat and release the backends."""
        self.heartbeat.stop()
        self.port.close()
        self.screen_capture.close()
