"""HAL initialization and lifecycle management.

Backends are imported lazily so that only the libraries a run actually
needs are loaded.
"""

from ..config import ScenePilotSettings, get_settings
from ..hardware_exceptions import SerialLinkError
from ..logging import get_logger
from .container import HALContainer
from .interfaces import IActuationPort, IOCREngine, IScreenCapture

logger = get_logger(__name__)


class HALInitializationError(Exception):
    """Raised when HAL component initialization fails."""

    pass


def initialize_hal(settings: ScenePilotSettings | None = None) -> HALContainer:
    """Initialize HAL components and return container.

    Args:
        settings: Settings to use. If None, uses the global settings.

    Returns:
        HALContainer with all components initialized

    Raises:
        HALInitializationError: If a backend library is missing or fails to start
    """
    settings = settings or get_settings()

    try:
        container = HALContainer.create_from_settings(settings)
    except ImportError as e:
        raise HALInitializationError(
            f"Failed to import HAL backend: {e}. Make sure required libraries are installed."
        ) from e

    if container.hardware_mode and settings.identity is not None:
        container.port.switch_identity(settings.identity)

    return container


def shutdown_hal(container: HALContainer) -> None:
    """Shutdown HAL components and release resources.

    Args:
        container: HAL container to shutdown
    """
    if container:
        container.cleanup()


def create_injection_driver() -> IActuationPort:
    from .implementations.injection_driver import InjectionDriver

    return InjectionDriver()


def create_actuation_port(settings: ScenePilotSettings) -> tuple[IActuationPort, bool]:
    """Select and open the actuation backend.

    The serial HID bridge is preferred; if the port cannot be opened the
    injection backend is used instead.

    Args:
        settings: Settings with port name and screen geometry

    Returns:
        Tuple of (driver, hardware_mode)
    """
    if settings.software_mode:
        logger.info("actuation_mode_selected", mode="injection", reason="software sentinel")
        return create_injection_driver(), False

    from .implementations.wire_driver import WireDriver

    try:
        driver = WireDriver.open(
            settings.serial_port,
            settings.screen_width,
            settings.screen_height,
            baud_rate=settings.baud_rate,
            timeout=settings.serial_timeout,
            frame_settle=settings.frame_settle,
        )
    except SerialLinkError as e:
        logger.warning(
            "serial_link_unavailable_falling_back",
            port=settings.serial_port,
            error=str(e),
        )
        return create_injection_driver(), False

    logger.info("actuation_mode_selected", mode="wire", port=settings.serial_port)
    return driver, True


def create_screen_capture(settings: ScenePilotSettings) -> IScreenCapture:
    from .implementations.mss_capture import MSSScreenCapture

    return MSSScreenCapture(default_monitor=settings.monitor)


def create_ocr_engine(settings: ScenePilotSettings) -> IOCREngine:
    from .implementations.easyocr_engine import EasyOCREngine

    return EasyOCREngine(languages=settings.ocr_languages, gpu=settings.ocr_gpu)
