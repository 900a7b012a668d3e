"""Shared, lock-guarded actuation handle and the heartbeat worker.

The foreground control loop and the background heartbeat both write to the
same device. Each port call holds the lock for one driver call only, so a
heartbeat frame may land between two frames of a gesture; the bridge treats
frames independently, so this is harmless.
"""

import threading

from ..hardware_exceptions import ActuationError
from ..logging import get_logger
from .interfaces.actuation_port import IActuationPort

logger = get_logger(__name__)


class SharedPort(IActuationPort):
    """Thread-safe facade over the selected actuation backend."""

    def __init__(self, driver: IActuationPort) -> None:
        """Initialize the handle.

        Args:
            driver: Backend selected at startup
        """
        self._driver = driver
        self._lock = threading.Lock()

    @property
    def driver(self) -> IActuationPort:
        return self._driver

    def heartbeat(self) -> None:
        with self._lock:
            self._driver.heartbeat()

    def switch_identity(self, index: int) -> None:
        with self._lock:
            self._driver.switch_identity(index)

    def mouse_abs(self, x: int, y: int) -> None:
        with self._lock:
            self._driver.mouse_abs(x, y)

    def mouse_move(self, dx: int, dy: int, wheel: int = 0) -> None:
        with self._lock:
            self._driver.mouse_move(dx, dy, wheel)

    def mouse_down(self, left: bool, right: bool) -> None:
        with self._lock:
            self._driver.mouse_down(left, right)

    def mouse_up(self) -> None:
        with self._lock:
            self._driver.mouse_up()

    def key_down(self, keycode: int, modifier: int = 0) -> None:
        with self._lock:
            self._driver.key_down(keycode, modifier)

    def key_up(self) -> None:
        with self._lock:
            self._driver.key_up()

    def close(self) -> None:
        with self._lock:
            self._driver.close()


class HeartbeatWorker:
    """Daemon thread that sends a heartbeat every ``interval`` seconds.

    Example:
        >>> worker = HeartbeatWorker(port, interval=1.0)
        >>> worker.start()
        >>> ...
        >>> worker.stop()
    """

    def __init__(self, port: IActuationPort, interval: float = 1.0) -> None:
        if interval <= 0:
            raise ValueError(f"Heartbeat interval must be positive, got {interval}")
        self.port = port
        self.interval = interval
        self.beats = 0
        self.failures = 0
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="heartbeat", daemon=True)
        self._thread.start()
        logger.debug("heartbeat_started", interval=self.interval)

    def stop(self, timeout: float | None = None) -> None:
        """Signal the worker to stop and wait for it.

        Args:
            timeout: Maximum seconds to wait for the thread (None waits one interval)
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(self.interval + 1.0 if timeout is None else timeout)
            self._thread = None
        logger.debug("heartbeat_stopped", beats=self.beats, failures=self.failures)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.port.heartbeat()
                self.beats += 1
            except ActuationError as e:
                self.failures += 1
                logger.warning("heartbeat_failed", error=str(e))
            self._stop_event.wait(self.interval)

    def __enter__(self) -> "HeartbeatWorker":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
