"""Structured logging configuration for scenepilot using structlog."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, cast

import structlog

from ..config import get_settings


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    structured: bool = True,
    console: bool = True,
    add_timestamp: bool = True,
    add_caller_info: bool = False,
    colorize: bool = True,
) -> None:
    """Configure structured logging for scenepilot.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        structured: Use JSON structured output
        console: Enable console output (overridden by SCENEPILOT_DISABLE_CONSOLE_LOGGING)
        add_timestamp: Add timestamps to logs
        add_caller_info: Add caller information
        colorize: Colorize console output (only for non-structured)
    """
    if os.getenv("SCENEPILOT_DISABLE_CONSOLE_LOGGING") == "1":
        console = False

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if add_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
    )

    if structured:
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colorize and console))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []

    if console:
        # stdout is left to the CLI's own output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)

    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        handlers=handlers,
        force=True,
    )


_logging_initialized = False


def _ensure_logging_initialized() -> None:
    """Ensure logging is initialized (called lazily, not at import time)."""
    global _logging_initialized

    if _logging_initialized:
        return

    try:
        settings = get_settings()
        log_file = None
        if settings.log_path is not None:
            log_file = settings.log_path / f"scenepilot_{datetime.now().strftime('%Y%m%d')}.log"
        setup_logging(
            level="DEBUG" if settings.debug_mode else "INFO",
            log_file=log_file,
            structured=not settings.debug_mode,
            colorize=settings.debug_mode,
        )
    except (AttributeError, OSError, ValueError):
        # Invalid settings or an unwritable log path still get console logging
        setup_logging(level="INFO", structured=False)

    _logging_initialized = True


def mark_logging_initialized() -> None:
    """Record that logging was configured explicitly (e.g. by the CLI)."""
    global _logging_initialized
    _logging_initialized = True


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    _ensure_logging_initialized()
    return cast(structlog.BoundLogger, structlog.get_logger(name))


class LogContext:
    """Context manager for temporary log context."""

    def __init__(self, logger: structlog.BoundLogger, **kwargs) -> None:
        """Initialize with logger and context.

        Args:
            logger: Logger instance
            **kwargs: Context key-value pairs
        """
        self.logger = logger
        self.context = kwargs

    def __enter__(self) -> structlog.types.BindableLogger:
        """Enter context and bind values."""
        self.bound_logger = self.logger.bind(**self.context)
        return self.bound_logger

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context."""
        pass


class NavigationLogger:
    """Specialized logger for scene recognition and transitions."""

    def __init__(self, base_logger: structlog.BoundLogger | None = None) -> None:
        """Initialize navigation logger.

        Args:
            base_logger: Base logger to use
        """
        self.logger = base_logger or get_logger(__name__)

    def log_scene(self, round_no: int, scene_id: str | None, target: str) -> None:
        """Log the scene recognized in one navigation round.

        Args:
            round_no: 1-based round number
            scene_id: Recognized scene, or None if nothing matched
            target: Navigation target
        """
        if scene_id is None:
            self.logger.debug("scene_unrecognized", round=round_no, target=target)
        else:
            self.logger.info("scene_matched", round=round_no, scene=scene_id, target=target)

    def log_transition(
        self,
        from_scene: str,
        to_scene: str,
        point: tuple[int, int],
        success: bool = True,
        **kwargs,
    ) -> None:
        """Log a transition click.

        Args:
            from_scene: Scene the click was issued from
            to_scene: Scene the transition leads to
            point: Click point
            success: Whether the click was delivered
            **kwargs: Additional context
        """
        log_data = {
            "from_scene": from_scene,
            "to_scene": to_scene,
            "point": point,
            **kwargs,
        }

        if success:
            self.logger.info("transition_clicked", **log_data)
        else:
            self.logger.warning("transition_click_failed", **log_data)
