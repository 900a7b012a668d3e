"""Configuration management for scenepilot using pydantic-settings.

Settings come from environment variables (``SCENEPILOT_`` prefix), an
optional ``.env`` file, or direct instantiation.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ScenePilotSettings(BaseSettings):
    """Main configuration settings for scenepilot."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SCENEPILOT_",
        case_sensitive=False,
        extra="forbid",
    )

    # Actuation settings
    serial_port: str = Field("COM3", description="Serial port of the HID bridge, or SOFT")
    baud_rate: int = Field(115200, gt=0, description="Serial link baud rate")
    serial_timeout: float = Field(0.1, ge=0.0, description="Serial write timeout in seconds")
    frame_settle: float = Field(
        0.004, ge=0.0, description="Pause after each wire frame in seconds"
    )
    heartbeat_interval: float = Field(1.0, gt=0.0, description="Heartbeat period in seconds")
    identity: int | None = Field(
        None, ge=0, le=255, description="Device identity to select at startup"
    )

    # Screen settings
    screen_width: int = Field(1920, gt=0, description="Screen width in pixels")
    screen_height: int = Field(1080, gt=0, description="Screen height in pixels")
    monitor: int = Field(0, ge=0, description="Monitor index used for capture")

    # Navigation settings
    catalog_path: Path = Field(Path("ui_map.toml"), description="Scene catalog file")
    target_scene: str = Field("lobby", description="Default navigation target")
    max_rounds: int = Field(15, ge=1, description="Round cap for one navigate call")
    idle_wait: float = Field(0.5, ge=0.0, description="Wait when no scene matches")
    confirm_rounds: int = Field(
        1, ge=0, description="Rounds to wait for a clicked transition before retrying it"
    )

    # Supervisor settings
    reset_cooldown: float = Field(3.0, ge=0.0, description="Wait after a reset gesture")
    reset_hold: float = Field(0.1, ge=0.0, description="Escape hold time for the reset gesture")
    success_rest: float = Field(5.0, ge=0.0, description="Wait after a plain success")
    handover_rest: float = Field(5.0, ge=0.0, description="Wait after a task module returns")
    start_delay: float = Field(5.0, ge=0.0, description="Delay before the loop starts")
    default_handler: str = Field("td", description="Handler used when a handover has no tag")

    # Humanizer settings
    move_duration: float = Field(0.5, ge=0.0, description="Duration for cursor moves")
    typing_rate: float = Field(60.0, gt=0.0, description="Characters per second when typing")

    # Perception settings
    ocr_languages: list[str] = Field(
        default_factory=lambda: ["ch_sim", "en"], description="EasyOCR language codes"
    )
    ocr_gpu: bool = Field(False, description="Use GPU for OCR when available")

    # Logging settings
    debug_mode: bool = Field(False, description="Enable debug logging")
    log_path: Path | None = Field(None, description="Directory for log files")

    @field_validator("serial_port")
    @classmethod
    def _strip_port(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("serial_port must not be empty")
        return value

    @property
    def software_mode(self) -> bool:
        """True when the serial port is the software-mode sentinel."""
        return self.serial_port.upper() == "SOFT"


# Singleton instance
_settings: ScenePilotSettings | None = None


def get_settings() -> ScenePilotSettings:
    """Get the singleton settings instance.

    Returns:
        ScenePilotSettings instance
    """
    global _settings

    if _settings is None:
        _settings = ScenePilotSettings()

    return _settings


def set_settings(settings: ScenePilotSettings) -> None:
    """Replace the singleton settings instance.

    Args:
        settings: New settings
    """
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset the settings singleton (mainly for testing)."""
    global _settings
    _settings = None
