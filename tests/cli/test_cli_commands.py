"""Tests for the scenepilot CLI."""

import importlib
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner
from PIL import Image

from scenepilot.cli.main import EXIT_CONFIG_ERROR, EXIT_RUNTIME_ERROR, EXIT_SUCCESS, main
from scenepilot.config import ScenePilotSettings
from scenepilot.hal import HALContainer, HALInitializationError, SharedPort
from scenepilot.hal.interfaces.ocr_engine import IOCREngine

# The package re-exports the click group as `main`, hiding the submodule
cli_module = importlib.import_module("scenepilot.cli.main")

VALID_CATALOG = """
[[scenes]]
id = "menu"
name = "Main menu"
logic = "or"

[scenes.anchors]
text = [ { rect = [0, 0, 100, 40], val = "开始游戏" } ]

[[scenes.transitions]]
target = "lobby"
coords = [50, 20]
post_delay = 0

[[scenes]]
id = "lobby"
name = "Lobby"
logic = "and"
handler = "daily"

[scenes.anchors]
text = [ { rect = [0, 0, 100, 40], val = "大厅" } ]
"""


class FixedOCR(IOCREngine):
    def __init__(self, text: str) -> None:
        self.text = text

    def extract_text(self, image: Image.Image) -> str:
        return self.text


@pytest.fixture
def cli_runner():
    """Create CLI runner."""
    return CliRunner()


@pytest.fixture
def catalog_file(temp_dir):
    path = temp_dir / "ui_map.toml"
    path.write_text(VALID_CATALOG, encoding="utf-8")
    return path


@pytest.fixture
def bad_catalog_file(temp_dir):
    path = temp_dir / "bad.toml"
    path.write_text(VALID_CATALOG.replace('logic = "or"', 'logic = "xor"'), encoding="utf-8")
    return path


@pytest.fixture
def fake_container(recording_port):
    """HAL container over a recording port and a blank 1920x1080 screen."""
    capture = MagicMock()
    capture.capture_screen.return_value = Image.new("RGB", (1920, 1080))
    return HALContainer(
        port=SharedPort(recording_port),
        heartbeat=MagicMock(),
        screen_capture=capture,
        ocr_engine=FixedOCR("大厅"),
        hardware_mode=False,
    )


@pytest.fixture
def no_delays(monkeypatch):
    for name in ("START_DELAY", "SUCCESS_REST", "HANDOVER_REST", "RESET_COOLDOWN"):
        monkeypatch.setenv(f"SCENEPILOT_{name}", "0")


def test_cli_help(cli_runner):
    """Test that CLI help works."""
    result = cli_runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "ScenePilot CLI" in result.output


def test_cli_version(cli_runner):
    """Test that version option works."""
    result = cli_runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "scenepilot" in result.output


class TestValidate:
    """Test the validate command."""

    def test_valid_catalog(self, cli_runner, catalog_file):
        result = cli_runner.invoke(main, ["validate", str(catalog_file)])

        assert result.exit_code == EXIT_SUCCESS
        assert "Catalog is valid" in result.output
        assert "Scenes: 2" in result.output
        assert "lobby (Lobby) [handover: daily]" in result.output

    def test_verbose_lists_transitions(self, cli_runner, catalog_file):
        result = cli_runner.invoke(main, ["validate", "-v", str(catalog_file)])

        assert result.exit_code == EXIT_SUCCESS
        assert "-> lobby at (50, 20)" in result.output

    def test_invalid_catalog(self, cli_runner, bad_catalog_file):
        result = cli_runner.invoke(main, ["validate", str(bad_catalog_file)])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "Catalog error" in result.output
        assert "logic" in result.output

    def test_missing_file(self, cli_runner, temp_dir):
        result = cli_runner.invoke(main, ["validate", str(temp_dir / "missing.toml")])
        assert result.exit_code == 2


class TestRun:
    """Test the run command with the HAL replaced."""

    def test_bad_catalog_exits_before_hardware(self, cli_runner, bad_catalog_file, monkeypatch):
        init = MagicMock()
        monkeypatch.setattr(cli_module, "initialize_hal", init)

        result = cli_runner.invoke(main, ["run", "--port", "SOFT", "--catalog", str(bad_catalog_file)])

        assert result.exit_code == EXIT_CONFIG_ERROR
        init.assert_not_called()

    def test_unknown_target(self, cli_runner, catalog_file, monkeypatch):
        init = MagicMock()
        monkeypatch.setattr(cli_module, "initialize_hal", init)

        result = cli_runner.invoke(
            main, ["run", "--catalog", str(catalog_file), "--target", "shop"]
        )

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "Unknown target scene: shop" in result.output
        init.assert_not_called()

    def test_invalid_port_setting(self, cli_runner, catalog_file):
        result = cli_runner.invoke(main, ["run", "--port", "   ", "--catalog", str(catalog_file)])
        assert result.exit_code == EXIT_CONFIG_ERROR

    def test_hal_failure_is_runtime_error(self, cli_runner, catalog_file, monkeypatch):
        monkeypatch.setattr(
            cli_module,
            "initialize_hal",
            MagicMock(side_effect=HALInitializationError("easyocr missing")),
        )

        result = cli_runner.invoke(
            main, ["run", "--catalog", str(catalog_file), "--target", "lobby"]
        )

        assert result.exit_code == EXIT_RUNTIME_ERROR

    def test_one_cycle(
        self, cli_runner, catalog_file, fake_container, recording_port, no_delays, monkeypatch
    ):
        """Test a full cycle reaches the handover scene and shuts down the HAL."""
        monkeypatch.setattr(cli_module, "initialize_hal", MagicMock(return_value=fake_container))
        dispatched = []
        registry = MagicMock()
        registry.dispatch.side_effect = lambda tag, context: dispatched.append(tag)
        monkeypatch.setattr(cli_module, "default_registry", lambda: registry)

        result = cli_runner.invoke(
            main,
            ["run", "--port", "SOFT", "--catalog", str(catalog_file), "--target", "lobby", "--cycles", "1"],
        )

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert dispatched == ["daily"]
        assert recording_port.calls[0] == ("mouse_abs", 960, 540)
        fake_container.heartbeat.start.assert_called_once()
        fake_container.heartbeat.stop.assert_called_once()
        assert recording_port.closed

    def test_scroll_self_test(
        self, cli_runner, fake_container, recording_port, no_delays, monkeypatch
    ):
        monkeypatch.setattr(cli_module, "initialize_hal", MagicMock(return_value=fake_container))
        monkeypatch.setattr("scenepilot.cli.self_test.time.sleep", lambda seconds: None)

        result = cli_runner.invoke(main, ["run", "--port", "SOFT", "--test", "scroll"])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert recording_port.calls == [
            ("mouse_abs", 960, 540),
            ("mouse_move", 0, 0, -5),
            ("mouse_move", 0, 0, 5),
        ]

    def test_ocr_self_test(self, cli_runner, fake_container, no_delays, monkeypatch):
        monkeypatch.setattr(cli_module, "initialize_hal", MagicMock(return_value=fake_container))

        result = cli_runner.invoke(main, ["run", "--port", "SOFT", "--test", "ocr"])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "Text: [大厅]" in result.output
        assert "[100, 100, 500, 200]" in result.output

    def test_unknown_test_mode(self, cli_runner):
        result = cli_runner.invoke(main, ["run", "--test", "gpu"])
        assert result.exit_code == 2


def test_build_humanizer_syncs_cursor_and_typing_rate(fake_container, recording_port):
    settings = ScenePilotSettings(typing_rate=12.0, _env_file=None)

    human = cli_module.build_humanizer(fake_container, settings)

    assert human.typing_rate == 12.0
    assert recording_port.calls == [("mouse_abs", 960, 540)]
