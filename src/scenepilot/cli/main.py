"""ScenePilot CLI - Main entry point.

Provides commands for running the navigation loop, the hardware self-tests,
and catalog validation.

Exit codes:
    0: Success
    2: Configuration or catalog error
    3: Runtime error
"""

import sys
import time
from pathlib import Path

import click
from pydantic import ValidationError

from ..config import ScenePilotSettings, set_settings
from ..config_exceptions import CatalogLoadError
from ..exceptions import ScenePilotException
from ..hal import HALContainer, HALInitializationError, initialize_hal, shutdown_hal
from ..human.humanizer import MotionHumanizer
from ..logging import get_logger, mark_logging_initialized, setup_logging
from ..model.catalog import load_catalog
from ..navigation.engine import NavigationEngine
from ..navigation.scene_graph import SceneGraph
from ..perception.screen import ScreenPerception
from ..supervisor import Supervisor
from ..tasks import default_registry
from .self_test import TEST_MODES, run_input_test, run_ocr_test, run_scroll_test, run_screen_test

# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 2
EXIT_RUNTIME_ERROR = 3

logger = get_logger(__name__)


def configure_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """Configure structlog for interactive use.

    Args:
        verbose: Enable debug logging
        log_file: Optional log file path
    """
    setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        structured=False,
    )
    mark_logging_initialized()


def build_settings(**overrides) -> ScenePilotSettings:
    """Build settings from the environment plus command-line overrides.

    Options left unset on the command line do not override anything.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    settings = ScenePilotSettings(**values)
    set_settings(settings)
    return settings


def build_humanizer(container: HALContainer, settings: ScenePilotSettings) -> MotionHumanizer:
    """Build the humanizer and pin the real pointer to its starting estimate."""
    human = MotionHumanizer(
        container.port,
        settings.screen_width,
        settings.screen_height,
        typing_rate=settings.typing_rate,
    )
    human.sync_cursor()
    return human


def build_engine(
    graph: SceneGraph,
    container: HALContainer,
    human: MotionHumanizer,
    settings: ScenePilotSettings,
) -> NavigationEngine:
    perception = ScreenPerception(container.screen_capture, container.ocr_engine, settings.monitor)
    return NavigationEngine(
        graph,
        perception,
        human,
        max_rounds=settings.max_rounds,
        idle_wait=settings.idle_wait,
        move_duration=settings.move_duration,
        confirm_rounds=settings.confirm_rounds,
    )


def run_self_test(mode: str, container: HALContainer, settings: ScenePilotSettings) -> None:
    """Run one self-test mode against the live backends."""
    if mode == "input":
        run_input_test(build_humanizer(container, settings))
    elif mode == "screen":
        run_screen_test(container.screen_capture, settings.monitor)
    elif mode == "ocr":
        perception = ScreenPerception(
            container.screen_capture, container.ocr_engine, settings.monitor
        )
        run_ocr_test(perception)
    elif mode == "scroll":
        run_scroll_test(build_humanizer(container, settings))


@click.group()
@click.version_option(prog_name="scenepilot")
@click.pass_context
def main(ctx: click.Context) -> None:
    """ScenePilot CLI - scene-graph UI navigation over a HID bridge.

    Run the navigation loop, exercise the hardware, and validate catalogs.
    """
    ctx.ensure_object(dict)


@main.command()
@click.argument("catalog_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--verbose", "-v", is_flag=True, help="Show anchors and transitions")
def validate(catalog_path: str, verbose: bool) -> None:
    """Validate a scene catalog file.

    CATALOG_PATH: Path to the TOML scene catalog
    """
    configure_logging(verbose)

    try:
        graph = load_catalog(catalog_path)
    except CatalogLoadError as e:
        click.echo(f"Catalog error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    click.echo(f"Catalog is valid: {catalog_path}")
    click.echo(f"Scenes: {len(graph)}")
    for scene in graph:
        marker = ""
        if scene.is_handover:
            marker = f" [handover: {scene.handover_tag or 'default'}]"
        click.echo(f"  - {scene.id} ({scene.display_name}){marker}")
        if verbose:
            click.echo(
                f"      {scene.combinator.value}: "
                f"{len(scene.text_anchors)} text, {len(scene.color_anchors)} color anchors"
            )
            for transition in scene.transitions:
                point = transition.click_point
                click.echo(
                    f"      -> {transition.target} at ({point.x}, {point.y}), "
                    f"settle {transition.settle_delay:.3f}s"
                )

    sys.exit(EXIT_SUCCESS)


@main.command()
@click.option("--port", "-p", help="Serial port of the HID bridge, or SOFT for OS injection")
@click.option("--target", "-t", help="Target scene id")
@click.option("--catalog", "-c", type=click.Path(dir_okay=False), help="Scene catalog file")
@click.option("--test", "test_mode", type=click.Choice(TEST_MODES), help="Run one self-test and exit")
@click.option("--cycles", type=click.IntRange(min=1), help="Stop after this many cycles")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also log to this file")
def run(
    port: str | None,
    target: str | None,
    catalog: str | None,
    test_mode: str | None,
    cycles: int | None,
    verbose: bool,
    log_file: str | None,
) -> None:
    """Drive the UI toward a target scene in a loop."""
    configure_logging(verbose, log_file)

    try:
        settings = build_settings(
            serial_port=port,
            target_scene=target,
            catalog_path=catalog,
            debug_mode=True if verbose else None,
        )
    except ValidationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    click.echo("=" * 40)
    click.echo("ScenePilot")
    click.echo(f"Port: {settings.serial_port}")
    if test_mode:
        click.echo(f"Mode: self-test ({test_mode})")
    else:
        click.echo(f"Target: {settings.target_scene}")
    click.echo("=" * 40)

    graph = None
    if not test_mode:
        try:
            graph = load_catalog(settings.catalog_path)
        except CatalogLoadError as e:
            click.echo(f"Catalog error: {e}", err=True)
            sys.exit(EXIT_CONFIG_ERROR)
        if settings.target_scene not in graph:
            click.echo(f"Unknown target scene: {settings.target_scene}", err=True)
            sys.exit(EXIT_CONFIG_ERROR)

    try:
        container = initialize_hal(settings)
    except (HALInitializationError, ScenePilotException) as e:
        click.echo(f"Initialization failed: {e}", err=True)
        sys.exit(EXIT_RUNTIME_ERROR)

    exit_code = EXIT_SUCCESS
    try:
        container.heartbeat.start()
        click.echo(f"Starting in {settings.start_delay:g} seconds...")
        time.sleep(settings.start_delay)

        if test_mode:
            run_self_test(test_mode, container, settings)
        else:
            human = build_humanizer(container, settings)
            engine = build_engine(graph, container, human, settings)
            supervisor = Supervisor.from_settings(engine, human, default_registry(), settings)
            supervisor.run(settings.target_scene, max_cycles=cycles)
    except KeyboardInterrupt:
        click.echo("\nInterrupted")
    except ScenePilotException as e:
        logger.error("run_failed", error=str(e), error_code=e.error_code)
        click.echo(f"Runtime error: {e}", err=True)
        exit_code = EXIT_RUNTIME_ERROR
    finally:
        shutdown_hal(container)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
