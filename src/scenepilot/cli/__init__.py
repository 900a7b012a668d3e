"""ScenePilot Command Line Interface.

Provides CLI commands for:
- Running the navigation loop
- Running the input, screen, OCR and scroll self-tests
- Validating scene catalogs

Usage:
    python -m scenepilot.cli --help
    python -m scenepilot.cli run --port COM3 --target lobby
    python -m scenepilot.cli validate ui_map.toml

Or via the installed entry point:
    scenepilot --help
"""

from .main import main

__all__ = ["main"]
