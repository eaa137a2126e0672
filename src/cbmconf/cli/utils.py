"""
cbmconf CLI Utilities.

Shared utility functions used across CLI modules.
"""

import logging
import platform

import typer
from rich.console import Console

from cbmconf._version import get_version

console = Console()

# Exit status for unreadable sources; matches WRONG_DIALECT.
SOURCE_ERROR_EXIT = 3


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"cbmconf version {get_version()}")
        typer.echo(f"  Python:   {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform: {platform.system()} {platform.release()}")
        raise typer.Exit()


def configure_logging(level: str) -> None:
    """Route library log records to stderr at the given level."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise typer.BadParameter(f"Unknown log level: {level}")
    logging.basicConfig(
        level=numeric,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )
