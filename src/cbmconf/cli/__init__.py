"""
cbmconf CLI Package.

- inspect.py: tokens, lex
- project.py: check, sections, trials, validate
- utils.py: shared utilities
"""

import typer

from .inspect import lex_command, tokens_command
from .project import check_command, sections_command, trials_command, validate_command
from .utils import configure_logging, version_callback

app = typer.Typer(
    help="""cbmconf – build and experiment files for cerebellar simulations

  • Inspection: tokens, lex
  • Parsing: check, sections, trials
  • Project: validate (reads cbmconf.toml)
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
) -> None:
    """cbmconf CLI main callback for global options."""
    configure_logging(log_level)


app.command(name="tokens")(tokens_command)
app.command(name="lex")(lex_command)
app.command(name="check")(check_command)
app.command(name="sections")(sections_command)
app.command(name="trials")(trials_command)
app.command(name="validate")(validate_command)


def main() -> None:
    app()


__all__ = ["app", "main"]
