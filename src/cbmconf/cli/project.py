"""
Parsing commands: check, sections, trials, validate.
"""

from pathlib import Path

import typer
from rich.table import Table

from cbmconf.core import ir
from cbmconf.core.errors import (
    CbmConfError,
    FormatError,
    FormatErrorKind,
    MaterializationError,
    ParseError,
    SourceError,
)
from cbmconf.core.lexer import lex
from cbmconf.core.manifest import DEFAULT_MANIFEST, load_manifest
from cbmconf.core.materializer import materialize
from cbmconf.core.parser import parse_project
from cbmconf.core.parser_impl import (
    BUILD_DIALECT,
    RUN_DIALECT,
    BuildFileParser,
    ExperimentFileParser,
    sniff_dialect,
)
from cbmconf.core.tokenizer import tokenize_file

from .utils import SOURCE_ERROR_EXIT, configure_logging, console


def _parse(
    file: Path, kind: str | None, strict: bool
) -> ir.ExperimentFile | ir.BuildFile:
    """
    Parse a file with the parser for its dialect, exiting on errors.

    Without an explicit kind, the file's own filetype declaration decides.
    """
    if kind is not None and kind not in (RUN_DIALECT, BUILD_DIALECT):
        raise typer.BadParameter(f"--kind must be '{RUN_DIALECT}' or '{BUILD_DIALECT}'")

    try:
        tokens = lex(tokenize_file(file))
        if kind is None:
            kind = sniff_dialect(tokens)
            if kind is None:
                raise FormatError(
                    f"{file}: no 'begin filetype <run|build>' declaration found",
                    FormatErrorKind.MISSING_FILETYPE,
                )
        if kind == RUN_DIALECT:
            return ExperimentFileParser(tokens, file, strict).parse()
        if kind == BUILD_DIALECT:
            return BuildFileParser(tokens, file, strict).parse()
        raise FormatError(
            f"{file}: '{kind}' is not a known filetype (expected "
            f"'{RUN_DIALECT}' or '{BUILD_DIALECT}')",
            FormatErrorKind.WRONG_DIALECT,
        )

    except SourceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=SOURCE_ERROR_EXIT)
    except FormatError as e:
        typer.echo(f"Format error: {e}", err=True)
        raise typer.Exit(code=e.exit_code)
    except ParseError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)


def check_command(
    file: Path = typer.Argument(..., help="Build or experiment file"),  # noqa: B008
    kind: str | None = typer.Option(
        None, "--kind", "-k", help="Dialect to parse as: 'run' or 'build' (default: detect)"
    ),
    lenient: bool = typer.Option(
        False, "--lenient", help="Log structural errors as warnings instead of failing"
    ),
) -> None:
    """
    Parse a file and report whether it is well-formed.
    """
    parsed = _parse(file, kind, strict=not lenient)
    sections = ", ".join(parsed.var_sections) or "none"
    typer.echo(f"✓ {file}: sections: {sections}")

    if isinstance(parsed, ir.ExperimentFile):
        ts = parsed.trial_section
        typer.echo(
            f"  {len(ts.trials)} trials, {len(ts.blocks)} blocks, "
            f"{len(ts.sessions)} sessions, {len(ts.experiment)} experiment entries"
        )


def sections_command(
    file: Path = typer.Argument(..., help="Build or experiment file"),  # noqa: B008
    kind: str | None = typer.Option(
        None, "--kind", "-k", help="'run' or 'build' (default: detect)"
    ),
) -> None:
    """Print the variable sections of a file."""
    parsed = _parse(file, kind, strict=True)

    for region_type, section in parsed.var_sections.items():
        table = Table(title=region_type)
        table.add_column("Type")
        table.add_column("Identifier")
        table.add_column("Value", justify="right")
        for variable in section.params.values():
            table.add_row(variable.type_name, variable.identifier, variable.value)
        console.print(table)


def _trials_table(trials: ir.TrialsData) -> Table:
    table = Table(title=f"{trials.num_trials} trials")
    table.add_column("#", justify="right")
    for column in ("trial", *ir.TRIAL_PARAMS):
        table.add_column(column)
    for i, row in enumerate(trials.rows()):
        table.add_row(
            str(i),
            row.trial_name,
            *(str(getattr(row, param)) for param in ir.TRIAL_PARAMS),
        )
    return table


def trials_command(
    file: Path = typer.Argument(..., help="Experiment (run) file"),  # noqa: B008
    as_json: bool = typer.Option(False, "--json", help="Print the table as JSON"),
) -> None:
    """
    Expand an experiment schedule into its per-trial parameter table.
    """
    parsed = _parse(file, RUN_DIALECT, strict=True)
    if not isinstance(parsed, ir.ExperimentFile):
        typer.echo(f"Error: {file} is not a run file", err=True)
        raise typer.Exit(code=1)

    try:
        trials = materialize(parsed)
    except MaterializationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(trials.model_dump_json(indent=2))
    else:
        console.print(_trials_table(trials))


def validate_command(
    manifest: str = typer.Option(
        DEFAULT_MANIFEST, "--manifest", "-m", help="Path to cbmconf.toml"
    ),
) -> None:
    """
    Parse the manifest's build and experiment files and expand the schedule.
    """
    manifest_path = Path(manifest).resolve()

    try:
        mf = load_manifest(manifest_path)
        configure_logging(mf.logging.level)
        project = parse_project(mf)
    except FormatError as e:
        typer.echo(f"Format error: {e}", err=True)
        raise typer.Exit(code=e.exit_code)
    except ParseError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)
    except SourceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=SOURCE_ERROR_EXIT)
    except CbmConfError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"✓ {mf.name}")
    if project.build is not None:
        typer.echo(f"  build: {len(project.build.var_sections)} sections")
    if project.trials is not None:
        typer.echo(f"  experiment: {project.trials.num_trials} trials")
