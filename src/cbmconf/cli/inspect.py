"""
Token inspection commands: ``cbmconf tokens`` and ``cbmconf lex``.
"""

from pathlib import Path

import typer

from cbmconf.core.errors import SourceError
from cbmconf.core.lexer import dump_tokens, lex
from cbmconf.core.tokenizer import tokenize_file

from .utils import SOURCE_ERROR_EXIT


def tokens_command(
    file: Path = typer.Argument(..., help="Build or experiment file"),  # noqa: B008
) -> None:
    """Print the raw whitespace-delimited tokens of a file."""
    try:
        tokenized = tokenize_file(file)
    except SourceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=SOURCE_ERROR_EXIT)
    typer.echo(tokenized.dump(), nl=False)


def lex_command(
    file: Path = typer.Argument(..., help="Build or experiment file"),  # noqa: B008
) -> None:
    """Print every token of a file with its lexeme."""
    try:
        tokens = lex(tokenize_file(file))
    except SourceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=SOURCE_ERROR_EXIT)
    typer.echo(dump_tokens(tokens), nl=False)
