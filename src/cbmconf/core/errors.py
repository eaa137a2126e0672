"""
Error types for cbmconf tokenizing, parsing, and trial materialization.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .lexer import Token


class CbmConfError(Exception):
    """Base exception for all cbmconf errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class SourceError(CbmConfError):
    """
    Raised when a source file cannot be read.

    Always fatal: no partial file is ever handed to the lexer.
    """

    pass


class FormatErrorKind(Enum):
    """Ways the top-level ``begin filetype <dialect>`` header can be wrong."""

    UNIDENTIFIED_LEADING_TOKEN = "unidentified_leading_token"
    MISSING_FILETYPE = "missing_filetype"
    WRONG_DIALECT = "wrong_dialect"
    MALFORMED_HEADER = "malformed_header"


# Process exit status for each header failure.
_FORMAT_EXIT_CODES = {
    FormatErrorKind.UNIDENTIFIED_LEADING_TOKEN: 1,
    FormatErrorKind.MISSING_FILETYPE: 2,
    FormatErrorKind.WRONG_DIALECT: 3,
    FormatErrorKind.MALFORMED_HEADER: 4,
}


class FormatError(CbmConfError):
    """
    Raised when a file does not start with a valid filetype declaration.

    Examples:
    - Leading tokens that are neither comments nor ``begin``
    - ``begin section ...`` instead of ``begin filetype ...``
    - An experiment parser handed a ``build`` file
    """

    def __init__(
        self,
        message: str,
        kind: FormatErrorKind,
        context: Optional["ErrorContext"] = None,
    ):
        self.kind = kind
        super().__init__(message, context)

    @property
    def exit_code(self) -> int:
        return _FORMAT_EXIT_CODES[self.kind]


class DiagnosticKind(Enum):
    """Structural problems found while parsing a region body."""

    UNEXPECTED_TOKEN = "unexpected_token"
    MALFORMED_DECLARATION = "malformed_declaration"
    MALFORMED_REGION_HEADER = "malformed_region_header"
    MALFORMED_DEF_HEADER = "malformed_def_header"
    ORPHAN_VALUE = "orphan_value"
    UNTERMINATED_REGION = "unterminated_region"
    UNTERMINATED_COMMENT = "unterminated_comment"
    STRAY_COMMENT_END = "stray_comment_end"
    TRAILING_TOKENS = "trailing_tokens"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single structural problem, tied to the token that triggered it.

    Attributes:
        kind: Category of the problem
        message: Human-readable description
        token: Offending token (carries line and column)
    """

    kind: DiagnosticKind
    message: str
    token: "Token"

    @property
    def line(self) -> int:
        return self.token.line

    @property
    def column(self) -> int:
        return self.token.column

    def format(self, file: Path | None = None) -> str:
        location = f"{self.line}:{self.column}"
        if file is not None:
            location = f"{file}:{location}"
        return f"{location}: {self.kind.value}: {self.message}"


class ParseError(CbmConfError):
    """
    Raised when a region body contains one or more structural errors.

    All diagnostics from a single parse are collected before raising, so
    one run reports every problem in the file.
    """

    def __init__(
        self,
        message: str,
        diagnostics: list[Diagnostic] | None = None,
        file: Path | None = None,
        context: Optional["ErrorContext"] = None,
    ):
        self.diagnostics = list(diagnostics or [])
        self.file = file
        super().__init__(message, context)

    def _format_message(self) -> str:
        lines = [super()._format_message()]
        lines.extend(f"  {d.format(self.file)}" for d in self.diagnostics)
        return "\n".join(lines)


class MaterializationError(CbmConfError):
    """
    Raised when a parsed schedule cannot be expanded into a trial table.
    """

    pass


class ResolutionError(MaterializationError):
    """
    Raised when a schedule name cannot be resolved.

    Examples:
    - Experiment entry naming no trial, block, or session
    - A block that (directly or indirectly) contains itself
    """

    pass


class InvalidValueError(MaterializationError):
    """
    Raised when a stored value cannot be interpreted.

    Examples:
    - Repeat count ``two`` or ``-1``
    - Trial definition missing ``cs_onset``
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source line shown under the location
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "acquisition.expt:10:5"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format the offending line with an error marker under the column."""
        prefix = f"{self.line:4d} | "
        marker = " " * (len(prefix) + self.column - 1) + "^^^"
        return f"{prefix}{self.snippet}\n{marker}"


def make_format_error(
    message: str,
    kind: FormatErrorKind,
    file: Path,
    line: int,
    column: int,
) -> FormatError:
    """
    Helper to create a FormatError with context.

    Args:
        message: Error description
        kind: Which header check failed
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)

    Returns:
        FormatError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column)
    return FormatError(message, kind, context)


def make_parse_error(diagnostics: list[Diagnostic], file: Path) -> ParseError:
    """
    Helper to create a ParseError summarizing collected diagnostics.

    The context points at the first diagnostic.
    """
    count = len(diagnostics)
    noun = "error" if count == 1 else "errors"
    context = None
    if diagnostics:
        first = diagnostics[0]
        context = ErrorContext(file=file, line=first.line, column=first.column)
    return ParseError(f"{count} structural {noun} found", diagnostics, file, context)
