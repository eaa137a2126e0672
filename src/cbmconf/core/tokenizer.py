"""
Tokenizer for cbmconf experiment and build files.

Splits source text into lines of whitespace-delimited raw tokens.
Blank lines are dropped entirely.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .errors import SourceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawToken:
    """
    A whitespace-delimited piece of source text.

    Attributes:
        text: The raw text
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    text: str
    line: int
    column: int


@dataclass
class TokenizedFile:
    """Raw tokens grouped by non-blank source line."""

    file: Path
    lines: list[list[RawToken]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.lines)

    def dump(self) -> str:
        """Render every token as ``['text'],`` inside brackets."""
        parts = ["["]
        for line in self.lines:
            parts.extend(f"['{token.text}']," for token in line)
        parts.append("]")
        return "\n".join(parts) + "\n"


def _split_line(line: str, line_no: int) -> list[RawToken]:
    tokens = []
    pos = 0
    for text in line.split():
        pos = line.index(text, pos)
        tokens.append(RawToken(text, line_no, pos + 1))
        pos += len(text)
    return tokens


def tokenize_text(text: str, file: Path) -> TokenizedFile:
    """
    Tokenize source text.

    Args:
        text: Source text
        file: Source file path (for error reporting)

    Returns:
        TokenizedFile with one entry per non-blank line
    """
    tokenized = TokenizedFile(file=file)
    for line_no, line in enumerate(text.splitlines(), start=1):
        tokens = _split_line(line, line_no)
        if tokens:
            tokenized.lines.append(tokens)
    logger.debug("Tokenized %s: %d non-blank lines", file, len(tokenized))
    return tokenized


def tokenize_file(path: Path) -> TokenizedFile:
    """
    Read and tokenize a source file.

    Raises:
        SourceError: If the file cannot be opened or decoded
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError(f"Could not open file {path}: {e}") from e
    return tokenize_text(text, path)
