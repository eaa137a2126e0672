"""
Lexer for cbmconf experiment and build files.

Classifies raw tokens into lexemes using a fixed keyword table, falling back
to identifier and numeric-value patterns. A synthetic NEW_LINE token follows
every source line so the parser can see line boundaries.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from .tokenizer import TokenizedFile

logger = logging.getLogger(__name__)


class Lexeme(Enum):
    """Token categories in the cbmconf language."""

    NONE = "NONE"

    # Structure
    BEGIN_MARKER = "BEGIN_MARKER"
    END_MARKER = "END_MARKER"
    REGION = "REGION"
    REGION_TYPE = "REGION_TYPE"

    # Typed declarations
    TYPE_NAME = "TYPE_NAME"
    VAR_IDENTIFIER = "VAR_IDENTIFIER"
    VAR_VALUE = "VAR_VALUE"

    # Schedule definitions
    DEF = "DEF"
    DEF_TYPE = "DEF_TYPE"

    # Comments
    SINGLE_COMMENT = "SINGLE_COMMENT"
    DOUBLE_COMMENT_BEGIN = "DOUBLE_COMMENT_BEGIN"
    DOUBLE_COMMENT_END = "DOUBLE_COMMENT_END"

    # Special
    NEW_LINE = "NEW_LINE"


KEYWORDS = MappingProxyType(
    {
        "begin": Lexeme.BEGIN_MARKER,
        "end": Lexeme.END_MARKER,
        # Region names
        "filetype": Lexeme.REGION,
        "section": Lexeme.REGION,
        # Region types
        "run": Lexeme.REGION_TYPE,
        "build": Lexeme.REGION_TYPE,
        "connectivity": Lexeme.REGION_TYPE,
        "activity": Lexeme.REGION_TYPE,
        "trial_def": Lexeme.REGION_TYPE,
        "mf_input": Lexeme.REGION_TYPE,
        "trial_spec": Lexeme.REGION_TYPE,
        # Type names
        "int": Lexeme.TYPE_NAME,
        "float": Lexeme.TYPE_NAME,
        # Schedule definitions
        "def": Lexeme.DEF,
        "trial": Lexeme.DEF_TYPE,
        "block": Lexeme.DEF_TYPE,
        "session": Lexeme.DEF_TYPE,
        "experiment": Lexeme.DEF_TYPE,
        # Comments
        "//": Lexeme.SINGLE_COMMENT,
        "/*": Lexeme.DOUBLE_COMMENT_BEGIN,
        "*/": Lexeme.DOUBLE_COMMENT_END,
    }
)

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
VALUE_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


@dataclass
class Token:
    """
    A classified token.

    Attributes:
        lexeme: Category of the token
        value: Raw source text ("\\n" for NEW_LINE)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        synthetic: True for tokens the lexer or parser made up
    """

    lexeme: Lexeme
    value: str
    line: int
    column: int
    synthetic: bool = False

    def __repr__(self) -> str:
        return f"Token({self.lexeme.value}, {self.value!r}, {self.line}:{self.column})"


def classify(text: str) -> Lexeme:
    """Classify one raw token."""
    lexeme = KEYWORDS.get(text)
    if lexeme is not None:
        return lexeme
    if IDENTIFIER_PATTERN.fullmatch(text):
        return Lexeme.VAR_IDENTIFIER
    if VALUE_PATTERN.fullmatch(text):
        return Lexeme.VAR_VALUE
    return Lexeme.NONE


class Lexer:
    """
    Lexer over a tokenized file.

    Unrecognized text is tagged NONE rather than rejected; the parser reports
    it when it fails to match an expected lexeme.
    """

    def __init__(self, tokenized: TokenizedFile):
        self.tokenized = tokenized
        self.tokens: list[Token] = []

    def lex(self) -> list[Token]:
        """
        Classify every raw token.

        Returns:
            Token list with a NEW_LINE after each source line
        """
        for line in self.tokenized.lines:
            for raw in line:
                self.tokens.append(Token(classify(raw.text), raw.text, raw.line, raw.column))
            last = line[-1]
            self.tokens.append(
                Token(
                    Lexeme.NEW_LINE,
                    "\n",
                    last.line,
                    last.column + len(last.text),
                    synthetic=True,
                )
            )

        unknown = sum(1 for t in self.tokens if t.lexeme is Lexeme.NONE)
        if unknown:
            logger.debug("%s: %d unrecognized tokens", self.tokenized.file, unknown)
        return self.tokens


def lex(tokenized: TokenizedFile) -> list[Token]:
    """Convenience function to lex a tokenized file."""
    return Lexer(tokenized).lex()


def dump_tokens(tokens: list[Token]) -> str:
    """Render tokens as ``['LEXEME', 'raw'],`` lines inside brackets."""
    parts = ["["]
    parts.extend(f"['{t.lexeme.value}', '{t.value}']," for t in tokens)
    parts.append("]")
    return "\n".join(parts) + "\n"
