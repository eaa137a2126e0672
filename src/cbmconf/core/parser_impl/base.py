"""
Base parser class for cbmconf files.

Provides token navigation, comment skipping, diagnostics collection, and the
top-level ``begin filetype <dialect>`` header check shared by both dialects.
"""

import logging
from pathlib import Path

from ..errors import (
    Diagnostic,
    DiagnosticKind,
    FormatErrorKind,
    make_format_error,
    make_parse_error,
)
from ..ir import Variable
from ..lexer import Lexeme, Token

logger = logging.getLogger(__name__)

# Tokens that open a region needing a matching ``end``.
_OPENERS = (Lexeme.BEGIN_MARKER, Lexeme.DEF)


class BaseParser:
    """
    Base parser class with token manipulation utilities.

    The parser owns its token list: shorthand elision inserts synthetic
    tokens at the cursor, so callers must not share the list.
    """

    DIALECT: str = ""
    VAR_SECTION_TYPES: frozenset[str] = frozenset()
    SCHEDULE_SECTION_TYPES: frozenset[str] = frozenset()

    def __init__(self, tokens: list[Token], file: Path, strict: bool = True):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer
            file: Source file path (for error reporting)
            strict: Raise on structural errors instead of logging them
        """
        self.tokens = tokens
        self.file = file
        self.strict = strict
        self.pos = 0
        self.diagnostics: list[Diagnostic] = []
        self.var_sections: dict[str, dict[str, Variable]] = {}

        last_line = tokens[-1].line if tokens else 0
        self._eof = Token(Lexeme.NONE, "", last_line + 1, 1, synthetic=True)

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def current_token(self) -> Token:
        """Get current token, or an empty NONE token past the end."""
        if self.at_end():
            return self._eof
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        """Peek ahead at token."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self._eof
        return self.tokens[pos]

    def previous_lexeme(self) -> Lexeme:
        if self.pos == 0:
            return Lexeme.NONE
        return self.tokens[self.pos - 1].lexeme

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if not self.at_end():
            self.pos += 1
        return token

    def match(self, *lexemes: Lexeme) -> bool:
        """Check if current token matches any of the given lexemes."""
        return not self.at_end() and self.current_token().lexeme in lexemes

    def insert_token(self, token: Token) -> None:
        """
        Insert a token at the cursor; the cursor then points at it.

        Raises:
            IndexError: If the cursor is outside the token list
        """
        if not 0 <= self.pos <= len(self.tokens):
            raise IndexError(f"cursor {self.pos} outside token list of length {len(self.tokens)}")
        self.tokens.insert(self.pos, token)

    # ------------------------------------------------------------------
    # Diagnostics and recovery
    # ------------------------------------------------------------------

    def report(self, kind: DiagnosticKind, message: str, token: Token) -> None:
        self.diagnostics.append(Diagnostic(kind, message, token))

    def report_unexpected(self, token: Token, where: str) -> None:
        self.report(
            DiagnosticKind.UNEXPECTED_TOKEN,
            f"unexpected {token.lexeme.value} {token.value!r} in {where}",
            token,
        )

    def skip_to_line_end(self) -> None:
        """Consume tokens up to and including the next NEW_LINE."""
        while not self.at_end():
            if self.advance().lexeme is Lexeme.NEW_LINE:
                return

    def recover(self) -> None:
        """
        Consume the current token and the rest of its line, stopping before
        any structural keyword so region nesting stays balanced.
        """
        self.advance()
        while not self.at_end() and not self.match(
            Lexeme.NEW_LINE, Lexeme.END_MARKER, *_OPENERS
        ):
            self.advance()

    def skip_comment(self) -> bool:
        """
        Skip a comment starting at the cursor.

        Single-line comments run to the end of the line; block comments run
        to the next ``*/``.

        Returns:
            True if a comment was skipped
        """
        if self.match(Lexeme.SINGLE_COMMENT):
            self.skip_to_line_end()
            return True

        if self.match(Lexeme.DOUBLE_COMMENT_BEGIN):
            opener = self.advance()
            while not self.at_end():
                if self.advance().lexeme is Lexeme.DOUBLE_COMMENT_END:
                    return True
            self.report(
                DiagnosticKind.UNTERMINATED_COMMENT,
                "block comment is never closed with '*/'",
                opener,
            )
            return True

        return False

    def skip_trivia(self) -> bool:
        """Skip one newline or comment; flag a stray ``*/``."""
        if self.match(Lexeme.NEW_LINE):
            self.advance()
            return True
        if self.skip_comment():
            return True
        if self.match(Lexeme.DOUBLE_COMMENT_END):
            self.report(
                DiagnosticKind.STRAY_COMMENT_END,
                "'*/' without a matching '/*'",
                self.advance(),
            )
            return True
        return False

    def expect_line_end(self, after: Token) -> None:
        """Require that nothing but a comment follows on the current line."""
        while self.match(Lexeme.DOUBLE_COMMENT_BEGIN):
            self.skip_comment()
        if self.at_end():
            return
        if self.match(Lexeme.NEW_LINE, Lexeme.SINGLE_COMMENT):
            self.skip_to_line_end()
            return

        token = self.current_token()
        self.report(
            DiagnosticKind.TRAILING_TOKENS,
            f"unexpected {token.value!r} after '{after.value}'",
            token,
        )
        self.skip_to_line_end()

    def skip_region(self, opener: Token) -> None:
        """Skip a ``begin``/``def`` region and everything nested in it."""
        self.advance()
        depth = 1
        while not self.at_end():
            if self.skip_comment():
                continue
            token = self.advance()
            if token.lexeme in _OPENERS:
                depth += 1
            elif token.lexeme is Lexeme.END_MARKER:
                depth -= 1
                if depth == 0:
                    return
        self.report_unterminated(opener)

    def report_unterminated(self, opener: Token) -> None:
        self.report(
            DiagnosticKind.UNTERMINATED_REGION,
            f"'{opener.value}' on line {opener.line} has no matching 'end'",
            opener,
        )

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------

    def parse_header(self) -> Token:
        """
        Parse the leading ``begin filetype <dialect>`` declaration.

        Returns:
            The dialect token

        Raises:
            FormatError: If the header is missing or names another dialect
        """
        while not self.match(Lexeme.BEGIN_MARKER):
            if self.at_end():
                raise make_format_error(
                    "File does not contain a filetype declaration",
                    FormatErrorKind.MISSING_FILETYPE,
                    self.file,
                    self._eof.line,
                    1,
                )
            if self.skip_comment():
                continue
            token = self.advance()
            if token.lexeme is not Lexeme.NEW_LINE:
                raise make_format_error(
                    f"Unidentified token {token.value!r} before filetype declaration",
                    FormatErrorKind.UNIDENTIFIED_LEADING_TOKEN,
                    self.file,
                    token.line,
                    token.column,
                )

        begin = self.current_token()
        region = self.peek_token(1)
        dialect = self.peek_token(2)

        if region.lexeme is not Lexeme.REGION:
            raise make_format_error(
                f"Unidentified token after '{begin.value}'",
                FormatErrorKind.MALFORMED_HEADER,
                self.file,
                begin.line,
                begin.column,
            )
        if region.value != "filetype":
            raise make_format_error(
                "First interpretable line does not specify filetype",
                FormatErrorKind.MISSING_FILETYPE,
                self.file,
                region.line,
                region.column,
            )
        if dialect.value != self.DIALECT:
            raise make_format_error(
                f"'{dialect.value}' does not indicate a {self.DIALECT} file",
                FormatErrorKind.WRONG_DIALECT,
                self.file,
                dialect.line,
                dialect.column,
            )

        self.pos += 3
        self.expect_line_end(dialect)
        logger.debug("%s: filetype %s", self.file, dialect.value)
        return dialect

    def parse_trailer(self) -> None:
        """Only comments may follow the top-level region."""
        while not self.at_end():
            if self.skip_trivia():
                continue
            token = self.current_token()
            self.report(
                DiagnosticKind.TRAILING_TOKENS,
                f"unexpected {token.value!r} after the filetype region",
                token,
            )
            self.recover()

    def check_diagnostics(self) -> None:
        """
        Raise or log collected diagnostics.

        Raises:
            ParseError: In strict mode, if anything was reported
        """
        if not self.diagnostics:
            return
        if self.strict:
            raise make_parse_error(self.diagnostics, self.file)
        for diagnostic in self.diagnostics:
            logger.warning("%s", diagnostic.format(self.file))
