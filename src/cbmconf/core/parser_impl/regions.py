"""
Region parsing for cbmconf files.

Handles nested ``begin section <type>`` regions and flat variable sections:

    begin section connectivity
        int num_gr 1048576     // granule cells
        float gr_pc_weight 0.0001
    end
"""

import logging
from typing import TYPE_CHECKING, Any

from ..errors import DiagnosticKind
from ..ir import Variable
from ..lexer import Lexeme, Token

logger = logging.getLogger(__name__)


class RegionParserMixin:
    """
    Mixin providing region and variable-section parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
        file: Any
        pos: int
        var_sections: dict[str, dict[str, Variable]]
        VAR_SECTION_TYPES: frozenset[str]
        SCHEDULE_SECTION_TYPES: frozenset[str]
        at_end: Any
        advance: Any
        match: Any
        current_token: Any
        peek_token: Any
        report: Any
        report_unexpected: Any
        report_unterminated: Any
        recover: Any
        skip_trivia: Any
        skip_region: Any
        expect_line_end: Any
        parse_trial_section: Any

    def parse_region(self, region_type: str, opener: Token) -> None:
        """
        Parse a region body up to and including its ``end``.

        Args:
            region_type: Declared type, deciding how the body is read
            opener: Token that opened the region (for diagnostics)
        """
        logger.debug("%s:%d: entering region %s", self.file, opener.line, region_type)
        if region_type in self.VAR_SECTION_TYPES:
            self.parse_var_section(region_type, opener)
        elif region_type in self.SCHEDULE_SECTION_TYPES:
            self.parse_trial_section(opener)
        else:
            self.parse_container(region_type, opener)

    def parse_region_header(self) -> Token | None:
        """
        Parse ``begin REGION REGION_TYPE`` at the cursor.

        Returns:
            The region type token, or None if the header was malformed (the
            whole malformed region is skipped)
        """
        begin = self.current_token()
        region = self.peek_token(1)
        region_type = self.peek_token(2)

        if region.lexeme is not Lexeme.REGION:
            message = "expected 'begin section <region type>'"
        elif region_type.lexeme is not Lexeme.REGION_TYPE:
            message = f"unknown region type {region_type.value.strip()!r}"
        else:
            message = None

        if message is not None:
            self.report(DiagnosticKind.MALFORMED_REGION_HEADER, message, begin)
            self.skip_region(begin)
            return None

        self.pos += 3
        self.expect_line_end(region_type)
        return region_type

    def parse_container(self, region_type: str, opener: Token) -> None:
        """Parse a region holding only nested regions."""
        while not self.at_end():
            if self.match(Lexeme.END_MARKER):
                self.advance()
                return
            if self.skip_trivia():
                continue

            if self.match(Lexeme.BEGIN_MARKER):
                nested = self.parse_region_header()
                if nested is not None:
                    self.parse_region(nested.value, nested)
                continue

            self.report_unexpected(self.current_token(), f"region '{region_type}'")
            self.recover()

        self.report_unterminated(opener)

    def parse_declarations(self, opener: Token, where: str) -> dict[str, Variable]:
        """
        Parse ``TYPE_NAME VAR_IDENTIFIER VAR_VALUE`` lines up to ``end``.

        A later declaration of the same identifier replaces the earlier one.
        """
        params: dict[str, Variable] = {}
        while not self.at_end():
            if self.match(Lexeme.END_MARKER):
                self.advance()
                return params
            if self.skip_trivia():
                continue

            token = self.current_token()
            if token.lexeme is Lexeme.TYPE_NAME:
                identifier = self.peek_token(1)
                value = self.peek_token(2)
                if (
                    identifier.lexeme is Lexeme.VAR_IDENTIFIER
                    and value.lexeme is Lexeme.VAR_VALUE
                ):
                    params[identifier.value] = Variable(
                        type_name=token.value,
                        identifier=identifier.value,
                        value=value.value,
                    )
                    self.pos += 3
                else:
                    self.report(
                        DiagnosticKind.MALFORMED_DECLARATION,
                        f"expected '<type> <identifier> <value>' after '{token.value}' in {where}",
                        token,
                    )
                    self.recover()

            elif token.lexeme in (Lexeme.BEGIN_MARKER, Lexeme.DEF):
                self.report(
                    DiagnosticKind.UNEXPECTED_TOKEN,
                    f"'{token.value}' cannot be nested inside {where}",
                    token,
                )
                self.skip_region(token)

            else:
                self.report_unexpected(token, where)
                self.recover()

        self.report_unterminated(opener)
        return params

    def parse_var_section(self, region_type: str, opener: Token) -> None:
        """
        Parse a flat variable section.

        Repeated sections of one type merge into a single section.
        """
        params = self.parse_declarations(opener, f"section '{region_type}'")
        section = self.var_sections.setdefault(region_type, {})
        section.update(params)
        logger.debug("%s: section %s has %d parameters", self.file, region_type, len(section))
