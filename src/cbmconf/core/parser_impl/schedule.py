"""
Trial schedule parsing for cbmconf run files.

Handles the ``trial_def`` region:

    begin section trial_def
        def trial baseline
            int use_cs 1
            int cs_onset 100
            ...
        end
        def block acquisition
            baseline 10
            probe              // same as 'probe 1'
        end
        def experiment main
            acquisition 5
        end
    end
"""

import logging
from typing import TYPE_CHECKING, Any

from ..errors import DiagnosticKind
from ..ir import ScheduleEntry, Variable
from ..lexer import Lexeme, Token

logger = logging.getLogger(__name__)


class ScheduleParserMixin:
    """
    Mixin providing ``trial_def`` region parsing.

    Note: This mixin expects to be combined with BaseParser and
    RegionParserMixin via multiple inheritance.
    """

    if TYPE_CHECKING:
        file: Any
        pos: int
        at_end: Any
        advance: Any
        match: Any
        current_token: Any
        peek_token: Any
        insert_token: Any
        report: Any
        report_unexpected: Any
        report_unterminated: Any
        recover: Any
        skip_trivia: Any
        skip_region: Any
        expect_line_end: Any
        parse_declarations: Any
        trials: dict[str, dict[str, Variable]]
        blocks: dict[str, list[ScheduleEntry]]
        sessions: dict[str, list[ScheduleEntry]]
        experiment: list[ScheduleEntry]

    def parse_trial_section(self, opener: Token) -> None:
        """Parse ``def <kind> <label>`` definitions up to the region's ``end``."""
        while not self.at_end():
            if self.match(Lexeme.END_MARKER):
                self.advance()
                return
            if self.skip_trivia():
                continue

            token = self.current_token()
            if token.lexeme is Lexeme.DEF:
                def_type = self.peek_token(1)
                label = self.peek_token(2)
                if def_type.lexeme is Lexeme.DEF_TYPE and label.lexeme is Lexeme.VAR_IDENTIFIER:
                    self.pos += 3
                    self.expect_line_end(label)
                    self.parse_def_body(def_type.value, label.value, token)
                else:
                    self.report(
                        DiagnosticKind.MALFORMED_DEF_HEADER,
                        "expected 'def <trial|block|session|experiment> <label>'",
                        token,
                    )
                    self.skip_region(token)

            elif token.lexeme is Lexeme.BEGIN_MARKER:
                self.report(
                    DiagnosticKind.UNEXPECTED_TOKEN,
                    "regions cannot be nested inside section 'trial_def'",
                    token,
                )
                self.skip_region(token)

            else:
                self.report_unexpected(token, "section 'trial_def'")
                self.recover()

        self.report_unterminated(opener)

    def parse_def_body(self, def_type: str, label: str, opener: Token) -> None:
        """
        Parse one definition body and store it under its label.

        Args:
            def_type: trial, block, session, or experiment
            label: Definition name
            opener: The ``def`` token
        """
        if def_type == "trial":
            params = self.parse_declarations(opener, f"trial '{label}'")
            if label in self.trials:
                logger.warning("%s:%d: trial '%s' redefined", self.file, opener.line, label)
            self.trials[label] = params
            return

        entries = self.parse_schedule_entries(opener, f"{def_type} '{label}'")

        if def_type == "experiment":
            self.experiment.extend(entries)
            return

        defs = self.blocks if def_type == "block" else self.sessions
        if label in defs:
            logger.warning("%s:%d: %s '%s' redefined", self.file, opener.line, def_type, label)
        defs[label] = entries
        logger.debug("%s: %s '%s' has %d entries", self.file, def_type, label, len(entries))

    def parse_schedule_entries(self, opener: Token, where: str) -> list[ScheduleEntry]:
        """
        Parse ``<name> [<count>]`` entries up to ``end``.

        A name not directly followed by a value gets a synthetic ``1``
        inserted after it.
        """
        entries: list[ScheduleEntry] = []
        pending: Token | None = None

        while True:
            if pending is not None and not self.match(Lexeme.VAR_VALUE):
                self.insert_token(
                    Token(
                        Lexeme.VAR_VALUE,
                        "1",
                        pending.line,
                        pending.column + len(pending.value),
                        synthetic=True,
                    )
                )

            if self.at_end():
                break

            token = self.current_token()
            if token.lexeme is Lexeme.END_MARKER:
                self.advance()
                return entries

            if token.lexeme is Lexeme.VAR_IDENTIFIER:
                pending = self.advance()
            elif token.lexeme is Lexeme.VAR_VALUE:
                self.advance()
                if pending is None:
                    self.report(
                        DiagnosticKind.ORPHAN_VALUE,
                        f"repeat count {token.value!r} does not follow a name in {where}",
                        token,
                    )
                else:
                    entries.append(ScheduleEntry(name=pending.value, repeat_count=token.value))
                    pending = None
            elif self.skip_trivia():
                continue
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
        return entries
