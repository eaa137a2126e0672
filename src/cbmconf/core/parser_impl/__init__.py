"""
cbmconf file parser package.

The parser is built from mixins: BaseParser holds the cursor and diagnostics,
RegionParserMixin reads regions and variable sections, ScheduleParserMixin
reads the ``trial_def`` schedule of run files.

The main exports are:
- ExperimentFileParser / BuildFileParser: dialect parsers
- parse_experiment_text / parse_experiment_file
- parse_build_text / parse_build_file

Usage:
    from cbmconf.core.parser_impl import parse_experiment_file

    expt = parse_experiment_file(Path("acquisition.expt"))
"""

import logging
from pathlib import Path

from .. import ir
from ..lexer import Lexeme, Token, lex
from ..tokenizer import tokenize_file, tokenize_text
from .base import BaseParser
from .regions import RegionParserMixin
from .schedule import ScheduleParserMixin

logger = logging.getLogger(__name__)

RUN_DIALECT = "run"
BUILD_DIALECT = "build"


def _var_sections(raw: dict[str, dict[str, ir.Variable]]) -> dict[str, ir.VarSection]:
    return {
        region_type: ir.VarSection(region_type=region_type, params=params)
        for region_type, params in raw.items()
    }


class ExperimentFileParser(BaseParser, RegionParserMixin, ScheduleParserMixin):
    """
    Parser for ``filetype run`` files.

    Flat sections: mf_input, activity, trial_spec.
    Schedule section: trial_def.
    """

    DIALECT = RUN_DIALECT
    VAR_SECTION_TYPES = frozenset({"mf_input", "activity", "trial_spec"})
    SCHEDULE_SECTION_TYPES = frozenset({"trial_def"})

    def __init__(self, tokens: list[Token], file: Path, strict: bool = True):
        super().__init__(tokens, file, strict)
        self.trials: dict[str, dict[str, ir.Variable]] = {}
        self.blocks: dict[str, list[ir.ScheduleEntry]] = {}
        self.sessions: dict[str, list[ir.ScheduleEntry]] = {}
        self.experiment: list[ir.ScheduleEntry] = []

    def parse(self) -> ir.ExperimentFile:
        """
        Parse the whole file.

        Raises:
            FormatError: If the filetype header is missing or wrong
            ParseError: In strict mode, if any structural error was found
        """
        dialect = self.parse_header()
        self.parse_region(dialect.value, dialect)
        self.parse_trailer()
        self.check_diagnostics()

        return ir.ExperimentFile(
            file=self.file,
            var_sections=_var_sections(self.var_sections),
            trial_section=ir.TrialSection(
                trials=self.trials,
                blocks=self.blocks,
                sessions=self.sessions,
                experiment=self.experiment,
            ),
        )


class BuildFileParser(BaseParser, RegionParserMixin):
    """
    Parser for ``filetype build`` files.

    Flat sections: connectivity, activity.
    """

    DIALECT = BUILD_DIALECT
    VAR_SECTION_TYPES = frozenset({"connectivity", "activity"})

    def parse(self) -> ir.BuildFile:
        """
        Parse the whole file.

        Raises:
            FormatError: If the filetype header is missing or wrong
            ParseError: In strict mode, if any structural error was found
        """
        dialect = self.parse_header()
        self.parse_region(dialect.value, dialect)
        self.parse_trailer()
        self.check_diagnostics()

        return ir.BuildFile(file=self.file, var_sections=_var_sections(self.var_sections))


def parse_experiment_text(
    text: str, file: Path = Path("<string>"), strict: bool = True
) -> ir.ExperimentFile:
    """Tokenize, lex, and parse run-file text."""
    tokens = lex(tokenize_text(text, file))
    return ExperimentFileParser(tokens, file, strict).parse()


def parse_experiment_file(path: Path, strict: bool = True) -> ir.ExperimentFile:
    """
    Tokenize, lex, and parse a run file.

    Raises:
        SourceError: If the file cannot be read
    """
    tokens = lex(tokenize_file(path))
    logger.debug("Parsing experiment file %s (%d tokens)", path, len(tokens))
    return ExperimentFileParser(tokens, path, strict).parse()


def parse_build_text(
    text: str, file: Path = Path("<string>"), strict: bool = True
) -> ir.BuildFile:
    """Tokenize, lex, and parse build-file text."""
    tokens = lex(tokenize_text(text, file))
    return BuildFileParser(tokens, file, strict).parse()


def parse_build_file(path: Path, strict: bool = True) -> ir.BuildFile:
    """
    Tokenize, lex, and parse a build file.

    Raises:
        SourceError: If the file cannot be read
    """
    tokens = lex(tokenize_file(path))
    logger.debug("Parsing build file %s (%d tokens)", path, len(tokens))
    return BuildFileParser(tokens, path, strict).parse()


def sniff_dialect(tokens: list[Token]) -> str | None:
    """
    Return the text following the first ``begin filetype`` declaration.

    The text is returned whether or not it names a known dialect, so callers
    can tell a wrong dialect from a missing one. Returns None if the tokens
    contain no such declaration.
    """
    for i, token in enumerate(tokens[:-2]):
        if token.lexeme is not Lexeme.BEGIN_MARKER:
            continue
        region, dialect = tokens[i + 1], tokens[i + 2]
        if region.value == "filetype" and dialect.lexeme is not Lexeme.NEW_LINE:
            return dialect.value
        return None
    return None


__all__ = [
    "BUILD_DIALECT",
    "RUN_DIALECT",
    "BaseParser",
    "BuildFileParser",
    "ExperimentFileParser",
    "RegionParserMixin",
    "ScheduleParserMixin",
    "parse_build_file",
    "parse_build_text",
    "parse_experiment_file",
    "parse_experiment_text",
    "sniff_dialect",
]
