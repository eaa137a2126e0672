"""Core cbmconf functionality: tokenizer, lexer, parser, IR, trial materializer."""

from . import ir
from .errors import (
    CbmConfError,
    Diagnostic,
    DiagnosticKind,
    ErrorContext,
    FormatError,
    FormatErrorKind,
    InvalidValueError,
    MaterializationError,
    ParseError,
    ResolutionError,
    SourceError,
)
from .lexer import Lexeme, Token, lex
from .manifest import ProjectManifest, load_manifest
from .materializer import count_trials, flatten_trial_names, materialize, resolve_trials
from .parser import ParsedProject, parse_project
from .parser_impl import (
    parse_build_file,
    parse_build_text,
    parse_experiment_file,
    parse_experiment_text,
)
from .tokenizer import tokenize_file, tokenize_text

__all__ = [
    "ir",
    "CbmConfError",
    "Diagnostic",
    "DiagnosticKind",
    "ErrorContext",
    "FormatError",
    "FormatErrorKind",
    "InvalidValueError",
    "MaterializationError",
    "ParseError",
    "ResolutionError",
    "SourceError",
    "Lexeme",
    "Token",
    "lex",
    "ProjectManifest",
    "load_manifest",
    "count_trials",
    "flatten_trial_names",
    "materialize",
    "resolve_trials",
    "ParsedProject",
    "parse_project",
    "parse_build_file",
    "parse_build_text",
    "parse_experiment_file",
    "parse_experiment_text",
    "tokenize_file",
    "tokenize_text",
]
