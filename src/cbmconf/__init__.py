"""
cbmconf - configuration language for cerebellar simulation runs.

Parses build and experiment description files and expands experiment
schedules into the per-trial parameter table the simulator consumes.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import (
    CbmConfError,
    FormatError,
    MaterializationError,
    ParseError,
    ResolutionError,
    SourceError,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "CbmConfError",
    "FormatError",
    "MaterializationError",
    "ParseError",
    "ResolutionError",
    "SourceError",
]
