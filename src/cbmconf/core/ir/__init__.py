"""
cbmconf Intermediate Representation (IR) types.

All types are re-exported from this package.
"""

# Parsed files
from .files import (
    BuildFile,
    ExperimentFile,
)

# Schedule
from .schedule import (
    Schedule,
    ScheduleEntry,
    TrialDef,
    TrialSection,
)

# Trial table
from .trials import (
    TRIAL_FLOAT_PARAMS,
    TRIAL_INT_PARAMS,
    TRIAL_PARAMS,
    TrialParameters,
    TrialsData,
)

# Declarations
from .variables import (
    Variable,
    VarSection,
)

__all__ = [
    "BuildFile",
    "ExperimentFile",
    "Schedule",
    "ScheduleEntry",
    "TrialDef",
    "TrialSection",
    "TRIAL_FLOAT_PARAMS",
    "TRIAL_INT_PARAMS",
    "TRIAL_PARAMS",
    "TrialParameters",
    "TrialsData",
    "Variable",
    "VarSection",
]
