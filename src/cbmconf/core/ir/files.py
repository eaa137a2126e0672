"""
Parsed file aggregates for cbmconf IR.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .schedule import TrialSection
from .variables import VarSection


class BuildFile(BaseModel):
    """
    A parsed ``filetype build`` file.

    Holds flat sections only (connectivity, activity).
    """

    file: Path | None = None
    var_sections: dict[str, VarSection] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def section(self, region_type: str) -> VarSection | None:
        return self.var_sections.get(region_type)


class ExperimentFile(BaseModel):
    """
    A parsed ``filetype run`` file.

    Holds flat sections (mf_input, activity, trial_spec) plus every trial,
    block, and session definition and the experiment sequence.
    """

    file: Path | None = None
    var_sections: dict[str, VarSection] = Field(default_factory=dict)
    trial_section: TrialSection = Field(default_factory=TrialSection)

    model_config = ConfigDict(frozen=True)

    def section(self, region_type: str) -> VarSection | None:
        return self.var_sections.get(region_type)
