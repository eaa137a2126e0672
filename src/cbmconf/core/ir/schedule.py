"""
Trial schedule types for cbmconf IR.

A ``trial_def`` region holds four kinds of definition:

    def trial baseline        -> TrialDef (leaf parameter set)
    def block acquisition     -> ordered ScheduleEntry list
    def session day_one       -> ordered ScheduleEntry list
    def experiment main       -> appended to the single experiment sequence
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .variables import Variable


class ScheduleEntry(BaseModel):
    """
    A reference to a trial, block, or session with a repeat count.

    Examples:
        - baseline 20
        - acquisition     (count elided, means once)
    """

    name: str = Field(description="Trial, block, or session label")
    repeat_count: str = Field(default="1", description="Raw repeat count text")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.name} {self.repeat_count}"


TrialDef = dict[str, Variable]
Schedule = list[ScheduleEntry]


class TrialSection(BaseModel):
    """All definitions found in the ``trial_def`` regions of a run file."""

    trials: dict[str, TrialDef] = Field(default_factory=dict)
    blocks: dict[str, Schedule] = Field(default_factory=dict)
    sessions: dict[str, Schedule] = Field(default_factory=dict)
    experiment: Schedule = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def is_empty(self) -> bool:
        return not (self.trials or self.blocks or self.sessions or self.experiment)
