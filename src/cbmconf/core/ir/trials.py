"""
Materialized trial table for cbmconf IR.

The table is column-oriented: position ``i`` in every list describes the
``i``-th trial the simulation runs.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Parameters every trial definition must declare.
TRIAL_INT_PARAMS = (
    "use_pfpc_plast",
    "use_mfnc_plast",
    "use_cs",
    "cs_onset",
    "cs_len",
    "use_us",
    "us_onset",
)
TRIAL_FLOAT_PARAMS = ("cs_percent",)
TRIAL_PARAMS = TRIAL_INT_PARAMS + TRIAL_FLOAT_PARAMS


class TrialParameters(BaseModel):
    """One row of the trial table."""

    trial_name: str
    use_pfpc_plast: int
    use_mfnc_plast: int
    use_cs: int
    cs_onset: int
    cs_len: int
    cs_percent: float
    use_us: int
    us_onset: int

    model_config = ConfigDict(frozen=True)


class TrialsData(BaseModel):
    """
    Column arrays handed to the simulation engine.

    All columns have exactly ``num_trials`` entries.
    """

    trial_names: list[str] = Field(default_factory=list)
    use_pfpc_plasts: list[int] = Field(default_factory=list)
    use_mfnc_plasts: list[int] = Field(default_factory=list)
    use_css: list[int] = Field(default_factory=list)
    cs_onsets: list[int] = Field(default_factory=list)
    cs_lens: list[int] = Field(default_factory=list)
    cs_percents: list[float] = Field(default_factory=list)
    use_uss: list[int] = Field(default_factory=list)
    us_onsets: list[int] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _columns_aligned(self) -> TrialsData:
        n = len(self.trial_names)
        for name in (
            "use_pfpc_plasts",
            "use_mfnc_plasts",
            "use_css",
            "cs_onsets",
            "cs_lens",
            "cs_percents",
            "use_uss",
            "us_onsets",
        ):
            size = len(getattr(self, name))
            if size != n:
                raise ValueError(f"column {name} has {size} entries, expected {n}")
        return self

    @property
    def num_trials(self) -> int:
        return len(self.trial_names)

    def __len__(self) -> int:
        return self.num_trials

    def row(self, index: int) -> TrialParameters:
        return TrialParameters(
            trial_name=self.trial_names[index],
            use_pfpc_plast=self.use_pfpc_plasts[index],
            use_mfnc_plast=self.use_mfnc_plasts[index],
            use_cs=self.use_css[index],
            cs_onset=self.cs_onsets[index],
            cs_len=self.cs_lens[index],
            cs_percent=self.cs_percents[index],
            use_us=self.use_uss[index],
            us_onset=self.us_onsets[index],
        )

    def rows(self) -> list[TrialParameters]:
        return [self.row(i) for i in range(self.num_trials)]

    @classmethod
    def from_rows(cls, rows: list[TrialParameters]) -> TrialsData:
        return cls(
            trial_names=[r.trial_name for r in rows],
            use_pfpc_plasts=[r.use_pfpc_plast for r in rows],
            use_mfnc_plasts=[r.use_mfnc_plast for r in rows],
            use_css=[r.use_cs for r in rows],
            cs_onsets=[r.cs_onset for r in rows],
            cs_lens=[r.cs_len for r in rows],
            cs_percents=[r.cs_percent for r in rows],
            use_uss=[r.use_us for r in rows],
            us_onsets=[r.us_onset for r in rows],
        )
