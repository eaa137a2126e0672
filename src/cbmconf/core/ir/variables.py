"""
Typed parameter declarations for cbmconf IR.

A declaration line ``float cs_percent 0.5`` becomes a Variable; all three
fields stay strings until the materializer interprets them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Variable(BaseModel):
    """
    A single typed declaration.

    Examples:
        - int cs_onset 100
        - float cs_percent 1.0
    """

    type_name: str = Field(description="Declared type (int or float)")
    identifier: str = Field(description="Parameter name")
    value: str = Field(description="Raw value text")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.type_name} {self.identifier} {self.value}"


class VarSection(BaseModel):
    """
    A flat region of declarations, keyed by identifier.

    Re-declaring an identifier replaces the earlier declaration.
    """

    region_type: str = Field(description="Region type, e.g. connectivity or mf_input")
    params: dict[str, Variable] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def get(self, identifier: str) -> Variable | None:
        return self.params.get(identifier)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.params

    def __len__(self) -> int:
        return len(self.params)
