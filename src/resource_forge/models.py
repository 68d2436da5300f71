# models.py
# Data contracts for the conversion engine.
# No business logic lives here. Pure schema and validation.

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator, model_validator


def _check_names(names: list[str]) -> list[str]:
    for name in names:
        if not name or not name.strip():
            raise ValueError("resource names must not be empty or whitespace-only")
    return names


class OutcomeTier(str, Enum):
    """The four ways a single application can turn out."""

    FAILURE = "failure"
    PARTIAL = "partial"
    BONUS = "bonus"
    NORMAL = "normal"


class OutcomeModifiers(BaseModel):
    """Tier probabilities for one proficiency level. Values are not clamped."""

    model_config = ConfigDict(frozen=True)

    failure: float
    partial: float
    bonus: float
    normal: float

    @property
    def total(self) -> float:
        return self.failure + self.partial + self.bonus + self.normal


class FormulaSpec(BaseModel):
    """Validated construction arguments for a Formula."""

    input_resources: list[str] = Field(..., description="Names consumed, in order.")
    input_quantities: list[NonNegativeInt] = Field(..., description="Quantity per input name.")
    output_resources: list[str] = Field(..., description="Names produced, in order.")
    output_quantities: list[NonNegativeInt] = Field(..., description="Nominal quantity per output name.")
    proficiency: int = Field(default=0, ge=0, le=5, description="Skill level biasing the outcome.")

    @field_validator("input_resources", "output_resources")
    @classmethod
    def _names_not_blank(cls, names: list[str]) -> list[str]:
        return _check_names(names)

    @model_validator(mode="after")
    def _paired_lengths(self) -> "FormulaSpec":
        if len(self.input_resources) != len(self.input_quantities):
            raise ValueError("input resource and input quantity lists differ in length")
        if len(self.output_resources) != len(self.output_quantities):
            raise ValueError("output resource and output quantity lists differ in length")
        return self


class LedgerSpec(BaseModel):
    """Validated opening balance for a ResourceLedger."""

    resources: dict[str, NonNegativeInt] = Field(..., min_length=1)

    @field_validator("resources")
    @classmethod
    def _names_not_blank(cls, resources: dict[str, int]) -> dict[str, int]:
        _check_names(list(resources))
        return resources


class ApplicationRecord(BaseModel):
    """Log entry produced by every Formula application."""

    slot: int | None = Field(default=None, description="Plan index, when applied through a plan.")
    draw: float = Field(..., description="Random value after rounding to two decimals.")
    tier: OutcomeTier | None = Field(..., description="Winning tier, or None when no branch fired.")
    result: list[int] = Field(default_factory=list)
    proficiency: int = Field(..., description="Proficiency level after this application.")
