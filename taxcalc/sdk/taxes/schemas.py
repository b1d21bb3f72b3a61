"""Pydantic schemas for tax rules validation.

These schemas validate the tax_rules/*.yaml files and provide typed access
to tax parameters like the Social Security wage base and tax brackets.
All rates are percentages (6.2 means 6.2%).
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..money import MAX_AMOUNT
from ..schemas import FilingStatus


class _RulesModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _floats_as_text(cls, value: Any) -> Any:
        if isinstance(value, float):
            return str(value)
        return value


class TaxBracket(_RulesModel):
    """Single tax bracket: income in [min, max) is taxed at rate."""

    rate: Decimal = Field(..., ge=0, le=100, description="Marginal rate in percent")
    min: Decimal = Field(..., ge=0, description="Lower bound (inclusive)")
    max: Optional[Decimal] = Field(default=None, description="Upper bound, None for the top bracket")

    @model_validator(mode="after")
    def check_bounds(self) -> "TaxBracket":
        if self.max is not None and self.max <= self.min:
            raise ValueError(f"bracket max {self.max} must be greater than min {self.min}")
        return self


def check_bracket_table(brackets: List[TaxBracket]) -> None:
    """Check that brackets partition [0, inf) with no gaps or overlaps.

    The table must start at 0, each min must equal the previous max, and
    exactly one bracket (the last) may be open-ended.

    Raises:
        ValueError: describing the first violation found
    """
    if not brackets:
        raise ValueError("bracket table is empty")
    if brackets[0].min != 0:
        raise ValueError(f"first bracket must start at 0, starts at {brackets[0].min}")

    open_ended = [b for b in brackets if b.max is None]
    if len(open_ended) != 1:
        raise ValueError(f"exactly one bracket must have no max, found {len(open_ended)}")
    if brackets[-1].max is not None:
        raise ValueError("the open-ended bracket must be last")

    for prev, cur in zip(brackets, brackets[1:]):
        if cur.min != prev.max:
            raise ValueError(
                f"bracket starting at {cur.min} does not continue from previous max {prev.max}"
            )


class FilingStatusRules(_RulesModel):
    """Tax rules for one filing status."""

    standard_deduction: Decimal = Field(..., ge=0, le=MAX_AMOUNT)
    tax_brackets: List[TaxBracket]

    @field_validator("tax_brackets")
    @classmethod
    def contiguous(cls, brackets: List[TaxBracket]) -> List[TaxBracket]:
        check_bracket_table(brackets)
        return brackets


class SocialSecurityRules(_RulesModel):
    """Social Security tax rules (employee share)."""

    wage_base: Decimal = Field(..., gt=0, description="Maximum wages subject to SS tax")
    tax_rate: Decimal = Field(..., ge=0, le=100)


class MedicareRules(_RulesModel):
    """Medicare and Additional Medicare Tax rules."""

    tax_rate: Decimal = Field(..., ge=0, le=100)
    additional_rate: Decimal = Field(..., ge=0, le=100)
    withholding_threshold: Decimal = Field(
        ..., ge=0, description="Employer starts Additional Medicare withholding above this, any status"
    )
    additional_thresholds: Dict[FilingStatus, Decimal] = Field(
        ..., description="Additional Medicare Tax threshold on the return, per filing status"
    )

    @model_validator(mode="after")
    def all_statuses(self) -> "MedicareRules":
        missing = [s.value for s in FilingStatus if s not in self.additional_thresholds]
        if missing:
            raise ValueError(f"additional_thresholds missing: {', '.join(missing)}")
        return self


class SelfEmploymentRules(_RulesModel):
    """Self-employment tax rates (both employer and employee shares)."""

    social_security_rate: Decimal = Field(..., ge=0, le=100)
    medicare_rate: Decimal = Field(..., ge=0, le=100)


class TaxRules(_RulesModel):
    """Complete federal tax rules for a year."""

    model_config = ConfigDict(extra="ignore", frozen=True)  # Allow unknown fields for forward compat

    year: int
    social_security: SocialSecurityRules
    medicare: MedicareRules
    self_employment: SelfEmploymentRules
    filing_status: Dict[FilingStatus, FilingStatusRules]

    @model_validator(mode="after")
    def all_statuses(self) -> "TaxRules":
        missing = [s.value for s in FilingStatus if s not in self.filing_status]
        if missing:
            raise ValueError(f"filing_status section missing: {', '.join(missing)}")
        return self

    def for_status(self, status: FilingStatus) -> FilingStatusRules:
        return self.filing_status[status]
