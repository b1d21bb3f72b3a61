"""Pydantic schemas for calculator inputs and results.

All schemas are frozen value objects and use extra='forbid' so a typo in an
input file causes a clear error rather than being silently ignored.

Input keys may be given in snake_case or in the camelCase used by the web
front end (``payFrequency``, ``traditionalIRA``); both map to the same field.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, List, Literal, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import InvalidInput
from .money import MAX_AMOUNT


# =============================================================================
# Enums
# =============================================================================


class FilingStatus(str, Enum):
    """Federal filing status. Selects bracket table and standard deduction."""

    SINGLE = "single"
    MARRIED_JOINTLY = "married_jointly"
    MARRIED_SEPARATELY = "married_separately"
    HEAD_OF_HOUSEHOLD = "head_of_household"

    @classmethod
    def parse(cls, value: Any) -> "FilingStatus":
        """Parse a filing status, accepting the short forms mfj/mfs/hoh."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidInput(f"Invalid filing status: {value!r}")
        key = value.strip().lower().replace("-", "_").replace(" ", "_")
        key = _FILING_STATUS_SHORT_FORMS.get(key, key)
        try:
            return cls(key)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise InvalidInput(f"Invalid filing status: {value!r}. Must be one of: {valid}")


_FILING_STATUS_SHORT_FORMS = {
    "mfj": "married_jointly",
    "mfs": "married_separately",
    "hoh": "head_of_household",
}


class PayFrequency(str, Enum):
    """How often wages are paid."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMIMONTHLY = "semimonthly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"

    @property
    def periods_per_year(self) -> int:
        return PAY_PERIODS[self]

    @classmethod
    def parse(cls, value: Any) -> "PayFrequency":
        """Parse a pay frequency ('bi-weekly' and 'Semi-Monthly' are accepted)."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidInput(f"Invalid pay frequency: {value!r}")
        key = value.strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        try:
            return cls(key)
        except ValueError:
            valid = ", ".join(f.value for f in cls)
            raise InvalidInput(f"Invalid pay frequency: {value!r}. Must be one of: {valid}")


PAY_PERIODS = {
    PayFrequency.WEEKLY: 52,
    PayFrequency.BIWEEKLY: 26,
    PayFrequency.SEMIMONTHLY: 24,
    PayFrequency.MONTHLY: 12,
    PayFrequency.QUARTERLY: 4,
    PayFrequency.ANNUALLY: 1,
}


# =============================================================================
# Inputs
# =============================================================================


def _squash(key: str) -> str:
    return key.replace("_", "").lower()


class _InputModel(BaseModel):
    """Base for input schemas: frozen, strict about unknown keys."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _normalize_keys(cls, data: Any) -> Any:
        """Map camelCase keys onto snake_case field names."""
        if not isinstance(data, Mapping):
            return data
        by_squashed = {_squash(name): name for name in cls.model_fields}
        normalized = {}
        seen = {}
        for key, value in data.items():
            name = by_squashed.get(_squash(str(key)), key)
            if name in normalized:
                raise ValueError(f"keys {seen[name]!r} and {key!r} both set {name}")
            normalized[name] = value
            seen[name] = key
        return normalized

    @field_validator("*", mode="before")
    @classmethod
    def _floats_as_text(cls, value: Any) -> Any:
        # Decimal(str(x)) keeps 0.1 as 0.1 instead of its binary expansion
        if isinstance(value, float):
            return str(value)
        return value


def _money(description: str) -> Any:
    return Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT, description=description)


class WithholdingProfile(_InputModel):
    """W-4 elections. Used by the withholding calculation only."""

    filing_status: FilingStatus
    multiple_jobs: bool = Field(default=False, description="Step 2(c) checkbox")
    claim_dependents: Decimal = _money("Step 3 annual dependent credit")
    other_income: Decimal = _money("Step 4(a) other annual income")
    deductions: Decimal = _money("Step 4(b) deductions beyond withholding allowance")
    extra_withholding: Decimal = _money("Step 4(c) extra withholding per period")

    @field_validator("filing_status", mode="before")
    @classmethod
    def _parse_filing_status(cls, value: Any) -> FilingStatus:
        return FilingStatus.parse(value)


class IncomeDetails(_InputModel):
    """Annual income and pre-tax contributions.

    ``salary`` is the annual salary; ``pay_frequency`` says how many pay
    periods it is split across.
    """

    salary: Decimal = Field(..., ge=0, le=MAX_AMOUNT, description="Annual salary")
    pay_frequency: PayFrequency
    self_employment_income: Decimal = _money("Net self-employment income")
    investment_income: Decimal = _money("Interest, dividends and gains")
    other_income: Decimal = _money("Any other taxable income")
    pre_tax_deductions: Decimal = _money("Section 125 and other pre-tax payroll deductions")
    retirement_401k: Decimal = _money("Traditional 401(k) contributions")
    traditional_ira: Decimal = _money("Deductible traditional IRA contributions")
    roth_401k: Decimal = _money("Roth 401(k) contributions (after tax)")
    roth_ira: Decimal = _money("Roth IRA contributions (after tax)")
    hsa: Decimal = _money("Health savings account contributions")
    fsa: Decimal = _money("Flexible spending account contributions")

    @field_validator("pay_frequency", mode="before")
    @classmethod
    def _parse_pay_frequency(cls, value: Any) -> PayFrequency:
        return PayFrequency.parse(value)

    @property
    def pre_tax_total(self) -> Decimal:
        """Contributions that reduce federal taxable wages.

        Roth contributions are after tax and are not included.
        """
        return (
            self.pre_tax_deductions
            + self.retirement_401k
            + self.traditional_ira
            + self.hsa
            + self.fsa
        )

    @property
    def total_income(self) -> Decimal:
        return self.salary + self.self_employment_income + self.investment_income + self.other_income


class DeductionDetails(_InputModel):
    """Standard deduction election or itemized amounts."""

    use_standard_deduction: bool = True
    mortgage_interest: Decimal = _money("Mortgage interest")
    property_taxes: Decimal = _money("State and local property taxes")
    charitable_donations: Decimal = _money("Charitable contributions")
    medical_expenses: Decimal = _money("Deductible medical expenses")
    student_loan_interest: Decimal = _money("Student loan interest")
    other_deductions: Decimal = _money("Other itemized deductions")

    @property
    def itemized_total(self) -> Decimal:
        return (
            self.mortgage_interest
            + self.property_taxes
            + self.charitable_donations
            + self.medical_expenses
            + self.student_loan_interest
            + self.other_deductions
        )


class CreditDetails(_InputModel):
    """Non-refundable credits, applied dollar for dollar."""

    child_tax_credit: Decimal = _money("Child tax credit")
    child_and_dependent_care: Decimal = _money("Child and dependent care credit")
    education_credits: Decimal = _money("Education credits")
    energy_credits: Decimal = _money("Residential energy credits")
    other_credits: Decimal = _money("Other credits")

    @property
    def total(self) -> Decimal:
        return (
            self.child_tax_credit
            + self.child_and_dependent_care
            + self.education_credits
            + self.energy_credits
            + self.other_credits
        )


M = TypeVar("M", bound=BaseModel)


def coerce_input(model: Type[M], value: Any, label: str) -> M:
    """Return ``value`` as a ``model`` instance, validating plain mappings.

    Raises:
        InvalidInput: if value is missing, not a mapping, or fails validation
    """
    if isinstance(value, model):
        return value
    if value is None:
        raise InvalidInput(f"{label} is required")
    if not isinstance(value, Mapping):
        raise InvalidInput(f"{label} must be a mapping, got {type(value).__name__}")
    try:
        return model.model_validate(dict(value))
    except ValidationError as e:
        raise InvalidInput(format_validation_error(label, e)) from e


def format_validation_error(label: str, error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one readable message."""
    problems = []
    for item in error.errors():
        path = ".".join(str(p) for p in item.get("loc", ()) if p != "__root__")
        where = f"{label}.{path}" if path else label
        message = item.get("msg", "invalid value")
        # InvalidInput raised inside a validator arrives as "Value error, ..."
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        problems.append(f"{where}: {message}")
    return "; ".join(problems)


# =============================================================================
# Results
# =============================================================================


class _ResultModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class AnnualProjection(_ResultModel):
    """Per-period figures scaled to a full year."""

    annual_gross_income: Decimal
    annual_taxes: Decimal
    annual_net_income: Decimal
    effective_tax_rate: Decimal = Field(..., description="Annual taxes / annual gross, in percent")


class WithholdingResult(_ResultModel):
    """Per-pay-period withholding."""

    tax_year: int
    filing_status: FilingStatus
    pay_periods_per_year: int
    annual_taxable_wages: Decimal
    marginal_tax_rate: Decimal
    pay_period_gross_income: Decimal
    federal_withholding: Decimal
    social_security_tax: Decimal
    medicare_tax: Decimal
    total_taxes: Decimal
    net_income: Decimal
    annual_projection: AnnualProjection


class BracketDetail(_ResultModel):
    """Income and tax falling in one bracket."""

    rate: Decimal
    min: Decimal
    max: Optional[Decimal]
    taxable_amount: Decimal
    tax: Decimal


class TaxBreakdown(_ResultModel):
    """Tax by type.

    Wage FICA and Additional Medicare Tax are informational; they are not part
    of ``total_tax_liability``.
    """

    federal_income_tax: Decimal
    self_employment_tax: Decimal
    social_security_tax: Decimal
    medicare_tax: Decimal
    additional_medicare_tax: Decimal


class TaxEstimate(_ResultModel):
    """Annual liability and refund (positive) or amount owed (negative)."""

    tax_year: int
    filing_status: FilingStatus
    total_income: Decimal
    adjusted_gross_income: Decimal
    deduction_method: Literal["standard", "itemized"]
    total_deductions: Decimal
    taxable_income: Decimal
    income_tax: Decimal
    self_employment_tax: Decimal
    total_credits: Decimal
    total_tax_liability: Decimal
    withholding_to_date: Decimal
    estimated_refund_or_owed: Decimal
    marginal_tax_rate: Decimal
    effective_tax_rate: Decimal
    tax_breakdown: TaxBreakdown
    brackets: List[BracketDetail] = Field(default_factory=list)
