"""Annual federal tax liability and refund estimate.

Line order follows a simplified Form 1040:
total income -> AGI -> deductions -> taxable income -> income tax
+ self-employment tax - credits -> liability, compared to withholding.
"""

import logging
from typing import Any, Union

from ..errors import InvalidInput
from ..money import ZERO, percent_of, rate_percent, round_cents, to_decimal
from ..schemas import (
    CreditDetails,
    DeductionDetails,
    FilingStatus,
    IncomeDetails,
    TaxBreakdown,
    TaxEstimate,
    coerce_input,
)
from .brackets import bracket_breakdown, calculate_progressive_tax
from .rules import load_tax_rules
from .schemas import TaxRules

logger = logging.getLogger(__name__)


def calculate_self_employment_tax(se_income, rules: TaxRules):
    """Self-employment tax: both shares of SS (capped at wage base) plus Medicare."""
    if se_income <= 0:
        return ZERO
    se = rules.self_employment
    ss_portion = percent_of(min(se_income, rules.social_security.wage_base), se.social_security_rate)
    medicare_portion = percent_of(se_income, se.medicare_rate)
    return round_cents(ss_portion + medicare_portion)


def _wage_fica(salary, status: FilingStatus, rules: TaxRules):
    """Employee FICA on salary, for the breakdown only."""
    ss = round_cents(percent_of(min(salary, rules.social_security.wage_base), rules.social_security.tax_rate))
    medicare = round_cents(percent_of(salary, rules.medicare.tax_rate))
    threshold = rules.medicare.additional_thresholds[status]
    additional = round_cents(percent_of(max(ZERO, salary - threshold), rules.medicare.additional_rate))
    return ss, medicare, additional


def calculate_tax_estimate(
    income: Union[IncomeDetails, dict],
    deductions: Union[DeductionDetails, dict],
    credits: Union[CreditDetails, dict],
    filing_status: Union[FilingStatus, str],
    tax_year: Union[int, str],
    withholding_to_date: Any = 0,
) -> TaxEstimate:
    """Estimate the year's federal tax liability and refund or amount owed.

    Args:
        income: Annual income and pre-tax contributions
        deductions: Standard deduction election or itemized amounts
        credits: Credits, applied against income + self-employment tax
        filing_status: Filing status (enum or string; mfj/mfs/hoh accepted)
        tax_year: Year whose rules apply
        withholding_to_date: Federal tax already withheld or paid

    Returns:
        TaxEstimate. estimated_refund_or_owed is positive for a refund and
        negative for an amount owed.

    Raises:
        InvalidInput: missing or invalid input
        UnsupportedTaxYear: no rules for tax_year
    """
    income = coerce_input(IncomeDetails, income, "income")
    deductions = coerce_input(DeductionDetails, deductions, "deductions")
    credits = coerce_input(CreditDetails, credits, "credits")
    status = FilingStatus.parse(filing_status)
    withheld = to_decimal(withholding_to_date, "withholding_to_date")
    if withheld < 0:
        raise InvalidInput(f"withholding_to_date must not be negative, got {withheld}")

    rules = load_tax_rules(tax_year)
    status_rules = rules.for_status(status)

    # Lines 1-9: total income
    total_income = round_cents(income.total_income)

    # Line 10-11: adjustments and AGI
    agi = round_cents(max(ZERO, total_income - income.pre_tax_total))

    # Lines 12-15: deductions and taxable income
    if deductions.use_standard_deduction:
        deduction_method = "standard"
        total_deductions = round_cents(status_rules.standard_deduction)
    else:
        deduction_method = "itemized"
        total_deductions = round_cents(deductions.itemized_total)
    taxable_income = max(ZERO, agi - total_deductions)

    # Line 16: income tax
    bracket_tax = calculate_progressive_tax(taxable_income, status_rules.tax_brackets)
    income_tax = bracket_tax.tax

    # Schedule SE
    se_tax = calculate_self_employment_tax(income.self_employment_income, rules)

    # Credits reduce tax but never below zero
    total_credits = round_cents(credits.total)
    liability = max(ZERO, income_tax + se_tax - total_credits)

    refund_or_owed = round_cents(withheld) - liability

    ss_tax, medicare_tax, additional_medicare = _wage_fica(income.salary, status, rules)

    logger.debug(
        f"estimate {rules.year} {status.value}: agi={agi} {deduction_method}={total_deductions} "
        f"taxable={taxable_income} income_tax={income_tax} se_tax={se_tax} liability={liability}"
    )

    return TaxEstimate(
        tax_year=rules.year,
        filing_status=status,
        total_income=total_income,
        adjusted_gross_income=agi,
        deduction_method=deduction_method,
        total_deductions=total_deductions,
        taxable_income=taxable_income,
        income_tax=income_tax,
        self_employment_tax=se_tax,
        total_credits=total_credits,
        total_tax_liability=liability,
        withholding_to_date=round_cents(withheld),
        estimated_refund_or_owed=refund_or_owed,
        marginal_tax_rate=bracket_tax.marginal_rate,
        effective_tax_rate=rate_percent(liability, total_income),
        tax_breakdown=TaxBreakdown(
            federal_income_tax=income_tax,
            self_employment_tax=se_tax,
            social_security_tax=ss_tax,
            medicare_tax=medicare_tax,
            additional_medicare_tax=additional_medicare,
        ),
        brackets=bracket_breakdown(taxable_income, status_rules.tax_brackets),
    )
