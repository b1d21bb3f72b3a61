"""Per-pay-period withholding calculations.

Federal income tax withholding follows the annualize / tax / de-annualize
shape of the IRS Pub 15-T percentage method, using the year's regular tax
brackets. W-4 elections adjust it:

- Step 2(c) multiple jobs: bracket thresholds are halved
- Step 3 dependents: annual credit subtracted from the annual tax
- Step 4(a)/(b): other income added to, deductions subtracted from, wages
- Step 4(c): extra withholding added to every period

FICA is computed on per-period gross pay.
"""

import logging
from decimal import Decimal
from typing import Optional, Union

from ..money import ZERO, percent_of, rate_percent, round_cents
from ..schemas import (
    AnnualProjection,
    IncomeDetails,
    WithholdingProfile,
    WithholdingResult,
    coerce_input,
)
from .brackets import calculate_progressive_tax, scale_brackets
from .rules import latest_tax_year, load_tax_rules
from .schemas import TaxRules

logger = logging.getLogger(__name__)

MULTIPLE_JOBS_FACTOR = Decimal("0.5")


def calc_ss_withholding(gross: Decimal, periods: int, rules: TaxRules) -> Decimal:
    """Social Security for one period, capped at the per-period share of the wage base."""
    ss = rules.social_security
    per_period_cap = ss.wage_base / periods
    return round_cents(percent_of(min(gross, per_period_cap), ss.tax_rate))


def calc_medicare_withholding(gross: Decimal, annual_wages: Decimal, periods: int, rules: TaxRules) -> Decimal:
    """Medicare for one period, including pro-rated Additional Medicare.

    Employers withhold the additional rate on wages over the withholding
    threshold regardless of filing status.
    """
    medicare = rules.medicare
    base = percent_of(gross, medicare.tax_rate)
    excess = max(ZERO, annual_wages - medicare.withholding_threshold)
    additional = percent_of(excess, medicare.additional_rate) / periods
    return round_cents(base + additional)


def calculate_withholding(
    profile: Union[WithholdingProfile, dict],
    income: Union[IncomeDetails, dict],
    tax_year: Optional[Union[int, str]] = None,
) -> WithholdingResult:
    """Calculate per-period withholding from W-4 elections and income.

    Args:
        profile: W-4 elections (model or mapping)
        income: Income details; salary is annual (model or mapping)
        tax_year: Rules year; defaults to the latest available year

    Returns:
        WithholdingResult with per-period amounts and an annual projection

    Raises:
        InvalidInput: missing or invalid input
        UnsupportedTaxYear: no rules for tax_year
    """
    profile = coerce_input(WithholdingProfile, profile, "profile")
    income = coerce_input(IncomeDetails, income, "income")
    year = latest_tax_year() if tax_year is None else tax_year
    rules = load_tax_rules(year)

    periods = income.pay_frequency.periods_per_year

    # Step 1: Per-period gross from annual salary
    annual_wages = income.salary
    gross = round_cents(annual_wages / periods)

    # Step 2: Taxable wages after pre-tax contributions and W-4 Step 4(a)/(b)
    adjusted_annual = annual_wages - income.pre_tax_total - profile.deductions + profile.other_income
    adjusted_annual = max(ZERO, adjusted_annual)

    # Step 3: Annual tax from the brackets (halved thresholds for Step 2(c))
    brackets = rules.for_status(profile.filing_status).tax_brackets
    if profile.multiple_jobs:
        brackets = scale_brackets(brackets, MULTIPLE_JOBS_FACTOR)
    annual = calculate_progressive_tax(adjusted_annual, brackets)

    # Step 4: Step 3 credits, de-annualize, Step 4(c) extra
    tentative_annual = max(ZERO, annual.tax - profile.claim_dependents)
    federal = round_cents(tentative_annual / periods + profile.extra_withholding)

    logger.debug(
        f"withholding: {profile.filing_status.value} {income.pay_frequency.value} "
        f"taxable={adjusted_annual} annual_fit={annual.tax} per_period={federal}"
    )

    # Step 5: FICA
    social_security = calc_ss_withholding(gross, periods, rules)
    medicare = calc_medicare_withholding(gross, annual_wages, periods, rules)

    # Step 6: Totals, derived from the rounded components
    total_taxes = federal + social_security + medicare
    net_income = gross - total_taxes

    annual_gross = gross * periods
    annual_taxes = total_taxes * periods
    projection = AnnualProjection(
        annual_gross_income=annual_gross,
        annual_taxes=annual_taxes,
        annual_net_income=annual_gross - annual_taxes,
        effective_tax_rate=rate_percent(annual_taxes, annual_gross),
    )

    return WithholdingResult(
        tax_year=rules.year,
        filing_status=profile.filing_status,
        pay_periods_per_year=periods,
        annual_taxable_wages=round_cents(adjusted_annual),
        marginal_tax_rate=annual.marginal_rate,
        pay_period_gross_income=gross,
        federal_withholding=federal,
        social_security_tax=social_security,
        medicare_tax=medicare,
        total_taxes=total_taxes,
        net_income=net_income,
        annual_projection=projection,
    )
