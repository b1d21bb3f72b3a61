"""Withholding recommendations.

Compares a year of withholding at the current W-4 elections with the
estimated liability and suggests the W-4 Step 4(c) extra withholding per
pay period needed to land on a target refund.
"""

import logging
from decimal import Decimal, ROUND_CEILING
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict

from ..errors import InvalidInput
from ..money import CENT, ZERO, round_cents, to_decimal
from ..schemas import (
    CreditDetails,
    DeductionDetails,
    IncomeDetails,
    WithholdingProfile,
    coerce_input,
)
from .estimate import calculate_tax_estimate
from .rules import latest_tax_year
from .withholding import calculate_withholding

logger = logging.getLogger(__name__)


class WithholdingRecommendation(BaseModel):
    """Suggested Step 4(c) amount and the outcome with and without it."""

    model_config = ConfigDict(frozen=True)

    tax_year: int
    pay_periods_per_year: int
    target_refund: Decimal
    projected_annual_withholding: Decimal
    projected_tax_liability: Decimal
    projected_refund_or_owed: Decimal
    current_extra_withholding: Decimal
    recommended_extra_withholding: Decimal
    refund_or_owed_with_recommendation: Decimal


def recommend_extra_withholding(
    profile: Union[WithholdingProfile, dict],
    income: Union[IncomeDetails, dict],
    deductions: Union[DeductionDetails, dict],
    credits: Union[CreditDetails, dict],
    tax_year: Optional[Union[int, str]] = None,
    target_refund: Any = 0,
) -> WithholdingRecommendation:
    """Recommend extra withholding per period to reach target_refund.

    Federal withholding for the year is the per-period federal amount at the
    current elections times the number of periods. The recommendation is
    rounded up to the cent and never negative: over-withholding is reported
    in projected_refund_or_owed rather than as a negative extra amount.
    """
    profile = coerce_input(WithholdingProfile, profile, "profile")
    income = coerce_input(IncomeDetails, income, "income")
    target = to_decimal(target_refund, "target_refund")
    if target < 0:
        raise InvalidInput(f"target_refund must not be negative, got {target}")
    year = latest_tax_year() if tax_year is None else tax_year

    withholding = calculate_withholding(profile, income, tax_year=year)
    periods = withholding.pay_periods_per_year
    annual_withholding = withholding.federal_withholding * periods

    estimate = calculate_tax_estimate(
        income, deductions, credits, profile.filing_status, year,
        withholding_to_date=annual_withholding,
    )

    shortfall = target - estimate.estimated_refund_or_owed
    additional = ZERO
    if shortfall > 0:
        additional = (shortfall / periods).quantize(CENT, rounding=ROUND_CEILING)
    recommended = profile.extra_withholding + additional

    logger.debug(
        f"recommend: withheld={annual_withholding} liability={estimate.total_tax_liability} "
        f"shortfall={shortfall} additional_per_period={additional}"
    )

    return WithholdingRecommendation(
        tax_year=estimate.tax_year,
        pay_periods_per_year=periods,
        target_refund=round_cents(target),
        projected_annual_withholding=annual_withholding,
        projected_tax_liability=estimate.total_tax_liability,
        projected_refund_or_owed=estimate.estimated_refund_or_owed,
        current_extra_withholding=profile.extra_withholding,
        recommended_extra_withholding=recommended,
        refund_or_owed_with_recommendation=estimate.estimated_refund_or_owed + additional * periods,
    )
