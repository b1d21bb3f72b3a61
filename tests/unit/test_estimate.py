"""Tests for the annual tax estimate.

Uses the toy rules year: 14,600 standard deduction, 10% / 12% / 22%
brackets, 100,000 SS wage base.
"""

from decimal import Decimal

import pytest

from taxcalc.sdk import (
    FilingStatus,
    InvalidInput,
    UnsupportedTaxYear,
    calculate_tax_estimate,
)
from taxcalc.sdk.taxes import calculate_self_employment_tax, load_tax_rules


STANDARD = {"use_standard_deduction": True}
NO_CREDITS = {}


def _annual(salary, **extra):
    return {"salary": salary, "pay_frequency": "annually", **extra}


@pytest.fixture
def estimate(toy_rules):
    """calculate_tax_estimate bound to the toy year, single filer by default."""
    def _estimate(income, deductions=STANDARD, credits=NO_CREDITS, status="single", withheld=0):
        return calculate_tax_estimate(
            income, deductions, credits, status, toy_rules["year"], withholding_to_date=withheld,
        )
    return _estimate


class TestLiability:

    def test_salary_with_standard_deduction(self, estimate):
        """80,000 - 14,600 = 65,400 taxable; 5,147 + 20,675 x 22% = 9,695.50."""
        result = estimate(_annual(80000), credits={"other_credits": "195.50"}, withheld=10200)

        assert result.total_income == Decimal("80000.00")
        assert result.adjusted_gross_income == Decimal("80000.00")
        assert result.deduction_method == "standard"
        assert result.total_deductions == Decimal("14600.00")
        assert result.taxable_income == Decimal("65400.00")
        assert result.income_tax == Decimal("9695.50")
        assert result.total_credits == Decimal("195.50")
        assert result.total_tax_liability == Decimal("9500.00")
        assert result.estimated_refund_or_owed == Decimal("700.00")
        assert result.marginal_tax_rate == Decimal("22")
        assert result.effective_tax_rate == Decimal("11.88")

    def test_amount_owed_is_negative(self, estimate):
        result = estimate(_annual(80000), credits={"other_credits": "195.50"}, withheld=9000)

        assert result.estimated_refund_or_owed == Decimal("-500.00")

    def test_itemized_deductions(self, estimate):
        """80,000 - 17,000 itemized = 63,000; 5,147 + 18,275 x 22% = 9,167.50."""
        deductions = {
            "use_standard_deduction": False,
            "mortgage_interest": 12000,
            "property_taxes": 5000,
        }

        result = estimate(_annual(80000), deductions=deductions)

        assert result.deduction_method == "itemized"
        assert result.total_deductions == Decimal("17000.00")
        assert result.income_tax == Decimal("9167.50")

    def test_itemized_amounts_ignored_with_standard_election(self, estimate):
        deductions = {"use_standard_deduction": True, "mortgage_interest": 50000}

        result = estimate(_annual(80000), deductions=deductions)

        assert result.total_deductions == Decimal("14600.00")

    def test_adjustments_reduce_agi(self, estimate):
        """Traditional contributions reduce AGI, Roth contributions do not."""
        income = _annual(
            80000,
            retirement_401k=10000,
            traditional_ira=2000,
            hsa=1000,
            fsa=500,
            pre_tax_deductions=500,
            roth_401k=5000,
            roth_ira=7000,
        )

        result = estimate(income)

        assert result.adjusted_gross_income == Decimal("66000.00")
        assert result.taxable_income == Decimal("51400.00")

    def test_agi_floored_at_zero(self, estimate):
        result = estimate(_annual(1000, retirement_401k=5000))

        assert result.adjusted_gross_income == Decimal("0.00")
        assert result.taxable_income == Decimal("0.00")

    def test_credits_cannot_make_liability_negative(self, estimate):
        result = estimate(_annual(20000), credits={"child_tax_credit": 5000}, withheld=100)

        assert result.total_tax_liability == Decimal("0.00")
        assert result.estimated_refund_or_owed == Decimal("100.00")

    def test_zero_income(self, estimate):
        result = estimate(_annual(0))

        assert result.total_tax_liability == Decimal("0.00")
        assert result.effective_tax_rate == Decimal("0")
        assert result.marginal_tax_rate == Decimal("10")

    def test_other_income_sources_are_taxed(self, estimate):
        income = _annual(50000, investment_income=10000, other_income=5000)

        result = estimate(income)

        assert result.total_income == Decimal("65000.00")
        assert result.taxable_income == Decimal("50400.00")

    def test_idempotent(self, estimate):
        income = _annual(123456.78, self_employment_income=4321)
        assert estimate(income) == estimate(income)


class TestSelfEmployment:

    def test_se_tax_added_to_liability(self, estimate):
        """SE tax 50,000 x 15.3% = 7,650; income tax on 35,400 = 4,028."""
        result = estimate(_annual(0, self_employment_income=50000))

        assert result.self_employment_tax == Decimal("7650.00")
        assert result.income_tax == Decimal("4028.00")
        assert result.total_tax_liability == Decimal("11678.00")
        assert result.tax_breakdown.self_employment_tax == Decimal("7650.00")

    def test_ss_portion_capped_at_wage_base(self, toy_rules):
        rules = load_tax_rules(toy_rules["year"])

        # 100,000 x 12.4% + 150,000 x 2.9%
        assert calculate_self_employment_tax(Decimal("150000"), rules) == Decimal("16750.00")

    def test_no_se_income(self, toy_rules):
        rules = load_tax_rules(toy_rules["year"])
        assert calculate_self_employment_tax(Decimal("0"), rules) == 0


class TestBreakdown:

    def test_wage_fica_is_informational(self, estimate):
        result = estimate(_annual(80000))

        assert result.tax_breakdown.federal_income_tax == result.income_tax
        assert result.tax_breakdown.social_security_tax == Decimal("4960.00")
        assert result.tax_breakdown.medicare_tax == Decimal("1160.00")
        assert result.tax_breakdown.additional_medicare_tax == Decimal("0.00")
        assert result.total_tax_liability == result.income_tax

    def test_social_security_capped(self, estimate):
        result = estimate(_annual(300000))

        assert result.tax_breakdown.social_security_tax == Decimal("6200.00")

    @pytest.mark.parametrize("status,expected", [
        ("single", Decimal("900.00")),
        ("married_jointly", Decimal("450.00")),
        ("married_separately", Decimal("1575.00")),
    ])
    def test_additional_medicare_by_status(self, estimate, status, expected):
        result = estimate(_annual(300000), status=status)

        assert result.tax_breakdown.additional_medicare_tax == expected

    def test_bracket_details(self, estimate):
        result = estimate(_annual(80000))

        assert [b.rate for b in result.brackets] == [10, 12, 22]
        assert sum(b.tax for b in result.brackets) == result.income_tax
        assert result.brackets[-1].taxable_amount == Decimal("20675.00")


class TestPackagedYears:

    def test_2024_single(self):
        """2024: 100,000 - 14,600 = 85,400; 5,426 + 38,250 x 22% = 13,841."""
        result = calculate_tax_estimate(_annual(100000), STANDARD, NO_CREDITS, "single", 2024)

        assert result.taxable_income == Decimal("85400.00")
        assert result.income_tax == Decimal("13841.00")

    def test_2025_married_jointly_deduction(self):
        result = calculate_tax_estimate(_annual(100000), STANDARD, NO_CREDITS, "mfj", 2025)

        assert result.filing_status == FilingStatus.MARRIED_JOINTLY
        assert result.total_deductions == Decimal("31500.00")


class TestInputs:

    def test_camel_case_keys(self, estimate):
        income = {"salary": 80000, "payFrequency": "annually", "traditionalIRA": 2000}
        deductions = {"useStandardDeduction": False, "mortgageInterest": 17000}

        result = estimate(income, deductions=deductions)

        assert result.adjusted_gross_income == Decimal("78000.00")
        assert result.total_deductions == Decimal("17000.00")

    def test_unknown_filing_status(self, estimate):
        with pytest.raises(InvalidInput, match="filing status"):
            estimate(_annual(80000), status="widowed")

    def test_unsupported_year(self):
        with pytest.raises(UnsupportedTaxYear):
            calculate_tax_estimate(_annual(80000), STANDARD, NO_CREDITS, "single", 1999)

    def test_negative_withholding(self, estimate):
        with pytest.raises(InvalidInput, match="withholding_to_date"):
            estimate(_annual(80000), withheld=-1)

    def test_negative_credit(self, estimate):
        with pytest.raises(InvalidInput, match="credits.other_credits"):
            estimate(_annual(80000), credits={"other_credits": -10})

    def test_missing_deductions(self, estimate):
        with pytest.raises(InvalidInput, match="deductions is required"):
            estimate(_annual(80000), deductions=None)

    def test_non_numeric_amount(self, estimate):
        with pytest.raises(InvalidInput, match="income.salary"):
            estimate(_annual("lots"))

    def test_huge_amounts_rejected(self, estimate):
        with pytest.raises(InvalidInput, match="income.salary"):
            estimate(_annual("1e27"))
        with pytest.raises(InvalidInput, match="deductions.mortgage_interest"):
            estimate(_annual(80000), deductions={"mortgage_interest": "1e27"})
        with pytest.raises(InvalidInput, match="exceeds the maximum"):
            estimate(_annual(80000), withheld="1e27")
