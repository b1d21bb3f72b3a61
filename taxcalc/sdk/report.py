"""Text, CSV and JSON rendering of calculation results."""

import csv
import io
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .schemas import TaxEstimate, WithholdingResult


def to_json_dict(model: BaseModel) -> dict:
    """Dump a result model with Decimals as floats and enums as values."""
    return _plain(model.model_dump())


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _usd(amount: Decimal) -> str:
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"


def _pct(rate: Decimal) -> str:
    return f"{rate.normalize():f}%"


def format_withholding(result: WithholdingResult) -> str:
    """Human-readable per-period withholding summary."""
    p = result.annual_projection
    lines = [
        f"Withholding ({result.tax_year}, {result.filing_status.value}, "
        f"{result.pay_periods_per_year} pay periods)",
        "",
        f"  Gross pay per period:     {_usd(result.pay_period_gross_income)}",
        f"  Federal income tax:       {_usd(result.federal_withholding)}",
        f"  Social Security:          {_usd(result.social_security_tax)}",
        f"  Medicare:                 {_usd(result.medicare_tax)}",
        f"  Total taxes:              {_usd(result.total_taxes)}",
        f"  Net pay per period:       {_usd(result.net_income)}",
        "",
        f"  Annual taxable wages:     {_usd(result.annual_taxable_wages)}",
        f"  Marginal rate:            {_pct(result.marginal_tax_rate)}",
        "",
        "Annual projection",
        f"  Gross:                    {_usd(p.annual_gross_income)}",
        f"  Taxes:                    {_usd(p.annual_taxes)}",
        f"  Net:                      {_usd(p.annual_net_income)}",
        f"  Effective rate:           {_pct(p.effective_tax_rate)}",
    ]
    return "\n".join(lines)


def format_estimate(estimate: TaxEstimate) -> str:
    """Human-readable annual estimate with the bracket table."""
    if estimate.estimated_refund_or_owed >= 0:
        outcome = f"  Estimated refund:         {_usd(estimate.estimated_refund_or_owed)}"
    else:
        outcome = f"  Estimated amount owed:    {_usd(-estimate.estimated_refund_or_owed)}"
    deduction_label = f"Deductions ({estimate.deduction_method}):"

    lines = [
        f"Tax estimate ({estimate.tax_year}, {estimate.filing_status.value})",
        "",
        f"  Total income:             {_usd(estimate.total_income)}",
        f"  Adjusted gross income:    {_usd(estimate.adjusted_gross_income)}",
        f"  {deduction_label:<26}-{_usd(estimate.total_deductions)}",
        f"  Taxable income:           {_usd(estimate.taxable_income)}",
        "",
        "  Bracket                     Income in bracket   Tax",
    ]
    for b in estimate.brackets:
        upper = _usd(b.max) if b.max is not None else "and up"
        label = f"{_pct(b.rate):>4} {_usd(b.min)} - {upper}"
        lines.append(f"  {label:<28}{_usd(b.taxable_amount):>17}   {_usd(b.tax)}")
    lines += [
        "",
        f"  Income tax:               {_usd(estimate.income_tax)}",
        f"  Self-employment tax:      {_usd(estimate.self_employment_tax)}",
        f"  Credits:                  -{_usd(estimate.total_credits)}",
        f"  Total tax liability:      {_usd(estimate.total_tax_liability)}",
        f"  Withholding to date:      {_usd(estimate.withholding_to_date)}",
        outcome,
        "",
        f"  Marginal rate:            {_pct(estimate.marginal_tax_rate)}",
        f"  Effective rate:           {_pct(estimate.effective_tax_rate)}",
    ]
    return "\n".join(lines)


def _write_estimate_rows(writer, estimate: TaxEstimate) -> None:
    """Write estimate rows to a CSV writer."""
    writer.writerow(["INCOME TAX BRACKETS", estimate.filing_status.value, str(estimate.tax_year)])
    writer.writerow(["Earnings Above", "Up To", "Rate", "Income In Bracket", "Tax Assessed"])
    for b in estimate.brackets:
        writer.writerow([
            f"{b.min:.2f}",
            f"{b.max:.2f}" if b.max is not None else "",
            f"{b.rate.normalize():f}",
            f"{b.taxable_amount:.2f}",
            f"{b.tax:.2f}",
        ])
    writer.writerow([])

    writer.writerow(["SUMMARY", "Amount"])
    rows = [
        ("Total income", estimate.total_income),
        ("Adjusted gross income", estimate.adjusted_gross_income),
        (f"Deductions ({estimate.deduction_method})", estimate.total_deductions),
        ("Taxable income", estimate.taxable_income),
        ("Income tax", estimate.income_tax),
        ("Self-employment tax", estimate.self_employment_tax),
        ("Credits", estimate.total_credits),
        ("Total tax liability", estimate.total_tax_liability),
        ("Withholding to date", estimate.withholding_to_date),
        ("Refund (or owed, if negative)", estimate.estimated_refund_or_owed),
        ("Marginal rate (%)", estimate.marginal_tax_rate),
        ("Effective rate (%)", estimate.effective_tax_rate),
    ]
    for caption, amount in rows:
        writer.writerow([caption, f"{amount:.2f}"])


def estimate_to_csv_string(estimate: TaxEstimate) -> str:
    """Convert a tax estimate to a CSV string."""
    output = io.StringIO()
    writer = csv.writer(output)
    _write_estimate_rows(writer, estimate)
    return output.getvalue()
