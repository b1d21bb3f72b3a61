"""Withholding commands."""

import json

import click

from taxcalc.sdk import (
    TaxCalcError,
    calculate_withholding,
    format_withholding,
    get_output_format,
    recommend_extra_withholding,
    to_json_dict,
)


def w4_options(func):
    """Salary, pay frequency and W-4 election options shared by withhold commands."""
    options = [
        click.option("--salary", type=str, required=True, help="Annual salary"),
        click.option("--frequency", "pay_frequency", default="biweekly", show_default=True,
                     help="weekly, biweekly, semimonthly, monthly, quarterly or annually"),
        click.option("--filing-status", "-s", default="single", show_default=True,
                     help="single, married_jointly (mfj), married_separately (mfs), head_of_household (hoh)"),
        click.option("--multiple-jobs", is_flag=True, help="W-4 Step 2(c) checkbox"),
        click.option("--dependents", "claim_dependents", default="0", help="W-4 Step 3 annual credit amount"),
        click.option("--other-income", default="0", help="W-4 Step 4(a) other annual income"),
        click.option("--deductions", default="0", help="W-4 Step 4(b) deductions"),
        click.option("--extra", "extra_withholding", default="0", help="W-4 Step 4(c) extra withholding per period"),
        click.option("--pre-tax", "pre_tax_deductions", default="0", help="Annual Section 125 / other pre-tax deductions"),
        click.option("--401k", "retirement_401k", default="0", help="Annual traditional 401(k) contributions"),
        click.option("--hsa", default="0", help="Annual HSA contributions"),
        click.option("--fsa", default="0", help="Annual FSA contributions"),
        click.option("--year", "tax_year", type=int, default=None, help="Tax year (default: latest available)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _split_inputs(kwargs: dict) -> tuple:
    profile = {
        "filing_status": kwargs["filing_status"],
        "multiple_jobs": kwargs["multiple_jobs"],
        "claim_dependents": kwargs["claim_dependents"],
        "other_income": kwargs["other_income"],
        "deductions": kwargs["deductions"],
        "extra_withholding": kwargs["extra_withholding"],
    }
    income = {
        "salary": kwargs["salary"],
        "pay_frequency": kwargs["pay_frequency"],
        "pre_tax_deductions": kwargs["pre_tax_deductions"],
        "retirement_401k": kwargs["retirement_401k"],
        "hsa": kwargs["hsa"],
        "fsa": kwargs["fsa"],
    }
    return profile, income


@click.group()
def withhold():
    """Calculate per-paycheck withholding and recommend adjustments."""
    pass


@withhold.command("calc")
@w4_options
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None,
              help="Output format (default: settings default_output_format, else text)")
def calc(output_format, **kwargs):
    """Calculate withholding for one pay period.

    Examples:

    \b
      tax-calc withhold calc --salary 60000 --frequency monthly
      tax-calc withhold calc --salary 150000 -s mfj --multiple-jobs --dependents 2000
      tax-calc withhold calc --salary 90000 --401k 10000 --format json
    """
    profile, income = _split_inputs(kwargs)
    output_format = output_format or get_output_format()

    try:
        result = calculate_withholding(profile, income, tax_year=kwargs["tax_year"])
    except TaxCalcError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(to_json_dict(result), indent=2))
    else:
        click.echo(format_withholding(result))


@withhold.command("recommend")
@w4_options
@click.option("--target-refund", default="0", show_default=True, help="Refund to aim for at filing time")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None,
              help="Output format (default: settings default_output_format, else text)")
def recommend(target_refund, output_format, **kwargs):
    """Recommend W-4 Step 4(c) extra withholding per pay period.

    Projects a full year of withholding at the given elections, estimates
    the year's tax with the standard deduction, and reports the extra
    amount per paycheck needed to reach the target refund.

    Examples:

    \b
      tax-calc withhold recommend --salary 120000 -s mfj
      tax-calc withhold recommend --salary 80000 --target-refund 500
    """
    profile, income = _split_inputs(kwargs)
    output_format = output_format or get_output_format()

    try:
        rec = recommend_extra_withholding(
            profile, income,
            deductions={"use_standard_deduction": True},
            credits={},
            tax_year=kwargs["tax_year"],
            target_refund=target_refund,
        )
    except TaxCalcError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(to_json_dict(rec), indent=2))
        return

    click.echo(f"Withholding recommendation ({rec.tax_year}, {rec.pay_periods_per_year} pay periods)")
    click.echo()
    click.echo(f"  Projected federal withholding:  ${rec.projected_annual_withholding:,.2f}")
    click.echo(f"  Projected tax liability:        ${rec.projected_tax_liability:,.2f}")
    if rec.projected_refund_or_owed >= 0:
        click.echo(f"  Projected refund:               ${rec.projected_refund_or_owed:,.2f}")
    else:
        click.echo(f"  Projected amount owed:          ${-rec.projected_refund_or_owed:,.2f}")
    click.echo(f"  Target refund:                  ${rec.target_refund:,.2f}")
    click.echo()
    if rec.recommended_extra_withholding == rec.current_extra_withholding:
        click.echo(click.style("No change needed: current withholding meets the target.", fg="green"))
    else:
        click.echo(f"  Set W-4 Step 4(c) to:           ${rec.recommended_extra_withholding:,.2f} per period")
        click.echo(f"  Refund with change:             ${rec.refund_or_owed_with_recommendation:,.2f}")
