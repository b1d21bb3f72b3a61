"""Tax rules CLI commands.

Lists, shows and validates the per-year tax-rules YAML files.
"""

from pathlib import Path

import click

from taxcalc.sdk import (
    FilingStatus,
    TaxCalcError,
    available_tax_years,
    find_rules_file,
    load_tax_rules,
    parse_rules_file,
)


@click.group()
def rules():
    """Inspect per-year tax rules (brackets, deductions, FICA)."""
    pass


@rules.command("list")
def rules_list():
    """List tax years with rules available and where each is loaded from."""
    years = available_tax_years()
    if not years:
        click.echo("No tax rules found.")
        return
    for year in years:
        click.echo(f"{year}  {find_rules_file(year)}")


@rules.command("show")
@click.argument("year")
@click.option("--filing-status", "-s", default=None, help="Show only this filing status")
def rules_show(year, filing_status):
    """Show bracket tables and constants for YEAR."""
    if not year.isdigit() or len(year) != 4:
        raise click.BadParameter(f"Invalid year '{year}'. Must be 4 digits.")

    try:
        tax_rules = load_tax_rules(year)
        statuses = [FilingStatus.parse(filing_status)] if filing_status else list(FilingStatus)
    except TaxCalcError as e:
        raise click.ClickException(str(e))

    ss = tax_rules.social_security
    medicare = tax_rules.medicare
    click.echo(f"Tax year {tax_rules.year}")
    click.echo(f"  Social Security: {ss.tax_rate}% up to ${ss.wage_base:,.0f}")
    click.echo(f"  Medicare: {medicare.tax_rate}% "
               f"(+{medicare.additional_rate}% withheld over ${medicare.withholding_threshold:,.0f})")

    for status in statuses:
        status_rules = tax_rules.for_status(status)
        click.echo()
        click.echo(f"{status.value}  (standard deduction ${status_rules.standard_deduction:,.0f})")
        for bracket in status_rules.tax_brackets:
            upper = f"${bracket.max:,.0f}" if bracket.max is not None else "and up"
            click.echo(f"  {bracket.rate:>3}%  ${bracket.min:,.0f} - {upper}")


@rules.command("validate")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def rules_validate(path):
    """Validate a tax-rules YAML file before adding it to rules_dir.

    A file named YYYY.yaml must declare the same year.
    """
    expected = int(path.stem) if path.stem.isdigit() else None
    try:
        tax_rules = parse_rules_file(path, expected_year=expected)
    except TaxCalcError as e:
        raise click.ClickException(str(e))
    click.echo(click.style(f"OK: {path} (tax year {tax_rules.year})", fg="green"))
