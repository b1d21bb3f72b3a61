"""Annual tax estimate command."""

import json
from pathlib import Path

import click
import yaml

from taxcalc.sdk import (
    TaxCalcError,
    calculate_tax_estimate,
    estimate_to_csv_string,
    format_estimate,
    get_output_format,
    latest_tax_year,
    to_json_dict,
)

INPUT_KEYS = {"filing_status", "tax_year", "withholding_to_date", "income", "deductions", "credits"}


def load_estimate_input(path: Path) -> dict:
    """Load an estimate input file (.json, or YAML for anything else)."""
    with open(path, "r") as f:
        try:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise click.ClickException(f"{path}: could not parse input: {e}")

    if not isinstance(data, dict):
        raise click.ClickException(f"{path}: expected a mapping at top level")

    unknown = set(data) - INPUT_KEYS
    if unknown:
        raise click.ClickException(f"{path}: unknown keys: {', '.join(sorted(unknown))}")
    for key in ("filing_status", "income"):
        if key not in data:
            raise click.ClickException(f"{path}: missing required key '{key}'")
    return data


@click.command("estimate")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--year", "tax_year", type=int, default=None,
              help="Tax year (default: tax_year in the file, else latest available)")
@click.option("--withheld", type=str, default=None,
              help="Federal tax withheld to date (overrides withholding_to_date in the file)")
@click.option("--format", "output_format", type=click.Choice(["text", "json", "csv"]), default=None,
              help="Output format (default: settings default_output_format, else text)")
def estimate(input_file, tax_year, withheld, output_format):
    """Estimate annual federal tax and refund from INPUT_FILE.

    INPUT_FILE is YAML or JSON:

    \b
      filing_status: married_jointly
      tax_year: 2025
      withholding_to_date: 14000
      income:
        salary: 145000
        pay_frequency: biweekly
        retirement_401k: 12000
      deductions:
        use_standard_deduction: true
      credits:
        child_tax_credit: 2000

    Output formats:

    \b
      --format=text  Summary with bracket table (default)
      --format=json  JSON object
      --format=csv   CSV (for spreadsheet import)
    """
    data = load_estimate_input(input_file)
    output_format = output_format or get_output_format()

    try:
        year = tax_year or data.get("tax_year") or latest_tax_year()
        result = calculate_tax_estimate(
            income=data["income"],
            deductions=data.get("deductions") or {"use_standard_deduction": True},
            credits=data.get("credits") or {},
            filing_status=data["filing_status"],
            tax_year=year,
            withholding_to_date=withheld if withheld is not None else data.get("withholding_to_date", 0),
        )
    except TaxCalcError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(to_json_dict(result), indent=2))
    elif output_format == "csv":
        click.echo(estimate_to_csv_string(result), nl=False)
    else:
        click.echo(format_estimate(result))
