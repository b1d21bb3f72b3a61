"""Tax rules loading and bracket table resolution.

Each tax year's constants live in a <year>.yaml file. Years are never
substituted for one another: asking for a year with no file raises
UnsupportedTaxYear rather than quietly applying another year's law.
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import ValidationError

from ..config import get_rules_dirs
from ..errors import InvalidInput, TaxRulesError, UnsupportedTaxYear
from ..schemas import FilingStatus, format_validation_error
from .schemas import TaxBracket, TaxRules

logger = logging.getLogger(__name__)


def available_tax_years() -> List[int]:
    """Get sorted list of tax years with rules available (ascending)."""
    years = set()
    for rules_dir in get_rules_dirs():
        years.update(int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit())
    return sorted(years)


def latest_tax_year() -> int:
    """Most recent year with rules available."""
    years = available_tax_years()
    if not years:
        raise UnsupportedTaxYear("any")
    return years[-1]


def _parse_year(year: Any) -> int:
    if isinstance(year, bool):
        raise InvalidInput(f"Invalid tax year: {year!r}")
    if isinstance(year, int):
        return year
    if isinstance(year, str) and year.strip().isdigit():
        return int(year.strip())
    raise InvalidInput(f"Invalid tax year: {year!r}. Must be a 4-digit year.")


def find_rules_file(year: Union[int, str]) -> Optional[Path]:
    """Locate <year>.yaml, preferring the user rules directory."""
    target = _parse_year(year)
    for rules_dir in get_rules_dirs():
        candidate = rules_dir / f"{target}.yaml"
        if candidate.exists():
            return candidate
    return None


def load_tax_rules(year: Union[int, str]) -> TaxRules:
    """Load and validate tax rules for a specific year.

    Raises:
        UnsupportedTaxYear: no rules file for the year
        TaxRulesError: the file exists but is malformed
    """
    target = _parse_year(year)
    config_file = find_rules_file(target)
    if config_file is None:
        raise UnsupportedTaxYear(target, available_tax_years())

    logger.debug(f"loading tax rules for {target} from {config_file}")
    return parse_rules_file(config_file, expected_year=target)


def parse_rules_file(config_file: Path, expected_year: Optional[int] = None) -> TaxRules:
    """Parse and validate one tax-rules YAML file.

    When expected_year is given, a missing ``year`` key defaults to it and a
    different declared year is an error.

    Raises:
        TaxRulesError: invalid YAML or schema violation
    """
    with open(config_file, "r") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise TaxRulesError(f"{config_file}: invalid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise TaxRulesError(f"{config_file}: expected a mapping at top level")

    if expected_year is not None:
        raw.setdefault("year", expected_year)
    try:
        rules = TaxRules.model_validate(raw)
    except ValidationError as e:
        raise TaxRulesError(format_validation_error(str(config_file), e)) from e

    if expected_year is not None and rules.year != expected_year:
        raise TaxRulesError(f"{config_file}: declares year {rules.year}, expected {expected_year}")
    return rules


def get_tax_brackets(filing_status: Union[FilingStatus, str], tax_year: Union[int, str]) -> List[TaxBracket]:
    """Get the ordered bracket table for a filing status and year."""
    status = FilingStatus.parse(filing_status)
    return list(load_tax_rules(tax_year).for_status(status).tax_brackets)


def get_standard_deduction(filing_status: Union[FilingStatus, str], tax_year: Union[int, str]) -> Decimal:
    """Get the standard deduction for a filing status and year."""
    status = FilingStatus.parse(filing_status)
    return load_tax_rules(tax_year).for_status(status).standard_deduction
