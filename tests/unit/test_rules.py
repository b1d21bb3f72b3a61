"""Tests for tax rules loading, year resolution and user overrides.

Uses isolated directories via tmp_path and TAX_CALC_CONFIG_PATH
to avoid touching real settings.
"""

import json
from decimal import Decimal

import pytest

from taxcalc.sdk import (
    FilingStatus,
    InvalidInput,
    TaxRulesError,
    UnsupportedTaxYear,
    available_tax_years,
    find_rules_file,
    get_standard_deduction,
    get_tax_brackets,
    latest_tax_year,
    load_tax_rules,
    PACKAGED_RULES_DIR,
)


def _use_rules_dir(isolated_env, rules_dir):
    settings = {"rules_dir": str(rules_dir)}
    (isolated_env["config_dir"] / "settings.json").write_text(json.dumps(settings))


class TestPackagedRules:

    def test_packaged_years(self):
        years = available_tax_years()
        assert 2024 in years
        assert 2025 in years
        assert latest_tax_year() == max(years)

    def test_2024_single_brackets(self):
        brackets = get_tax_brackets(FilingStatus.SINGLE, 2024)

        assert len(brackets) == 7
        assert brackets[0].rate == 10
        assert brackets[0].max == 11600
        assert brackets[-1].rate == 37
        assert brackets[-1].min == 609350
        assert brackets[-1].max is None

    def test_short_form_filing_status(self):
        assert get_tax_brackets("hoh", 2024)[0].max == 16550
        assert get_tax_brackets("MFJ", "2024")[0].max == 23200

    def test_standard_deductions_2025(self):
        assert get_standard_deduction("single", 2025) == 15750
        assert get_standard_deduction("married_jointly", 2025) == 31500
        assert get_standard_deduction("married_separately", 2025) == 15750
        assert get_standard_deduction("head_of_household", 2025) == 23625

    def test_fica_constants(self):
        rules = load_tax_rules(2024)

        assert rules.social_security.wage_base == 168600
        assert rules.social_security.tax_rate == Decimal("6.2")
        assert rules.medicare.tax_rate == Decimal("1.45")
        assert rules.medicare.additional_thresholds[FilingStatus.MARRIED_JOINTLY] == 250000

    def test_files_resolve_to_package(self):
        assert find_rules_file(2025) == PACKAGED_RULES_DIR / "2025.yaml"


class TestUnsupportedYear:

    def test_unknown_year_raises(self):
        with pytest.raises(UnsupportedTaxYear) as exc_info:
            load_tax_rules(1999)

        assert exc_info.value.year == 1999
        assert 2025 in exc_info.value.available
        assert "1999" in str(exc_info.value)

    def test_unknown_year_is_lookup_error(self):
        with pytest.raises(LookupError):
            get_tax_brackets("single", 2150)

    def test_malformed_year_is_invalid_input(self):
        with pytest.raises(InvalidInput):
            load_tax_rules("20x4")

    def test_unknown_filing_status(self):
        with pytest.raises(InvalidInput, match="filing status"):
            get_tax_brackets("widowed", 2025)


class TestUserRulesDir:

    def test_toy_year_available(self, toy_rules):
        assert toy_rules["year"] in available_tax_years()
        assert latest_tax_year() == toy_rules["year"]
        assert load_tax_rules(toy_rules["year"]).social_security.wage_base == 100000

    def test_user_file_overrides_packaged_year(self, tmp_path, isolated_env, rules_text):
        rules_dir = tmp_path / "override"
        rules_dir.mkdir()
        (rules_dir / "2025.yaml").write_text(rules_text(2025))
        _use_rules_dir(isolated_env, rules_dir)

        assert find_rules_file(2025) == rules_dir / "2025.yaml"
        assert load_tax_rules(2025).social_security.wage_base == 100000
        # Other years still come from the package
        assert load_tax_rules(2024).social_security.wage_base == 168600

    def test_missing_rules_dir_is_ignored(self, tmp_path, isolated_env):
        _use_rules_dir(isolated_env, tmp_path / "does-not-exist")

        assert load_tax_rules(2024).year == 2024

    def test_invalid_yaml(self, toy_rules):
        toy_rules["rules_file"].write_text("year: [unclosed\n")

        with pytest.raises(TaxRulesError, match="invalid YAML"):
            load_tax_rules(toy_rules["year"])

    def test_gap_in_brackets_rejected(self, toy_rules):
        text = toy_rules["rules_file"].read_text()
        toy_rules["rules_file"].write_text(text.replace("min: 11000, max: 44725", "min: 12000, max: 44725", 1))

        with pytest.raises(TaxRulesError, match="does not continue"):
            load_tax_rules(toy_rules["year"])

    def test_missing_filing_status_rejected(self, toy_rules):
        text = toy_rules["rules_file"].read_text()
        head, _, _ = text.partition("  head_of_household:")
        toy_rules["rules_file"].write_text(head)

        with pytest.raises(TaxRulesError, match="head_of_household"):
            load_tax_rules(toy_rules["year"])

    def test_year_mismatch_rejected(self, toy_rules):
        (toy_rules["rules_dir"] / "2098.yaml").write_text(toy_rules["rules_file"].read_text())

        with pytest.raises(TaxRulesError, match="declares year 2099"):
            load_tax_rules(2098)

    def test_top_level_must_be_mapping(self, toy_rules):
        toy_rules["rules_file"].write_text("- 1\n- 2\n")

        with pytest.raises(TaxRulesError, match="mapping"):
            load_tax_rules(toy_rules["year"])
