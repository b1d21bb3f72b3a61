"""Shared fixtures.

Every test runs with TAX_CALC_CONFIG_PATH pointed at an empty temp
directory so a developer's own settings.json never leaks in.
"""

import json
import pytest


# Toy rules used for hand-checkable numbers. Every filing status shares the
# same three brackets: 10% to 11,000, 12% to 44,725, 22% above.
TOY_YEAR = 2099

TOY_BRACKETS = [
    {"rate": 10, "min": 0, "max": 11000},
    {"rate": 12, "min": 11000, "max": 44725},
    {"rate": 22, "min": 44725},
]

TOY_RULES_YAML = """\
year: {year}
social_security:
  wage_base: 100000
  tax_rate: 6.2
medicare:
  tax_rate: 1.45
  additional_rate: 0.9
  withholding_threshold: 200000
  additional_thresholds:
    single: 200000
    married_jointly: 250000
    married_separately: 125000
    head_of_household: 200000
self_employment:
  social_security_rate: 12.4
  medicare_rate: 2.9
filing_status:
{statuses}
"""

TOY_STATUS_YAML = """\
  {status}:
    standard_deduction: 14600
    tax_brackets:
      - {{rate: 10, min: 0, max: 11000}}
      - {{rate: 12, min: 11000, max: 44725}}
      - {{rate: 22, min: 44725}}
"""


def toy_rules_text(year: int = TOY_YEAR) -> str:
    statuses = "".join(
        TOY_STATUS_YAML.format(status=s)
        for s in ("single", "married_jointly", "married_separately", "head_of_household")
    )
    return TOY_RULES_YAML.format(year=year, statuses=statuses.rstrip("\n"))


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point config at an empty temp directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("TAX_CALC_CONFIG_PATH", str(config_dir))
    return {"config_dir": config_dir}


@pytest.fixture
def toy_rules(tmp_path, isolated_env):
    """User rules_dir holding the toy year, registered in settings.json."""
    rules_dir = tmp_path / "rules"
    rules_dir.mkdir()
    rules_file = rules_dir / f"{TOY_YEAR}.yaml"
    rules_file.write_text(toy_rules_text())

    settings = {"rules_dir": str(rules_dir)}
    (isolated_env["config_dir"] / "settings.json").write_text(json.dumps(settings))

    return {"rules_dir": rules_dir, "rules_file": rules_file, "year": TOY_YEAR}


@pytest.fixture
def rules_text():
    """Factory for toy rules YAML text for a given year."""
    return toy_rules_text
