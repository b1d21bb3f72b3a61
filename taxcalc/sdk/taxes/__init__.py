"""taxes - Federal tax calculation and withholding logic.

Scope:
- Year-specific rules and bracket tables (tax_rules/{year}.yaml)
- Progressive bracket tax
- Per-period withholding (FIT, SS, Medicare) from W-4 elections
- Annual liability and refund estimate
- Extra-withholding recommendations

Constraints:
- Pure calculation - no persistence, no identity, no network
- Receives data, returns frozen result models
- Unknown tax years are errors, never silently mapped to another year

Modules:
- rules: Tax rules loading and bracket table resolution
- brackets: Progressive tax and per-bracket breakdown
- withholding: Per-period FIT and FICA
- estimate: Annual tax estimate
- planning: Extra withholding recommendation

Usage:
    from taxcalc.sdk.taxes import calculate_withholding, calculate_tax_estimate

    result = calculate_withholding(
        {"filing_status": "single"},
        {"salary": 60000, "pay_frequency": "monthly"},
    )
    estimate = calculate_tax_estimate(income, deductions, credits, "single", 2025)
"""

# Rules and bracket tables
from .rules import (
    available_tax_years,
    latest_tax_year,
    load_tax_rules,
    find_rules_file,
    parse_rules_file,
    get_tax_brackets,
    get_standard_deduction,
)

# Tax rules schemas
from .schemas import TaxBracket, TaxRules, check_bracket_table

# Bracket math
from .brackets import BracketTax, calculate_progressive_tax, bracket_breakdown

# Per-period withholding
from .withholding import calculate_withholding

# Annual estimate
from .estimate import calculate_tax_estimate, calculate_self_employment_tax

# Planning
from .planning import WithholdingRecommendation, recommend_extra_withholding

__all__ = [
    # Rules
    "available_tax_years",
    "latest_tax_year",
    "load_tax_rules",
    "find_rules_file",
    "parse_rules_file",
    "get_tax_brackets",
    "get_standard_deduction",
    "TaxBracket",
    "TaxRules",
    "check_bracket_table",
    # Brackets
    "BracketTax",
    "calculate_progressive_tax",
    "bracket_breakdown",
    # Withholding
    "calculate_withholding",
    # Estimate
    "calculate_tax_estimate",
    "calculate_self_employment_tax",
    # Planning
    "WithholdingRecommendation",
    "recommend_extra_withholding",
]
