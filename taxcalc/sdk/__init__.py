"""Tax Calc SDK - Core functionality for withholding and tax estimates."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_user_rules_dir,
    get_rules_dirs,
    get_output_format,
    validate_setting,
    PACKAGED_RULES_DIR,
    OUTPUT_FORMATS,
)

from .errors import (
    TaxCalcError,
    InvalidInput,
    UnsupportedTaxYear,
    TaxRulesError,
)

from .schemas import (
    FilingStatus,
    PayFrequency,
    PAY_PERIODS,
    WithholdingProfile,
    IncomeDetails,
    DeductionDetails,
    CreditDetails,
    AnnualProjection,
    WithholdingResult,
    BracketDetail,
    TaxBreakdown,
    TaxEstimate,
)

from .taxes import (
    available_tax_years,
    latest_tax_year,
    load_tax_rules,
    find_rules_file,
    parse_rules_file,
    get_tax_brackets,
    get_standard_deduction,
    TaxBracket,
    TaxRules,
    BracketTax,
    calculate_progressive_tax,
    bracket_breakdown,
    calculate_withholding,
    calculate_tax_estimate,
    WithholdingRecommendation,
    recommend_extra_withholding,
)

from .report import (
    to_json_dict,
    format_withholding,
    format_estimate,
    estimate_to_csv_string,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_user_rules_dir",
    "get_rules_dirs",
    "get_output_format",
    "validate_setting",
    "PACKAGED_RULES_DIR",
    "OUTPUT_FORMATS",
    # Errors
    "TaxCalcError",
    "InvalidInput",
    "UnsupportedTaxYear",
    "TaxRulesError",
    # Schemas
    "FilingStatus",
    "PayFrequency",
    "PAY_PERIODS",
    "WithholdingProfile",
    "IncomeDetails",
    "DeductionDetails",
    "CreditDetails",
    "AnnualProjection",
    "WithholdingResult",
    "BracketDetail",
    "TaxBreakdown",
    "TaxEstimate",
    # Taxes
    "available_tax_years",
    "latest_tax_year",
    "load_tax_rules",
    "find_rules_file",
    "parse_rules_file",
    "get_tax_brackets",
    "get_standard_deduction",
    "TaxBracket",
    "TaxRules",
    "BracketTax",
    "calculate_progressive_tax",
    "bracket_breakdown",
    "calculate_withholding",
    "calculate_tax_estimate",
    "WithholdingRecommendation",
    "recommend_extra_withholding",
    # Reports
    "to_json_dict",
    "format_withholding",
    "format_estimate",
    "estimate_to_csv_string",
]
