"""Error types raised by the tax calculators.

Every calculation is deterministic, so an error raised for a given input is
raised again for the same input. Callers surface the message as-is.
"""


class TaxCalcError(Exception):
    """Base class for all tax-calc errors."""
    pass


class InvalidInput(TaxCalcError, ValueError):
    """Raised for negative money, missing fields, or unknown enum values."""
    pass


class UnsupportedTaxYear(TaxCalcError, LookupError):
    """Raised when no tax rules are defined for the requested year."""

    def __init__(self, year, available=None):
        self.year = year
        self.available = list(available or [])
        if self.available:
            years = ", ".join(str(y) for y in self.available)
            message = f"No tax rules for year {year} (available: {years})"
        else:
            message = f"No tax rules for year {year}"
        super().__init__(message)


class TaxRulesError(TaxCalcError):
    """Raised when a tax-rules file exists but cannot be parsed or validated."""
    pass
