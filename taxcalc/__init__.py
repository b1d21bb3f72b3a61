"""Tax Calc - federal withholding and annual tax estimates."""

__version__ = "0.1.0"
