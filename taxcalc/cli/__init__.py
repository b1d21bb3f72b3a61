"""Tax Calc command-line interface."""
