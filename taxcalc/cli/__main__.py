"""Tax Calc CLI - Command-line interface for withholding and tax estimates."""

import logging
import os

import click

from taxcalc import __version__

from .estimate_commands import estimate as estimate_command
from .rules_commands import rules as rules_group
from .settings_commands import settings as settings_group
from .withhold_commands import withhold as withhold_group


def _configure_logging():
    """Configure logging based on LOG_LEVEL environment variable."""
    log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S"
    )


@click.group()
@click.version_option(version=__version__, prog_name="tax-calc")
def cli():
    """Tax Calc - Federal withholding and annual tax estimates.

    Tax rules are loaded per year from (in order):

    \b
    1. settings.json 'rules_dir' (if set via 'tax-calc settings rules-dir')
    2. tax rules shipped with the package

    Settings live in TAX_CALC_CONFIG_PATH or ~/.config/tax-calc/.
    Set LOG_LEVEL=DEBUG to see calculation steps.
    """
    _configure_logging()


# Add subcommand groups
cli.add_command(withhold_group)
cli.add_command(estimate_command)
cli.add_command(rules_group)
cli.add_command(settings_group)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
