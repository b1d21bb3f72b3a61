"""Settings CLI commands for Tax Calc.

Manages settings.json - user tax rules directory, preferences.
"""

import click
from pathlib import Path

from taxcalc.sdk import (
    OUTPUT_FORMATS,
    PACKAGED_RULES_DIR,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_settings_path,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - rules_dir: directory of YYYY.yaml tax rules overriding the packaged ones
    - default_output_format: text, json or csv
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Tax rules search path:")
    if current.get("rules_dir"):
        click.echo(f"  1. {current['rules_dir']}")
        click.echo(f"  2. {PACKAGED_RULES_DIR} (packaged)")
    else:
        click.echo(f"  {PACKAGED_RULES_DIR} (packaged)")


@settings.command("rules-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom rules_dir, use packaged rules only")
def settings_rules_dir(path, clear):
    """Set or clear the user tax rules directory.

    PATH holds YYYY.yaml files. A year found there replaces the packaged
    rules for that year; other years still come from the package.

    Examples:
        tax-calc settings rules-dir ~/tax-rules
        tax-calc settings rules-dir --clear
    """
    if clear:
        current = load_settings()
        if "rules_dir" in current:
            del current["rules_dir"]
            save_settings(current)
            click.echo("Cleared rules_dir setting.")
        else:
            click.echo("rules_dir was not set.")
        return

    if not path:
        current_rules_dir = get_setting("rules_dir")
        if current_rules_dir:
            click.echo(f"Current rules_dir: {current_rules_dir}")
        else:
            click.echo(f"No custom rules_dir set. Using packaged rules: {PACKAGED_RULES_DIR}")
        return

    rules_path = Path(path).expanduser().resolve()
    if not rules_path.is_dir():
        raise click.ClickException(f"Not a directory: {rules_path}")

    set_setting("rules_dir", str(rules_path))
    click.echo(f"Set rules_dir: {rules_path}")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("output-format")
@click.argument("fmt", type=click.Choice(list(OUTPUT_FORMATS)))
def settings_output_format(fmt):
    """Set the default output format for withhold and estimate commands."""
    set_setting("default_output_format", fmt)
    click.echo(f"Set default_output_format: {fmt}")
