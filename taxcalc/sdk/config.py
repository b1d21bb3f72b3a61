"""Configuration management for Tax Calc.

Configuration is a single machine-specific settings.json with two keys:
   - rules_dir: directory of user <year>.yaml tax rules (optional)
   - default_output_format: text, json or csv for CLI output

Config directory resolution:
1. TAX_CALC_CONFIG_PATH environment variable (if set)
2. $XDG_CONFIG_HOME/tax-calc/ or ~/.config/tax-calc/

Tax rules resolution (per year):
1. <rules_dir>/<year>.yaml when rules_dir is set and the file exists
2. tax_rules/<year>.yaml shipped with the package
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

APP_NAME = "tax-calc"
SETTINGS_FILENAME = "settings.json"
PACKAGED_RULES_DIR = Path(__file__).parent.parent / "tax_rules"

OUTPUT_FORMATS = ("text", "json", "csv")
DEFAULT_OUTPUT_FORMAT = "text"

# Known settings and the type each value must have
SETTINGS_SCHEMA = {
    "rules_dir": str,
    "default_output_format": str,
}


def get_config_dir() -> Path:
    """Directory holding settings.json.

    TAX_CALC_CONFIG_PATH wins; otherwise tax-calc/ under XDG_CONFIG_HOME
    (default ~/.config).
    """
    override = os.environ.get("TAX_CALC_CONFIG_PATH")
    if override:
        return Path(override)
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def validate_setting(key: str, value: Any) -> tuple[bool, str]:
    """Check a setting key and value against SETTINGS_SCHEMA.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if key not in SETTINGS_SCHEMA:
        valid_keys = ", ".join(SETTINGS_SCHEMA)
        return False, f"Unknown setting '{key}'. Valid keys: {valid_keys}"
    if not isinstance(value, SETTINGS_SCHEMA[key]):
        return False, f"Setting '{key}' must be a {SETTINGS_SCHEMA[key].__name__}"
    if key == "default_output_format" and value not in OUTPUT_FORMATS:
        return False, f"default_output_format must be one of: {', '.join(OUTPUT_FORMATS)}"
    return True, ""


def load_settings() -> dict:
    """Read settings.json; unknown or invalid entries are logged and skipped.

    Returns:
        Settings dictionary (empty if the file does not exist)
    """
    path = get_settings_path()
    if not path.exists():
        return {}

    with open(path, "r") as f:
        raw = json.load(f)

    settings = {}
    for key, value in raw.items():
        ok, error = validate_setting(key, value)
        if ok:
            settings[key] = value
        else:
            logger.warning(f"{path}: ignoring setting: {error}")
    return settings


def save_settings(settings: dict) -> Path:
    """Write settings.json, creating the config directory if needed."""
    path = get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(settings, f, indent=2)
    return path


def get_setting(key: str, default: Any = None) -> Any:
    """Get one setting value from settings.json."""
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Validate and store one setting.

    Raises:
        ValueError: unknown key or invalid value
    """
    ok, error = validate_setting(key, value)
    if not ok:
        raise ValueError(error)
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_output_format() -> str:
    """Default CLI output format from settings."""
    return get_setting("default_output_format", DEFAULT_OUTPUT_FORMAT)


def get_user_rules_dir() -> Optional[Path]:
    """Get the user tax-rules directory from settings, if configured."""
    rules_dir = get_setting("rules_dir")
    if not rules_dir:
        return None
    return Path(rules_dir).expanduser()


def get_rules_dirs() -> List[Path]:
    """Directories searched for <year>.yaml, highest priority first."""
    dirs = []
    user_dir = get_user_rules_dir()
    if user_dir is not None:
        if user_dir.is_dir():
            dirs.append(user_dir)
        else:
            logger.warning(f"rules_dir {user_dir} is not a directory, ignoring")
    dirs.append(PACKAGED_RULES_DIR)
    return dirs
