"""Configuration management for Payslip Calc.

Machine settings live in settings.json:
   - data_dir: where payslip records are stored (optional)
   - default_currency: ISO 4217 code used when none is given (default MYR)

Config directory resolution:
1. PAYSLIP_CONFIG_PATH environment variable (if set)
2. ~/.config/payslip-calc/ (XDG_CONFIG_HOME fallback)

Data directory resolution:
1. settings.json "data_dir" key (if set via CLI)
2. XDG_DATA_HOME/payslip-calc/ or ~/.local/share/payslip-calc/
"""

import json
import os
import re
from pathlib import Path
from typing import Any


APP_NAME = "payslip-calc"
SETTINGS_FILENAME = "settings.json"

DEFAULT_CURRENCY = "MYR"
SUPPORTED_CURRENCIES = ("MYR", "SGD", "IDR")

_CURRENCY_CODE_RE = re.compile(r"^[A-Za-z]{3}$")


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAYSLIP_CONFIG_PATH environment variable
    2. ~/.config/payslip-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    # 1. Check environment variable
    env_path = os.environ.get("PAYSLIP_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    # 2. Fall back to XDG config path
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def normalize_currency_code(code: str) -> str:
    """Upper-case a currency code after checking it is three letters.

    Raises:
        ValueError: If code is not three ASCII letters
    """
    if not isinstance(code, str) or not _CURRENCY_CODE_RE.match(code.strip()):
        raise ValueError(f"Currency code must be a 3-letter ISO 4217 code, got: {code!r}")
    return code.strip().upper()


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    default_currency values are validated and upper-cased.

    Returns:
        Path to the saved settings file
    """
    if key == "default_currency":
        value = normalize_currency_code(value)

    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_default_currency() -> str:
    """Currency used when a caller doesn't specify one."""
    return get_setting("default_currency") or DEFAULT_CURRENCY


def get_data_path() -> Path:
    """Get the data directory path.

    Returns:
        Path to the data directory (created if doesn't exist)
    """
    custom = get_setting("data_dir")
    if custom:
        data_path = Path(custom).expanduser()
    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
        data_path = Path(xdg_data_home) / APP_NAME
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path
