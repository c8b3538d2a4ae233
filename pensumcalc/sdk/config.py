"""Configuration management for Pensum Calc.

Configuration is a single settings.json in the config directory. Only two
keys are known:
   - school_year_dir: directory holding <code>.yaml school-year files
   - default_output_format: "table" or "json"

The config directory is PENSUM_CALC_CONFIG_PATH if set, else
XDG_CONFIG_HOME/pensum-calc. Without a school_year_dir setting,
school-year files are looked up in XDG_DATA_HOME/pensum-calc/school-years.
"""

import json
import os
from pathlib import Path
from typing import Dict, Optional, Tuple

APP_NAME = "pensum-calc"
SETTINGS_FILENAME = "settings.json"
SCHOOL_YEAR_SUBDIR = "school-years"
OUTPUT_FORMATS = ("table", "json")
SETTING_KEYS = ("school_year_dir", "default_output_format")


class SchoolYearNotFoundError(Exception):
    """Raised when a school-year file cannot be located."""
    pass


class SettingsError(ValueError):
    """Raised for an unknown setting key, an invalid value or an unreadable settings.json."""
    pass


def get_config_dir() -> Path:
    env_path = os.environ.get("PENSUM_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / APP_NAME


def get_settings_path() -> Path:
    """Path of settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> Dict[str, str]:
    """Stored settings; an absent file means no settings.

    Raises:
        SettingsError: If settings.json is not a JSON object
    """
    path = get_settings_path()
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise SettingsError(f"Invalid settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise SettingsError(f"Invalid settings file {path}: expected an object")
    return data


def get_setting(key: str) -> Optional[str]:
    return load_settings().get(key)


def validate_setting(key: str, value: str) -> str:
    """Check a setting value and return it in stored form.

    school_year_dir must be an existing directory and is stored resolved;
    default_output_format must be one of OUTPUT_FORMATS.

    Raises:
        SettingsError: If the key is unknown or the value is invalid
    """
    if key == "default_output_format":
        if value not in OUTPUT_FORMATS:
            raise SettingsError(
                f"Invalid default_output_format '{value}'. Choose from: {', '.join(OUTPUT_FORMATS)}"
            )
        return value
    if key == "school_year_dir":
        path = Path(value).expanduser()
        if not path.is_dir():
            raise SettingsError(f"school_year_dir is not a directory: {path}")
        return str(path.resolve())
    raise SettingsError(f"Unknown setting '{key}'. Known settings: {', '.join(SETTING_KEYS)}")


def update_setting(key: str, value: Optional[str]) -> Path:
    """Store a validated setting, or remove it when value is None.

    Returns:
        Path to settings.json
    """
    if key not in SETTING_KEYS:
        raise SettingsError(f"Unknown setting '{key}'. Known settings: {', '.join(SETTING_KEYS)}")

    settings = load_settings()
    if value is None:
        settings.pop(key, None)
    else:
        settings[key] = validate_setting(key, value)

    path = get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings, indent=2))
    return path


def get_school_year_dir() -> Path:
    """Directory holding school-year files."""
    custom = get_setting("school_year_dir")
    if custom:
        return Path(custom).expanduser()

    xdg_data_home = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
    return Path(xdg_data_home) / APP_NAME / SCHOOL_YEAR_SUBDIR


def get_default_output_format() -> str:
    value = get_setting("default_output_format")
    return value if value in OUTPUT_FORMATS else "table"


def effective_settings() -> Dict[str, Tuple[str, str]]:
    """Effective value of every known setting with its source.

    Returns:
        Mapping key -> (value, source), source being "settings.json" or "default"
    """
    stored = load_settings()
    values = {
        "school_year_dir": str(get_school_year_dir()),
        "default_output_format": get_default_output_format(),
    }
    return {
        key: (values[key], "settings.json" if stored.get(key) == values[key] else "default")
        for key in SETTING_KEYS
    }


def resolve_school_year_path(code_or_path: str) -> Path:
    """Resolve a school-year argument to a file path.

    Accepts an existing file path, or a school-year code looked up as
    <code>.yaml / <code>.yml in the school-year directory.

    Raises:
        SchoolYearNotFoundError: If nothing matches
    """
    candidate = Path(code_or_path).expanduser()
    if candidate.is_file():
        return candidate

    school_year_dir = get_school_year_dir()
    for suffix in (".yaml", ".yml"):
        path = school_year_dir / f"{code_or_path}{suffix}"
        if path.is_file():
            return path

    raise SchoolYearNotFoundError(
        f"School year '{code_or_path}' not found. Checked:\n"
        f"  1. {candidate} (not a file)\n"
        f"  2. {school_year_dir}/{code_or_path}.yaml (not found)\n\n"
        f"Set the directory with: pensum-calc settings set school_year_dir /path/to/dir"
    )
