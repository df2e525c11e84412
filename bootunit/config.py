"""Configuration loading and management for bootunit."""

from pathlib import Path
from typing import Any

from .core.exceptions import ConfigFileError, ConfigValidationError
from .core.settings import CONFIG_DIR_NAME, CONFIG_FILE_NAME, find_config_file, load_settings

VALID_LOG_LEVELS = {"debug", "info", "warning", "error"}

# Config keys that can be set via `bootunit config`
CONFIGURABLE_KEYS = {
    "units.file": {
        "type": str,
        "default": "units.toml",
        "description": "Units file, relative to the directory holding .bootunit/",
    },
    "units.root": {
        "type": str,
        "default": None,
        "description": "Base directory for unit commands (defaults to the units file's directory)",
    },
    "activation.target": {
        "type": str,
        "default": "multi-user.target",
        "description": "Target activated when `bootunit activate` is given no target",
    },
    "activation.reached": {
        "type": list,
        "default": [],
        "description": "Events treated as already reached (comma-separated)",
    },
    "activation.max_workers": {
        "type": int,
        "default": 4,
        "description": "Maximum number of units activated concurrently",
    },
    "output.quiet": {
        "type": bool,
        "default": False,
        "description": "Only print failed or blocked units after activation",
    },
    "logging.level": {
        "type": str,
        "default": "warning",
        "description": "Log level (debug, info, warning, error)",
    },
    "logging.console": {
        "type": bool,
        "default": False,
        "description": "Output debug logs to stderr",
    },
    "logging.file": {
        "type": bool,
        "default": True,
        "description": "Output debug logs to ~/.bootunit/bootunit.log",
    },
}


def _get_default_config() -> dict:
    """Get default config from Pydantic models."""
    from .core.models.config import BootunitConfig

    return BootunitConfig().to_dict()


def _get_nested(d: dict, key: str, default=None):
    """Get a nested key like 'activation.max_workers'."""
    for part in key.split("."):
        if isinstance(d, dict) and part in d:
            d = d[part]
        else:
            return default
    return d


def _set_nested(d: dict, key: str, value):
    """Set a nested key like 'activation.max_workers'."""
    parts = key.split(".")
    for part in parts[:-1]:
        if part not in d:
            d[part] = {}
        d = d[part]
    d[parts[-1]] = value


def _format_toml_value(val: Any) -> str:
    if isinstance(val, bool):
        return str(val).lower()
    if isinstance(val, int):
        return str(val)
    if isinstance(val, list):
        items = ", ".join(_format_toml_value(v) for v in val)
        return f"[{items}]"
    escaped = str(val).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def load_config(config_path: Path | None = None, start_dir: str | None = None) -> dict:
    """
    Load configuration from file.

    Args:
        config_path: Explicit path to config file
        start_dir: Directory to start searching from (if config_path not given)

    Returns:
        Configuration dict with defaults applied
    """
    settings = load_settings(config_path=config_path, start_dir=start_dir)
    return settings.to_dict()


def get_config_dir(start_dir: str | None = None) -> Path:
    """
    Get the .bootunit directory path, creating it if needed.

    Returns:
        Path to .bootunit directory in start_dir or cwd.
    """
    base = Path(start_dir) if start_dir else Path.cwd()
    config_dir = base / CONFIG_DIR_NAME
    config_dir.mkdir(exist_ok=True)
    return config_dir


def get_config_path_for_write(start_dir: str | None = None) -> Path:
    """
    Get the path where config should be written.

    Prefers existing .bootunit/config.toml, otherwise creates one in start_dir or cwd.
    """
    existing = find_config_file(start_dir)
    if existing and existing.name == CONFIG_FILE_NAME:
        return existing

    return get_config_dir(start_dir) / CONFIG_FILE_NAME


def save_config(config: dict, config_path: Path) -> None:
    """
    Save configuration to a config.toml file.

    Only saves non-default values.
    """
    lines: list[str] = []
    defaults = _get_default_config()

    for section in ("units", "activation", "output", "logging"):
        section_lines = []
        for key, val in config.get(section, {}).items():
            default_val = defaults.get(section, {}).get(key)
            if val != default_val and val is not None:
                section_lines.append(f"{key} = {_format_toml_value(val)}")

        if section_lines:
            lines.append(f"[{section}]")
            lines.extend(section_lines)
            lines.append("")

    config_path.write_text("\n".join(lines))


def config_get(key: str, start_dir: str | None = None):
    """Get a config value."""
    config = load_config(start_dir=start_dir)
    return _get_nested(config, key)


def _parse_value(key: str, value: str) -> Any:
    key_info = CONFIGURABLE_KEYS[key]
    value_type = key_info["type"]

    if value_type is bool:
        if value.lower() in ("true", "1", "yes", "on"):
            return True
        if value.lower() in ("false", "0", "no", "off"):
            return False
        raise ConfigValidationError(f"Invalid boolean value: {value}", key=key, value=value)

    if value_type is int:
        try:
            number = int(value)
        except ValueError as e:
            raise ConfigValidationError(f"Invalid integer value: {value}", key=key, value=value, cause=e) from e
        if key == "activation.max_workers" and not 1 <= number <= 64:
            raise ConfigValidationError("max_workers must be between 1 and 64", key=key, value=value)
        return number

    if value_type is list:
        if value.strip() == "":
            return []
        return [v.strip() for v in value.split(",") if v.strip()]

    if key == "logging.level" and value not in VALID_LOG_LEVELS:
        raise ConfigValidationError(
            f"Invalid log level: {value}. Valid levels: {', '.join(sorted(VALID_LOG_LEVELS))}",
            key=key,
            value=value,
        )
    return value


def config_set(key: str, value: str, start_dir: str | None = None):
    """Set a config value and save to .bootunit/config.toml."""
    if key not in CONFIGURABLE_KEYS:
        raise ConfigValidationError(
            f"Unknown config key: {key}. Valid keys: {', '.join(CONFIGURABLE_KEYS.keys())}",
            key=key,
        )

    typed_value = _parse_value(key, value)

    config = load_config(start_dir=start_dir)
    if config.get("_config_error"):
        # rewriting would drop whatever the unreadable file holds
        raise ConfigFileError(config["_config_error"], file_path=config.get("_config_file"))
    _set_nested(config, key, typed_value)

    config_path = get_config_path_for_write(start_dir)
    save_config(config, config_path)

    return config_path, typed_value


def config_list():
    """List all configurable keys with descriptions."""
    return CONFIGURABLE_KEYS
