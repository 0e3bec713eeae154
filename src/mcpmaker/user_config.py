"""User-level configuration for mcp-maker defaults.

Reads from ~/.config/mcp-maker/config.yaml and provides defaults for
``create server``. Command-line flags always take precedence.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "mcp-maker"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Recognised keys and the type their value must have
_FIELD_TYPES: dict[str, type] = {
    "http": bool,
    "cors": bool,
    "port": int,
    "install": bool,
    "git": bool,
}

# User config key -> ServerOptions field
_OPTION_FIELDS: dict[str, str] = {
    "http": "use_http_transport",
    "cors": "enable_cors",
    "port": "port",
    "install": "install_dependencies",
    "git": "initialize_git",
}


def get_config_path() -> Path:
    """Return the path to the user config file."""
    return CONFIG_FILE


def _is_valid(key: str, value: Any) -> bool:
    expected = _FIELD_TYPES[key]
    if expected is int:
        return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 65535
    return isinstance(value, expected)


def load_user_config() -> dict[str, Any]:
    """Load user configuration from disk.

    Returns an empty dict if the file doesn't exist or is invalid.
    """
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load user config from {config_path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"User config is not a mapping: {config_path}")
        return {}

    validated: dict[str, Any] = {}
    for key, value in data.items():
        if key not in _FIELD_TYPES:
            logger.warning(f"Unknown key '{key}' in user config. Valid: {list(_FIELD_TYPES)}")
            continue
        if not _is_valid(key, value):
            logger.warning(
                f"Invalid value '{value}' for '{key}' in user config "
                f"(expected {_FIELD_TYPES[key].__name__})"
            )
            continue
        validated[key] = value

    return validated


def apply_user_defaults(overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge user defaults under explicit option overrides.

    ``overrides`` maps ``ServerOptions`` field names to values; ``None``
    values mean "not given on the command line" and are filled from the
    user config when it has a value for them.
    """
    user_cfg = load_user_config()
    result = {key: value for key, value in overrides.items() if value is not None}

    for key, field_name in _OPTION_FIELDS.items():
        if key in user_cfg:
            result.setdefault(field_name, user_cfg[key])

    return result


def save_user_config(config: dict[str, Any]) -> Path:
    """Save configuration to the user config file.

    Returns the path written to.
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
    return config_path


def coerce_config_value(key: str, value: str) -> bool | int | str:
    """Convert a command-line string to the type expected for ``key``."""
    expected = _FIELD_TYPES.get(key)
    if expected is bool:
        lowered = value.lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off"):
            return False
        raise ValueError(f"'{key}' expects true or false, got '{value}'")
    if expected is int:
        return int(value)
    return value


def get_default_config_template() -> dict[str, Any]:
    """Return the default config written by ``config init``."""
    return {
        "http": False,
        "cors": False,
        "port": 8080,
        "install": True,
        "git": True,
    }
