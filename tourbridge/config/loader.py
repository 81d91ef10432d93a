"""Configuration loader for Tourbridge.

Loads configuration from TOML files.
Environment variables can override any configuration value.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from tourbridge.config.schema import TourbridgeConfig

logger = logging.getLogger(__name__)

# Keys that must be converted to int when read from the environment
_INT_KEYS = ("min_pool_size", "max_pool_size", "export_limit", "lookup_limit", "max_import_rows")


def get_config_search_paths() -> list[Path]:
    """Get the list of paths to search for configuration files.

    Returns paths in priority order (first found wins):
    1. ./config.toml (project root - for development)
    2. ~/.config/tourbridge/config.toml (user config)
    3. /opt/tourbridge/config.toml (production install)
    4. /etc/tourbridge/config.toml (system config)
    """
    return [
        Path.cwd() / "config.toml",
        Path.home() / ".config" / "tourbridge" / "config.toml",
        Path("/opt/tourbridge/config.toml"),
        Path("/etc/tourbridge/config.toml"),
    ]


def find_config_file() -> Path | None:
    """Find the first existing config file from search paths."""
    for path in get_config_search_paths():
        if path.exists() and path.is_file():
            logger.debug(f"Found config file: {path}")
            return path
    return None


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def apply_env_overrides(config_dict: dict[str, Any], prefix: str = "TOURBRIDGE") -> None:
    """Apply environment variable overrides to configuration dictionary.

    Environment variables are mapped as follows:
    - TOURBRIDGE_DATABASE_MONGODB_URL -> config_dict["database"]["mongodb_url"]
    - TOURBRIDGE_TRANSFER_EXPORT_LIMIT -> config_dict["transfer"]["export_limit"]
    - etc.

    Note: This modifies config_dict in place.
    """
    env_mappings = {
        # Database
        f"{prefix}_DATABASE_MONGODB_URL": ("database", "mongodb_url"),
        f"{prefix}_DATABASE_MONGODB_DATABASE": ("database", "mongodb_database"),
        f"{prefix}_DATABASE_MIN_POOL_SIZE": ("database", "min_pool_size"),
        f"{prefix}_DATABASE_MAX_POOL_SIZE": ("database", "max_pool_size"),
        f"{prefix}_MONGODB_URL": ("database", "mongodb_url"),  # Shorthand
        f"{prefix}_MONGODB_DATABASE": ("database", "mongodb_database"),  # Shorthand
        # Transfer
        f"{prefix}_TRANSFER_EXPORT_LIMIT": ("transfer", "export_limit"),
        f"{prefix}_TRANSFER_LOOKUP_LIMIT": ("transfer", "lookup_limit"),
        f"{prefix}_TRANSFER_MAX_IMPORT_ROWS": ("transfer", "max_import_rows"),
        # Logging
        f"{prefix}_LOGGING_LEVEL": ("logging", "level"),
        f"{prefix}_LOG_LEVEL": ("logging", "level"),  # Shorthand
    }

    for env_var, path in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            section, key = path

            if section not in config_dict:
                config_dict[section] = {}

            if key in _INT_KEYS:
                config_dict[section][key] = int(value)
            elif key == "level":
                config_dict[section][key] = value.upper()
            else:
                config_dict[section][key] = value


def load_config(config_file: Path | None = None) -> TourbridgeConfig:
    """Load configuration from TOML file with environment variable overrides.

    Args:
        config_file: Optional path to config file. If not provided,
                     searches default locations.

    Returns:
        TourbridgeConfig instance with all settings loaded.
    """
    config_dict: dict[str, Any] = {}

    if config_file is None:
        config_file = find_config_file()

    if config_file and config_file.exists():
        logger.info(f"Loading config from: {config_file}")
        config_dict = load_toml_file(config_file)
    else:
        logger.info("No config file found, using defaults with env overrides")

    apply_env_overrides(config_dict)

    return TourbridgeConfig(**config_dict)
