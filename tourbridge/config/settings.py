"""Global settings instance for Tourbridge.

The settings object provides a flat interface over the structured
TourbridgeConfig loaded from config.toml and the environment.
"""

import logging
from typing import Optional

from tourbridge.config.loader import load_config
from tourbridge.config.schema import TourbridgeConfig

logger = logging.getLogger(__name__)


class Settings:
    """Flat accessor over a TourbridgeConfig."""

    def __init__(self, config: TourbridgeConfig | None = None):
        """Initialize settings.

        Args:
            config: Optional TourbridgeConfig instance. If not provided, loads from file.
        """
        self._config = config or load_config()

    @property
    def config(self) -> TourbridgeConfig:
        """Get the full configuration object."""
        return self._config

    @property
    def app_name(self) -> str:
        return self._config.app_name

    # Database
    @property
    def mongodb_url(self) -> str:
        return self._config.database.mongodb_url

    @property
    def mongodb_database(self) -> str:
        return self._config.database.mongodb_database

    @property
    def min_pool_size(self) -> int:
        return self._config.database.min_pool_size

    @property
    def max_pool_size(self) -> int:
        return self._config.database.max_pool_size

    # Transfer
    @property
    def export_limit(self) -> int:
        return self._config.transfer.export_limit

    @property
    def lookup_limit(self) -> int:
        return self._config.transfer.lookup_limit

    @property
    def max_import_rows(self) -> Optional[int]:
        return self._config.transfer.max_import_rows

    # Logging
    @property
    def log_level(self) -> str:
        return self._config.logging.level


# Global settings instance - lazily initialized
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    The settings are loaded once and cached for subsequent calls.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance.

    This is primarily useful for testing to reload configuration.
    """
    global _settings
    _settings = None


class _SettingsProxy:
    """Proxy object that lazily loads settings on first access."""

    def __getattr__(self, name: str):
        return getattr(get_settings(), name)

    def __repr__(self) -> str:
        return repr(get_settings())


settings = _SettingsProxy()
