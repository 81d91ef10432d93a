"""Tourbridge configuration module.

Configuration is loaded from the following locations (in order of priority):
1. Environment variables (highest priority)
2. ./config.toml (project root - for development)
3. ~/.config/tourbridge/config.toml (user config)
4. /opt/tourbridge/config.toml (production install)
5. /etc/tourbridge/config.toml (system config)
"""

from tourbridge.config.schema import (
    DatabaseConfig,
    LoggingConfig,
    TourbridgeConfig,
    TransferConfig,
)
from tourbridge.config.settings import get_settings, reset_settings, settings

__all__ = [
    "DatabaseConfig",
    "LoggingConfig",
    "TourbridgeConfig",
    "TransferConfig",
    "get_settings",
    "reset_settings",
    "settings",
]
