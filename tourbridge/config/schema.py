"""Pydantic models for Tourbridge configuration.

These models define the structure of the config.toml file.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """MongoDB database configuration."""

    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "tourbridge"
    # Connection pool settings
    min_pool_size: int = 1
    max_pool_size: int = 20


class TransferConfig(BaseModel):
    """Import/export limits."""

    export_limit: int = Field(default=10000, ge=1)
    lookup_limit: int = Field(default=10000, ge=1)
    max_import_rows: Optional[int] = Field(default=None, ge=1)  # None processes every row


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class TourbridgeConfig(BaseModel):
    """Main Tourbridge configuration loaded from config.toml."""

    app_name: str = "Tourbridge"
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    transfer: TransferConfig = Field(default_factory=TransferConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
