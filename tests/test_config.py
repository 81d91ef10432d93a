"""Tests for the Tourbridge configuration system."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from tourbridge.config.loader import (
    apply_env_overrides,
    find_config_file,
    get_config_search_paths,
    load_config,
    load_toml_file,
)
from tourbridge.config.schema import (
    DatabaseConfig,
    LoggingConfig,
    TourbridgeConfig,
    TransferConfig,
)
from tourbridge.config.settings import Settings, get_settings, reset_settings


class TestSchemaDefaults:
    """Test default values in schema models."""

    def test_database_config_defaults(self):
        """Test DatabaseConfig has correct defaults."""
        config = DatabaseConfig()
        assert config.mongodb_url == "mongodb://localhost:27017"
        assert config.mongodb_database == "tourbridge"
        assert config.min_pool_size == 1
        assert config.max_pool_size == 20

    def test_transfer_config_defaults(self):
        """Test TransferConfig has correct defaults."""
        config = TransferConfig()
        assert config.export_limit == 10000
        assert config.lookup_limit == 10000
        assert config.max_import_rows is None

    def test_transfer_limits_must_be_positive(self):
        """Test limits below one are rejected."""
        with pytest.raises(ValidationError):
            TransferConfig(export_limit=0)

    def test_logging_config_defaults(self):
        """Test LoggingConfig has correct defaults."""
        assert LoggingConfig().level == "INFO"

    def test_tourbridge_config_defaults(self):
        """Test TourbridgeConfig has correct defaults."""
        config = TourbridgeConfig()
        assert config.app_name == "Tourbridge"
        assert isinstance(config.database, DatabaseConfig)
        assert isinstance(config.transfer, TransferConfig)
        assert isinstance(config.logging, LoggingConfig)


class TestConfigSearchPaths:
    """Test configuration file search paths."""

    def test_config_search_paths_order(self):
        """Test config search paths are in correct priority order."""
        paths = get_config_search_paths()
        assert paths == [
            Path.cwd() / "config.toml",
            Path.home() / ".config" / "tourbridge" / "config.toml",
            Path("/opt/tourbridge/config.toml"),
            Path("/etc/tourbridge/config.toml"),
        ]


class TestTomlLoading:
    """Test TOML file loading."""

    def test_load_toml_file(self, tmp_path):
        """Test loading a valid TOML file."""
        toml_content = """
app_name = "TestApp"

[database]
mongodb_url = "mongodb://testhost:27017"

[transfer]
export_limit = 50
"""
        config_file = tmp_path / "config.toml"
        config_file.write_text(toml_content)

        data = load_toml_file(config_file)
        assert data["app_name"] == "TestApp"
        assert data["database"]["mongodb_url"] == "mongodb://testhost:27017"
        assert data["transfer"]["export_limit"] == 50

    def test_load_config_from_file(self, tmp_path):
        """Test load_config with a specific file."""
        toml_content = """
[transfer]
max_import_rows = 200

[logging]
level = "DEBUG"
"""
        config_file = tmp_path / "config.toml"
        config_file.write_text(toml_content)

        config = load_config(config_file)
        assert config.transfer.max_import_rows == 200
        assert config.logging.level == "DEBUG"
        # Defaults should still apply
        assert config.transfer.export_limit == 10000
        assert config.database.mongodb_database == "tourbridge"


class TestEnvOverrides:
    """Test environment variable overrides."""

    def test_apply_database_overrides(self):
        """Test database configuration overrides."""
        config_dict = {}

        with patch.dict(
            os.environ,
            {
                "TOURBRIDGE_MONGODB_URL": "mongodb://custom:27017",
                "TOURBRIDGE_MONGODB_DATABASE": "custom_db",
                "TOURBRIDGE_DATABASE_MAX_POOL_SIZE": "5",
            },
        ):
            apply_env_overrides(config_dict)

        assert config_dict["database"]["mongodb_url"] == "mongodb://custom:27017"
        assert config_dict["database"]["mongodb_database"] == "custom_db"
        assert config_dict["database"]["max_pool_size"] == 5

    def test_apply_transfer_overrides(self):
        """Test transfer limits are converted to int."""
        config_dict = {"transfer": {"export_limit": 1}}

        with patch.dict(
            os.environ,
            {
                "TOURBRIDGE_TRANSFER_EXPORT_LIMIT": "300",
                "TOURBRIDGE_TRANSFER_MAX_IMPORT_ROWS": "40",
            },
        ):
            apply_env_overrides(config_dict)

        assert config_dict["transfer"] == {"export_limit": 300, "max_import_rows": 40}

    def test_apply_log_level_override(self):
        """Test log level is upper-cased."""
        config_dict = {}

        with patch.dict(os.environ, {"TOURBRIDGE_LOG_LEVEL": "warning"}):
            apply_env_overrides(config_dict)

        assert config_dict["logging"]["level"] == "WARNING"

    def test_env_overrides_file(self, tmp_path):
        """Test environment beats the config file."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("[transfer]\nexport_limit = 10\n")

        with patch.dict(os.environ, {"TOURBRIDGE_TRANSFER_EXPORT_LIMIT": "20"}):
            config = load_config(config_file)

        assert config.transfer.export_limit == 20


class TestSettings:
    """Test the Settings class."""

    def setup_method(self):
        """Reset settings before each test."""
        reset_settings()

    def test_settings_defaults(self):
        """Test Settings with default configuration."""
        settings = Settings(config=TourbridgeConfig())
        assert settings.app_name == "Tourbridge"
        assert settings.mongodb_url == "mongodb://localhost:27017"
        assert settings.export_limit == 10000
        assert settings.log_level == "INFO"

    def test_settings_property_accessors(self):
        """Test all property accessors work correctly."""
        config = TourbridgeConfig(
            app_name="TestApp",
            database=DatabaseConfig(mongodb_database="testdb", min_pool_size=2, max_pool_size=4),
            transfer=TransferConfig(export_limit=5, lookup_limit=6, max_import_rows=7),
            logging=LoggingConfig(level="ERROR"),
        )
        settings = Settings(config=config)

        assert settings.app_name == "TestApp"
        assert settings.mongodb_database == "testdb"
        assert settings.min_pool_size == 2
        assert settings.max_pool_size == 4
        assert settings.export_limit == 5
        assert settings.lookup_limit == 6
        assert settings.max_import_rows == 7
        assert settings.log_level == "ERROR"
        assert settings.config is config

    def test_get_settings_singleton(self):
        """Test get_settings returns same instance."""
        s1 = get_settings()
        s2 = get_settings()
        assert s1 is s2

    def test_reset_settings_clears_cache(self):
        """Test reset_settings clears the cached instance."""
        s1 = get_settings()
        reset_settings()
        s2 = get_settings()
        assert s1 is not s2

    def test_proxy_reads_environment(self, monkeypatch):
        """Test the module-level proxy loads lazily."""
        from tourbridge.config import settings

        monkeypatch.setenv("TOURBRIDGE_TRANSFER_LOOKUP_LIMIT", "77")
        reset_settings()
        assert settings.lookup_limit == 77


class TestFindConfigFile:
    """Test find_config_file function."""

    def test_find_config_file_in_cwd(self, tmp_path, monkeypatch):
        """Test finding config file in current directory."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("[transfer]\nexport_limit = 8\n")

        monkeypatch.chdir(tmp_path)
        found = find_config_file()
        assert found == config_file

    def test_find_config_file_not_found(self, tmp_path):
        """Test when no config file exists."""
        missing = [tmp_path / "a" / "config.toml", tmp_path / "b" / "config.toml"]
        with patch("tourbridge.config.loader.get_config_search_paths", return_value=missing):
            assert find_config_file() is None
