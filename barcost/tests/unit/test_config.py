"""Unit tests for Config.

Each property is tested for:
- Default values when no environment variables set
- Environment variable overrides
- Invalid value handling (fallback to defaults with warning)
"""

import logging
from decimal import Decimal

from barcost.utils.config import Config, get_config, reset_config


class TestDatabaseConfigProperties:
    """Tests for database configuration properties."""

    def setup_method(self):
        """Reset config singleton before each test."""
        reset_config()

    def teardown_method(self):
        """Clean up after each test."""
        reset_config()

    def test_db_timeout_default(self, monkeypatch):
        monkeypatch.delenv("BAR_COSTING_DB_TIMEOUT", raising=False)
        assert Config().db_timeout == 30

    def test_db_timeout_env_override(self, monkeypatch):
        monkeypatch.setenv("BAR_COSTING_DB_TIMEOUT", "60")
        assert Config().db_timeout == 60

    def test_db_timeout_invalid_uses_default(self, monkeypatch, caplog):
        monkeypatch.setenv("BAR_COSTING_DB_TIMEOUT", "invalid")
        with caplog.at_level(logging.WARNING):
            assert Config().db_timeout == 30
        assert "Invalid BAR_COSTING_DB_TIMEOUT" in caplog.text

    def test_db_timeout_non_positive_uses_default(self, monkeypatch):
        monkeypatch.setenv("BAR_COSTING_DB_TIMEOUT", "0")
        assert Config().db_timeout == 30

    def test_data_dir_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BAR_COSTING_DATA_DIR", str(tmp_path))

        config = Config()

        assert config.database_path == tmp_path / "bar_costing.db"
        assert config.database_url.startswith("sqlite:///")
        assert config.database_exists() is False


class TestCostingConfigProperties:
    """Tests for costing defaults."""

    def setup_method(self):
        reset_config()

    def teardown_method(self):
        reset_config()

    def test_profit_margin_default(self, monkeypatch):
        monkeypatch.delenv("BAR_COSTING_PROFIT_MARGIN", raising=False)
        assert Config().default_profit_margin == Decimal("100")

    def test_profit_margin_override(self, monkeypatch):
        monkeypatch.setenv("BAR_COSTING_PROFIT_MARGIN", "35.5")
        assert Config().default_profit_margin == Decimal("35.5")

    def test_profit_margin_invalid_uses_default(self, monkeypatch, caplog):
        monkeypatch.setenv("BAR_COSTING_PROFIT_MARGIN", "lots")
        with caplog.at_level(logging.WARNING):
            assert Config().default_profit_margin == Decimal("100")
        assert "Invalid BAR_COSTING_PROFIT_MARGIN" in caplog.text


    def test_low_stock_threshold_unset(self, monkeypatch):
        monkeypatch.delenv("BAR_COSTING_LOW_STOCK_THRESHOLD", raising=False)
        assert Config().low_stock_default_threshold is None

    def test_low_stock_threshold_override(self, monkeypatch):
        monkeypatch.setenv("BAR_COSTING_LOW_STOCK_THRESHOLD", "500")
        assert Config().low_stock_default_threshold == Decimal("500")

    def test_low_stock_threshold_negative_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("BAR_COSTING_LOW_STOCK_THRESHOLD", "-5")
        with caplog.at_level(logging.WARNING):
            assert Config().low_stock_default_threshold is None
        assert "Invalid BAR_COSTING_LOW_STOCK_THRESHOLD" in caplog.text


class TestConfigSingleton:
    """Tests for get_config()."""

    def setup_method(self):
        reset_config()

    def teardown_method(self):
        reset_config()

    def test_environment_from_env_var(self, monkeypatch):
        monkeypatch.setenv("BAR_COSTING_ENV", "development")

        config = get_config()

        assert config.is_development is True
        assert config.is_production is False

    def test_singleton_ignores_new_environment(self, caplog):
        first = get_config("production")

        with caplog.at_level(logging.WARNING):
            second = get_config("development")

        assert second is first
        assert second.environment == "production"
        assert "Returning existing singleton" in caplog.text
