"""
Tests for environment detection and ledger construction.
"""

from seed_ledger import Config, EnvironmentManager, create_ledger


class TestEnvironmentManager:
    """Test suite for EnvironmentManager."""

    def test_default(self):
        """Test the fallback when no variable is set."""
        manager = EnvironmentManager()
        assert manager.current_environment == "development"

        manager = EnvironmentManager("staging")
        assert manager.current_environment == "staging"

    def test_detection_order(self, monkeypatch):
        """Test that variables are checked in order and lower-cased."""
        monkeypatch.setenv("APP_ENV", "staging")
        monkeypatch.setenv("ENVIRONMENT", "Production")

        assert EnvironmentManager().current_environment == "production"

        monkeypatch.setenv("SEED_ENV", "testing")
        assert EnvironmentManager().current_environment == "testing"

    def test_setter(self):
        """Test overriding the detected environment."""
        manager = EnvironmentManager()
        manager.current_environment = "qa"

        assert manager.current_environment == "qa"

    def test_is_production(self):
        """Test production detection."""
        manager = EnvironmentManager("production")

        assert manager.is_production() is True
        assert manager.is_production("prod") is True
        assert manager.is_production("staging") is False


class TestCreateLedger:
    """Test suite for create_ledger."""

    def test_from_config(self, database_url):
        """Test building a ledger from configuration."""
        config = Config(load_env=False, configure_logging=False)
        config.set("database_url", database_url)
        config.set("table_name", "seed_history")

        ledger = create_ledger(config, environment="testing")

        assert ledger.get_env() == "testing"
        assert ledger.table_name == "seed_history"
        assert str(ledger.get_connection().url) == database_url
        ledger.get_connection_resolver().dispose()

    def test_detected_environment(self, database_url, monkeypatch):
        """Test that the environment is detected when not given."""
        monkeypatch.setenv("APP_ENV", "staging")
        config = Config(load_env=False, configure_logging=False)
        config.set("database_url", database_url)

        ledger = create_ledger(config)

        assert ledger.get_env() == "staging"

    def test_configured_default_environment(self, database_url):
        """Test the configured default environment."""
        config = Config(load_env=False, configure_logging=False)
        config.set("database_url", database_url)
        config.set("default_environment", "qa")

        assert create_ledger(config).get_env() == "qa"
