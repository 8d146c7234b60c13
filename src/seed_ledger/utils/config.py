"""
Configuration management for sqlalchemy-seed-ledger.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from seed_ledger.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class LedgerSettings(BaseModel):
    """Main configuration for sqlalchemy-seed-ledger."""

    # Database configuration
    database_url: Optional[str] = None
    connections: Dict[str, str] = Field(default_factory=dict)
    default_connection: str = "default"
    echo_sql: bool = False

    # Ledger settings
    table_name: str = "seeds"
    default_environment: str = "development"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Custom settings
    custom_settings: Dict[str, Any] = Field(default_factory=dict)


class Config:
    """
    Configuration manager for sqlalchemy-seed-ledger.

    Values are loaded, lowest precedence first, from:
    - Default values
    - A configuration file (JSON)
    - Environment variables (optionally from a .env file)
    """

    CONFIG_FILE_NAMES = [
        "seed_ledger.config.json",
        ".seedledgerrc",
    ]

    ENV_PREFIX = "SEED_LEDGER_"

    ENV_MAPPING = {
        "DATABASE_URL": "database_url",
        "TABLE_NAME": "table_name",
        "DEFAULT_ENVIRONMENT": "default_environment",
        "DEFAULT_CONNECTION": "default_connection",
        "LOG_LEVEL": "log_level",
        "ECHO_SQL": "echo_sql",
    }

    BOOLEAN_KEYS = {"echo_sql"}

    def __init__(
        self,
        config_file: Optional[str] = None,
        load_env: bool = True,
        configure_logging: bool = True,
    ):
        """
        Initialize the configuration manager.

        Args:
            config_file: Path to configuration file
            load_env: Whether to load from environment variables
            configure_logging: Whether to set up logging from the loaded settings
        """
        self._config = LedgerSettings()

        # Load .env file if present
        if load_env:
            load_dotenv()

        if config_file:
            self._load_from_file(config_file)
        else:
            self._auto_discover_config()

        if load_env:
            self._load_from_env()

        if configure_logging:
            self._configure_logging()

    def _auto_discover_config(self) -> None:
        """Auto-discover configuration file in project."""
        for filename in self.CONFIG_FILE_NAMES:
            config_path = Path(filename)
            if config_path.exists():
                logger.info(f"Found configuration file: {filename}")
                self._load_from_file(str(config_path))
                break

    def _load_from_file(self, file_path: str) -> None:
        """
        Load configuration from a JSON file.

        Args:
            file_path: Path to configuration file
        """
        path = Path(file_path)

        if not path.exists():
            logger.warning(f"Configuration file not found: {file_path}")
            return

        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading configuration from {file_path}: {e}")
            raise ConfigurationError(
                f"Error loading configuration from {file_path}: {e}", original=e
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration in {file_path} must be a JSON object"
            )

        self._update_config(data)
        logger.info(f"Loaded configuration from {file_path}")

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        for env_var, config_key in self.ENV_MAPPING.items():
            # Check with prefix
            prefixed_var = f"{self.ENV_PREFIX}{env_var}"
            value = os.environ.get(prefixed_var) or os.environ.get(env_var)

            if value:
                if config_key in self.BOOLEAN_KEYS:
                    value = value.lower() in ["true", "1", "yes", "on"]

                setattr(self._config, config_key, value)
                logger.debug(f"Loaded {config_key} from environment variable")

    def _update_config(self, data: Dict[str, Any]) -> None:
        """
        Update configuration with data from dictionary.

        Args:
            data: Configuration data
        """
        merged = self._config.model_dump()
        for key, value in data.items():
            if key == "custom_settings" and isinstance(value, dict):
                merged["custom_settings"].update(value)
            elif key in LedgerSettings.model_fields:
                merged[key] = value
            else:
                # Add to custom settings
                merged["custom_settings"][key] = value

        try:
            self._config = LedgerSettings(**merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}", original=e) from e

    def _configure_logging(self) -> None:
        """Set up logging from the loaded settings."""
        level = getattr(logging, self._config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        if self._config.log_file:
            file_handler = logging.FileHandler(self._config.log_file)
            file_handler.setLevel(level)
            logging.getLogger().addHandler(file_handler)

    @property
    def database_url(self) -> Optional[str]:
        """Get the database URL."""
        return self._config.database_url

    @property
    def table_name(self) -> str:
        """Get the ledger table name."""
        return self._config.table_name

    @property
    def default_environment(self) -> str:
        """Get the default environment."""
        return self._config.default_environment

    @property
    def default_connection(self) -> str:
        """Get the default connection name."""
        return self._config.default_connection

    @property
    def connections(self) -> Dict[str, str]:
        """Get the named connections."""
        return dict(self._config.connections)

    def connection_urls(self) -> Dict[str, str]:
        """
        Get every configured connection URL by name.

        ``database_url``, when set, is registered under the default
        connection name and takes precedence over an entry of the same name.
        """
        urls = dict(self._config.connections)
        if self._config.database_url:
            urls[self._config.default_connection] = self._config.database_url
        return urls

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        if key in LedgerSettings.model_fields:
            return getattr(self._config, key)

        return self._config.custom_settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value.

        Args:
            key: Configuration key
            value: Configuration value
        """
        if key in LedgerSettings.model_fields:
            setattr(self._config, key, value)
        else:
            self._config.custom_settings[key] = value

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Returns:
            Configuration as dictionary
        """
        return self._config.model_dump()

    def save(self, file_path: str) -> None:
        """
        Save configuration to a JSON file.

        Args:
            file_path: Path to save configuration
        """
        with open(file_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Saved configuration to {file_path}")
