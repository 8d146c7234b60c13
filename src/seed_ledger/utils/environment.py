"""
Environment detection for the seed ledger.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


class EnvironmentManager:
    """
    Works out which environment the ledger should run in.

    The environment is taken from the first of ``ENV_VARS`` that is set,
    falling back to the configured default.
    """

    ENV_VARS = [
        "SEED_ENV",
        "ENVIRONMENT",
        "ENV",
        "APP_ENV",
        "PYTHON_ENV",
    ]

    PRODUCTION_NAMES = {"production", "prod"}

    def __init__(self, default_environment: str = "development"):
        """
        Initialize the environment manager.

        Args:
            default_environment: Environment used when none is detected
        """
        self.default_environment = default_environment
        self._current_environment: Optional[str] = None
        self._detect_environment()

    def _detect_environment(self) -> None:
        """Detect the current environment from environment variables."""
        for var in self.ENV_VARS:
            env_value = os.environ.get(var)
            if env_value:
                self._current_environment = env_value.lower()
                logger.info(f"Detected environment: {self._current_environment} (from {var})")
                return

        self._current_environment = self.default_environment
        logger.info(f"No environment detected, defaulting to: {self.default_environment}")

    @property
    def current_environment(self) -> str:
        """Get the current environment name."""
        return self._current_environment or self.default_environment

    @current_environment.setter
    def current_environment(self, value: str) -> None:
        """Set the current environment."""
        self._current_environment = value
        logger.info(f"Environment set to: {value}")

    def is_production(self, environment: Optional[str] = None) -> bool:
        """
        Check if an environment is production.

        Args:
            environment: Environment name (defaults to current)

        Returns:
            True if production environment
        """
        env = environment or self.current_environment
        return env.lower() in self.PRODUCTION_NAMES
