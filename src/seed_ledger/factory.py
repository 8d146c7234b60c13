"""
Construction of a ready-to-use seed ledger from configuration.
"""

import logging
from typing import Optional

from seed_ledger.core.resolver import ConnectionResolver
from seed_ledger.tracking.repository import SeedLedger
from seed_ledger.utils.config import Config
from seed_ledger.utils.environment import EnvironmentManager

logger = logging.getLogger(__name__)


def create_ledger(
    config: Optional[Config] = None,
    environment: Optional[str] = None,
    connection: Optional[str] = None,
) -> SeedLedger:
    """
    Create a seed ledger from configuration.

    Args:
        config: Configuration manager (loaded from the usual sources by default)
        environment: Environment to run in (detected when omitted)
        connection: Connection name (the configured default when omitted)

    Returns:
        A SeedLedger bound to the configured connections
    """
    config = config or Config()
    resolver = ConnectionResolver.from_config(config)

    if environment is None:
        environment = EnvironmentManager(config.default_environment).current_environment

    logger.debug(
        f"Creating seed ledger on table {config.table_name} for environment {environment}"
    )
    return SeedLedger(resolver, config.table_name, environment, connection=connection)
