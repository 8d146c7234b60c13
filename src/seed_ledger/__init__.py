"""
Seed Ledger - Tracks which database seeders have run, per environment and batch.

This package records executed seeds in a single table accessed through
SQLAlchemy, so a seeding runner can decide what to run next and what to
roll back.
"""

from seed_ledger.core.resolver import ConnectionResolver
from seed_ledger.exceptions import (
    ConfigurationError,
    LedgerQueryError,
    MissingTableError,
    SchemaConflictError,
    SeedLedgerError,
    StoreUnavailableError,
)
from seed_ledger.factory import create_ledger
from seed_ledger.tracking.models import SeedRecord, build_ledger_table
from seed_ledger.tracking.repository import SeedLedger
from seed_ledger.utils.config import Config
from seed_ledger.utils.environment import EnvironmentManager

__version__ = "1.0.0"

__all__ = [
    "SeedLedger",
    "SeedRecord",
    "build_ledger_table",
    "ConnectionResolver",
    "Config",
    "EnvironmentManager",
    "create_ledger",
    "SeedLedgerError",
    "ConfigurationError",
    "StoreUnavailableError",
    "SchemaConflictError",
    "MissingTableError",
    "LedgerQueryError",
]
