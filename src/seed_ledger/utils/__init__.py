"""Utility modules for sqlalchemy-seed-ledger."""

from .config import Config, LedgerSettings
from .environment import EnvironmentManager

__all__ = ["EnvironmentManager", "Config", "LedgerSettings"]
