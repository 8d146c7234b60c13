"""Tracking of executed seeds."""

from .models import DEFAULT_TABLE_NAME, SeedRecord, build_ledger_table
from .repository import SeedLedger

__all__ = ["SeedLedger", "SeedRecord", "build_ledger_table", "DEFAULT_TABLE_NAME"]
