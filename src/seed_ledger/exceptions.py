"""
Custom exceptions for sqlalchemy-seed-ledger
"""

from typing import Optional


class SeedLedgerError(Exception):
    """Base exception for seed ledger errors"""

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original


class ConfigurationError(SeedLedgerError):
    """Raised when a configuration file cannot be read or validated"""
    pass


class StoreUnavailableError(SeedLedgerError):
    """Raised when a connection name cannot be resolved or the database cannot be reached"""
    pass


class SchemaConflictError(SeedLedgerError):
    """Raised when the ledger table cannot be created, e.g. because it already exists"""
    pass


class MissingTableError(SeedLedgerError):
    """Raised when the ledger is queried before its table has been created"""
    pass


class LedgerQueryError(SeedLedgerError):
    """Raised for any other database failure while reading or writing the ledger"""
    pass
