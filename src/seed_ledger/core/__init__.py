"""Core components of sqlalchemy-seed-ledger."""

from .resolver import DEFAULT_CONNECTION, ConnectionResolver

__all__ = ["ConnectionResolver", "DEFAULT_CONNECTION"]
