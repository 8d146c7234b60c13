"""
Table definition and record model for the seed ledger.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, Integer, MetaData, String, Table

DEFAULT_TABLE_NAME = "seeds"


def build_ledger_table(
    table_name: str = DEFAULT_TABLE_NAME, metadata: Optional[MetaData] = None
) -> Table:
    """
    Build the ledger table definition.

    The table keeps track of which seeds have actually run for the
    application: the seed identifier, the environment it ran in and
    the batch it belonged to. There is no primary key and no index.

    Args:
        table_name: Name of the ledger table
        metadata: MetaData to attach the table to (a fresh one by default)

    Returns:
        The SQLAlchemy Table
    """
    return Table(
        table_name,
        metadata if metadata is not None else MetaData(),
        Column("seed", String(255), nullable=False),
        Column("env", String(255), nullable=False),
        Column("batch", Integer, nullable=False),
    )


class SeedRecord(BaseModel):
    """One executed seed in one environment and batch."""

    model_config = ConfigDict(frozen=True)

    seed: str
    env: str
    batch: int

    @classmethod
    def from_row(cls, row: Any) -> "SeedRecord":
        """Build a record from a SQLAlchemy result row."""
        mapping = row._mapping
        return cls(seed=mapping["seed"], env=mapping["env"], batch=mapping["batch"])

    def __repr__(self) -> str:
        return f"<SeedRecord(seed={self.seed}, env={self.env}, batch={self.batch})>"
