"""
Repository recording which seeds have run, per environment and batch.
"""

import logging
from typing import Any, Callable, List, Optional, TypeVar, Union

from sqlalchemy import Table, delete, func, insert, inspect, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from seed_ledger.core.resolver import ConnectionResolver
from seed_ledger.exceptions import (
    LedgerQueryError,
    MissingTableError,
    SchemaConflictError,
    StoreUnavailableError,
)
from seed_ledger.tracking.models import SeedRecord, build_ledger_table

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _warn_if_empty(env: str) -> None:
    if not env:
        logger.warning("Seed ledger environment set to an empty name")


class SeedLedger:
    """
    Tracks which seeds have been executed, in which environment and batch.

    Every query is filtered by the environment selected at call time, so
    switching environments changes the visible records for all later calls.
    Records are only ever inserted or deleted, never updated.

    Each operation runs in its own transaction. Reading the next batch
    number and logging under it are two separate transactions, so two
    runners working on the same environment concurrently may pick the
    same batch number.
    """

    def __init__(
        self,
        resolver: ConnectionResolver,
        table: str,
        environment: str,
        connection: Optional[str] = None,
    ):
        """
        Initialize the seed ledger.

        Args:
            resolver: Connection resolver
            table: Name of the ledger table
            environment: Environment to run in
            connection: Name of the connection to use (defaults to the resolver's default)
        """
        self._resolver = resolver
        self._table_name = table
        self._table = build_ledger_table(table)
        _warn_if_empty(environment)
        self._env = environment
        self._connection = connection

    def __repr__(self) -> str:
        return (
            f"<SeedLedger(table={self._table_name}, env={self._env}, "
            f"connection={self._connection or self._resolver.default_connection})>"
        )

    @property
    def table_name(self) -> str:
        """Get the ledger table name."""
        return self._table_name

    @property
    def table(self) -> Table:
        """Get the ledger Table definition."""
        return self._table

    def get_env(self) -> str:
        """Get the environment we run in."""
        return self._env

    def set_env(self, env: str) -> None:
        """
        Set the environment to run the seeds against.

        Args:
            env: Environment name
        """
        _warn_if_empty(env)
        self._env = env

    def set_source(self, name: Optional[str]) -> None:
        """
        Set the connection to gather data from.

        Args:
            name: Connection name, or None for the default connection
        """
        self._connection = name

    def with_env(self, env: str) -> "SeedLedger":
        """Return a new ledger scoped to another environment."""
        return SeedLedger(self._resolver, self._table_name, env, self._connection)

    def with_source(self, name: Optional[str]) -> "SeedLedger":
        """Return a new ledger bound to another connection."""
        return SeedLedger(self._resolver, self._table_name, self._env, name)

    def get_connection_resolver(self) -> ConnectionResolver:
        """Get the connection resolver instance."""
        return self._resolver

    def get_connection(self) -> Engine:
        """Resolve the engine for the currently selected connection."""
        return self._resolver.connection(self._connection)

    def get_ran(self) -> List[str]:
        """
        Get the seeds that have run in the current environment.

        Returns:
            Seed identifiers, in the order the database returns them
        """
        query = select(self._table.c.seed).where(self._table.c.env == self._env)
        ran = self._run("get ran seeds", lambda conn: list(conn.execute(query).scalars()))
        logger.debug(f"Found {len(ran)} ran seed(s) in environment {self._env}")
        return ran

    def get_last(self) -> List[SeedRecord]:
        """
        Get the records of the last batch in the current environment.

        Returns:
            SeedRecords ordered by seed, descending
        """
        last_batch = (
            select(func.max(self._table.c.batch))
            .where(self._table.c.env == self._env)
            .scalar_subquery()
        )
        query = (
            select(self._table.c.seed, self._table.c.env, self._table.c.batch)
            .where(self._table.c.env == self._env)
            .where(self._table.c.batch == last_batch)
            .order_by(self._table.c.seed.desc())
        )
        return self._run(
            "get last batch",
            lambda conn: [SeedRecord.from_row(row) for row in conn.execute(query)],
        )

    def log(self, seed: str, batch: int) -> None:
        """
        Log that a seed was run.

        Args:
            seed: Seed identifier
            batch: Batch number
        """
        record = {"seed": seed, "env": self._env, "batch": batch}
        self._run("log seed", lambda conn: conn.execute(insert(self._table).values(**record)))
        logger.info(f"Logged seed {seed} in environment {self._env} (batch {batch})")

    def delete(self, record: Union[SeedRecord, Any, str]) -> None:
        """
        Remove a seed from the log.

        Every record of the seed in the current environment is removed,
        whatever batch it was logged under.

        Args:
            record: A SeedRecord (or any object with a ``seed`` attribute) or a seed identifier
        """
        seed = record if isinstance(record, str) else record.seed
        statement = (
            delete(self._table)
            .where(self._table.c.env == self._env)
            .where(self._table.c.seed == seed)
        )
        removed = self._run("delete seed", lambda conn: conn.execute(statement).rowcount)
        logger.info(f"Removed {removed} record(s) of seed {seed} from environment {self._env}")

    def get_next_batch_number(self) -> int:
        """Get the next batch number."""
        return self.get_last_batch_number() + 1

    def get_last_batch_number(self) -> int:
        """
        Get the last batch number in the current environment.

        Returns:
            The highest batch number, or 0 when nothing has run yet
        """
        last = self.get_last_batch_number_or_none()
        return last if last is not None else 0

    def get_last_batch_number_or_none(self) -> Optional[int]:
        """
        Get the last batch number in the current environment.

        Returns:
            The highest batch number, or None when nothing has run yet
        """
        query = select(func.max(self._table.c.batch)).where(self._table.c.env == self._env)
        return self._run("get last batch number", lambda conn: conn.execute(query).scalar())

    def create_repository(self) -> None:
        """
        Create the ledger table.

        Raises:
            SchemaConflictError: If the table cannot be created, including when it exists
        """
        engine = self.get_connection()
        connection = self._connect(engine)
        with connection:
            try:
                with connection.begin():
                    self._table.create(bind=connection, checkfirst=False)
            except SQLAlchemyError as e:
                logger.error(f"Could not create seed ledger table {self._table_name}: {e}")
                raise SchemaConflictError(
                    f"Could not create seed ledger table {self._table_name}: {e}",
                    original=e,
                ) from e
        logger.info(f"Created seed ledger table {self._table_name}")

    def repository_exists(self) -> bool:
        """Determine if the ledger table exists on the current connection."""
        engine = self.get_connection()
        connection = self._connect(engine)
        with connection:
            try:
                return inspect(connection).has_table(self._table_name)
            except SQLAlchemyError as e:
                logger.error(f"Could not inspect seed ledger table {self._table_name}: {e}")
                raise LedgerQueryError(
                    f"Could not inspect seed ledger table {self._table_name}: {e}",
                    original=e,
                ) from e

    def _connect(self, engine: Engine) -> Connection:
        try:
            return engine.connect()
        except SQLAlchemyError as e:
            logger.error(f"Could not connect to {engine.url!r}: {e}")
            raise StoreUnavailableError(
                f"Could not connect to {engine.url!r}: {e}", original=e
            ) from e

    def _run(self, operation: str, work: Callable[[Connection], T]) -> T:
        """Run ``work`` inside a transaction on the current connection."""
        engine = self.get_connection()
        connection = self._connect(engine)
        with connection:
            try:
                with connection.begin():
                    return work(connection)
            except SQLAlchemyError as e:
                error = e
        # Probe with a fresh connection, the failed one may be in an aborted state.
        if not self._table_exists(engine):
            logger.error(f"Seed ledger table {self._table_name} does not exist ({operation})")
            raise MissingTableError(
                f"Seed ledger table {self._table_name} does not exist; "
                f"create it before trying to {operation}.",
                original=error,
            ) from error
        logger.error(f"Could not {operation}: {error}")
        raise LedgerQueryError(f"Could not {operation}: {error}", original=error) from error

    def _table_exists(self, engine: Engine) -> bool:
        try:
            with engine.connect() as connection:
                return inspect(connection).has_table(self._table_name)
        except SQLAlchemyError as e:
            logger.debug(f"Could not check for table {self._table_name}: {e}")
            return True
