"""
Resolution of connection names to SQLAlchemy engines.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, NoSuchModuleError

from seed_ledger.exceptions import StoreUnavailableError

if TYPE_CHECKING:
    from seed_ledger.utils.config import Config

logger = logging.getLogger(__name__)

DEFAULT_CONNECTION = "default"


class ConnectionResolver:
    """
    Maps connection names to live SQLAlchemy engines.

    Connections can be registered either as database URLs, in which case
    the engine is created on first use and cached, or as ready-made
    engines. An empty or missing name resolves to the default connection.
    """

    def __init__(
        self,
        connections: Optional[Mapping[str, Union[str, Engine]]] = None,
        default: Optional[str] = None,
        engine_options: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the resolver.

        Args:
            connections: Mapping of connection name to URL or Engine
            default: Name of the default connection
            engine_options: Keyword arguments passed to create_engine
        """
        self._urls: Dict[str, str] = {}
        self._engines: Dict[str, Engine] = {}
        self._owned: List[str] = []
        self._default = default or DEFAULT_CONNECTION
        self.engine_options = dict(engine_options or {})

        for name, target in (connections or {}).items():
            self.add_connection(name, target)

    @classmethod
    def from_config(cls, config: "Config") -> "ConnectionResolver":
        """
        Build a resolver from a loaded configuration.

        Args:
            config: Configuration manager

        Returns:
            A resolver with every configured connection registered
        """
        return cls(
            connections=config.connection_urls(),
            default=config.default_connection,
            engine_options={"echo": bool(config.get("echo_sql", False))},
        )

    @property
    def default_connection(self) -> str:
        """Get the default connection name."""
        return self._default

    def set_default_connection(self, name: str) -> None:
        """Set the default connection name."""
        self._default = name

    def add_connection(self, name: str, target: Union[str, Engine]) -> None:
        """
        Register a connection.

        Args:
            name: Connection name
            target: Database URL or an existing Engine
        """
        if name in self._owned:
            self._engines.pop(name).dispose()
            self._owned.remove(name)

        if isinstance(target, Engine):
            self._engines[name] = target
            self._urls.pop(name, None)
        else:
            self._urls[name] = target
            self._engines.pop(name, None)
        logger.debug(f"Registered connection: {name}")

    def has_connection(self, name: str) -> bool:
        """Check whether a connection name is registered."""
        return name in self._engines or name in self._urls

    def connection(self, name: Optional[str] = None) -> Engine:
        """
        Resolve a connection name to an engine.

        Args:
            name: Connection name (defaults to the default connection)

        Returns:
            The SQLAlchemy Engine

        Raises:
            StoreUnavailableError: If the name is unknown or the URL is invalid
        """
        name = name or self._default

        if name in self._engines:
            return self._engines[name]

        if name not in self._urls:
            raise StoreUnavailableError(f"Database connection [{name}] not configured.")

        try:
            engine = create_engine(self._urls[name], **self.engine_options)
        except (ArgumentError, NoSuchModuleError, ImportError) as e:
            logger.error(f"Could not create engine for connection {name}: {e}")
            raise StoreUnavailableError(
                f"Database connection [{name}] could not be created: {e}", original=e
            ) from e

        self._engines[name] = engine
        self._owned.append(name)
        logger.debug(f"Created engine for connection: {name}")
        return engine

    def dispose(self) -> None:
        """Dispose every engine created by this resolver."""
        for name in self._owned:
            engine = self._engines.pop(name, None)
            if engine is not None:
                engine.dispose()
        self._owned = []
