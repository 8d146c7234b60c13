"""Pytest configuration and fixtures."""

import pytest

from seed_ledger import ConnectionResolver, SeedLedger

ENVIRONMENT_VARIABLES = [
    "SEED_ENV",
    "ENVIRONMENT",
    "ENV",
    "APP_ENV",
    "PYTHON_ENV",
    "DATABASE_URL",
    "SEED_LEDGER_DATABASE_URL",
    "SEED_LEDGER_TABLE_NAME",
    "SEED_LEDGER_DEFAULT_ENVIRONMENT",
    "SEED_LEDGER_DEFAULT_CONNECTION",
    "SEED_LEDGER_LOG_LEVEL",
    "SEED_LEDGER_ECHO_SQL",
    "TABLE_NAME",
    "DEFAULT_ENVIRONMENT",
    "DEFAULT_CONNECTION",
    "LOG_LEVEL",
    "ECHO_SQL",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate tests from the caller's environment variables and config files."""
    for name in ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def database_url(tmp_path):
    """URL of a file-backed SQLite database."""
    return f"sqlite:///{tmp_path / 'ledger.db'}"


@pytest.fixture
def other_database_url(tmp_path):
    """URL of a second, independent SQLite database."""
    return f"sqlite:///{tmp_path / 'other.db'}"


@pytest.fixture
def resolver(database_url, other_database_url):
    """Resolver with a default and a secondary connection."""
    resolver = ConnectionResolver(
        {"default": database_url, "other": other_database_url}
    )
    yield resolver
    resolver.dispose()


@pytest.fixture
def bare_ledger(resolver):
    """Ledger whose table has not been created."""
    return SeedLedger(resolver, "seeds", "testing")


@pytest.fixture
def ledger(bare_ledger):
    """Ledger with its table created."""
    bare_ledger.create_repository()
    return bare_ledger
