"""
Tests for the command-line interface.
"""

import pytest
from click.testing import CliRunner

from seed_ledger import ConnectionResolver, SeedLedger
from seed_ledger.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, database_url):
    """Invoke the CLI against the test database."""

    def _invoke(*args, env="testing", input=None):
        return runner.invoke(
            cli,
            ["--database-url", database_url, "--env", env, *args],
            input=input,
            obj={},
        )

    return _invoke


@pytest.fixture
def inspect_ledger(database_url):
    """Open the test database directly."""
    resolver = ConnectionResolver({"default": database_url})
    yield lambda env="testing": SeedLedger(resolver, "seeds", env)
    resolver.dispose()


class TestCli:
    """Test suite for the seed-ledger CLI."""

    def test_install(self, invoke, inspect_ledger):
        """Test creating the ledger table."""
        result = invoke("install")

        assert result.exit_code == 0
        assert "created" in result.output
        assert inspect_ledger().repository_exists() is True

    def test_install_twice_fails(self, invoke):
        """Test that installing over an existing table fails."""
        invoke("install")
        result = invoke("install")

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_status_before_install(self, invoke):
        """Test status when the table is missing."""
        result = invoke("status")

        assert result.exit_code == 0
        assert "not found" in result.output

    def test_status(self, invoke, inspect_ledger):
        """Test status output."""
        invoke("install")
        inspect_ledger().log("UsersSeeder", 4)

        result = invoke("status")

        assert result.exit_code == 0
        assert "Last Batch" in result.output
        assert "Next Batch" in result.output
        assert "4" in result.output
        assert "5" in result.output

    def test_status_next_batch_comes_from_ledger(self, invoke, monkeypatch):
        """Test that status reports the ledger's own next batch number."""
        invoke("install")
        monkeypatch.setattr(SeedLedger, "get_next_batch_number", lambda self: 42)

        result = invoke("status")

        assert result.exit_code == 0
        assert "42" in result.output

    def test_log_uses_next_batch(self, invoke, inspect_ledger):
        """Test logging without an explicit batch."""
        invoke("install")
        inspect_ledger().log("UsersSeeder", 2)

        result = invoke("log", "PostsSeeder")

        assert result.exit_code == 0
        assert "batch 3" in result.output
        assert inspect_ledger().get_last()[0].seed == "PostsSeeder"

    def test_log_with_batch(self, invoke, inspect_ledger):
        """Test logging with an explicit batch."""
        invoke("install")

        result = invoke("log", "UsersSeeder", "--batch", "7")

        assert result.exit_code == 0
        assert inspect_ledger().get_last_batch_number() == 7

    def test_ran(self, invoke):
        """Test listing ran seeds per environment."""
        invoke("install")
        invoke("log", "UsersSeeder")

        result = invoke("ran")
        assert result.exit_code == 0
        assert "UsersSeeder" in result.output

        result = invoke("ran", env="staging")
        assert result.exit_code == 0
        assert "No seeds have run in staging" in result.output

    def test_last(self, invoke):
        """Test showing the last batch."""
        invoke("install")
        invoke("log", "AlphaSeeder", "--batch", "1")
        invoke("log", "BetaSeeder", "--batch", "1")

        result = invoke("last")

        assert result.exit_code == 0
        assert result.output.index("BetaSeeder") < result.output.index("AlphaSeeder")

    def test_last_empty(self, invoke):
        """Test showing the last batch of an empty environment."""
        invoke("install")

        result = invoke("last")

        assert result.exit_code == 0
        assert "No batches" in result.output

    def test_forget(self, invoke, inspect_ledger):
        """Test forgetting a seed in every batch."""
        invoke("install")
        invoke("log", "X", "--batch", "1")
        invoke("log", "X", "--batch", "2")

        result = invoke("forget", "X")

        assert result.exit_code == 0
        assert inspect_ledger().get_ran() == []

    def test_forget_in_production_asks(self, invoke, inspect_ledger):
        """Test that forgetting in production asks for confirmation."""
        invoke("install")
        invoke("log", "X", env="production")

        result = invoke("forget", "X", env="production", input="n\n")

        assert "Aborted" in result.output
        assert inspect_ledger("production").get_ran() == ["X"]

        result = invoke("forget", "X", "--yes", env="production")

        assert result.exit_code == 0
        assert inspect_ledger("production").get_ran() == []

    def test_missing_table(self, invoke):
        """Test commands before the table exists."""
        result = invoke("ran")

        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_no_database_configured(self, runner):
        """Test commands without any database URL."""
        result = runner.invoke(cli, ["--env", "testing", "ran"], obj={})

        assert result.exit_code == 1
        assert "not configured" in result.output
