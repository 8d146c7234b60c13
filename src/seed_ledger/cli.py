"""
Command-line interface for sqlalchemy-seed-ledger.
"""

import logging
import sys
from typing import NoReturn, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table

from seed_ledger.exceptions import SeedLedgerError
from seed_ledger.factory import create_ledger
from seed_ledger.tracking.repository import SeedLedger
from seed_ledger.utils.config import Config
from seed_ledger.utils.environment import EnvironmentManager

logger = logging.getLogger(__name__)
console = Console()


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--env",
    "-e",
    type=str,
    help="Environment to use",
)
@click.option(
    "--connection",
    type=str,
    help="Named connection to use",
)
@click.option(
    "--database-url",
    type=str,
    envvar="DATABASE_URL",
    help="Database URL",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug logging",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    env: Optional[str],
    connection: Optional[str],
    database_url: Optional[str],
    debug: bool,
) -> None:
    """Seed Ledger - Track executed database seeders."""

    if debug:
        logging.basicConfig(level=logging.DEBUG)

    try:
        cfg = Config(config_file=config)
    except SeedLedgerError as e:
        _fail(e)

    if database_url:
        cfg.set("database_url", database_url)

    env_manager = EnvironmentManager(cfg.default_environment)
    if env:
        env_manager.current_environment = env

    ledger = create_ledger(cfg, environment=env_manager.current_environment, connection=connection)
    ctx.call_on_close(ledger.get_connection_resolver().dispose)

    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg
    ctx.obj["env_manager"] = env_manager
    ctx.obj["ledger"] = ledger


@cli.command()
@click.pass_context
def install(ctx: click.Context) -> None:
    """Create the seed ledger table."""

    ledger: SeedLedger = ctx.obj["ledger"]

    try:
        ledger.create_repository()
    except SeedLedgerError as e:
        _fail(e)

    console.print(
        f"[bold green]✓ Seed ledger table {escape(ledger.table_name)} created.[/bold green]"
    )


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the state of the seed ledger."""

    ledger: SeedLedger = ctx.obj["ledger"]

    try:
        if not ledger.repository_exists():
            console.print(
                "[yellow]Seed ledger table not found. "
                "Run [cyan]seed-ledger install[/cyan] first.[/yellow]"
            )
            return

        last_batch = ledger.get_last_batch_number()
        next_batch = ledger.get_next_batch_number()
        ran = ledger.get_ran()
    except SeedLedgerError as e:
        _fail(e)

    table = Table(title=f"Seed Ledger ({escape(ledger.get_env())})")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Table", escape(ledger.table_name))
    table.add_row("Ran Seeds", f"[green]{len(ran)}[/green]")
    table.add_row("Last Batch", str(last_batch))
    table.add_row("Next Batch", str(next_batch))

    console.print(table)


@cli.command()
@click.pass_context
def ran(ctx: click.Context) -> None:
    """List the seeds that have run in the environment."""

    ledger: SeedLedger = ctx.obj["ledger"]

    try:
        seeds = ledger.get_ran()
    except SeedLedgerError as e:
        _fail(e)

    if not seeds:
        console.print(f"[yellow]No seeds have run in {escape(ledger.get_env())}.[/yellow]")
        return

    for seed in seeds:
        console.print(f"  • {escape(seed)}")


@cli.command()
@click.pass_context
def last(ctx: click.Context) -> None:
    """Show the last batch, in rollback order."""

    ledger: SeedLedger = ctx.obj["ledger"]

    try:
        records = ledger.get_last()
    except SeedLedgerError as e:
        _fail(e)

    if not records:
        console.print(f"[yellow]No batches in {escape(ledger.get_env())}.[/yellow]")
        return

    table = Table(title=f"Last Batch ({escape(ledger.get_env())})")
    table.add_column("Seed", style="cyan")
    table.add_column("Batch", style="yellow")

    for record in records:
        table.add_row(escape(record.seed), str(record.batch))

    console.print(table)


@cli.command()
@click.argument("seed")
@click.option(
    "--batch",
    "-b",
    type=int,
    help="Batch number (defaults to the next batch)",
)
@click.pass_context
def log(ctx: click.Context, seed: str, batch: Optional[int]) -> None:
    """Record SEED as run."""

    ledger: SeedLedger = ctx.obj["ledger"]

    try:
        if batch is None:
            batch = ledger.get_next_batch_number()
        ledger.log(seed, batch)
    except SeedLedgerError as e:
        _fail(e)

    console.print(
        f"[bold green]✓ Logged {escape(seed)} in {escape(ledger.get_env())} "
        f"(batch {batch}).[/bold green]"
    )


@cli.command()
@click.argument("seed")
@click.option(
    "--yes",
    "-y",
    is_flag=True,
    help="Do not ask for confirmation",
)
@click.pass_context
def forget(ctx: click.Context, seed: str, yes: bool) -> None:
    """Remove every record of SEED from the environment."""

    ledger: SeedLedger = ctx.obj["ledger"]
    env_manager: EnvironmentManager = ctx.obj["env_manager"]

    if env_manager.is_production(ledger.get_env()) and not yes:
        if not Confirm.ask(
            f"[bold red]Forget {escape(seed)} in PRODUCTION. Continue?[/bold red]"
        ):
            console.print("[yellow]Aborted.[/yellow]")
            return

    try:
        ledger.delete(seed)
    except SeedLedgerError as e:
        _fail(e)

    console.print(
        f"[bold green]✓ Forgot {escape(seed)} in {escape(ledger.get_env())}.[/bold green]"
    )


def _fail(error: SeedLedgerError) -> NoReturn:
    """Report a ledger error and exit."""
    logger.debug("Seed ledger command failed", exc_info=error)
    console.print(f"[bold red]Error: {escape(str(error))}[/bold red]")
    sys.exit(1)


def main():
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
