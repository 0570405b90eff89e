"""CLI interface for block-migrations."""

import json
import logging
import sys
import time
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import load_config
from .demo import DEFAULT_CONFIG, build_registry
from .demo.payload import Counter, decode, encode
from .errors import HeightError, MigrationError
from .migrations import (
    ActiveMigrationSet,
    MigrationRegistry,
    MigrationRunner,
    Status,
    load_enable_all_migrations,
    load_migrations,
    load_migrations_file,
)
from .storage import BlockStorage

console = Console()


def _migration_options(func):
    """Options shared by commands that resolve an active migration set."""
    func = click.option(
        "--disable",
        "-d",
        multiple=True,
        help="Disable a migration after loading (can be specified multiple times)",
    )(func)
    func = click.option(
        "--include-hotfixes", is_flag=True, help="Enable hotfixes too (requires --enable-all)"
    )(func)
    func = click.option(
        "--enable-all",
        is_flag=True,
        help="Enable every registered migration with default metadata",
    )(func)
    func = click.option(
        "--migrations",
        "-m",
        "migrations_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Migration configuration document (JSON)",
    )(func)
    return func


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Custom config file path",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, config: Path | None, verbose: bool) -> None:
    """block-migrations: Register and run block-height gated migrations."""
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )

    # Load configuration
    try:
        ctx.obj["config"] = load_config(config)
    except (FileNotFoundError, ValueError, OSError, PermissionError) as e:
        console.print(f"[red]Error:[/red] Configuration: {e}")
        sys.exit(1)

    ctx.obj["registry"] = build_registry()


@cli.command("list")
@click.pass_context
def list_migrations(ctx: click.Context) -> None:
    """
    List every registered migration.

    Examples:

        \b
        block-migrations list
    """
    registry: MigrationRegistry = ctx.obj["registry"]

    table = Table(title="Migration Registry")
    table.add_column("Name", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Description")

    for migration in registry:
        table.add_row(migration.name, migration.kind.value, migration.description())

    console.print(table)


@cli.command()
@_migration_options
@click.option(
    "--format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format: table (default) or json",
)
@click.pass_context
def show(
    ctx: click.Context,
    migrations_file: Path | None,
    enable_all: bool,
    include_hotfixes: bool,
    disable: tuple[str, ...],
    format: str,
) -> None:
    """
    Show the active migration set.

    Examples:

        \b
        # Active set from the built-in demo configuration
        block-migrations show

        \b
        # Active set from a configuration document, with one migration disabled
        block-migrations show --migrations migrations.json --disable Three

        \b
        # Output as JSON; the result can be fed back with --migrations
        block-migrations show --format json
    """
    active = _resolve_active(ctx, migrations_file, enable_all, include_hotfixes, disable)

    if format == "json":
        output = [
            {
                "type": name,
                "block_height": entry.metadata.block_height,
                "issue": entry.metadata.issue,
                "status": entry.status.value,
            }
            for name, entry in active.items()
        ]
        print(json.dumps(output, indent=2))
    else:
        _display_active_table(active)


@cli.command()
@_migration_options
@click.option("--start", type=click.IntRange(min=0), help="First height (overrides config)")
@click.option("--end", type=click.IntRange(min=0), help="Height to stop before (overrides config)")
@click.option(
    "--delay",
    type=click.FloatRange(min=0),
    help="Seconds to sleep between heights (overrides config)",
)
@click.option(
    "--state-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Persist storage to this TinyDB file (overrides config)",
)
@click.pass_context
def run(
    ctx: click.Context,
    migrations_file: Path | None,
    enable_all: bool,
    include_hotfixes: bool,
    disable: tuple[str, ...],
    start: int | None,
    end: int | None,
    delay: float | None,
    state_file: Path | None,
) -> None:
    """
    Simulate a chain advancing through heights and run migrations at each one.

    Each height runs initialize, then update, then hotfix migrations against
    a counter payload. Storage contents and hotfix results are printed after
    every height.

    Examples:

        \b
        # Run heights 0..9 with the demo configuration
        block-migrations run

        \b
        # Resume a persisted chain from height 10
        block-migrations run --state-file chain.json --start 10 --end 20
    """
    config = ctx.obj["config"]
    active = _resolve_active(ctx, migrations_file, enable_all, include_hotfixes, disable)

    start = config.start_height if start is None else start
    end = config.end_height if end is None else end
    delay = config.step_delay if delay is None else delay
    state_file = state_file or config.state_file

    if end < start:
        console.print(f"[red]Error:[/red] End height {end} is below start height {start}")
        sys.exit(1)

    payload = encode(Counter())

    with BlockStorage.open(state_file) as storage:
        runner = MigrationRunner(active, storage)

        for height in range(start, end):
            try:
                result = runner.run_block(height, payload)
            except HeightError as e:
                console.print(f"[red]Error:[/red] {e}")
                sys.exit(1)

            console.print(f"[bold]Height {height}[/bold]")
            if result.initialized:
                console.print(f"  Initialized: [cyan]{', '.join(result.initialized)}[/cyan]")
            if result.updated:
                console.print(f"  Updated: [cyan]{', '.join(result.updated)}[/cyan]")
            console.print(f"  Storage: {storage.as_dict()}")

            for name, data in result.hotfixes.items():
                if data is None:
                    continue
                counter = decode(data)
                value = counter.value if counter else "<undecodable>"
                console.print(f"  Hotfix [cyan]{name}[/cyan] result: {value}")

            if delay and height < end - 1:
                time.sleep(delay)

    console.print("[green]✓[/green] Simulation completed.")


def _resolve_active(
    ctx: click.Context,
    migrations_file: Path | None,
    enable_all: bool,
    include_hotfixes: bool,
    disable: tuple[str, ...],
) -> ActiveMigrationSet:
    """Resolve the active set from CLI options and config, exiting on errors."""
    config = ctx.obj["config"]
    registry: MigrationRegistry = ctx.obj["registry"]

    enable_all = enable_all or config.enable_all
    if include_hotfixes and not enable_all:
        console.print("[red]Error:[/red] --include-hotfixes requires --enable-all")
        sys.exit(1)

    include_hotfixes = include_hotfixes or config.include_hotfixes
    migrations_file = migrations_file or config.migrations_file

    try:
        if enable_all:
            active = load_enable_all_migrations(registry, include_hotfixes=include_hotfixes)
        elif migrations_file is not None:
            active = load_migrations_file(registry, migrations_file)
        else:
            active = load_migrations(registry, DEFAULT_CONFIG)
    except MigrationError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    for name in disable:
        if name not in active:
            console.print(f"[red]Error:[/red] Migration '{name}' is not in the active set")
            sys.exit(1)
        active.disable(name)

    return active


def _display_active_table(active: ActiveMigrationSet) -> None:
    """Display the active migration set in a table."""
    table = Table(title="Active Migrations")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Block Height", justify="right")
    table.add_column("Issue", style="magenta")
    table.add_column("Status")

    for name, entry in active.items():
        if entry.status is Status.ENABLED:
            status_text = "[green]Enabled[/green]"
        else:
            status_text = "[yellow]Disabled[/yellow]"

        table.add_row(
            name,
            entry.description(),
            str(entry.metadata.block_height),
            entry.metadata.issue or "None",
            status_text,
        )

    console.print(table)


if __name__ == "__main__":
    cli()
