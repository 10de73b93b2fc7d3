"""CLI entry point for podnav."""

import asyncio
import sys
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from podnav.browser import EpisodeBrowser
from podnav.catalog.client import CatalogClient
from podnav.catalog.service import ShowService, validate_show_id
from podnav.cli_library import favorites_app, history_app
from podnav.config.logging import setup_logging
from podnav.config.manager import ConfigManager
from podnav.config.schema import GlobalConfig
from podnav.library.favorites import FavoritesStore
from podnav.library.history import HistoryStore
from podnav.navigation.engine import NavigationEngine
from podnav.navigation.window import parse_page_size
from podnav.ui.display import (
    display_episode_details,
    display_episode_page,
    display_show_details,
    display_show_results,
)
from podnav.ui.theme import set_theme
from podnav.utils.errors import ConfigError, PodnavError, ValidationError

app = typer.Typer(
    name="podnav",
    help="Browse podcast episodes and jump straight to episode #N",
    no_args_is_help=True,
)
config_app = typer.Typer(name="config", help="Show or change podnav configuration")
app.add_typer(favorites_app, name="favorites")
app.add_typer(history_app, name="history")
app.add_typer(config_app, name="config")
console = Console()


@dataclass
class Session:
    """Services wired together for one command run."""

    config: GlobalConfig
    service: ShowService
    engine: NavigationEngine


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
) -> None:
    """podnav - browse podcast episodes from the terminal."""
    # Initialize logging before any command runs
    setup_logging(verbose=verbose, log_file=log_file)


@contextmanager
def cli_errors() -> Iterator[None]:
    """Print podnav errors as one-line failures and exit with a status code."""
    try:
        yield
    except ValidationError as e:
        console.print(f"[red]✗[/red] {e}")
        if e.suggestion:
            console.print(f"[dim]  {e.suggestion}[/dim]")
        sys.exit(1)
    except ConfigError as e:
        console.print(f"[red]✗[/red] {e}")
        sys.exit(1)
    except PodnavError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


def load_config() -> GlobalConfig:
    config = ConfigManager().load_config()
    set_theme(config.theme)
    return config


@asynccontextmanager
async def open_session(config: GlobalConfig) -> AsyncIterator[Session]:
    """Catalog client, show service and navigation engine built from config."""
    async with CatalogClient.from_config(config.catalog) as client:
        service = ShowService(
            client, prefetch_full_collection=config.browse.prefetch_full_collection
        )
        engine = NavigationEngine(
            service,
            policy=config.browse.numbering,
            scan_page_size=config.browse.scan_page_size,
            index_ttl_seconds=config.browse.index_ttl_seconds,
        )
        yield Session(config=config, service=service, engine=engine)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from podnav import __version__

    console.print(f"[bold cyan]podnav[/bold cyan] v{__version__}")


@app.command("search")
def search_command(
    query: str = typer.Argument(..., help="Show name or keywords"),
    limit: int = typer.Option(10, "--limit", "-l", min=1, max=50, help="Maximum results"),
) -> None:
    """Search the catalog for shows.

    Examples:
        podnav search "history podcast"
    """
    with cli_errors():
        config = load_config()

        async def run_search() -> None:
            async with open_session(config) as session:
                shows = await session.service.search_shows(query, limit)
            display_show_results(shows)

        asyncio.run(run_search())


@app.command("show")
def show_command(
    show_id: str = typer.Argument(..., help="Show ID or show URL"),
) -> None:
    """Show details for a show."""
    with cli_errors():
        config = load_config()
        show_id = validate_show_id(show_id)

        async def run_show() -> None:
            async with open_session(config) as session:
                show = await session.service.get_show(show_id)
            await HistoryStore().record(show.id, show.name)
            display_show_details(show)

        asyncio.run(run_show())


@app.command("episodes")
def episodes_command(
    show_id: str = typer.Argument(..., help="Show ID or show URL"),
    page: int = typer.Option(1, "--page", "-p", help="Page to show"),
    page_size: str | None = typer.Option(
        None, "--page-size", "-s", help="Episodes per page, or 'unlimited'"
    ),
) -> None:
    """List a page of a show's episodes.

    Examples:
        podnav episodes 4rOoJ6Egrf8K2IrywzwOMk --page 3 --page-size 15
    """
    with cli_errors():
        config = load_config()
        show_id = validate_show_id(show_id)
        size = parse_page_size(page_size) if page_size else config.browse.default_page_size

        async def run_episodes() -> None:
            async with open_session(config) as session:
                listing = await session.engine.list_page(show_id, page, size)
            display_episode_page(listing.episodes, listing.pagination)

        asyncio.run(run_episodes())


@app.command("jump")
def jump_command(
    show_id: str = typer.Argument(..., help="Show ID or show URL"),
    number: int = typer.Argument(..., help="Episode number"),
    page_size: str | None = typer.Option(
        None, "--page-size", "-s", help="Page size used to report the listing page"
    ),
) -> None:
    """Jump to an episode by its number.

    Examples:
        podnav jump 4rOoJ6Egrf8K2IrywzwOMk 42
    """
    with cli_errors():
        config = load_config()
        show_id = validate_show_id(show_id)
        size = parse_page_size(page_size) if page_size else config.browse.default_page_size

        async def run_jump() -> bool:
            async with open_session(config) as session:
                with console.status(f"Looking for episode #{number}..."):
                    result = await session.engine.locate_by_number(show_id, number, size)
                listing_page = session.engine.page_for_episode(show_id, number, size)

            if not result.success or result.data is None:
                console.print(f"[red]✗[/red] {result.error}")
                return False

            display_episode_details(result.data.episodes[0])
            hint = f"Found via {result.data.search_method}"
            if listing_page is not None:
                hint += f" · page {listing_page} of the listing at {size} per page"
            console.print(f"[dim]{hint}[/dim]")
            return True

        if not asyncio.run(run_jump()):
            sys.exit(1)


@app.command("browse")
def browse_command(
    show_id: str | None = typer.Argument(
        None, help="Show ID or show URL (defaults to default_show_id)"
    ),
) -> None:
    """Browse a show's episodes interactively."""
    with cli_errors():
        config = load_config()
        show_id = show_id or config.default_show_id
        if not show_id:
            raise ValidationError(
                "No show given and no default_show_id configured",
                suggestion="Run 'podnav browse SHOW_ID' or "
                "'podnav config set default_show_id SHOW_ID'",
            )
        show_id = validate_show_id(show_id)

        async def run_browse() -> None:
            async with open_session(config) as session:
                show = await session.service.get_show(show_id)
                await HistoryStore().record(show.id, show.name)
                browser = EpisodeBrowser(
                    session.engine,
                    show,
                    page_size=config.browse.default_page_size,
                    page_size_choices=config.browse.page_size_choices,
                    favorites=FavoritesStore(),
                )
                await browser.run()

        asyncio.run(run_browse())


@config_app.command("show")
def config_show() -> None:
    """Display current configuration."""
    with cli_errors():
        manager = ConfigManager()
        config = manager.load_config()
        data = config.model_dump(mode="json")

        table = Table(show_header=False, box=None)
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="white")

        for key, value in _flatten(data):
            if key.endswith("client_secret") and value:
                value = "********"
            table.add_row(key, str(value))

        console.print("\n[bold]podnav Configuration[/bold]\n")
        console.print(table)
        console.print(f"\n[dim]Config file: {manager.config_file}[/dim]")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Dotted config key, e.g. browse.default_page_size"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set a configuration value.

    Examples:
        podnav config set browse.numbering newest_first
    """
    with cli_errors():
        ConfigManager().set_value(key, value)
        console.print(f"[green]✓[/green] Set [cyan]{key}[/cyan] = {value}")


def _flatten(data: dict, prefix: str = "") -> list[tuple[str, object]]:
    rows: list[tuple[str, object]] = []
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            rows += _flatten(value, f"{name}.")
        else:
            rows.append((name, value))
    return rows


if __name__ == "__main__":
    app()
