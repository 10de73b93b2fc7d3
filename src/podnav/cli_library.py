"""CLI commands for saved shows.

Provides the `podnav favorites` and `podnav history` subcommand groups.
"""

import asyncio
import sys
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from podnav.catalog.service import validate_show_id
from podnav.library.favorites import FavoritesStore
from podnav.library.history import HistoryStore
from podnav.library.models import FavoriteShow, HistoryEntry
from podnav.utils.errors import PodnavError, ValidationError

favorites_app = typer.Typer(name="favorites", help="Manage favorite shows")
history_app = typer.Typer(name="history", help="Recently opened shows")
console = Console()

SORT_CHOICES = ("recent", "oldest", "name_asc", "name_desc", "id")


def _fail(error: PodnavError) -> None:
    console.print(f"[red]✗[/red] {error}")
    if isinstance(error, ValidationError) and error.suggestion:
        console.print(f"[dim]  {error.suggestion}[/dim]")
    sys.exit(1)


def _favorites_table(favorites: list[FavoriteShow]) -> Table:
    table = Table(title="[bold]Favorite Shows[/bold]")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Show", style="cyan")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Added", style="green", no_wrap=True)
    for i, favorite in enumerate(favorites, 1):
        table.add_row(
            str(i), escape(favorite.name), favorite.id, favorite.added_at.strftime("%Y-%m-%d")
        )
    return table


def _history_table(entries: list[HistoryEntry], title: str = "Recently Opened") -> Table:
    table = Table(title=f"[bold]{title}[/bold]")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Show", style="cyan")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Last opened", style="green", no_wrap=True)
    for i, entry in enumerate(entries, 1):
        table.add_row(
            str(i),
            escape(entry.name),
            entry.id,
            entry.last_accessed.strftime("%Y-%m-%d %H:%M"),
        )
    return table


@favorites_app.command("list")
def favorites_list() -> None:
    """List favorite shows, most recently added first."""
    try:
        favorites = asyncio.run(FavoritesStore().list())
        if not favorites:
            console.print("[yellow]No favorites yet.[/yellow]")
            console.print("\nAdd one: [cyan]podnav favorites add <show-id> --name <name>[/cyan]")
            return
        console.print(_favorites_table(favorites))
        console.print(f"\n[dim]Total: {len(favorites)} show(s)[/dim]")
    except PodnavError as e:
        _fail(e)


@favorites_app.command("add")
def favorites_add(
    show_id: Annotated[str, typer.Argument(help="Show ID or show URL")],
    name: Annotated[str, typer.Option("--name", "-n", help="Display name")],
) -> None:
    """Add a show to favorites (renames it if already saved)."""
    try:
        favorite = asyncio.run(FavoritesStore().add(validate_show_id(show_id), name))
        console.print(f"[green]✓[/green] Saved '[bold]{escape(favorite.name)}[/bold]'")
    except PodnavError as e:
        _fail(e)


@favorites_app.command("remove")
def favorites_remove(
    show_id: Annotated[str, typer.Argument(help="Show ID to remove")],
) -> None:
    """Remove a show from favorites."""
    try:
        if not asyncio.run(FavoritesStore().remove(show_id)):
            console.print(f"[red]✗[/red] Show '{show_id}' is not a favorite")
            sys.exit(1)
        console.print(f"[green]✓[/green] Removed '{show_id}' from favorites")
    except PodnavError as e:
        _fail(e)


@favorites_app.command("clear")
def favorites_clear(
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation prompt")] = False,
) -> None:
    """Remove all favorites."""
    if not force and not typer.confirm("Remove all favorites?"):
        console.print("[yellow]Cancelled[/yellow]")
        return
    try:
        count = asyncio.run(FavoritesStore().clear())
        console.print(f"[green]✓[/green] Removed {count} favorite(s)")
    except PodnavError as e:
        _fail(e)


@history_app.command("list")
def history_list(
    sort: Annotated[
        str, typer.Option("--sort", help=f"Order: {', '.join(SORT_CHOICES)}")
    ] = "recent",
) -> None:
    """List recently opened shows."""
    try:
        entries = asyncio.run(HistoryStore().sorted(sort))  # type: ignore[arg-type]
        if not entries:
            console.print("[yellow]No shows opened yet.[/yellow]")
            return
        console.print(_history_table(entries))
    except PodnavError as e:
        _fail(e)


@history_app.command("search")
def history_search(
    query: Annotated[str, typer.Argument(help="Text to match in show names or IDs")],
) -> None:
    """Search history by show name or ID."""
    try:
        entries = asyncio.run(HistoryStore().search(query))
        if not entries:
            console.print(f"[yellow]No history entries match '{escape(query)}'[/yellow]")
            return
        console.print(_history_table(entries, title=f"History matching '{escape(query)}'"))
    except PodnavError as e:
        _fail(e)


@history_app.command("remove")
def history_remove(
    show_id: Annotated[str, typer.Argument(help="Show ID to remove")],
) -> None:
    """Remove one show from history."""
    try:
        if not asyncio.run(HistoryStore().remove(show_id)):
            console.print(f"[red]✗[/red] Show '{show_id}' is not in history")
            sys.exit(1)
        console.print(f"[green]✓[/green] Removed '{show_id}' from history")
    except PodnavError as e:
        _fail(e)


@history_app.command("clear")
def history_clear(
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation prompt")] = False,
) -> None:
    """Clear all history."""
    if not force and not typer.confirm("Clear all history?"):
        console.print("[yellow]Cancelled[/yellow]")
        return
    try:
        count = asyncio.run(HistoryStore().clear())
        console.print(f"[green]✓[/green] Cleared {count} history entr(ies)")
    except PodnavError as e:
        _fail(e)
