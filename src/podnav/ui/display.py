"""Rich rendering of shows, episode listings and locate results.

All display functions use a shared Console instance for consistent output.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from podnav.catalog.models import Show, ShowSummary
from podnav.navigation.results import NavigationEpisode
from podnav.navigation.window import PageWindow
from podnav.ui.theme import get_theme
from podnav.utils.display import format_duration, truncate_text

# Shared console instance for all display functions
console = Console()


def format_pagination_footer(window: PageWindow) -> str:
    """One-line pagination summary, e.g. "Page 3 of 7 · Showing 31-45 of 100"."""
    if window.total_items == 0:
        return "No episodes"
    return (
        f"Page {window.current_page} of {window.total_pages} · "
        f"Showing {window.start_item}-{window.end_item} of {window.total_items}"
    )


def build_episode_table(episodes: list[NavigationEpisode], title: str | None = None) -> Table:
    """Table of episodes with their ordinal numbers; highlighted rows stand out."""
    theme = get_theme()
    table = Table(
        title=title,
        show_header=True,
        header_style=theme.table_header,
        border_style=theme.table_border,
    )
    table.add_column("#", style=theme.episode_number, justify="right", no_wrap=True)
    table.add_column("Title", style=theme.primary)
    table.add_column("Released", style=theme.episode_date, no_wrap=True)
    table.add_column("Duration", style=theme.episode_duration, justify="right", no_wrap=True)

    for item in episodes:
        episode = item.episode
        released = episode.release_date.isoformat() if episode.release_date else "Unknown"
        table.add_row(
            str(item.episode_number),
            escape(truncate_text(episode.title, 70)),
            released,
            format_duration(episode.duration_ms),
            style=theme.highlight if item.is_highlighted else None,
        )

    return table


def display_episode_page(
    episodes: list[NavigationEpisode],
    window: PageWindow,
    title: str | None = None,
) -> None:
    """Print a page of episodes followed by its pagination footer."""
    theme = get_theme()
    if not episodes:
        console.print(theme.warning_text("No episodes to show"))
    else:
        console.print(build_episode_table(episodes, title))
    console.print(theme.muted_text(format_pagination_footer(window)))


def display_episode_details(item: NavigationEpisode) -> None:
    """Panel with one episode's full details."""
    theme = get_theme()
    episode = item.episode
    lines = [
        f"[bold]Episode #{item.episode_number}[/bold]",
        f"[{theme.primary}]{escape(episode.title)}[/{theme.primary}]",
        "",
        f"Released: {episode.release_date.isoformat() if episode.release_date else 'Unknown'}",
        f"Duration: {format_duration(episode.duration_ms)}",
    ]
    if episode.explicit:
        lines.append(theme.warning_text("Explicit"))
    if episode.source_url:
        lines.append(f"URL: [{theme.url}]{escape(episode.source_url)}[/{theme.url}]")
    if episode.description:
        lines += ["", theme.muted_text(escape(truncate_text(episode.description, 500)))]

    console.print(Panel("\n".join(lines), border_style=theme.info, padding=(1, 2)))


def display_show_details(show: Show) -> None:
    """Panel with a show's details."""
    theme = get_theme()
    lines = [
        f"[bold {theme.primary}]{escape(show.name)}[/bold {theme.primary}]",
        f"by {escape(show.publisher)}" if show.publisher else "",
        "",
        f"ID: {show.id}",
        f"Episodes: {show.total_episodes}",
    ]
    if show.language:
        lines.append(f"Language: {show.language}")
    if show.explicit:
        lines.append(theme.warning_text("Explicit"))
    if show.source_url:
        lines.append(f"URL: [{theme.url}]{escape(show.source_url)}[/{theme.url}]")
    if show.description:
        lines += ["", theme.muted_text(escape(truncate_text(show.description, 400)))]

    console.print(Panel("\n".join(lines), border_style=theme.info, padding=(1, 2)))


def display_show_results(shows: list[ShowSummary]) -> None:
    """Table of show search results."""
    theme = get_theme()
    if not shows:
        console.print(theme.warning_text("No shows found"))
        return

    table = Table(show_header=True, header_style=theme.table_header, border_style=theme.table_border)
    table.add_column("#", justify="right", style=theme.muted)
    table.add_column("Show", style=theme.primary)
    table.add_column("Publisher")
    table.add_column("ID", style=theme.muted, no_wrap=True)

    for i, show in enumerate(shows, 1):
        table.add_row(
            str(i),
            escape(truncate_text(show.name, 50)),
            escape(truncate_text(show.publisher, 30)),
            show.id,
        )

    console.print(table)
