"""Interactive episode browser.

A prompt-driven loop over NavigationEngine: page through a show, jump
to an episode by number, change the page size without losing your
place, search, filter by date, and open episodes in the web browser.
"""

import logging
import webbrowser
from dataclasses import dataclass
from datetime import date

from podnav.catalog.models import Show
from podnav.library.favorites import FavoritesStore
from podnav.navigation.engine import NavigationEngine
from podnav.navigation.results import ListingResult, NavigationEpisode
from podnav.navigation.window import PageSize, parse_page_size
from podnav.ui.display import (
    console,
    display_episode_details,
    display_episode_page,
    display_show_details,
)
from podnav.ui.prompts import get_choice, get_number, get_single_line_input
from podnav.ui.theme import get_theme
from podnav.utils.errors import TransportError, ValidationError

logger = logging.getLogger(__name__)

DATE_FILTER_LABELS = {
    "30days": "Last 30 days",
    "90days": "Last 90 days",
    "1year": "Last year",
    "custom": "Custom range",
}

ACTION_LABELS = {
    "next": "Next page",
    "prev": "Previous page",
    "page": "Jump to page",
    "goto": "Go to episode #",
    "size": "Change page size",
    "search": "Search episodes",
    "date": "Filter by date",
    "all": "Show all episodes",
    "open": "Open episode in browser",
    "details": "Episode details",
    "favorite": "Add show to favorites",
    "quit": "Quit",
}

# Actions that move away from the page a go-to landed on
NAVIGATION_ACTIONS = frozenset({"next", "prev", "page", "size", "search", "date", "all"})


@dataclass
class BrowseState:
    """Where the user is in the show."""

    page: int = 1
    page_size: PageSize = 20
    mode: str = "all"  # all | search | date
    query: str = ""
    date_filter: str = "30days"
    start: date | None = None
    end: date | None = None
    highlight: int | None = None


class EpisodeBrowser:
    """Interactive browsing session for one show."""

    def __init__(
        self,
        engine: NavigationEngine,
        show: Show,
        page_size: PageSize = 20,
        page_size_choices: list[PageSize] | None = None,
        favorites: FavoritesStore | None = None,
    ) -> None:
        self.engine = engine
        self.show = show
        self.page_size_choices = page_size_choices or [10, 20, 50, 100, "unlimited"]
        self.favorites = favorites
        self.state = BrowseState(page_size=page_size)
        self.listing: ListingResult | None = None

    async def run(self) -> None:
        """Loop until the user quits or cancels a prompt."""
        display_show_details(self.show)

        while True:
            await self._refresh()

            action = get_choice(
                "What next?",
                self._available_actions(),
                default="next" if self._has_next() else "quit",
                labels=ACTION_LABELS,
            )
            if action is None or action == "quit":
                break

            try:
                await self._dispatch(action)
            except ValidationError as e:
                self._show_validation_error(e)

    async def _refresh(self) -> None:
        """Load and print the listing for the current state."""
        state = self.state
        theme = get_theme()
        try:
            if state.mode == "search":
                self.listing = await self.engine.search_episodes(
                    self.show.id, state.query, state.page, state.page_size
                )
                title = f"Episodes matching {state.query!r}"
            elif state.mode == "date":
                self.listing = await self.engine.filter_by_date(
                    self.show.id,
                    state.date_filter,
                    state.page,
                    state.page_size,
                    start=state.start,
                    end=state.end,
                )
                title = DATE_FILTER_LABELS[state.date_filter]
            else:
                self.listing = await self.engine.list_page(
                    self.show.id, state.page, state.page_size, highlight=state.highlight
                )
                title = self.show.name
        except TransportError as e:
            logger.error("Failed to load episodes: %s", e)
            console.print(theme.error_text(f"Could not load episodes: {e}"))
            self.listing = None
            return
        except ValidationError as e:
            self._show_validation_error(e)
            state.mode = "all"
            self.listing = None
            return

        # Clamped pages come back corrected
        state.page = self.listing.pagination.current_page
        display_episode_page(self.listing.episodes, self.listing.pagination, title)

    def _has_next(self) -> bool:
        return self.listing is not None and self.listing.pagination.has_next

    def _available_actions(self) -> list[str]:
        actions = []
        pagination = self.listing.pagination if self.listing else None
        if pagination and pagination.has_next:
            actions.append("next")
        if pagination and pagination.has_previous:
            actions.append("prev")
        if pagination and pagination.total_pages > 1:
            actions.append("page")
        actions += ["goto", "size", "search", "date"]
        if self.state.mode != "all":
            actions.append("all")
        if self.listing and self.listing.episodes:
            actions += ["details", "open"]
        if self.favorites is not None:
            actions.append("favorite")
        actions.append("quit")
        return actions

    async def _dispatch(self, action: str) -> None:
        state = self.state
        if action in NAVIGATION_ACTIONS:
            state.highlight = None

        match action:
            case "next":
                state.page += 1
            case "prev":
                state.page = max(1, state.page - 1)
            case "page":
                total_pages = self.listing.pagination.total_pages if self.listing else 1
                page = get_number("Page", 1, total_pages, default=state.page)
                if page is not None:
                    state.page = page
            case "goto":
                await self._go_to_episode()
            case "size":
                self._change_page_size()
            case "search":
                query = get_single_line_input("Search episodes")
                if query:
                    state.mode, state.query, state.page = "search", query, 1
            case "date":
                self._choose_date_filter()
            case "all":
                state.mode, state.page = "all", 1
            case "details":
                item = self._pick_episode_on_page()
                if item is not None:
                    display_episode_details(item)
            case "open":
                self._open_episode()
            case "favorite":
                await self._add_favorite()

    async def _go_to_episode(self) -> None:
        theme = get_theme()
        number = get_number("Episode number", 1)
        if number is None:
            return

        with console.status(f"Looking for episode #{number}..."):
            result = await self.engine.locate_by_number(
                self.show.id, number, self.state.page_size
            )

        if not result.success or result.data is None:
            console.print(theme.error_text(result.error or f"Episode #{number} not found"))
            return

        display_episode_details(result.data.episodes[0])
        console.print(theme.muted_text(f"Found via {result.data.search_method}"))

        page = self.engine.page_for_episode(self.show.id, number, self.state.page_size)
        if page is not None:
            self.state.mode = "all"
            self.state.page = page
            self.state.highlight = number

    def _change_page_size(self) -> None:
        state = self.state
        choices = [str(size) for size in self.page_size_choices]
        raw = get_choice("Episodes per page", choices, default=str(state.page_size))
        if raw is None:
            return

        new_size = parse_page_size(raw)
        state.page = self.engine.reconcile_page_for_new_size(state.page, state.page_size, new_size)
        state.page_size = new_size
        logger.debug("Page size changed to %s, now on page %d", new_size, state.page)

    def _choose_date_filter(self) -> None:
        state = self.state
        choice = get_choice("Show episodes from", list(DATE_FILTER_LABELS), labels=DATE_FILTER_LABELS)
        if choice is None:
            return

        if choice == "custom":
            start = _ask_date("Start date (YYYY-MM-DD)")
            end = _ask_date("End date (YYYY-MM-DD)") if start else None
            if start is None or end is None:
                return
            state.start, state.end = start, end

        state.mode, state.date_filter, state.page = "date", choice, 1

    def _pick_episode_on_page(self) -> NavigationEpisode | None:
        if not self.listing or not self.listing.episodes:
            return None
        numbers = [item.episode_number for item in self.listing.episodes]
        number = get_number("Episode number", min(numbers), max(numbers))
        if number is None:
            return None
        item = next((i for i in self.listing.episodes if i.episode_number == number), None)
        if item is None:
            console.print(get_theme().warning_text(f"Episode #{number} is not on this page"))
        return item

    def _open_episode(self) -> None:
        theme = get_theme()
        item = self._pick_episode_on_page()
        if item is None:
            return
        url = item.episode.source_url
        if not url:
            console.print(theme.warning_text("This episode has no URL"))
            return
        if webbrowser.open(url):
            console.print(theme.success_text(f"Opened episode #{item.episode_number}"))
        else:
            console.print(theme.info_text(url))

    async def _add_favorite(self) -> None:
        if self.favorites is None:
            return
        await self.favorites.add(self.show.id, self.show.name)
        console.print(get_theme().success_text(f"Added {self.show.name} to favorites"))

    @staticmethod
    def _show_validation_error(error: ValidationError) -> None:
        theme = get_theme()
        console.print(theme.error_text(str(error)))
        if error.suggestion:
            console.print(theme.muted_text(f"  {error.suggestion}"))


def _ask_date(prompt: str) -> date | None:
    raw = get_single_line_input(prompt)
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Invalid date: {raw}", suggestion="Use YYYY-MM-DD") from None
