"""Navigation engine: paged listings, episode-number lookup, page reconciliation."""

import asyncio
import logging
import math
from collections.abc import Sequence
from datetime import date, timedelta
from typing import Literal

from podnav.catalog.models import Episode
from podnav.navigation.formatter import format_listing
from podnav.navigation.index import CacheStats, EpisodeNumberIndex, IndexCache, NumberingPolicy
from podnav.navigation.locator import DEFAULT_SCAN_PAGE_SIZE, EpisodeLocator
from podnav.navigation.reconcile import reconcile_page
from podnav.navigation.results import ListingResult, LocateResult
from podnav.navigation.source import EpisodeSource
from podnav.navigation.window import (
    UNLIMITED,
    PageSize,
    PageWindow,
    compute_window,
    page_slice,
    validate_page_size,
)
from podnav.utils.datetime import now_utc
from podnav.utils.errors import ValidationError

logger = logging.getLogger(__name__)

DateFilter = Literal["30days", "90days", "1year", "custom"]

DATE_FILTER_DAYS: dict[str, int] = {
    "30days": 30,
    "90days": 90,
    "1year": 365,
}


class NavigationEngine:
    """Pages through a show's episodes and resolves episode numbers.

    The engine owns one IndexCache shared by listings and lookups, so a
    "go to #N" right after browsing usually resolves from memory.

    Example:
        >>> engine = NavigationEngine(ShowService(client))
        >>> listing = await engine.list_page("show-id", page=2, page_size=20)
        >>> result = await engine.locate_by_number("show-id", 42, page_size=20)
    """

    def __init__(
        self,
        source: EpisodeSource,
        policy: NumberingPolicy = NumberingPolicy.OLDEST_FIRST,
        scan_page_size: int = DEFAULT_SCAN_PAGE_SIZE,
        index_ttl_seconds: float | None = IndexCache.DEFAULT_TTL_SECONDS,
        cache: IndexCache | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            source: Supplier of the show's newest-first episode collection
            policy: How ordinal numbers are assigned
            scan_page_size: Page size used for scans and full fetches
            index_ttl_seconds: Lifetime of cached number indexes
            cache: Index cache to use (a new one is created if omitted)
        """
        self.source = source
        self.policy = policy
        self.scan_page_size = scan_page_size
        self.cache = cache if cache is not None else IndexCache(ttl_seconds=index_ttl_seconds)
        self.locator = EpisodeLocator(source, self.cache, policy, scan_page_size)

    async def list_page(
        self,
        show_id: str,
        page: int,
        page_size: PageSize,
        highlight: int | None = None,
    ) -> ListingResult:
        """Return one page of a show's episodes with canonical numbers.

        Out-of-range pages are clamped. Transport errors propagate. The
        episode numbered `highlight`, if on the page, is marked highlighted.

        Raises:
            InvalidInputError: If page_size is out of domain
            TransportError: If the source fails
        """
        validate_page_size(page_size)

        if page_size == UNLIMITED:
            total_items, positioned = await self._load_collection(show_id)
            window = compute_window(total_items, 1, UNLIMITED)
            return self._format_positioned(positioned, window, total_items, highlight)

        requested = max(page, 1)
        result = await self.source.fetch_episode_page(show_id, requested, page_size)
        window = compute_window(result.total_items, requested, page_size)

        if window.current_page != requested:
            logger.debug(
                "Page %d of show %s out of range, showing page %d",
                requested,
                show_id,
                window.current_page,
            )
            result = await self.source.fetch_episode_page(show_id, window.current_page, page_size)
            window = compute_window(result.total_items, window.current_page, page_size)

        self._check_snapshot(show_id, result.total_items)

        bounds = page_slice(window)
        positioned = [
            (position, episode)
            for position, episode in result.positioned(bounds.start)
            if bounds.start <= position < bounds.stop
        ]
        return self._format_positioned(positioned, window, window.total_items, highlight)

    async def locate_by_number(
        self,
        show_id: str,
        episode_number: int,
        page_size: PageSize,
        cancel_event: asyncio.Event | None = None,
    ) -> LocateResult:
        """Find the episode carrying an ordinal number.

        Never raises for a missing episode or a transport failure; both
        come back as unsuccessful results.

        Raises:
            InvalidInputError: If episode_number or page_size is out of domain
        """
        return await self.locator.locate(show_id, episode_number, page_size, cancel_event)

    def reconcile_page_for_new_size(
        self, old_page: int, old_page_size: PageSize, new_page_size: PageSize
    ) -> int:
        """Page that keeps the first visible item in view after a size change.

        Switching to or from "unlimited" always lands on page 1.
        """
        validate_page_size(old_page_size)
        validate_page_size(new_page_size)
        if old_page_size == UNLIMITED or new_page_size == UNLIMITED:
            return 1
        return reconcile_page(old_page, old_page_size, new_page_size)

    async def search_episodes(
        self, show_id: str, query: str, page: int, page_size: PageSize
    ) -> ListingResult:
        """Case-insensitive text search over titles, descriptions and release dates.

        Matches keep their canonical episode numbers.
        """
        validate_page_size(page_size)
        needle = query.strip().lower()
        if not needle:
            raise ValidationError("Search query cannot be empty")

        total_items, positioned = await self._load_collection(show_id)
        matches = [
            (position, episode)
            for position, episode in positioned
            if _matches_text(episode, needle)
        ]
        logger.info("Search %r in show %s matched %d episode(s)", query, show_id, len(matches))
        return self._paginate_matches(matches, total_items, page, page_size)

    async def filter_by_date(
        self,
        show_id: str,
        date_filter: DateFilter,
        page: int,
        page_size: PageSize,
        start: date | None = None,
        end: date | None = None,
        today: date | None = None,
    ) -> ListingResult:
        """Episodes released inside a date range, with canonical numbers.

        Args:
            show_id: Show to filter
            date_filter: "30days", "90days", "1year" or "custom"
            page: Page of the filtered results
            page_size: Items per page
            start: First day of a custom range (inclusive)
            end: Last day of a custom range (inclusive)
            today: Reference day for relative filters (defaults to today, UTC)

        Raises:
            ValidationError: If the filter is unknown or a custom range is incomplete
        """
        validate_page_size(page_size)
        start, end = _resolve_date_range(date_filter, start, end, today)

        total_items, positioned = await self._load_collection(show_id)
        matches = [
            (position, episode)
            for position, episode in positioned
            if episode.release_date is not None and start <= episode.release_date <= end
        ]
        logger.info(
            "Date filter %s (%s to %s) on show %s matched %d episode(s)",
            date_filter,
            start,
            end,
            show_id,
            len(matches),
        )
        return self._paginate_matches(matches, total_items, page, page_size)

    def page_for_episode(self, show_id: str, episode_number: int, page_size: PageSize) -> int | None:
        """Listing page that holds an episode number, if the show's size is known."""
        validate_page_size(page_size)
        index = self.cache.peek(show_id)
        if index is None or not 1 <= episode_number <= index.total_items:
            return None
        if page_size == UNLIMITED:
            return 1
        position = self.policy.position_for_number(episode_number, index.total_items)
        return position // page_size + 1

    def invalidate(self, show_id: str | None = None) -> int:
        """Drop cached indexes for one show, or all shows."""
        return self.cache.invalidate(show_id)

    def cache_stats(self) -> CacheStats:
        return self.cache.stats

    async def _load_collection(self, show_id: str) -> tuple[int, list[tuple[int, Episode]]]:
        """Reported size and every served (position, episode) pair, newest first.

        Served from the cache when an index already holds everything the
        source serves. Positions are absolute, so episodes the catalog
        counts but does not serve leave gaps instead of renumbering the
        rest.
        """
        index = self.cache.get(show_id)
        if index is not None and index.is_exhaustive:
            return index.total_items, index.positioned_newest_first()

        episodes = await self.source.get_full_episode_collection(show_id)
        if episodes is not None:
            total_items, positioned = len(episodes), list(enumerate(episodes))
        else:
            total_items, positioned = await self._fetch_all_pages(show_id)

        self.cache.install(
            EpisodeNumberIndex.from_positions(
                show_id, positioned, total_items, self.policy, exhaustive=True
            )
        )
        return total_items, positioned

    async def _fetch_all_pages(self, show_id: str) -> tuple[int, list[tuple[int, Episode]]]:
        size = self.scan_page_size
        first = await self.source.fetch_episode_page(show_id, 1, size)
        total_items = first.total_items
        served = dict(first.positioned(0))

        for page in range(2, math.ceil(total_items / size) + 1):
            result = await self.source.fetch_episode_page(show_id, page, size)
            served.update(result.positioned((page - 1) * size))

        positioned = sorted(
            (pair for pair in served.items() if 0 <= pair[0] < total_items),
            key=lambda pair: pair[0],
        )
        if len(positioned) < total_items:
            logger.warning(
                "Show %s reported %d episodes but only %d were served",
                show_id,
                total_items,
                len(positioned),
            )
        return total_items, positioned

    def _check_snapshot(self, show_id: str, total_items: int) -> None:
        """Drop a cached index that no longer matches the collection size."""
        index = self.cache.peek(show_id)
        if index is not None and index.total_items != total_items:
            logger.info(
                "Show %s changed size (%d -> %d), discarding episode index",
                show_id,
                index.total_items,
                total_items,
            )
            self.cache.invalidate(show_id)

    def _format_positioned(
        self,
        positioned: Sequence[tuple[int, Episode]],
        window: PageWindow,
        total_items: int,
        highlight: int | None = None,
    ) -> ListingResult:
        return format_listing(
            [episode for _, episode in positioned],
            window,
            [self.policy.number_for_position(position, total_items) for position, _ in positioned],
            highlight,
        )

    def _paginate_matches(
        self,
        matches: Sequence[tuple[int, Episode]],
        total_items: int,
        page: int,
        page_size: PageSize,
    ) -> ListingResult:
        window = compute_window(len(matches), page, page_size)
        return self._format_positioned(matches[page_slice(window)], window, total_items)


def _matches_text(episode: Episode, needle: str) -> bool:
    haystacks = [episode.title, episode.description]
    if episode.release_date is not None:
        haystacks.append(episode.release_date.isoformat())
    return any(needle in text.lower() for text in haystacks)


def _resolve_date_range(
    date_filter: str,
    start: date | None,
    end: date | None,
    today: date | None,
) -> tuple[date, date]:
    if date_filter == "custom":
        if start is None or end is None:
            raise ValidationError(
                "Custom date filter needs both a start and an end date",
                suggestion="Use YYYY-MM-DD for both dates",
            )
        if start > end:
            raise ValidationError(f"Start date {start} is after end date {end}")
        return start, end

    days = DATE_FILTER_DAYS.get(date_filter)
    if days is None:
        raise ValidationError(
            f"Unknown date filter: {date_filter}",
            suggestion="Choose one of: 30days, 90days, 1year, custom",
        )
    reference = today if today is not None else now_utc().date()
    return reference - timedelta(days=days), reference
