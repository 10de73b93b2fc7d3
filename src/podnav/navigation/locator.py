"""Resolve "go to episode #N" requests.

Strategy, in order:

1. Cached number index for the show (search method "mapping").
2. Full collection from the source, indexed on the spot ("mapping").
3. Page-by-page scan through the source in the numbering policy's
   natural order ("scan").

A missing number is a NotFound outcome, never an exception.
"""

import asyncio
import logging
import math

from podnav.catalog.models import Episode
from podnav.navigation.formatter import format_locate, format_transport_failure
from podnav.navigation.index import EpisodeNumberIndex, IndexCache, NumberingPolicy
from podnav.navigation.results import LocateOutcome, LocateResult, MappingHit, NotFound, ScanHit
from podnav.navigation.source import EpisodeSource
from podnav.navigation.window import PageSize, validate_page_size
from podnav.utils.errors import InvalidInputError, TransportError

logger = logging.getLogger(__name__)

# Largest page the catalog API serves in one request
DEFAULT_SCAN_PAGE_SIZE = 50


class EpisodeLocator:
    """Finds an episode by its ordinal number for one engine's cache and policy."""

    def __init__(
        self,
        source: EpisodeSource,
        cache: IndexCache,
        policy: NumberingPolicy = NumberingPolicy.OLDEST_FIRST,
        scan_page_size: int = DEFAULT_SCAN_PAGE_SIZE,
    ) -> None:
        if scan_page_size < 1:
            raise InvalidInputError(f"Scan page size must be positive, got {scan_page_size}")

        self.source = source
        self.cache = cache
        self.policy = policy
        self.scan_page_size = scan_page_size

    async def locate(
        self,
        show_id: str,
        episode_number: int,
        page_size: PageSize,
        cancel_event: asyncio.Event | None = None,
    ) -> LocateResult:
        """Find an episode and wrap it in the locate envelope.

        Transport failures become failure results carrying the cause.

        Raises:
            InvalidInputError: If episode_number or page_size is out of domain
        """
        validate_page_size(page_size)
        try:
            outcome = await self.find(show_id, episode_number, cancel_event)
        except TransportError as e:
            logger.error("Locating episode #%d of show %s failed: %s", episode_number, show_id, e)
            return format_transport_failure(episode_number, e)

        return format_locate(outcome, page_size)

    async def find(
        self,
        show_id: str,
        episode_number: int,
        cancel_event: asyncio.Event | None = None,
    ) -> LocateOutcome:
        """Find an episode, reporting which strategy produced it.

        Raises:
            InvalidInputError: If episode_number is not positive
            TransportError: If the source fails while fetching
        """
        if episode_number < 1:
            raise InvalidInputError(
                f"Episode number must be positive, got {episode_number}",
                suggestion="Episode numbers start at 1",
            )

        index = self.cache.get(show_id)
        if index is not None:
            episode = index.lookup(episode_number, show_id=show_id)
            if episode is not None:
                logger.info("Found episode #%d of show %s in index", episode_number, show_id)
                return MappingHit(show_id, episode_number, episode, index.total_items)
            if episode_number > index.total_items or index.is_exhaustive:
                return NotFound(show_id, episode_number, index.total_items)

        full_collection = await self.source.get_full_episode_collection(show_id)
        if full_collection is not None:
            return self._from_full_collection(show_id, episode_number, full_collection)

        logger.info(
            "No index covers episode #%d of show %s, scanning pages", episode_number, show_id
        )
        return await self._scan(show_id, episode_number, cancel_event)

    def _from_full_collection(
        self, show_id: str, episode_number: int, episodes: list[Episode]
    ) -> LocateOutcome:
        index = EpisodeNumberIndex.build(show_id, episodes, policy=self.policy)
        self.cache.install(index)

        episode = index.lookup(episode_number)
        if episode is None:
            return NotFound(show_id, episode_number, index.total_items)
        return MappingHit(show_id, episode_number, episode, index.total_items)

    async def _scan(
        self,
        show_id: str,
        episode_number: int,
        cancel_event: asyncio.Event | None,
    ) -> LocateOutcome:
        """Fetch pages one at a time until the target ordinal is materialized.

        Page 1 is always fetched first since it carries the collection size.
        Oldest-first numbering then walks from the last page backwards, so
        low numbers are reached without reading the whole show.
        """
        if _cancelled(cancel_event):
            logger.info("Scan for episode #%d of show %s cancelled", episode_number, show_id)
            return NotFound(show_id, episode_number, cancelled=True)

        size = self.scan_page_size
        page = await self.source.fetch_episode_page(show_id, 1, size)
        total_items = page.total_items
        if episode_number > total_items:
            return NotFound(show_id, episode_number, total_items)

        target = self.policy.position_for_number(episode_number, total_items)
        positioned: dict[int, Episode] = {}
        pages_fetched = 0
        current_page = 1
        walked_all = False

        while True:
            pages_fetched += 1
            logger.debug(
                "Scanned page %d of show %s (%d episodes)",
                current_page,
                show_id,
                len(page.episodes),
            )
            if page.total_items != total_items:
                logger.warning(
                    "Show %s changed size during scan (%d -> %d), keeping first snapshot",
                    show_id,
                    total_items,
                    page.total_items,
                )

            for position, episode in page.positioned((current_page - 1) * size):
                if 0 <= position < total_items:
                    positioned[position] = episode

            if target in positioned or not page.episodes:
                break
            next_page = self._next_scan_page(current_page, math.ceil(total_items / size))
            if next_page is None:
                walked_all = True
                break
            if _cancelled(cancel_event):
                logger.info("Scan for episode #%d of show %s cancelled", episode_number, show_id)
                return NotFound(show_id, episode_number, total_items, cancelled=True)
            current_page = next_page
            page = await self.source.fetch_episode_page(show_id, current_page, size)

        self.cache.install(
            EpisodeNumberIndex.from_positions(
                show_id, positioned.items(), total_items, self.policy, exhaustive=walked_all
            )
        )

        if target not in positioned:
            logger.info(
                "Episode #%d of show %s not found after %d page(s)",
                episode_number,
                show_id,
                pages_fetched,
            )
            return NotFound(show_id, episode_number, total_items)

        return ScanHit(show_id, episode_number, positioned[target], total_items, pages_fetched)

    def _next_scan_page(self, current: int, total_pages: int) -> int | None:
        """Next page to fetch in the policy's natural order, or None when exhausted."""
        if self.policy is NumberingPolicy.NEWEST_FIRST:
            return current + 1 if current < total_pages else None

        # Oldest-first: 1, then total_pages, total_pages - 1, ..., 2
        if current == 1:
            return total_pages if total_pages > 1 else None
        return current - 1 if current > 2 else None


def _cancelled(cancel_event: asyncio.Event | None) -> bool:
    return cancel_event is not None and cancel_event.is_set()
