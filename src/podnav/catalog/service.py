"""Show service: maps catalog payloads into models and serves episode pages."""

import logging
import re
from datetime import date
from typing import Any

from podnav.catalog.client import MAX_PAGE_LIMIT, CatalogClient
from podnav.catalog.models import Episode, EpisodePage, Show, ShowSummary
from podnav.navigation.window import UNLIMITED, PageSize, validate_page_size
from podnav.utils.errors import ShowNotFoundError, TransportError, ValidationError
from podnav.utils.retry import InvalidRequestError

logger = logging.getLogger(__name__)

SHOW_ID_PATTERN = re.compile(r"^[0-9A-Za-z]{22}$")
SHOW_URL_PATTERN = re.compile(r"open\.spotify\.com/show/([0-9A-Za-z]{22})")


def validate_show_id(value: str) -> str:
    """Normalize a show ID or show URL into a bare 22-character ID.

    Raises:
        ValidationError: If the value is neither a show ID nor a show URL
    """
    candidate = value.strip()
    match = SHOW_URL_PATTERN.search(candidate)
    if match:
        return match.group(1)
    if SHOW_ID_PATTERN.match(candidate):
        return candidate
    raise ValidationError(
        f"Invalid show ID: {value!r}",
        suggestion="Show IDs are 22 letters and digits, e.g. 4rOoJ6Egrf8K2IrywzwOMk",
    )


class ShowService:
    """EpisodeSource backed by the catalog API.

    Example:
        >>> service = ShowService(client)
        >>> page = await service.fetch_episode_page(show_id, page=2, page_size=20)
    """

    def __init__(self, client: CatalogClient, prefetch_full_collection: bool = False) -> None:
        """Initialize service.

        Args:
            client: Catalog API client
            prefetch_full_collection: Offer whole collections to the locator
                instead of letting it scan page by page
        """
        self.client = client
        self.prefetch_full_collection = prefetch_full_collection

    async def get_show(self, show_id: str) -> Show:
        """Fetch show details.

        Raises:
            ShowNotFoundError: If the catalog does not know the show
        """
        try:
            payload = await self.client.get_show(show_id)
        except InvalidRequestError as e:
            if e.status_code in (400, 404):
                raise ShowNotFoundError(f"Show not found: {show_id}") from e
            raise
        return _parse_show(payload)

    async def search_shows(self, query: str, limit: int = 10) -> list[ShowSummary]:
        """Search shows by name or keyword."""
        if not query.strip():
            raise ValidationError("Search query cannot be empty")

        payload = await self.client.search_shows(query, limit)
        items = payload.get("shows", {}).get("items") or []
        results = [_parse_show_summary(item) for item in items if item]
        logger.info("Show search %r returned %d result(s)", query, len(results))
        return results

    async def fetch_episode_page(
        self, show_id: str, page: int, page_size: PageSize
    ) -> EpisodePage:
        """Fetch one page (1-based) of the show's episodes, newest first.

        Page sizes above the API limit are served with several requests.
        Episodes keep the catalog's order and their absolute positions, so
        unavailable items leave a gap instead of shifting later episodes.
        """
        validate_page_size(page_size)
        if page_size == UNLIMITED:
            positioned, total_items = await self._fetch_range(show_id, 0, None)
        else:
            offset = (max(page, 1) - 1) * page_size
            positioned, total_items = await self._fetch_range(show_id, offset, page_size)

        return EpisodePage(
            episodes=[episode for _, episode in positioned],
            positions=[position for position, _ in positioned],
            total_items=total_items,
        )

    async def get_full_episode_collection(self, show_id: str) -> list[Episode] | None:
        """Fetch every episode newest first, or None when prefetching is off.

        Pages that fail after the first are skipped with a warning. A
        collection with holes would shift episode numbers, so in that case
        (or when the catalog serves fewer episodes than it reports) None is
        returned and the caller falls back to page-by-page lookup.
        """
        if not self.prefetch_full_collection:
            return None

        logger.info("Fetching all episodes for show %s", show_id)
        first = await self.client.get_show_episodes(show_id, MAX_PAGE_LIMIT, 0)
        total_items = int(first.get("total", 0))
        episodes = _parse_episodes(first)
        skipped = 0

        for offset in range(MAX_PAGE_LIMIT, total_items, MAX_PAGE_LIMIT):
            try:
                payload = await self.client.get_show_episodes(show_id, MAX_PAGE_LIMIT, offset)
            except TransportError as e:
                logger.warning("Failed to fetch episodes at offset %d: %s", offset, e)
                skipped += 1
                continue
            episodes.extend(_parse_episodes(payload))

        logger.info(
            "Fetched %d/%d episodes for show %s", len(episodes), total_items, show_id
        )
        if skipped or len(episodes) != total_items:
            logger.warning(
                "Episode collection for show %s is incomplete (%d page(s) failed, %d/%d served)",
                show_id,
                skipped,
                len(episodes),
                total_items,
            )
            return None
        return episodes

    async def _fetch_range(
        self, show_id: str, offset: int, count: int | None
    ) -> tuple[list[tuple[int, Episode]], int]:
        """Fetch `count` slots from `offset` (all remaining when None).

        Returns (position, episode) pairs and the reported total. Empty
        slots count towards `count` but produce no pair.
        """
        positioned: list[tuple[int, Episode]] = []
        total_items = 0
        cursor = offset

        while True:
            wanted = MAX_PAGE_LIMIT
            if count is not None:
                wanted = min(MAX_PAGE_LIMIT, offset + count - cursor)
            payload = await self.client.get_show_episodes(show_id, wanted, cursor)
            total_items = int(payload.get("total", 0))
            items = payload.get("items") or []
            positioned.extend(
                (cursor + i, _parse_episode(item)) for i, item in enumerate(items) if item
            )
            cursor += len(items)

            if not items or cursor >= total_items:
                break
            if count is not None and cursor - offset >= count:
                break

        return positioned, total_items


def _parse_release_date(value: str | None) -> date | None:
    """Parse a release date at day, month or year precision."""
    if not value:
        return None
    parts = value.split("-")
    try:
        year = int(parts[0])
        month = int(parts[1]) if len(parts) > 1 else 1
        day = int(parts[2]) if len(parts) > 2 else 1
        return date(year, month, day)
    except ValueError:
        logger.debug("Unparseable release date: %r", value)
        return None


def _external_url(item: dict[str, Any]) -> str | None:
    return (item.get("external_urls") or {}).get("spotify")


def _image_url(item: dict[str, Any]) -> str | None:
    images = item.get("images") or []
    return images[0].get("url") if images else None


def _parse_episodes(payload: dict[str, Any]) -> list[Episode]:
    return [_parse_episode(item) for item in payload.get("items") or [] if item]


def _parse_episode(item: dict[str, Any]) -> Episode:
    return Episode(
        id=item["id"],
        title=item.get("name") or "Untitled",
        description=item.get("description") or "",
        release_date=_parse_release_date(item.get("release_date")),
        duration_ms=item.get("duration_ms"),
        explicit=bool(item.get("explicit", False)),
        source_url=_external_url(item),
    )


def _parse_show(item: dict[str, Any]) -> Show:
    languages = item.get("languages") or []
    return Show(
        id=item["id"],
        name=item.get("name") or "Untitled",
        publisher=item.get("publisher") or "",
        description=item.get("description") or "",
        language=languages[0] if languages else item.get("language"),
        total_episodes=int(item.get("total_episodes") or 0),
        explicit=bool(item.get("explicit", False)),
        source_url=_external_url(item),
        image_url=_image_url(item),
    )


def _parse_show_summary(item: dict[str, Any]) -> ShowSummary:
    return ShowSummary(
        id=item["id"],
        name=item.get("name") or "Untitled",
        publisher=item.get("publisher") or "",
        description=item.get("description") or "",
        image_url=_image_url(item),
    )
