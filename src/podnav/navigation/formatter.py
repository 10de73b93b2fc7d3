"""Shape page slices and locate outcomes into result envelopes.

Pure transformations; no I/O.
"""

from collections.abc import Sequence

from podnav.catalog.models import Episode
from podnav.navigation.results import (
    ListingResult,
    LocateData,
    LocateOutcome,
    LocateResult,
    MappingHit,
    NavigationEpisode,
    NotFound,
    ScanHit,
    SearchMethod,
)
from podnav.navigation.window import PageSize, PageWindow


def single_item_window(page_size: PageSize) -> PageWindow:
    """Window describing a page that holds exactly the highlighted result."""
    return PageWindow(
        current_page=1,
        total_pages=1,
        total_items=1,
        page_size=page_size,
        has_next=False,
        has_previous=False,
    )


def format_listing(
    episodes: Sequence[Episode],
    window: PageWindow,
    numbers: Sequence[int],
    highlight: int | None = None,
) -> ListingResult:
    """Wrap a page of episodes and their ordinals into a listing envelope.

    Args:
        episodes: Episodes on the page, in display order
        window: Window the page belongs to
        numbers: Ordinal number of each episode (same length as episodes)
        highlight: Ordinal to mark as highlighted, if any
    """
    if len(episodes) != len(numbers):
        raise ValueError(
            f"Got {len(numbers)} episode numbers for {len(episodes)} episodes"
        )

    return ListingResult(
        episodes=[
            NavigationEpisode(
                episode=episode,
                episode_number=number,
                is_highlighted=number == highlight,
            )
            for episode, number in zip(episodes, numbers)
        ],
        pagination=window,
    )


def not_found_message(episode_number: int) -> str:
    return f"Episode #{episode_number} not found"


def format_locate(outcome: LocateOutcome, page_size: PageSize) -> LocateResult:
    """Turn a locate outcome into the locate envelope."""
    match outcome:
        case MappingHit(episode_number=number, episode=episode):
            method: SearchMethod = "mapping"
        case ScanHit(episode_number=number, episode=episode):
            method = "scan"
        case NotFound(episode_number=number):
            return LocateResult(success=False, error=not_found_message(number))

    return LocateResult(
        success=True,
        data=LocateData(
            episodes=[
                NavigationEpisode(episode=episode, episode_number=number, is_highlighted=True)
            ],
            pagination=single_item_window(page_size),
            searched_episode_number=number,
            search_method=method,
        ),
    )


def format_transport_failure(episode_number: int, error: Exception) -> LocateResult:
    """Failure envelope for a page fetch that raised during locate."""
    return LocateResult(
        success=False,
        error=f"Could not look up episode #{episode_number}: {error}",
        cause=error,
    )
