"""Episode navigation core.

Paged listings over a show's episode collection, lookup of episodes by
ordinal number, and page reconciliation when the page size changes.
"""

from .engine import NavigationEngine
from .formatter import format_listing, format_locate, single_item_window
from .index import CacheStats, EpisodeNumberIndex, IndexCache, NumberingPolicy
from .locator import EpisodeLocator
from .reconcile import reconcile_page
from .results import (
    ListingResult,
    LocateData,
    LocateOutcome,
    LocateResult,
    MappingHit,
    NavigationEpisode,
    NotFound,
    ScanHit,
)
from .source import EpisodeSource
from .window import UNLIMITED, PageSize, PageWindow, compute_window, page_slice, parse_page_size

__all__ = [
    "NavigationEngine",
    "EpisodeLocator",
    "EpisodeSource",
    "EpisodeNumberIndex",
    "IndexCache",
    "CacheStats",
    "NumberingPolicy",
    "PageWindow",
    "PageSize",
    "UNLIMITED",
    "compute_window",
    "page_slice",
    "parse_page_size",
    "reconcile_page",
    "format_listing",
    "format_locate",
    "single_item_window",
    "ListingResult",
    "LocateResult",
    "LocateData",
    "LocateOutcome",
    "NavigationEpisode",
    "MappingHit",
    "ScanHit",
    "NotFound",
]
