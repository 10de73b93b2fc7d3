"""Locate outcomes and the result envelopes handed to the presentation layer."""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict

from podnav.catalog.models import Episode
from podnav.navigation.window import PageWindow

SearchMethod = Literal["mapping", "scan"]


@dataclass(frozen=True)
class MappingHit:
    """Episode found through the number index."""

    show_id: str
    episode_number: int
    episode: Episode
    total_items: int


@dataclass(frozen=True)
class ScanHit:
    """Episode found by scanning fetched pages."""

    show_id: str
    episode_number: int
    episode: Episode
    total_items: int
    pages_fetched: int


@dataclass(frozen=True)
class NotFound:
    """No episode carries the requested number."""

    show_id: str
    episode_number: int
    total_items: int | None = None
    cancelled: bool = False


LocateOutcome = MappingHit | ScanHit | NotFound


class NavigationEpisode(BaseModel):
    """An episode decorated with its ordinal number for display."""

    model_config = ConfigDict(frozen=True)

    episode: Episode
    episode_number: int
    is_highlighted: bool = False


class ListingResult(BaseModel):
    """One page of episodes plus its window."""

    episodes: list[NavigationEpisode]
    pagination: PageWindow


class LocateData(BaseModel):
    """Payload of a successful locate."""

    episodes: list[NavigationEpisode]
    pagination: PageWindow
    searched_episode_number: int
    search_method: SearchMethod


class LocateResult(BaseModel):
    """Outcome of a "go to episode #N" request."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    data: LocateData | None = None
    error: str | None = None
    cause: Exception | None = None
