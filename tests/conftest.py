"""Shared fixtures for podnav tests."""

from datetime import date, timedelta

import pytest

from podnav.catalog.models import Episode, EpisodePage
from podnav.navigation.window import UNLIMITED, PageSize
from podnav.utils.errors import NetworkConnectionError

SHOW_ID = "4rOoJ6Egrf8K2IrywzwOMk"


def make_episodes(count: int, newest: date = date(2024, 6, 30)) -> list[Episode]:
    """Newest-first episodes, one per day; "Episode k" is the k-th oldest."""
    return [
        Episode(
            id=f"ep{count - i:04d}",
            title=f"Episode {count - i}",
            description=f"Notes for episode {count - i}",
            release_date=newest - timedelta(days=i),
            duration_ms=(30 + i % 30) * 60_000,
            source_url=f"https://open.spotify.com/episode/ep{count - i:04d}",
        )
        for i in range(count)
    ]


class InMemoryEpisodeSource:
    """EpisodeSource over a fixed newest-first list, recording every fetch.

    `reported_total` makes the source claim more episodes than it serves,
    like a catalog that counts unavailable episodes.
    """

    def __init__(
        self,
        episodes: list[Episode],
        full_collection: bool = False,
        fail_on_pages: set[int] | None = None,
        reported_total: int | None = None,
    ) -> None:
        self.episodes = episodes
        self.reported_total = reported_total
        self.full_collection = full_collection
        self.fail_on_pages = fail_on_pages or set()
        self.page_calls: list[tuple[int, PageSize]] = []
        self.full_calls = 0

    async def fetch_episode_page(self, show_id: str, page: int, page_size: PageSize) -> EpisodePage:
        self.page_calls.append((page, page_size))
        if page in self.fail_on_pages:
            raise NetworkConnectionError(f"connection reset fetching page {page}")

        if page_size == UNLIMITED:
            return EpisodePage(episodes=list(self.episodes), total_items=self.total_items)
        start = (page - 1) * page_size
        return EpisodePage(
            episodes=self.episodes[start : start + page_size],
            total_items=self.total_items,
        )

    @property
    def total_items(self) -> int:
        if self.reported_total is not None:
            return self.reported_total
        return len(self.episodes)

    async def get_full_episode_collection(self, show_id: str) -> list[Episode] | None:
        self.full_calls += 1
        return list(self.episodes) if self.full_collection else None


@pytest.fixture
def episodes() -> list[Episode]:
    """100 newest-first sample episodes."""
    return make_episodes(100)


@pytest.fixture
def source(episodes: list[Episode]) -> InMemoryEpisodeSource:
    """Scan-only source over the sample episodes."""
    return InMemoryEpisodeSource(episodes)


@pytest.fixture
def full_source(episodes: list[Episode]) -> InMemoryEpisodeSource:
    """Source that can hand over the whole collection at once."""
    return InMemoryEpisodeSource(episodes, full_collection=True)
