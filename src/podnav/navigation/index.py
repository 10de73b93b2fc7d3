"""Episode number index and its per-show cache.

An EpisodeNumberIndex maps ordinal episode numbers to episodes for one
show, built from whatever part of the collection has been fetched. It is
a derived cache: it is rebuilt from a fresh snapshot, never patched in
place, and the IndexCache swaps whole indexes per show.
"""

import logging
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from podnav.catalog.models import Episode
from podnav.utils.errors import InvalidInputError

logger = logging.getLogger(__name__)


class NumberingPolicy(str, Enum):
    """How ordinal numbers map onto a newest-first episode collection."""

    OLDEST_FIRST = "oldest_first"  # oldest episode is #1
    NEWEST_FIRST = "newest_first"  # newest episode is #1

    def number_for_position(self, position: int, total_items: int) -> int:
        """Ordinal number of the item at a 0-based newest-first position."""
        if self is NumberingPolicy.OLDEST_FIRST:
            return total_items - position
        return position + 1

    def position_for_number(self, number: int, total_items: int) -> int:
        """0-based newest-first position holding an ordinal number."""
        if self is NumberingPolicy.OLDEST_FIRST:
            return total_items - number
        return number - 1


class EpisodeNumberIndex:
    """O(1) lookup from ordinal episode number to episode, scoped to one show."""

    def __init__(
        self,
        show_id: str,
        entries: dict[int, Episode],
        total_items: int,
        policy: NumberingPolicy,
        exhaustive: bool = False,
    ) -> None:
        self.show_id = show_id
        self.total_items = total_items
        self.policy = policy
        self._entries = entries
        self._exhaustive = exhaustive

    @classmethod
    def build(
        cls,
        show_id: str,
        ordered_episodes: Sequence[Episode],
        total_items: int | None = None,
        policy: NumberingPolicy = NumberingPolicy.OLDEST_FIRST,
        offset: int = 0,
    ) -> "EpisodeNumberIndex":
        """Build an index from a contiguous newest-first run of episodes.

        Args:
            show_id: Show the episodes belong to
            ordered_episodes: Episodes in newest-first order
            total_items: Size of the whole collection (defaults to the run
                length, i.e. a complete snapshot)
            policy: Numbering policy
            offset: Position of the first episode within the collection

        Returns:
            New EpisodeNumberIndex
        """
        if total_items is None:
            total_items = offset + len(ordered_episodes)
        positioned = enumerate(ordered_episodes, start=offset)
        return cls.from_positions(show_id, positioned, total_items, policy)

    @classmethod
    def from_positions(
        cls,
        show_id: str,
        positioned: Iterable[tuple[int, Episode]],
        total_items: int,
        policy: NumberingPolicy = NumberingPolicy.OLDEST_FIRST,
        exhaustive: bool = False,
    ) -> "EpisodeNumberIndex":
        """Build an index from (newest-first position, episode) pairs.

        Positions outside [0, total_items) are rejected; they would produce
        numbers that cannot exist for this collection. Pass exhaustive=True
        when the pairs are everything the source serves, even if the
        reported total is larger.
        """
        if total_items < 0:
            raise InvalidInputError(f"Total items cannot be negative: {total_items}")

        entries: dict[int, Episode] = {}
        for position, episode in positioned:
            if not 0 <= position < total_items:
                raise InvalidInputError(
                    f"Episode position {position} outside collection of {total_items}"
                )
            entries[policy.number_for_position(position, total_items)] = episode

        return cls(show_id, entries, total_items, policy, exhaustive)

    @property
    def is_complete(self) -> bool:
        """Whether the snapshot holds every episode of the collection."""
        return len(self._entries) == self.total_items

    @property
    def is_exhaustive(self) -> bool:
        """Whether every episode the source serves is indexed.

        Numbers missing from an exhaustive index are unavailable upstream.
        """
        return self._exhaustive or self.is_complete

    def __len__(self) -> int:
        return len(self._entries)

    def covers(self, number: int) -> bool:
        """Whether the snapshot contains the given ordinal."""
        return number in self._entries

    def lookup(self, number: int, show_id: str | None = None) -> Episode | None:
        """Return the episode with the given ordinal, or None if not indexed.

        Raises:
            InvalidInputError: If number is not positive, or show_id names a
                different show than the one the index was built for
        """
        if show_id is not None and show_id != self.show_id:
            raise InvalidInputError(
                f"Index for show {self.show_id} queried for show {show_id}"
            )
        if number < 1:
            raise InvalidInputError(f"Episode number must be positive, got {number}")
        return self._entries.get(number)

    def positioned_newest_first(self) -> list[tuple[int, Episode]]:
        """Indexed (newest-first position, episode) pairs in position order."""
        pairs = [
            (self.policy.position_for_number(number, self.total_items), episode)
            for number, episode in self._entries.items()
        ]
        return sorted(pairs, key=lambda pair: pair[0])


@dataclass
class CacheStats:
    """Hit/miss counters for the index cache."""

    hits: int = 0
    misses: int = 0
    builds: int = 0
    invalidations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class IndexCache:
    """Per-show EpisodeNumberIndex cache with TTL expiry.

    Example:
        >>> cache = IndexCache(ttl_seconds=300)
        >>> cache.install(EpisodeNumberIndex.build("show", episodes))
        >>> cache.get("show").lookup(1)
    """

    DEFAULT_TTL_SECONDS = 300.0

    def __init__(
        self,
        ttl_seconds: float | None = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache.

        Args:
            ttl_seconds: Lifetime of an installed index (None disables expiry)
            clock: Monotonic time source, injectable for tests
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._indexes: dict[str, tuple[EpisodeNumberIndex, float]] = {}
        self.stats = CacheStats()

    def get(self, show_id: str) -> EpisodeNumberIndex | None:
        """Return the live index for a show, dropping it if expired."""
        cached = self._indexes.get(show_id)
        if cached is None:
            self.stats.misses += 1
            return None

        index, installed_at = cached
        if self.ttl_seconds is not None and self._clock() - installed_at > self.ttl_seconds:
            logger.info("Episode index for show %s expired, discarding", show_id)
            del self._indexes[show_id]
            self.stats.misses += 1
            return None

        self.stats.hits += 1
        return index

    def peek(self, show_id: str) -> EpisodeNumberIndex | None:
        """Like get(), without touching hit/miss statistics or expiry."""
        cached = self._indexes.get(show_id)
        return cached[0] if cached else None

    def install(self, index: EpisodeNumberIndex) -> None:
        """Replace the show's index with a freshly built one."""
        self._indexes[index.show_id] = (index, self._clock())
        self.stats.builds += 1
        logger.debug(
            "Installed episode index for show %s (%d/%d episodes)",
            index.show_id,
            len(index),
            index.total_items,
        )

    def invalidate(self, show_id: str | None = None) -> int:
        """Drop the index for one show, or for every show when show_id is None.

        Returns:
            Number of indexes removed
        """
        if show_id is None:
            count = len(self._indexes)
            self._indexes.clear()
        else:
            count = 1 if self._indexes.pop(show_id, None) is not None else 0

        if count:
            self.stats.invalidations += count
            logger.info("Invalidated %d episode index(es)", count)
        return count

    def __contains__(self, show_id: str) -> bool:
        return show_id in self._indexes
