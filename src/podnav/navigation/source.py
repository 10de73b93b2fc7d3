"""Contract for the collaborator that supplies episodes to the engine."""

from typing import Protocol, runtime_checkable

from podnav.catalog.models import Episode, EpisodePage
from podnav.navigation.window import PageSize


@runtime_checkable
class EpisodeSource(Protocol):
    """Supplies a show's newest-first episode collection, page by page.

    Implementations raise podnav.utils.errors.TransportError when the
    upstream service fails; the engine never retries.
    """

    async def fetch_episode_page(
        self, show_id: str, page: int, page_size: PageSize
    ) -> EpisodePage:
        """Fetch one page (1-based) of the show's episodes, newest first."""
        ...

    async def get_full_episode_collection(self, show_id: str) -> list[Episode] | None:
        """Return every episode newest first, or None when not available cheaply."""
        ...
