"""Favorite shows."""

import logging
from pathlib import Path

from podnav.library.models import FavoriteShow
from podnav.library.store import JsonListStore
from podnav.utils.paths import get_favorites_file

logger = logging.getLogger(__name__)


class FavoritesStore(JsonListStore[FavoriteShow]):
    """Favorite shows, persisted in the data directory.

    Example:
        >>> store = FavoritesStore()
        >>> await store.add("4rOoJ6Egrf8K2IrywzwOMk", "The Joe Show")
        >>> [f.name for f in await store.list()]
        ['The Joe Show']
    """

    record_type = FavoriteShow

    def __init__(self, path: Path | None = None) -> None:
        super().__init__(path if path is not None else get_favorites_file())

    async def add(self, show_id: str, name: str) -> FavoriteShow:
        """Add a show, or rename it if it is already a favorite."""
        favorites = await self._load()
        for i, favorite in enumerate(favorites):
            if favorite.id == show_id:
                if favorite.name != name:
                    favorites[i] = favorite.model_copy(update={"name": name})
                    await self._save(favorites)
                    logger.info("Renamed favorite %s to %r", show_id, name)
                return favorites[i]

        favorite = FavoriteShow(id=show_id, name=name)
        favorites.append(favorite)
        await self._save(favorites)
        logger.info("Added favorite %s (%s)", show_id, name)
        return favorite

    async def remove(self, show_id: str) -> bool:
        """Remove a favorite. Returns False if it was not saved."""
        favorites = await self._load()
        remaining = [f for f in favorites if f.id != show_id]
        if len(remaining) == len(favorites):
            return False
        await self._save(remaining)
        logger.info("Removed favorite %s", show_id)
        return True

    async def contains(self, show_id: str) -> bool:
        return any(f.id == show_id for f in await self._load())

    async def clear(self) -> int:
        """Remove every favorite. Returns how many were removed."""
        favorites = await self._load()
        await self._save([])
        return len(favorites)

    # Defined last: the name shadows the builtin inside the class body
    async def list(self) -> list[FavoriteShow]:
        """Favorites, most recently added first."""
        favorites = await self._load()
        return sorted(favorites, key=lambda f: f.added_at, reverse=True)
