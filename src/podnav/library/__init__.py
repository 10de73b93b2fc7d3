"""Favorites and history of shows, persisted as JSON in the data dir."""

from .favorites import FavoritesStore
from .history import MAX_HISTORY_ENTRIES, HistoryStore
from .models import FavoriteShow, HistoryEntry

__all__ = [
    "FavoritesStore",
    "HistoryStore",
    "FavoriteShow",
    "HistoryEntry",
    "MAX_HISTORY_ENTRIES",
]
