"""Recently opened shows."""

import logging
from pathlib import Path
from typing import Literal

from podnav.library.models import HistoryEntry
from podnav.library.store import JsonListStore
from podnav.utils.datetime import now_utc
from podnav.utils.errors import ValidationError
from podnav.utils.paths import get_history_file

logger = logging.getLogger(__name__)

MAX_HISTORY_ENTRIES = 20

HistorySort = Literal["recent", "oldest", "name_asc", "name_desc", "id"]


class HistoryStore(JsonListStore[HistoryEntry]):
    """Most-recently-used list of shows, capped at MAX_HISTORY_ENTRIES."""

    record_type = HistoryEntry

    def __init__(self, path: Path | None = None, max_entries: int = MAX_HISTORY_ENTRIES) -> None:
        super().__init__(path if path is not None else get_history_file())
        self.max_entries = max_entries

    async def record(self, show_id: str, name: str | None = None) -> HistoryEntry:
        """Move a show to the top of the history, adding it if new."""
        entries = await self._load()
        existing = next((e for e in entries if e.id == show_id), None)

        if existing is not None:
            entries.remove(existing)
            update: dict = {"last_accessed": now_utc()}
            if name and name != existing.name:
                update["name"] = name
            entry = existing.model_copy(update=update)
        else:
            entry = HistoryEntry(id=show_id, name=name or "Unknown Show")

        entries.insert(0, entry)
        dropped = len(entries) - self.max_entries
        if dropped > 0:
            logger.debug("History full, dropping %d oldest entr(ies)", dropped)
        await self._save(entries[: self.max_entries])
        return entry

    async def remove(self, show_id: str) -> bool:
        entries = await self._load()
        remaining = [e for e in entries if e.id != show_id]
        if len(remaining) == len(entries):
            return False
        await self._save(remaining)
        return True

    async def clear(self) -> int:
        entries = await self._load()
        await self._save([])
        logger.info("Cleared %d history entr(ies)", len(entries))
        return len(entries)

    async def search(self, query: str) -> list[HistoryEntry]:
        """Entries whose name or ID contains the query, case-insensitive."""
        needle = query.strip().lower()
        entries = await self._load()
        if not needle:
            return entries
        return [e for e in entries if needle in e.name.lower() or needle in e.id.lower()]

    async def sorted(self, sort_type: HistorySort = "recent") -> list[HistoryEntry]:
        """History in the requested order.

        Raises:
            ValidationError: If sort_type is unknown
        """
        entries = await self._load()
        match sort_type:
            case "recent":
                return sorted(entries, key=lambda e: e.last_accessed, reverse=True)
            case "oldest":
                return sorted(entries, key=lambda e: e.last_accessed)
            case "name_asc":
                return sorted(entries, key=lambda e: e.name.lower())
            case "name_desc":
                return sorted(entries, key=lambda e: e.name.lower(), reverse=True)
            case "id":
                return sorted(entries, key=lambda e: e.id)
        raise ValidationError(
            f"Unknown sort: {sort_type}",
            suggestion="Use one of: recent, oldest, name_asc, name_desc, id",
        )

    # Defined last: the name shadows the builtin inside the class body
    async def list(self) -> list[HistoryEntry]:
        """History, most recent first."""
        return await self._load()
