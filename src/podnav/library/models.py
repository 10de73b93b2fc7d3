"""Saved-show records for favorites and history."""

from datetime import datetime

from pydantic import BaseModel, Field

from podnav.utils.datetime import now_utc


class FavoriteShow(BaseModel):
    """A show the user starred."""

    id: str
    name: str
    added_at: datetime = Field(default_factory=now_utc)


class HistoryEntry(BaseModel):
    """A recently opened show."""

    id: str
    name: str = "Unknown Show"
    first_accessed: datetime = Field(default_factory=now_utc)
    last_accessed: datetime = Field(default_factory=now_utc)
