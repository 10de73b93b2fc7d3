"""Data models for shows and episodes in the podcast catalog."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Episode(BaseModel):
    """A single podcast episode as supplied by the catalog.

    The ordinal episode number is not part of the record; it is assigned
    by position within the show's ordered collection.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    release_date: date | None = None
    duration_ms: int | None = None
    explicit: bool = False
    source_url: str | None = None


class EpisodePage(BaseModel):
    """One page of a show's newest-first episode collection.

    `total_items` is the size the catalog reports, which can exceed the
    episodes it actually serves (unavailable items come back empty).
    `positions`, when set, gives each episode's 0-based newest-first
    position in the whole collection so such gaps keep later numbers
    stable. Without it, episodes are contiguous from the page's offset.
    """

    model_config = ConfigDict(frozen=True)

    episodes: list[Episode] = Field(default_factory=list)
    total_items: int = Field(ge=0)
    positions: list[int] | None = None

    @model_validator(mode="after")
    def check_positions(self) -> "EpisodePage":
        if self.positions is not None and len(self.positions) != len(self.episodes):
            raise ValueError(
                f"Got {len(self.positions)} positions for {len(self.episodes)} episodes"
            )
        return self

    def positioned(self, offset: int = 0) -> list[tuple[int, Episode]]:
        """(newest-first position, episode) pairs for this page."""
        if self.positions is None:
            return list(enumerate(self.episodes, start=offset))
        return list(zip(self.positions, self.episodes))


class ShowSummary(BaseModel):
    """Compact show entry returned by catalog search."""

    id: str
    name: str
    publisher: str = ""
    description: str = ""
    image_url: str | None = None


class Show(BaseModel):
    """Full show details."""

    id: str
    name: str
    publisher: str = ""
    description: str = ""
    language: str | None = None
    total_episodes: int = 0
    explicit: bool = False
    source_url: str | None = None
    image_url: str | None = None
