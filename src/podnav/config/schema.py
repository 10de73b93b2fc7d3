"""Configuration schema models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from podnav.navigation.index import NumberingPolicy
from podnav.navigation.window import PageSize, validate_page_size

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
ThemeName = Literal["dark", "light"]


class CatalogConfig(BaseModel):
    """Catalog (podcast Web API) connection settings."""

    api_base_url: str = "https://api.spotify.com/v1"
    token_url: str = "https://accounts.spotify.com/api/token"
    client_id: str | None = None  # If None, will use environment variable
    client_secret: str | None = None  # If None, will use environment variable
    market: str = "US"
    timeout_seconds: float = Field(default=10.0, gt=0)
    max_retries: int = Field(default=3, ge=1, le=10)


class BrowseConfig(BaseModel):
    """Episode browsing preferences."""

    default_page_size: PageSize = 20
    page_size_choices: list[PageSize] = Field(
        default_factory=lambda: [10, 20, 50, 100, "unlimited"]
    )
    numbering: NumberingPolicy = NumberingPolicy.OLDEST_FIRST

    # Engine tuning
    scan_page_size: int = Field(default=50, ge=1, le=50)
    index_ttl_seconds: float = Field(default=300.0, gt=0)
    prefetch_full_collection: bool = False

    @field_validator("default_page_size")
    @classmethod
    def _check_page_size(cls, value: PageSize) -> PageSize:
        validate_page_size(value)
        return value

    @field_validator("page_size_choices")
    @classmethod
    def _check_page_size_choices(cls, values: list[PageSize]) -> list[PageSize]:
        if not values:
            raise ValueError("page_size_choices cannot be empty")
        for value in values:
            validate_page_size(value)
        return values


class GlobalConfig(BaseModel):
    """Global podnav configuration."""

    version: str = "1"
    log_level: LogLevel = "INFO"
    default_show_id: str | None = None
    theme: ThemeName = "dark"

    # Service configurations
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    browse: BrowseConfig = Field(default_factory=BrowseConfig)
