"""Configuration loading, saving and logging setup."""

from .manager import ConfigManager
from .schema import BrowseConfig, CatalogConfig, GlobalConfig

__all__ = ["ConfigManager", "GlobalConfig", "CatalogConfig", "BrowseConfig"]
