"""Podcast catalog: API client, show service and data models.

Import CatalogClient and ShowService from their modules; this package
only re-exports the models, which the navigation core depends on.
"""

from .models import Episode, EpisodePage, Show, ShowSummary

__all__ = ["Episode", "EpisodePage", "Show", "ShowSummary"]
