"""Utility functions and helpers for podnav."""

from podnav.utils.errors import (
    AuthenticationError,
    CatalogAPIError,
    ConfigError,
    InvalidConfigError,
    InvalidInputError,
    LibraryError,
    NetworkConnectionError,
    NetworkError,
    NetworkTimeoutError,
    NotFoundError,
    PodnavError,
    ShowNotFoundError,
    TransportError,
    ValidationError,
)
from podnav.utils.paths import (
    get_config_dir,
    get_config_file,
    get_data_dir,
    get_favorites_file,
    get_history_file,
)

__all__ = [
    # Errors
    "PodnavError",
    "ConfigError",
    "InvalidConfigError",
    "ValidationError",
    "InvalidInputError",
    "NotFoundError",
    "ShowNotFoundError",
    "LibraryError",
    "TransportError",
    "AuthenticationError",
    "CatalogAPIError",
    "NetworkError",
    "NetworkConnectionError",
    "NetworkTimeoutError",
    # Paths
    "get_config_dir",
    "get_data_dir",
    "get_config_file",
    "get_favorites_file",
    "get_history_file",
]
