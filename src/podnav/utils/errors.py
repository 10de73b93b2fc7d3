"""Custom exceptions for podnav."""


class PodnavError(Exception):
    """Base exception for all podnav errors."""

    pass


class ConfigError(PodnavError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class ValidationError(PodnavError):
    """User-supplied value failed validation."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        super().__init__(message)
        self.suggestion = suggestion


class InvalidInputError(ValidationError, ValueError):
    """Out-of-domain argument passed by a caller (negative count, zero page size)."""

    pass


class NotFoundError(PodnavError):
    """Requested resource does not exist."""

    pass


class ShowNotFoundError(NotFoundError):
    """Show ID unknown to the catalog."""

    pass


class LibraryError(PodnavError):
    """Favorites or history store errors."""

    pass


class TransportError(PodnavError):
    """Failure talking to the upstream catalog service."""

    pass


class AuthenticationError(TransportError):
    """Catalog credentials rejected or missing."""

    pass


class CatalogAPIError(TransportError):
    """Catalog API returned an error response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(TransportError):
    """Network-related errors."""

    pass


class NetworkConnectionError(NetworkError):
    """Connection failures."""

    pass


class NetworkTimeoutError(NetworkError):
    """Request timeout."""

    pass
