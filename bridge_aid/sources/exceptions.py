"""Custom exceptions for catalog sources."""

from typing import Optional


class SourceError(Exception):
    """Base exception for all catalog source errors.

    Catching this handles any failure of a primary source; the fallback
    composite does exactly that before switching to the static catalog.
    """

    pass


class SourceHTTPError(SourceError):
    """Remote catalog request failed with a 4xx/5xx status or a connection error."""

    def __init__(self, message: str, status_code: int, url: str) -> None:
        """Initialize HTTP error with status code and URL.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (0 when no response was received)
            url: URL that failed
        """
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class SourceTimeoutError(SourceError):
    """Remote catalog request did not complete within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class SourceResponseError(SourceError):
    """A response or file was received but could not be parsed into records."""

    pass


class SourceConfigurationError(SourceError):
    """Invalid source configuration (unknown source type, missing URL ...)."""

    pass


class CatalogUnavailableError(SourceError):
    """The static catalog file is missing or malformed.

    No further fallback exists; the catalog service records the error and
    serves an empty catalog.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path
