"""Base classes shared by all catalog sources.

A source yields raw catalog records (plain mappings); normalization into
Resources happens afterwards in the catalog service so every source feeds the
same normalizer.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from bridge_aid.logging import get_logger

from .exceptions import (
    SourceConfigurationError,
    SourceHTTPError,
    SourceResponseError,
    SourceTimeoutError,
)

logger = get_logger(__name__, component="source")

# Envelope keys that wrap the record list in remote catalog responses, in lookup order
RECORD_ENVELOPE_KEYS = ("resources", "data", "results", "organizations")


@dataclass(frozen=True)
class SourceLoad:
    """Outcome of loading one catalog.

    Attributes:
        records: Raw records, not yet normalized
        served_by: Name of the source that actually produced ``records``
        fell_back: True when the configured primary was replaced by the fallback
        primary_error: Why the primary was abandoned, when it was
    """

    records: List[Any]
    served_by: str
    fell_back: bool = False
    primary_error: Optional[str] = None


def extract_records(payload: Any, origin: str) -> List[Any]:
    """Pull the record list out of a decoded catalog payload.

    Accepts a bare list, or an object wrapping the list under one of
    RECORD_ENVELOPE_KEYS. An object without any of those keys yields an empty
    list (and a warning) so the caller can fall back.

    Raises:
        SourceResponseError: If the payload is neither a list nor an object,
            or an envelope key holds something other than a list
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        raise SourceResponseError(
            f"Expected a JSON array or object from {origin}, got {type(payload).__name__}"
        )

    for key in RECORD_ENVELOPE_KEYS:
        if payload.get(key):
            records = payload[key]
            if not isinstance(records, list):
                raise SourceResponseError(
                    f"Expected '{key}' from {origin} to be an array, got {type(records).__name__}"
                )
            return records

    logger.warning(
        f"Unexpected catalog structure from {origin}",
        extra={
            "event": "source.fetch.unexpected_structure",
            "origin": origin,
            "keys": sorted(str(k) for k in payload)[:20],
        },
    )
    return []


class ResourceSource(ABC):
    """Base class for all catalog sources.

    Subclasses implement fetch_records(); load() wraps the records in a
    SourceLoad naming the source. Composites override load() instead.
    """

    name: str = "source"

    @abstractmethod
    def fetch_records(self) -> List[Any]:
        """Fetch raw catalog records.

        Returns:
            List of raw records (possibly empty)

        Raises:
            SourceError: On any failure; subclasses indicate the specific kind
        """

    def load(self) -> SourceLoad:
        return SourceLoad(records=self.fetch_records(), served_by=self.name)

    def close(self) -> None:
        """Release held resources. No-op by default."""


class HTTPResourceSource(ResourceSource):
    """Source that talks to a remote service over HTTP with a shared session.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    def __init__(self, timeout: int = 30, user_agent: str = "BridgeAid/0.1") -> None:
        """Initialize the HTTP session.

        Raises:
            SourceConfigurationError: If timeout is outside 5-300 or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise SourceConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise SourceConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = requests.Session()
        self._session.headers.update(
            {
                "User-Agent": self.user_agent,
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

    def close(self) -> None:
        self._session.close()

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make an HTTP request and decode the JSON body.

        Returns:
            Parsed JSON (object or array)

        Raises:
            SourceHTTPError: On 4xx/5xx status or connection failure
            SourceTimeoutError: On request timeout
            SourceResponseError: On a body that is not valid JSON
        """
        try:
            logger.debug(
                f"HTTP {method} request to {url}",
                extra={
                    "event": "source.fetch.request",
                    "method": method,
                    "url": url,
                    "timeout": self.timeout,
                },
            )

            response = self._session.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                timeout=self.timeout,
            )

            if response.status_code >= 400:
                is_retryable = response.status_code >= 500
                logger.log(
                    logging.WARNING if is_retryable else logging.ERROR,
                    f"HTTP {response.status_code} error from {url}",
                    extra={
                        "event": "source.fetch.retryable_error" if is_retryable else "source.fetch.error",
                        "status_code": response.status_code,
                        "url": url,
                    },
                )
                raise SourceHTTPError(
                    f"HTTP {response.status_code}: {response.reason}",
                    status_code=response.status_code,
                    url=url,
                )

            try:
                data = response.json()
            except ValueError as e:
                logger.error(
                    f"Failed to parse JSON response from {url}",
                    extra={
                        "event": "source.fetch.error",
                        "error_type": "JSONDecodeError",
                        "url": url,
                    },
                )
                raise SourceResponseError(f"Failed to parse JSON response from {url}: {e}") from e

            logger.debug(
                "HTTP request succeeded",
                extra={
                    "event": "source.fetch.succeeded",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            return data

        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "source.fetch.retryable_error",
                    "error_type": "Timeout",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise SourceTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "source.fetch.error",
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise SourceHTTPError(f"Request to {url} failed: {e}", status_code=0, url=url) from e
