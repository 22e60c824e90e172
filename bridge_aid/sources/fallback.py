"""Composite source that degrades from a primary source to the static catalog."""

from typing import Any, List

from bridge_aid.logging import get_logger

from .base import ResourceSource, SourceLoad
from .exceptions import SourceError

logger = get_logger(__name__, component="source")


class FallbackSource(ResourceSource):
    """Try ``primary``; on an error or an empty result, load ``fallback``.

    Errors from the fallback itself propagate unchanged.
    """

    def __init__(self, primary: ResourceSource, fallback: ResourceSource) -> None:
        self.primary = primary
        self.fallback = fallback
        self.name = primary.name

    def fetch_records(self) -> List[Any]:
        return self.load().records

    def load(self) -> SourceLoad:
        try:
            records = self.primary.fetch_records()
        except SourceError as e:
            return self._fall_back(f"{type(e).__name__}: {e}")
        except Exception as e:
            # any failure of the primary falls back
            logger.error(
                f"Unexpected error from {self.primary.name} source",
                exc_info=True,
                extra={"event": "source.fallback.unexpected_error", "source": self.primary.name},
            )
            return self._fall_back(f"{type(e).__name__}: {e}")

        if not records:
            return self._fall_back(f"{self.primary.name} source returned no records")
        return SourceLoad(records=records, served_by=self.primary.name)

    def _fall_back(self, reason: str) -> SourceLoad:
        logger.warning(
            f"Falling back to {self.fallback.name} catalog: {reason}",
            extra={
                "event": "source.fallback.activated",
                "primary": self.primary.name,
                "fallback": self.fallback.name,
                "reason": reason,
            },
        )
        records = self.fallback.fetch_records()
        return SourceLoad(
            records=records,
            served_by=self.fallback.name,
            fell_back=True,
            primary_error=reason,
        )

    def close(self) -> None:
        self.primary.close()
        self.fallback.close()
