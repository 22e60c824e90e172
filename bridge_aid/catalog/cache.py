"""Time-to-live cache holding the current catalog snapshot."""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Tuple

from bridge_aid.domain.models import Resource
from bridge_aid.utils.timestamps import utc_now

CACHE_TTL_SECONDS = 3600


@dataclass(frozen=True)
class CatalogSnapshot:
    """The immutable result of one catalog load.

    Attributes:
        resources: Normalized resources, shared read-only by every request
        configured_source: RESOURCE_DATA_SOURCE in effect
        served_by: Source that actually produced the records
        fell_back: True when the configured source was replaced by the static file
        loaded_at: UTC time of the load
        error: Why the catalog is unavailable, when even the static file failed
    """

    resources: Tuple[Resource, ...]
    configured_source: str
    served_by: str
    fell_back: bool = False
    loaded_at: datetime = field(default_factory=utc_now)
    error: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.error is None

    def __len__(self) -> int:
        return len(self.resources)


class CatalogCache:
    """Holds one snapshot for ``ttl_seconds``.

    The clock is injectable (any zero-argument callable returning seconds)
    so expiry can be tested without sleeping. The snapshot and its store time
    are one tuple, read once per call and replaced whole.
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._entry: Optional[Tuple[CatalogSnapshot, float]] = None

    def get(self) -> Optional[CatalogSnapshot]:
        """Return the cached snapshot, or None when empty or expired."""
        entry = self._entry
        if entry is None:
            return None
        snapshot, stored_at = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            return None
        return snapshot

    def put(self, snapshot: CatalogSnapshot) -> None:
        self._entry = (snapshot, self._clock())

    def invalidate(self) -> None:
        self._entry = None

    def age_seconds(self) -> Optional[float]:
        """Seconds since the snapshot was stored, or None when nothing is cached."""
        entry = self._entry
        if entry is None:
            return None
        return max(0.0, self._clock() - entry[1])

    def status(self) -> str:
        """``empty``, ``fresh`` or ``expired``."""
        entry = self._entry
        if entry is None:
            return "empty"
        return "fresh" if self._clock() - entry[1] < self.ttl_seconds else "expired"
