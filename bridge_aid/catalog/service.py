"""Catalog service: load, normalize and cache the resource catalog."""

import threading
from typing import Optional, Tuple

from bridge_aid.domain.models import Resource
from bridge_aid.logging import get_logger
from bridge_aid.normalization import ResourceNormalizer
from bridge_aid.sources import ResourceSource, SourceError

from .cache import CatalogCache, CatalogSnapshot

logger = get_logger(__name__, component="catalog")


class CatalogService:
    """Serves the normalized catalog, reloading once per cache period.

    Loads are single-flight: concurrent readers that find the cache empty
    wait for the one reload in progress and then share its snapshot.
    """

    def __init__(
        self,
        source: ResourceSource,
        configured_source: str = "json",
        normalizer: Optional[ResourceNormalizer] = None,
        cache: Optional[CatalogCache] = None,
    ):
        """Initialize CatalogService.

        Args:
            source: Catalog source (usually built by get_source())
            configured_source: RESOURCE_DATA_SOURCE value, reported by health
            normalizer: ResourceNormalizer (defaults to a new one)
            cache: CatalogCache (defaults to the one-hour TTL cache)
        """
        self.source = source
        self.configured_source = configured_source
        self.normalizer = normalizer or ResourceNormalizer()
        self.cache = cache or CatalogCache()
        self._lock = threading.Lock()

    def snapshot(self) -> CatalogSnapshot:
        """Return the cached snapshot, loading it first when empty or expired."""
        cached = self.cache.get()
        if cached is not None:
            return cached

        with self._lock:
            # another thread may have reloaded while we waited
            cached = self.cache.get()
            if cached is not None:
                return cached
            return self._reload()

    def get_resources(self) -> Tuple[Resource, ...]:
        """Current resources; empty when the catalog is unavailable."""
        return self.snapshot().resources

    def refresh(self) -> CatalogSnapshot:
        """Invalidate the cache and reload immediately."""
        with self._lock:
            self.cache.invalidate()
            logger.info(
                "Catalog cache invalidated",
                extra={"event": "catalog.cache.invalidated"},
            )
            return self._reload()

    def cache_status(self) -> str:
        return self.cache.status()

    def cache_age_seconds(self) -> Optional[float]:
        return self.cache.age_seconds()

    def _reload(self) -> CatalogSnapshot:
        try:
            load = self.source.load()
        except SourceError as e:
            logger.error(
                f"Catalog unavailable: {e}",
                extra={
                    "event": "catalog.load.failed",
                    "configured_source": self.configured_source,
                    "error_type": type(e).__name__,
                },
            )
            snapshot = CatalogSnapshot(
                resources=(),
                configured_source=self.configured_source,
                served_by="none",
                fell_back=self.configured_source != "json",
                error=str(e),
            )
        else:
            resources = tuple(self.normalizer.normalize_batch(load.records))
            snapshot = CatalogSnapshot(
                resources=resources,
                configured_source=self.configured_source,
                served_by=load.served_by,
                fell_back=load.fell_back,
            )
            logger.info(
                f"Catalog loaded with {len(resources)} resources",
                extra={
                    "event": "catalog.load.completed",
                    "configured_source": self.configured_source,
                    "served_by": load.served_by,
                    "fell_back": load.fell_back,
                    "resources_count": len(resources),
                },
            )

        self.cache.put(snapshot)
        return snapshot

    def close(self) -> None:
        self.source.close()
