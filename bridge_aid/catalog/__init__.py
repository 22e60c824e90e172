"""Catalog loading and caching."""

from .cache import CACHE_TTL_SECONDS, CatalogCache, CatalogSnapshot
from .service import CatalogService

__all__ = ["CACHE_TTL_SECONDS", "CatalogCache", "CatalogSnapshot", "CatalogService"]
