"""Catalog sources: static file, remote catalog, database and the fallback composite."""

from .base import HTTPResourceSource, ResourceSource, SourceLoad, extract_records
from .database import DatabaseSource
from .exceptions import (
    CatalogUnavailableError,
    SourceConfigurationError,
    SourceError,
    SourceHTTPError,
    SourceResponseError,
    SourceTimeoutError,
)
from .factory import get_source
from .fallback import FallbackSource
from .remote import RemoteCatalogSource
from .static_file import StaticFileSource, bundled_catalog_path

__all__ = [
    "ResourceSource",
    "HTTPResourceSource",
    "SourceLoad",
    "extract_records",
    "StaticFileSource",
    "RemoteCatalogSource",
    "DatabaseSource",
    "FallbackSource",
    "get_source",
    "bundled_catalog_path",
    "SourceError",
    "SourceHTTPError",
    "SourceTimeoutError",
    "SourceResponseError",
    "SourceConfigurationError",
    "CatalogUnavailableError",
]
