"""Static JSON catalog source: the seed data and universal fallback."""

import json
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any, List, Optional

from bridge_aid.logging import get_logger

from .base import ResourceSource, extract_records
from .exceptions import CatalogUnavailableError, SourceResponseError

logger = get_logger(__name__, component="source")


def bundled_catalog_path() -> Path:
    """Path of the catalog shipped inside the package."""
    return Path(str(importlib_resources.files("bridge_aid") / "data" / "resources.json"))


class StaticFileSource(ResourceSource):
    """Reads the catalog from a JSON file.

    The file holds an array of records (an object wrapping the array under
    ``resources`` is accepted too).
    """

    name = "json"

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else bundled_catalog_path()

    def fetch_records(self) -> List[Any]:
        """Read and decode the catalog file.

        Raises:
            CatalogUnavailableError: If the file is missing, unreadable or malformed
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            records = extract_records(payload, origin=str(self.path))
        except FileNotFoundError as e:
            raise CatalogUnavailableError(
                f"Catalog file not found: {self.path}", path=str(self.path)
            ) from e
        except (OSError, ValueError, SourceResponseError) as e:
            raise CatalogUnavailableError(
                f"Failed to load catalog file {self.path}: {e}", path=str(self.path)
            ) from e

        logger.info(
            f"Loaded {len(records)} records from {self.path.name}",
            extra={
                "event": "source.static.loaded",
                "path": str(self.path),
                "records_count": len(records),
            },
        )
        return records
