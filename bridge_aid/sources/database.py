"""SQL database catalog source."""

from typing import Any, List

from bridge_aid.logging import get_logger
from bridge_aid.persistence import (
    PersistenceError,
    ResourceRepository,
    get_session,
    init_database,
    is_initialized,
)

from .base import ResourceSource
from .exceptions import SourceError

logger = get_logger(__name__, component="source")


class DatabaseSource(ResourceSource):
    """Reads the catalog from the ``resources`` table.

    The database is initialized lazily on first fetch so a broken
    DATABASE_URL degrades to the static catalog instead of failing startup.
    """

    name = "database"

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def fetch_records(self) -> List[Any]:
        """Read every resource row.

        Raises:
            SourceError: Wrapping any persistence failure
        """
        try:
            if not is_initialized():
                init_database(self.database_url)
            with get_session() as session:
                records = ResourceRepository(session).list_records()
        except PersistenceError as e:
            raise SourceError(f"Database catalog unavailable: {e}") from e

        logger.info(
            f"Loaded {len(records)} records from database",
            extra={"event": "source.database.loaded", "records_count": len(records)},
        )
        return records
