"""Data access layer for the resources table."""

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bridge_aid.domain.models import Resource
from bridge_aid.logging import get_logger

from .exceptions import DataIntegrityError, PersistenceError
from .schema import ResourceModel

logger = get_logger(__name__, component="database")


class ResourceRepository:
    """Repository for resource catalog rows."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def list_records(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return every row as a raw catalog record, ordered by id.

        Records are handed to the normalizer like any other source's output.

        Args:
            category: Only return rows of this category when given

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(ResourceModel).order_by(ResourceModel.resource_id)
            if category is not None:
                stmt = stmt.where(ResourceModel.category == category)
            rows = self.session.execute(stmt).scalars().all()
            return [row.to_record() for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Error listing resources: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list resources: {e}") from e

    def count(self) -> int:
        try:
            return self.session.execute(select(func.count()).select_from(ResourceModel)).scalar_one()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to count resources: {e}") from e

    def upsert_many(self, resources: Iterable[Resource]) -> int:
        """Insert new resources and update existing ones, keyed by id.

        Args:
            resources: Canonical resources to persist

        Returns:
            Number of rows written

        Raises:
            DataIntegrityError: If a constraint is violated
            PersistenceError: If any other database error occurs
        """
        written = 0
        try:
            for resource in resources:
                existing = self.session.get(ResourceModel, str(resource.id))
                if existing is not None:
                    existing.apply(resource)
                else:
                    self.session.add(ResourceModel.from_domain(resource))
                written += 1
            self.session.flush()
        except IntegrityError as e:
            logger.error(f"Integrity error writing resources: {e}", exc_info=True)
            raise DataIntegrityError(f"Resource constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error writing resources: {e}", exc_info=True)
            raise PersistenceError(f"Failed to write resources: {e}") from e

        logger.info(
            f"Upserted {written} resources",
            extra={"event": "database.resources.upserted", "resources_count": written},
        )
        return written
