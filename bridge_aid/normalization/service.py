"""Resource normalization service for converting raw catalog records to Resources.

This module implements the normalization logic that:
1. Accepts records that already carry the canonical shape unchanged
2. Remaps heterogeneous field names onto the canonical schema
3. Translates category synonyms and extracts ZIP codes from address text
4. Fills defaults for anything missing, so a mapping never fails to normalize
"""

import logging
import uuid
from typing import Any, Callable, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from bridge_aid.domain.models import Resource
from bridge_aid.logging import get_logger

from .mappings import (
    FIELD_ALIASES,
    FIELD_DEFAULTS,
    first_present,
    map_category,
    resolve_zip,
)

logger = get_logger(__name__, component="normalization")


def _random_id() -> str:
    return uuid.uuid4().hex


class ResourceNormalizer:
    """Normalizes raw catalog records into canonical Resource models.

    Responsibilities:
    - Pass canonical records through without remapping
    - Resolve each field from its ordered list of alternate names
    - Map categories onto the canonical set
    - Generate an identifier when none is supplied
    """

    def __init__(
        self,
        id_factory: Optional[Callable[[], str]] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize ResourceNormalizer.

        Args:
            id_factory: Callable producing fallback identifiers (defaults to uuid4 hex)
            logger_instance: Logger instance (defaults to module logger)
        """
        self.id_factory = id_factory or _random_id
        self.logger = logger_instance or logger

    def normalize(self, raw: Any) -> Resource:
        """Normalize one record.

        A Resource is returned as-is. A mapping with truthy ``id``, ``name``
        and ``category`` is validated directly, keeping its category verbatim.
        Anything else is remapped field by field.

        Args:
            raw: Resource instance or raw mapping

        Returns:
            Canonical Resource

        Raises:
            TypeError: If ``raw`` is neither a Resource nor a mapping
        """
        if isinstance(raw, Resource):
            return raw
        if not isinstance(raw, Mapping):
            raise TypeError(f"Cannot normalize {type(raw).__name__}; expected a mapping")

        if self._is_canonical(raw):
            try:
                return Resource.model_validate(dict(raw))
            except ValidationError as e:
                # e.g. a whitespace-only name; remapping fills the defaults
                self.logger.debug(
                    "Canonical-looking record failed validation; remapping",
                    extra={
                        "event": "normalization.resource.remapped",
                        "resource_id": str(raw.get("id")),
                        "error_count": e.error_count(),
                    },
                )

        return self._remap(raw)

    def normalize_batch(self, records: Iterable[Any]) -> List[Resource]:
        """Normalize many records, skipping entries that are not records.

        Args:
            records: Iterable of raw records

        Returns:
            List of Resources in input order
        """
        resources: List[Resource] = []
        skipped = 0
        for index, record in enumerate(records):
            try:
                resources.append(self.normalize(record))
            except (TypeError, ValidationError) as e:
                skipped += 1
                self.logger.warning(
                    f"Skipping catalog entry {index}: {e}",
                    extra={
                        "event": "normalization.resource.skipped",
                        "index": index,
                        "entry_type": type(record).__name__,
                    },
                )

        self.logger.info(
            f"Normalized {len(resources)} resources",
            extra={
                "event": "normalization.batch.completed",
                "resources_count": len(resources),
                "skipped_count": skipped,
            },
        )
        return resources

    @staticmethod
    def _is_canonical(raw: Mapping[str, Any]) -> bool:
        return bool(raw.get("id")) and bool(raw.get("name")) and bool(raw.get("category"))

    def _remap(self, raw: Mapping[str, Any]) -> Resource:
        fields = {}
        for field_name in (
            "name", "address", "hours", "phone", "website",
            "eligibility_notes", "eligibility_tags", "languages_supported",
        ):
            value = first_present(raw, FIELD_ALIASES[field_name])
            fields[field_name] = value if value is not None else FIELD_DEFAULTS[field_name]

        resource_id = first_present(raw, FIELD_ALIASES["id"])
        if resource_id is None or isinstance(resource_id, bool):
            resource_id = self.id_factory()
            self.logger.debug(
                "Generated identifier for resource without one",
                extra={
                    "event": "normalization.resource.id_generated",
                    "resource_id": resource_id,
                    "resource_name": str(fields["name"]),
                },
            )
        elif not isinstance(resource_id, (int, str)):
            resource_id = str(resource_id)

        fields["id"] = resource_id
        fields["category"] = map_category(first_present(raw, FIELD_ALIASES["category"]))
        address = fields["address"] if isinstance(fields["address"], str) else str(fields["address"])
        fields["zip"] = resolve_zip(raw, address)

        return Resource.model_validate(fields)
