"""Database schema definition and ORM models."""

import json
from typing import Any, Dict

from sqlalchemy import Column, Index, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from bridge_aid.domain.models import Resource

Base = declarative_base()


def _dump_list(values) -> str:
    return json.dumps(list(values))


def _load_list(raw: str | None) -> list:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        # tolerate hand-entered comma-separated rows; the normalizer splits them
        return [raw]
    return value if isinstance(value, list) else [value]


class ResourceModel(Base):
    """ORM model for the resources table.

    Tags and languages are stored as JSON arrays in text columns. ``id_kind``
    records whether the original identifier was an int so it round-trips.
    """

    __tablename__ = "resources"

    resource_id = Column(String(64), primary_key=True, nullable=False)
    id_kind = Column(String(8), nullable=False, default="str")

    name = Column(Text, nullable=False)
    category = Column(String(64), nullable=False)
    address = Column(Text, nullable=False, default="")
    zip = Column(String(10), nullable=False, default="")
    hours = Column(Text, nullable=False, default="Contact for hours")
    phone = Column(String(64), nullable=False, default="")
    website = Column(Text, nullable=False, default="")
    eligibility_notes = Column(Text, nullable=False, default="")
    eligibility_tags = Column(Text, nullable=False, default="[]")
    languages_supported = Column(Text, nullable=False, default="[]")

    __table_args__ = (Index("idx_resources_category", "category"),)

    def to_record(self) -> Dict[str, Any]:
        """Convert the row to a raw catalog record (camelCase, like the JSON file)."""
        return {
            "id": int(self.resource_id) if self.id_kind == "int" else self.resource_id,
            "name": self.name,
            "category": self.category,
            "address": self.address,
            "zip": self.zip,
            "hours": self.hours,
            "phone": self.phone,
            "website": self.website,
            "eligibilityNotes": self.eligibility_notes,
            "eligibilityTags": _load_list(self.eligibility_tags),
            "languagesSupported": _load_list(self.languages_supported),
        }

    def apply(self, resource: Resource) -> None:
        """Copy a Resource's fields onto this row."""
        self.id_kind = "int" if isinstance(resource.id, int) else "str"
        self.name = resource.name
        self.category = resource.category
        self.address = resource.address
        self.zip = resource.zip
        self.hours = resource.hours
        self.phone = resource.phone
        self.website = resource.website
        self.eligibility_notes = resource.eligibility_notes
        self.eligibility_tags = _dump_list(resource.eligibility_tags)
        self.languages_supported = _dump_list(resource.languages_supported)

    @classmethod
    def from_domain(cls, resource: Resource) -> "ResourceModel":
        model = cls(resource_id=str(resource.id))
        model.apply(resource)
        return model


def create_schema(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(engine)
