"""Resource normalization module."""

from .mappings import CATEGORY_SYNONYMS, FIELD_ALIASES, extract_zip, map_category
from .service import ResourceNormalizer

__all__ = [
    "CATEGORY_SYNONYMS",
    "FIELD_ALIASES",
    "ResourceNormalizer",
    "extract_zip",
    "map_category",
]
