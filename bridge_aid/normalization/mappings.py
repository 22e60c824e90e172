"""Field-name aliases, category synonyms and ZIP extraction.

Remote catalogs (211 exports, city open-data portals, partner spreadsheets)
name the same fields differently. The tables here list, per canonical field,
the source keys tried in order. Dotted keys reach into nested mappings.
"""

import re
from typing import Any, Dict, Mapping, Optional, Tuple

from bridge_aid.domain.models import Category

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "id": ("id", "resource_id", "organization_id"),
    "name": ("name", "organization_name", "title"),
    "category": ("category", "service_category", "type"),
    "address": ("address", "location.address", "physical_address"),
    "zip": ("zip", "postal_code", "location.postal_code"),
    "hours": ("hours", "hours_of_operation", "schedule"),
    "phone": ("phone", "phone_number", "contact_phone"),
    "website": ("website", "url", "web_url"),
    "eligibility_notes": ("eligibilityNotes", "eligibility_notes", "eligibility", "description"),
    "eligibility_tags": ("eligibilityTags", "eligibility_tags", "tags"),
    "languages_supported": ("languagesSupported", "languages_supported", "languages"),
}

FIELD_DEFAULTS: Dict[str, Any] = {
    "name": "Unknown Resource",
    "address": "",
    "hours": "Contact for hours",
    "phone": "",
    "website": "",
    "eligibility_notes": "",
    "eligibility_tags": [],
    "languages_supported": ["English"],
}

UNMAPPED_CATEGORY = "other"

CATEGORY_SYNONYMS: Dict[str, str] = {
    "food": Category.FOOD.value,
    "food assistance": Category.FOOD.value,
    "food bank": Category.FOOD.value,
    "meal": Category.FOOD.value,
    "nutrition": Category.FOOD.value,
    "housing": Category.HOUSING.value,
    "shelter": Category.HOUSING.value,
    "rental assistance": Category.HOUSING.value,
    "mental health": Category.MENTAL_HEALTH.value,
    "mental healthcare": Category.MENTAL_HEALTH.value,
    "counseling": Category.MENTAL_HEALTH.value,
    "therapy": Category.MENTAL_HEALTH.value,
    "legal": Category.LEGAL.value,
    "legal aid": Category.LEGAL.value,
    "legal services": Category.LEGAL.value,
    "jobs": Category.JOBS.value,
    "employment": Category.JOBS.value,
    "job training": Category.JOBS.value,
    "workforce": Category.JOBS.value,
    "career": Category.JOBS.value,
}

# 5-digit ZIP, optionally followed by a +4 extension that is dropped
_ZIP_PATTERN = re.compile(r"\b(\d{5})(?:-\d{4})?\b")


def lookup(record: Mapping[str, Any], key: str) -> Any:
    """Fetch ``key`` from ``record``, following dots into nested mappings."""
    current: Any = record
    for part in key.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def first_present(record: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    """Return the first non-blank value among ``keys``, or None.

    An explicitly empty list counts as given: ``languages: []`` means every
    language, not the English default.
    """
    for key in keys:
        value = lookup(record, key)
        if _is_present(value):
            return value
    return None


def map_category(category: Any) -> str:
    """Translate a free-text category into a canonical one.

    Known synonyms map onto the five canonical categories; anything else is
    lower-cased and kept. A missing category becomes ``other``.

    Example:
        >>> map_category("Food Bank")
        'food'
        >>> map_category("Utilities")
        'utilities'
    """
    if not _is_present(category):
        return UNMAPPED_CATEGORY
    key = str(category).strip().lower()
    return CATEGORY_SYNONYMS.get(key, key)


def extract_zip(value: Any) -> str:
    """Find a ZIP code in a postal-code field or free address text.

    Example:
        >>> extract_zip("1955 San Pablo Ave, Oakland, CA 94612-1234")
        '94612'
        >>> extract_zip("PO Box, no zip")
        ''
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, int):
        # numeric ZIPs lose leading zeros in some exports
        value = f"{value:05d}"
    match = _ZIP_PATTERN.search(str(value))
    return match.group(1) if match else ""


def resolve_zip(record: Mapping[str, Any], address_text: Optional[str]) -> str:
    """Resolve a ZIP from explicit postal fields, then from the address text."""
    for key in FIELD_ALIASES["zip"]:
        zip_code = extract_zip(lookup(record, key))
        if zip_code:
            return zip_code
    return extract_zip(address_text or "")
