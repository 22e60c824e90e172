#!/usr/bin/env python3
"""Verify the structure of a resource catalog JSON file without importing the service.

Usage:
    python scripts/verify_catalog.py                      # bundled catalog
    python scripts/verify_catalog.py path/to/catalog.json
"""

import json
import sys
from collections import Counter
from pathlib import Path

DEFAULT_CATALOG = Path(__file__).parent.parent / "bridge_aid" / "data" / "resources.json"

KNOWN_CATEGORIES = {"food", "housing", "mental_health", "legal", "jobs"}
KNOWN_TAGS = {"low_income", "senior", "parent"}
REQUIRED_KEYS = ["id", "name", "category"]
LIST_KEYS = ["eligibilityTags", "languagesSupported"]


def verify_catalog(catalog_file: Path) -> bool:
    """Check every record of ``catalog_file``; print a summary or the errors."""
    if not catalog_file.exists():
        print(f"✗ {catalog_file} not found")
        return False

    try:
        with open(catalog_file, "r", encoding="utf-8") as f:
            records = json.load(f)
    except (OSError, ValueError) as e:
        print(f"✗ Failed to parse {catalog_file}: {e}")
        return False

    if not isinstance(records, list):
        print(f"✗ {catalog_file} must contain a JSON array, got {type(records).__name__}")
        return False

    errors = []
    warnings = []
    seen_ids = set()

    for idx, record in enumerate(records):
        if not isinstance(record, dict):
            errors.append(f"Record {idx} is not an object")
            continue

        for key in REQUIRED_KEYS:
            if not record.get(key):
                errors.append(f"Record {idx} missing key: {key}")

        resource_id = record.get("id")
        if resource_id in seen_ids:
            errors.append(f"Record {idx} duplicates id {resource_id!r}")
        seen_ids.add(resource_id)

        for key in LIST_KEYS:
            if key in record and not isinstance(record[key], list):
                errors.append(f"Record {idx} '{key}' must be a list")

        category = record.get("category")
        if category and category not in KNOWN_CATEGORIES:
            warnings.append(f"Record {idx} has non-standard category: {category}")

        for tag in record.get("eligibilityTags") or []:
            if tag not in KNOWN_TAGS:
                warnings.append(f"Record {idx} has tag no user can qualify for: {tag}")

        zip_code = record.get("zip")
        if zip_code and not (isinstance(zip_code, str) and len(zip_code) == 5 and zip_code.isdigit()):
            warnings.append(f"Record {idx} has unusual zip: {zip_code!r}")

    for warning in warnings:
        print(f"! {warning}")

    if errors:
        print(f"✗ {catalog_file} validation failed:")
        for error in errors:
            print(f"  - {error}")
        return False

    print(f"✓ {catalog_file} structure is valid")
    print(f"  - {len(records)} resources")
    by_category = Counter(r.get("category") for r in records)
    for category, count in sorted(by_category.items()):
        print(f"  - {category}: {count}")
    return True


if __name__ == "__main__":
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_CATALOG
    success = verify_catalog(path)
    sys.exit(0 if success else 1)
