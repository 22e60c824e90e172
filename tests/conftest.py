"""Shared fixtures for the Bridge Aid test suite."""

import json
import random
from pathlib import Path

import pytest

from bridge_aid.domain.models import Resource, UserCriteria
from bridge_aid.logging.context import clear_log_context

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _build_resource(**overrides) -> Resource:
    fields = {
        "id": 1,
        "name": "Test Pantry",
        "category": "food",
        "address": "100 Main St, Oakland, CA 94601",
        "zip": "94601",
        "hours": "Mon-Fri 9am-5pm",
        "phone": "(510) 555-0100",
        "website": "https://pantry.example.org",
        "eligibilityNotes": "Open to all.",
        "eligibilityTags": [],
        "languagesSupported": ["English"],
    }
    fields.update(overrides)
    return Resource.model_validate(fields)


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def make_resource():
    """Factory building a canonical Resource; keyword arguments override defaults."""
    return _build_resource


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def seeded_rng():
    return random.Random(42)


@pytest.fixture
def criteria():
    """A low-income family of three in 94601 looking for food."""
    return UserCriteria(
        zip="94601",
        primary_need="food",
        age_range="25-34",
        income_bracket="low",
        household_size=3,
        preferred_language="English",
    )


@pytest.fixture
def sample_records():
    """Raw records as stored in tests/fixtures/sample_catalog.json."""
    with open(FIXTURES_DIR / "sample_catalog.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def catalog_file(tmp_path, sample_records):
    """A writable copy of the sample catalog."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(sample_records), encoding="utf-8")
    return path
