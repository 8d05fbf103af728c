import sys
from pathlib import Path

import pytest

# Ensure `wedding_directory` is importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wedding_directory.models import Location  # noqa: E402


class FakeProvider:
    """Stands in for DataForSEOClient; records calls and replays canned payloads."""

    def __init__(self, items=None, error=None, detail_items=None):
        self.items = items or []
        self.detail_items = detail_items if detail_items is not None else []
        self.error = error
        self.search_calls = []
        self.detail_calls = []

    def maps_search(self, keyword, location_name, depth=20, language_code="en"):
        self.search_calls.append({"keyword": keyword, "location_name": location_name, "depth": depth})
        if self.error:
            raise self.error
        return {"status_code": 20000, "tasks": [{"status_code": 20000, "result": [{"items": self.items[:depth]}]}]}

    def business_info(self, place_id, location_name, language_code="en"):
        self.detail_calls.append(place_id)
        if self.error:
            raise self.error
        return {"tasks": [{"result": [{"items": self.detail_items}]}]}


def _make_items(count):
    return [
        {"place_id": f"pid-{i}", "title": f"Vendor {i}", "rating": {"value": 4.0, "votes_count": i}}
        for i in range(count)
    ]


@pytest.fixture
def fake_provider():
    """Factory for provider doubles: `fake_provider(items=..., error=..., detail_items=...)`."""
    return FakeProvider


@pytest.fixture
def provider_items():
    """Factory for `count` titled provider items with place ids pid-0..pid-N."""
    return _make_items


@pytest.fixture
def new_york():
    return Location(
        city="New York",
        city_ascii="New York",
        state_id="NY",
        state_name="New York",
        county_name="New York County",
        lat=40.7128,
        lng=-74.0060,
        population=8419000,
        density=27012.0,
        timezone="America/New_York",
        zips=("10001", "10002"),
    )
