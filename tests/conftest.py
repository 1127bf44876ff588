"""Pytest configuration and fixtures."""
import math
import sys
from pathlib import Path

import pytest

# Ensure repo root is on path when running pytest from anywhere
root = Path(__file__).resolve().parent.parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from store_locator.data.database import LocationsSource, create_locator_engine
from store_locator.data.geo import EARTH_RADIUS_MILES
from store_locator.data.locations_repo import LocationRecord, load_locations

ORIGIN = (42.3584308, -71.0597732)  # Boston City Hall
DEFAULT_SCALE = EARTH_RADIUS_MILES * 1.2

# (name, category, adjusted distance in miles due north of ORIGIN), in insert order
REFERENCE_LOCATIONS = [
    ("Harbor Slice", "pizza", 2.3),
    ("Beacon Beans", "coffee", 0.6),
    ("North End Pies", "pizza", 0.3),
    ("Fenway Grinders", "subs", 4.1),
    ("Back Bay Brew", "coffee", 1.2),
    ("Seaport Pizza", "pizza", 4.0),
    ("Common Cafe", "coffee", 0.6),
    ("Charlestown Subs", "subs", 1.4),
]
SORTED_DISTANCES = sorted(d for _, _, d in REFERENCE_LOCATIONS)


def lat_north_of_origin(distance: float, scale: float = DEFAULT_SCALE) -> float:
    """Latitude whose great-circle distance from ORIGIN (same lng) is `distance` at `scale`."""
    return ORIGIN[0] + math.degrees(distance / scale)


def reference_records() -> list[LocationRecord]:
    records = [
        LocationRecord(name=name, lat=lat_north_of_origin(d), lng=ORIGIN[1], category=category)
        for name, category, d in REFERENCE_LOCATIONS
    ]
    # Outside any test radius, and un-geocoded
    records.append(LocationRecord(name="Manhattan Pizza", lat=40.7128, lng=-74.0060, category="pizza"))
    records.append(LocationRecord(name="Nowhere Diner", lat=None, lng=None, category="pizza"))
    return records


@pytest.fixture
def engine(tmp_path):
    eng = create_locator_engine(f"sqlite:///{tmp_path / 'locations.db'}")
    load_locations(eng, reference_records())
    yield eng
    eng.dispose()


@pytest.fixture
def source(engine):
    return LocationsSource(engine)


class FakeSource:
    """Records the compiled statement and returns canned rows."""

    def __init__(self, rows=None, dialect="mysql"):
        self.rows = rows or []
        self.dialect = dialect
        self.calls = []

    def fetch_all(self, sql, params):
        self.calls.append((sql, dict(params)))
        return list(self.rows)


@pytest.fixture
def fake_source():
    return FakeSource(rows=[{"id": i, "distance": d} for i, d in enumerate(SORTED_DISTANCES, start=1)])
