#!/usr/bin/env python3
"""
Load locations from a CSV file into a locations table.

CSV must have columns: name, lat, lng
Optional columns: category, address
(Header row expected.) Rows with blank lat/lng are loaded with NULL
coordinates; the locator skips them.

Run: python scripts/load_locations.py --csv path/to/locations.csv --db-url sqlite:///data/locations.db
"""
import argparse
import csv
import logging
import sys
from pathlib import Path

# Add repo root to path
root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(root))

from store_locator.data.database import create_locator_engine
from store_locator.data.locations_repo import LocationRecord, load_locations
from store_locator.settings import get_settings

logger = logging.getLogger("load_locations")


def _coordinate(raw: str | None) -> float | None:
    raw = (raw or "").strip()
    if not raw:
        return None
    return float(raw)


def read_records(csv_path: Path) -> list[LocationRecord]:
    records = []
    with open(csv_path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise ValueError("empty CSV")
        # Normalize headers (strip BOM / spaces)
        fieldnames = [h.strip().lower().lstrip("\ufeff") for h in reader.fieldnames]
        missing = {"name", "lat", "lng"} - set(fieldnames)
        if missing:
            raise ValueError(f"CSV must have name, lat and lng columns. Missing: {sorted(missing)}")
        for line_no, row in enumerate(reader, start=2):
            row = {k.strip().lower().lstrip("\ufeff"): v for k, v in row.items() if k}
            name = (row.get("name") or "").strip()
            if not name:
                continue
            try:
                lat = _coordinate(row.get("lat"))
                lng = _coordinate(row.get("lng"))
            except ValueError:
                logger.warning("skipping line=%d name=%s (bad coordinates)", line_no, name)
                continue
            records.append(
                LocationRecord(
                    name=name,
                    lat=lat,
                    lng=lng,
                    category=(row.get("category") or "").strip(),
                    address=(row.get("address") or "").strip(),
                )
            )
    return records


def main() -> int:
    parser = argparse.ArgumentParser(description="Load locations CSV into a database table")
    parser.add_argument("--csv", required=True, type=Path, help="Path to CSV (name, lat, lng[, category, address])")
    parser.add_argument(
        "--db-url",
        default=f"sqlite:///{root / 'data' / 'locations.db'}",
        help="SQLAlchemy database URL",
    )
    parser.add_argument("--table", default="locations", help="Locations table name")
    parser.add_argument("--append", action="store_true", help="Keep existing rows instead of replacing them")
    args = parser.parse_args()

    logging.basicConfig(level=get_settings().log_level.upper(), format="%(levelname)s %(name)s %(message)s")

    if not args.csv.exists():
        print(f"Error: CSV not found: {args.csv}", file=sys.stderr)
        return 1
    try:
        records = read_records(args.csv)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.db_url.startswith("sqlite:///"):
        Path(args.db_url[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)
    engine = create_locator_engine(args.db_url)
    count = load_locations(engine, records, name=args.table, replace=not args.append)
    print(f"Loaded {count} locations into {args.table}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
