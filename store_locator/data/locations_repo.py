"""
Locations table helpers: create the table and load records into it.
"""
from collections.abc import Iterable
from typing import NamedTuple

from sqlalchemy import Column, Float, Integer, MetaData, String, Table, delete, insert
from sqlalchemy.engine import Engine


class LocationRecord(NamedTuple):
    name: str
    lat: float | None
    lng: float | None
    category: str = ""
    address: str = ""


def locations_table(name: str = "locations", metadata: MetaData | None = None) -> Table:
    return Table(
        name,
        metadata if metadata is not None else MetaData(),
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("name", String(255), nullable=False),
        Column("category", String(64), nullable=False, default=""),
        Column("address", String(255), nullable=False, default=""),
        # Nullable: un-geocoded rows are skipped by the locator
        Column("lat", Float, nullable=True, index=True),
        Column("lng", Float, nullable=True, index=True),
    )


def init_locations_table(engine: Engine, name: str = "locations") -> Table:
    """Create the locations table if it does not exist."""
    table = locations_table(name)
    table.metadata.create_all(engine)
    return table


def load_locations(
    engine: Engine,
    records: Iterable[LocationRecord],
    name: str = "locations",
    replace: bool = False,
) -> int:
    """Insert records; with replace=True the table is emptied first. Returns rows inserted."""
    table = init_locations_table(engine, name)
    rows = [record._asdict() for record in records]
    with engine.begin() as conn:
        if replace:
            conn.execute(delete(table))
        if rows:
            conn.execute(insert(table), rows)
    return len(rows)
