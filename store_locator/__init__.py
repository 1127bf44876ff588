from store_locator.errors import (
    ERROR_DB_CONNECTION,
    ERROR_QUERY,
    DatabaseConnectionError,
    LocatorError,
    PositionNotSetError,
    QueryError,
)
from store_locator.query import LocationResult, LocatorConfig, LocatorConfigBuilder, Position, Rule, UnitSystem
from store_locator.service import StoreLocator

__all__ = [
    "ERROR_DB_CONNECTION",
    "ERROR_QUERY",
    "DatabaseConnectionError",
    "LocationResult",
    "LocatorConfig",
    "LocatorConfigBuilder",
    "LocatorError",
    "Position",
    "PositionNotSetError",
    "QueryError",
    "Rule",
    "StoreLocator",
    "UnitSystem",
]
