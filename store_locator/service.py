"""
StoreLocator: compile the nearby query, run it through a LocationsSource and
shape the rows into a LocationResult.

Pagination is applied after fetching the full distance-ordered set so that
total_locations is known without a second query.
"""
import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.engine import Engine

from store_locator.data.database import DbConnectionInfo, LocationsSource, create_locator_engine
from store_locator.errors import PositionNotSetError
from store_locator.query.builder import LocatorConfigBuilder
from store_locator.query.compiler import compile_query
from store_locator.query.models import LocationResult, LocatorConfig, Position
from store_locator.settings import Settings, get_settings

logger = logging.getLogger(__name__)

DB_OPTION_KEYS = ("db_connection_info", "db_info")


class StoreLocator:
    def __init__(self, source: LocationsSource, config: LocatorConfig | None = None):
        self.source = source
        self.config = config or LocatorConfig()

    @classmethod
    def from_options(cls, options: Mapping[str, Any], engine: Engine | None = None) -> "StoreLocator":
        """
        Build from one options mapping. Without an engine, `db_connection_info`
        (or `db_info`) must describe the database.
        """
        if engine is None:
            db_options = next((options[k] for k in DB_OPTION_KEYS if k in options), None)
            if db_options is None:
                raise ValueError("db_connection_info is required when no engine is given")
            engine = create_locator_engine(DbConnectionInfo.from_options(db_options))
        config = LocatorConfigBuilder(options).build()
        return cls(LocationsSource(engine), config)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "StoreLocator":
        settings = settings or get_settings()
        if settings.database_url:
            engine = create_locator_engine(settings.database_url)
        else:
            engine = create_locator_engine(
                DbConnectionInfo(
                    username=settings.db_username or None,
                    password=settings.db_password or None,
                    database=settings.db_name,
                    host=settings.db_host,
                    driver=settings.db_type,
                )
            )
        config = (
            LocatorConfigBuilder()
            .set_locations_table(settings.locations_table)
            .set_latlng_columns(settings.lat_column, settings.lng_column)
            .set_radius(settings.radius)
            .set_units(settings.units)
            .set_distance_adjustment(settings.distance_adjustment)
            .set_distance_decimals(settings.distance_decimals)
            .build()
        )
        return cls(LocationsSource(engine), config)

    def with_config(self, config: LocatorConfig) -> "StoreLocator":
        """Same data source, different configuration."""
        return StoreLocator(self.source, config)

    def find_nearby(self, position: Position | tuple[float, float] | None = None) -> LocationResult:
        """
        Return locations within the configured radius of position, nearest first.
        A position passed here replaces the configured one on this locator.

        Raises DatabaseConnectionError or QueryError; PositionNotSetError when
        no position was ever given.
        """
        if position is not None:
            if not isinstance(position, Position):
                lat, lng = position
                position = Position(lat=float(lat), lng=float(lng))
            self.config = self.config.model_copy(update={"position": position})
        config = self.config
        if config.position is None:
            raise PositionNotSetError()

        query = compile_query(config, dialect=self.source.dialect)
        rows = self.source.fetch_all(query.sql, query.params)
        locations = config.limit.apply(rows)

        logger.info(
            "locator query radius=%s units=%s rules=%d total=%d returned=%d",
            config.radius,
            config.units,
            len(config.rules),
            len(rows),
            len(locations),
        )
        return LocationResult(
            radius=config.radius,
            units=config.units,
            position=config.position,
            return_columns=config.return_columns if isinstance(config.return_columns, str) else list(config.return_columns),
            rules=[rule.as_pair() for rule in config.rules] or None,
            locations=locations,
            result_count=len(locations),
            total_locations=len(rows),
            limit_start=config.limit.start,
            limit_length=config.limit.length,
        )
