"""
SQLAlchemy access to the locations table.

LocationsSource is the seam StoreLocator executes through. It separates
connection failures from statement failures so callers can report them
differently.
"""
import logging
import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from store_locator.data.geo import safe_acos
from store_locator.errors import DatabaseConnectionError, QueryError

logger = logging.getLogger(__name__)

# Functions the distance expression needs; older SQLite builds lack them
SQLITE_MATH_FUNCTIONS = {
    "radians": math.radians,
    "acos": safe_acos,
    "cos": math.cos,
    "sin": math.sin,
}


# Bare "mysql" would pick mysqlclient; PyMySQL is the driver this package ships with
DEFAULT_MYSQL_DRIVER = "mysql+pymysql"


class DbConnectionInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str | None = None
    password: str | None = None
    database: str
    host: str = "localhost"
    driver: str = DEFAULT_MYSQL_DRIVER

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "DbConnectionInfo":
        """Accept both our key names and the db_username/db_name/... style."""
        def pick(*keys: str) -> Any:
            for key in keys:
                if options.get(key):
                    return options[key]
            return None

        values = {
            "username": pick("username", "db_username"),
            "password": pick("password", "db_password"),
            "database": pick("database", "db_name"),
            "host": pick("host", "db_host"),
            "driver": pick("driver", "db_type"),
        }
        return cls(**{k: v for k, v in values.items() if v is not None})

    @property
    def drivername(self) -> str:
        return DEFAULT_MYSQL_DRIVER if self.driver == "mysql" else self.driver

    def url(self) -> URL:
        drivername = self.drivername
        if drivername.startswith("sqlite"):
            return URL.create(drivername, database=self.database)
        query = {"charset": "utf8mb4"} if drivername.startswith("mysql") else {}
        return URL.create(
            drivername,
            username=self.username,
            password=self.password,
            host=self.host,
            database=self.database,
            query=query,
        )


def register_sqlite_functions(dbapi_connection, connection_record=None) -> None:
    for name, func in SQLITE_MATH_FUNCTIONS.items():
        dbapi_connection.create_function(name, 1, func, deterministic=True)


def create_locator_engine(target: "DbConnectionInfo | URL | str", **engine_kwargs: Any) -> Engine:
    """Create an Engine for a connection info, URL or URL string. SQLite gets math functions."""
    url = target.url() if isinstance(target, DbConnectionInfo) else target
    engine = create_engine(url, **engine_kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", register_sqlite_functions)
    return engine


class LocationsSource:
    """Runs locator statements on an injected Engine and returns rows as dicts."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def fetch_all(self, sql: str, params: Mapping[str, Any]) -> list[dict[str, Any]]:
        try:
            conn = self.engine.connect()
        except SQLAlchemyError as e:
            logger.error("locator db connect failed dialect=%s error=%s", self.dialect, type(e).__name__)
            raise DatabaseConnectionError("Error connecting to the database") from e

        with conn:
            try:
                result = conn.execute(text(sql), dict(params))
                return [dict(row) for row in result.mappings()]
            except SQLAlchemyError as e:
                logger.error("locator query failed error=%s", e)
                raise QueryError(str(e)) from e
