"""Tests for locations table helpers and the SQLite engine setup."""
from sqlalchemy import inspect, text

from store_locator.data.database import DbConnectionInfo, create_locator_engine
from store_locator.data.locations_repo import LocationRecord, init_locations_table, load_locations


def _count(engine, table="locations"):
    with engine.connect() as conn:
        return conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar_one()


def test_init_locations_table_is_idempotent(tmp_path):
    engine = create_locator_engine(f"sqlite:///{tmp_path / 'a.db'}")
    init_locations_table(engine, "stores")
    init_locations_table(engine, "stores")
    columns = {c["name"] for c in inspect(engine).get_columns("stores")}
    assert {"id", "name", "category", "address", "lat", "lng"} <= columns


def test_load_locations_append_and_replace(tmp_path):
    engine = create_locator_engine(f"sqlite:///{tmp_path / 'b.db'}")
    records = [LocationRecord(name="A", lat=1.0, lng=2.0), LocationRecord(name="B", lat=None, lng=None)]
    assert load_locations(engine, records) == 2
    load_locations(engine, records)
    assert _count(engine) == 4
    load_locations(engine, records[:1], replace=True)
    assert _count(engine) == 1


def test_sqlite_engine_has_math_functions(tmp_path):
    engine = create_locator_engine(f"sqlite:///{tmp_path / 'c.db'}")
    with engine.connect() as conn:
        value = conn.execute(text("SELECT ROUND(ACOS(COS(RADIANS(180))), 4)")).scalar_one()
    assert value == 3.1416


def test_connection_info_urls():
    mysql = DbConnectionInfo(username="user", password="secret", database="shops").url()
    assert mysql.drivername == "mysql+pymysql"
    assert mysql.host == "localhost"
    assert mysql.database == "shops"
    assert mysql.query["charset"] == "utf8mb4"

    pg = DbConnectionInfo(username="u", database="d", host="db", driver="postgresql").url()
    assert pg.host == "db"
    assert "charset" not in pg.query

    sqlite = DbConnectionInfo(database="/tmp/x.db", driver="sqlite").url()
    assert sqlite.database == "/tmp/x.db"
    assert sqlite.host is None


def test_connection_info_from_legacy_keys():
    info = DbConnectionInfo.from_options(
        {"db_username": "u", "db_password": "p", "db_name": "stores", "db_host": "db.internal", "db_type": "mysql+pymysql"}
    )
    assert (info.username, info.password, info.database) == ("u", "p", "stores")
    assert info.host == "db.internal"
    assert info.driver == "mysql+pymysql"
    assert DbConnectionInfo.from_options({"database": "x"}).host == "localhost"


def test_default_connection_info_builds_pymysql_engine():
    engine = create_locator_engine(DbConnectionInfo.from_options({"username": "u", "password": "p", "database": "shops"}))
    assert engine.dialect.name == "mysql"
    assert engine.dialect.driver == "pymysql"
    engine.dispose()


def test_bare_mysql_driver_maps_to_pymysql():
    info = DbConnectionInfo(database="shops", driver="mysql")
    assert info.url().drivername == "mysql+pymysql"
    assert create_locator_engine(info).dialect.driver == "pymysql"
