"""
Compile a LocatorConfig into the nearby-locations SQL statement.

Distance is computed once, aliased as `distance`, and the radius filter is
applied to the alias. MySQL accepts HAVING on a select alias without GROUP BY;
other dialects get the same select wrapped in a derived table instead.
"""
from typing import Any, NamedTuple

from store_locator.errors import PositionNotSetError
from store_locator.query.models import LocatorConfig, Position

HAVING_DIALECTS = frozenset({"mysql", "mariadb"})

# Rounding can push the cosine of identical points just past 1.0
CLAMP_SQL = {
    "sqlite": "MIN(1.0, MAX(-1.0, {cosine}))",
}
DEFAULT_CLAMP_SQL = "LEAST(1.0, GREATEST(-1.0, {cosine}))"

COSINE_SQL = (
    "COS(RADIANS(:lat)) * COS(RADIANS({lat_col}))"
    " * COS(RADIANS({lng_col}) - RADIANS(:lng))"
    " + SIN(RADIANS(:lat)) * SIN(RADIANS({lat_col}))"
)
DISTANCE_SQL = "ROUND({scale!r} * ACOS({clamped}), {decimals:d})"


class CompiledQuery(NamedTuple):
    sql: str
    params: dict[str, Any]


def rule_placeholder(index: int) -> str:
    """Bind parameter name for the 1-based rule index."""
    return f"rule{index}"


def compile_rules(config: LocatorConfig) -> tuple[str, dict[str, Any]]:
    """Render rules as ' AND ...' fragments in insertion order, with their bound values."""
    fragments = []
    params: dict[str, Any] = {}
    for index, rule in enumerate(config.rules, start=1):
        name = rule_placeholder(index)
        fragments.append(" AND " + rule.render(":" + name))
        params[name] = rule.value
    return "".join(fragments), params


def distance_expression(config: LocatorConfig, dialect: str = "mysql") -> str:
    cosine = COSINE_SQL.format(lat_col=config.latitude_column, lng_col=config.longitude_column)
    clamped = CLAMP_SQL.get(dialect, DEFAULT_CLAMP_SQL).format(cosine=cosine)
    return DISTANCE_SQL.format(scale=config.scale, clamped=clamped, decimals=config.distance_decimals)


def compile_query(
    config: LocatorConfig,
    position: Position | None = None,
    dialect: str = "mysql",
) -> CompiledQuery:
    if position is None:
        position = config.position
    if position is None:
        raise PositionNotSetError()

    rule_sql, rule_params = compile_rules(config)
    select = (
        f"SELECT {config.columns_sql}, {distance_expression(config, dialect)} AS distance"
        f" FROM {config.locations_table}"
        f" WHERE {config.latitude_column} IS NOT NULL"
        f" AND {config.longitude_column} IS NOT NULL{rule_sql}"
    )
    if dialect in HAVING_DIALECTS:
        sql = f"{select} HAVING distance < {config.radius:d} ORDER BY distance ASC"
    else:
        sql = (
            f"SELECT * FROM ({select}) AS nearby"
            f" WHERE distance < {config.radius:d} ORDER BY distance ASC"
        )

    params: dict[str, Any] = {"lat": position.lat, "lng": position.lng}
    params.update(rule_params)
    return CompiledQuery(sql=sql, params=params)
