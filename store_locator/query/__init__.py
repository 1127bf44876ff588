from store_locator.query.builder import LocatorConfigBuilder
from store_locator.query.compiler import CompiledQuery, compile_query
from store_locator.query.models import (
    Limit,
    LocationResult,
    LocatorConfig,
    Position,
    Rule,
    RuleOperator,
    UnitSystem,
)

__all__ = [
    "CompiledQuery",
    "Limit",
    "LocationResult",
    "LocatorConfig",
    "LocatorConfigBuilder",
    "Position",
    "Rule",
    "RuleOperator",
    "UnitSystem",
    "compile_query",
]
