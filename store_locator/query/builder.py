"""
Mutable builder for LocatorConfig.

Setters normalize their input. A value that cannot be coerced is logged and
ignored so the previous setting stays in effect.
"""
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from store_locator.query.models import Limit, LocatorConfig, Position, Rule, UnitSystem

logger = logging.getLogger(__name__)


def _as_int(name: str, value: Any) -> int | None:
    try:
        return abs(int(float(value)))
    except (TypeError, ValueError, OverflowError):
        logger.warning("locator ignored %s=%r (not an integer)", name, value)
        return None


def _field_values(config: LocatorConfig) -> dict[str, Any]:
    values = {name: getattr(config, name) for name in LocatorConfig.model_fields}
    values["rules"] = list(config.rules)
    return values


def _pair(value: Any, keys: tuple[str, str]) -> tuple[Any, Any] | None:
    """Accept {"lat": .., "lng": ..} style mappings or 2-item sequences."""
    if isinstance(value, Mapping):
        if all(k in value for k in keys):
            return value[keys[0]], value[keys[1]]
        return None
    if isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 2:
        return value[0], value[1]
    return None


class LocatorConfigBuilder:
    def __init__(self, options: Mapping[str, Any] | None = None):
        self._values: dict[str, Any] = _field_values(LocatorConfig())
        if options:
            self.set_options(options)

    @classmethod
    def from_config(cls, config: LocatorConfig) -> "LocatorConfigBuilder":
        builder = cls()
        builder._values = _field_values(config)
        return builder

    def build(self) -> LocatorConfig:
        values = dict(self._values)
        values["rules"] = tuple(values["rules"])
        return LocatorConfig(**values)

    # --- Table layout ---

    def set_locations_table(self, locations_table: str) -> "LocatorConfigBuilder":
        self._values["locations_table"] = str(locations_table)
        return self

    def set_latlng_columns(self, latitude_column: str, longitude_column: str) -> "LocatorConfigBuilder":
        self._values["latitude_column"] = str(latitude_column)
        self._values["longitude_column"] = str(longitude_column)
        return self

    def set_return_columns(self, return_columns: str | Sequence[str]) -> "LocatorConfigBuilder":
        if isinstance(return_columns, str):
            self._values["return_columns"] = return_columns
        elif isinstance(return_columns, Sequence) and return_columns:
            self._values["return_columns"] = tuple(str(c) for c in return_columns)
        else:
            logger.warning("locator ignored return_columns=%r", return_columns)
        return self

    # --- Units ---

    def use_english_units(self) -> "LocatorConfigBuilder":
        self._values["unit_system"] = UnitSystem.ENGLISH
        return self

    def use_metric_units(self) -> "LocatorConfigBuilder":
        self._values["unit_system"] = UnitSystem.METRIC
        return self

    def set_units(self, name: str) -> "LocatorConfigBuilder":
        """Select "english" or "metric" by name. Unknown names raise ValueError."""
        self._values["unit_system"] = UnitSystem.parse(name)
        return self

    def set_english_units(self, label: str) -> "LocatorConfigBuilder":
        self._values["english_units"] = str(label)
        return self

    def set_metric_units(self, label: str) -> "LocatorConfigBuilder":
        self._values["metric_units"] = str(label)
        return self

    # --- Distance ---

    def set_radius(self, radius: Any) -> "LocatorConfigBuilder":
        value = _as_int("radius", radius)
        if value is not None:
            self._values["radius"] = value
        return self

    def set_distance_adjustment(self, distance_adjustment: Any) -> "LocatorConfigBuilder":
        try:
            value = float(distance_adjustment)
        except (TypeError, ValueError):
            value = 0.0
        if value <= 0:
            logger.warning("locator ignored distance_adjustment=%r", distance_adjustment)
            return self
        self._values["distance_adjustment"] = value
        return self

    def set_distance_decimals(self, distance_decimals: Any) -> "LocatorConfigBuilder":
        value = _as_int("distance_decimals", distance_decimals)
        if value is not None:
            self._values["distance_decimals"] = value
        return self

    # --- Pagination ---

    def set_limit(self, length: Any, start: Any = None) -> "LocatorConfigBuilder":
        """Length 0 disables pagination. start=None keeps the current offset; 0 resets it."""
        current: Limit = self._values["limit"]
        new_length = _as_int("limit_length", length)
        new_start = current.start if start is None else _as_int("limit_start", start)
        self._values["limit"] = Limit(
            start=current.start if new_start is None else new_start,
            length=current.length if new_length is None else new_length,
        )
        return self

    # --- Position and rules ---

    def set_position(self, lat: float, lng: float) -> "LocatorConfigBuilder":
        """Non-numeric input is ignored; numbers outside lat/lng bounds raise ValueError."""
        try:
            lat, lng = float(lat), float(lng)
        except (TypeError, ValueError):
            logger.warning("locator ignored position=(%r, %r)", lat, lng)
            return self
        self._values["position"] = Position(lat=lat, lng=lng)
        return self

    def add_rule(self, template: str, value: Any) -> "LocatorConfigBuilder":
        """Append a "column = %s" style fragment; its value is bound, never interpolated."""
        self._values["rules"].append(Rule.from_template(template, value))
        return self

    def add_where(self, column: str, operator: str, value: Any) -> "LocatorConfigBuilder":
        self._values["rules"].append(Rule.where(column, operator, value))
        return self

    # --- Options bundle ---

    def set_options(self, options: Mapping[str, Any]) -> "LocatorConfigBuilder":
        for key, value in options.items():
            if key == "locations_table":
                self.set_locations_table(value)
            elif key == "latlng_columns":
                pair = _pair(value, ("lat", "lng"))
                if pair is not None:
                    self.set_latlng_columns(*pair)
            elif key == "radius":
                self.set_radius(value)
            elif key == "limit":
                self._set_limit_option(value)
            elif key == "units":
                self.set_units(value)
            elif key == "metric_units":
                self.set_metric_units(value)
            elif key == "english_units":
                self.set_english_units(value)
            elif key == "distance_adjustment":
                self.set_distance_adjustment(value)
            elif key == "distance_decimals":
                self.set_distance_decimals(value)
            elif key == "position":
                pair = _pair(value, ("lat", "lng"))
                if pair is not None:
                    self.set_position(*pair)
            elif key == "return_columns":
                self.set_return_columns(value)
            elif key == "rules":
                for rule in value or ():
                    self._add_rule_option(rule)
        return self

    def _set_limit_option(self, value: Any) -> None:
        if isinstance(value, str):
            parts = [p.strip() for p in value.split(",")]
            self.set_limit(parts[0], parts[1] if len(parts) > 1 else None)
        elif isinstance(value, Mapping):
            self.set_limit(value.get("length", 0), value.get("start"))
        elif isinstance(value, Sequence):
            self.set_limit(value[0] if value else 0, value[1] if len(value) > 1 else None)
        else:
            self.set_limit(value)

    def _add_rule_option(self, rule: Any) -> None:
        if isinstance(rule, Rule):
            self._values["rules"].append(rule)
        elif not isinstance(rule, Mapping) or "value" not in rule:
            logger.warning("locator ignored rule=%r", rule)
        elif "column" in rule:
            self.add_where(rule["column"], rule.get("operator", "="), rule["value"])
        elif "template" in rule or "format_string" in rule:
            self.add_rule(rule.get("template", rule.get("format_string")), rule["value"])
        else:
            logger.warning("locator ignored rule=%r", rule)
