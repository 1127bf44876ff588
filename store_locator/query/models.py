"""Pydantic models for locator configuration and results."""
import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from store_locator.data.geo import distance_scale

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")
RULE_PLACEHOLDER = "%s"
# Characters that could close a quoted literal or identifier in a rule
_QUOTE_CHARS = re.compile(r"[\"'`]")


def strip_quotes(value: Any) -> Any:
    """Remove quote and backtick characters from strings; other values pass through."""
    if isinstance(value, str):
        return _QUOTE_CHARS.sub("", value)
    return value


class UnitSystem(str, Enum):
    ENGLISH = "english"
    METRIC = "metric"

    @classmethod
    def parse(cls, name: str) -> "UnitSystem":
        key = str(name).strip().lower()
        if key == "imperial":
            key = "english"
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"units must be 'english' or 'metric', got {name!r}") from None


class RuleOperator(str, Enum):
    EQ = "="
    NE = "!="
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="
    LIKE = "LIKE"
    NOT_LIKE = "NOT LIKE"

    @classmethod
    def parse(cls, op: "str | RuleOperator") -> "RuleOperator":
        if isinstance(op, RuleOperator):
            return op
        key = " ".join(str(op).split()).upper()
        if key == "<>":
            key = "!="
        for member in cls:
            if key in (member.value, member.name):
                return member
        raise ValueError(f"Unsupported rule operator {op!r}")


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

    @model_validator(mode="after")
    def check_coordinates(self):
        if not (-90 <= self.lat <= 90):
            raise ValueError("lat must be between -90 and 90")
        if not (-180 <= self.lng <= 180):
            raise ValueError("lng must be between -180 and 180")
        return self


class Rule(BaseModel):
    """
    One extra WHERE predicate. `template` holds exactly one %s, which the
    compiler swaps for a named bind parameter carrying `value`.
    """

    model_config = ConfigDict(frozen=True)

    template: str
    value: Any = None

    @model_validator(mode="after")
    def check_placeholder(self):
        if self.template.count(RULE_PLACEHOLDER) != 1:
            raise ValueError(f"Rule template must contain exactly one {RULE_PLACEHOLDER}: {self.template!r}")
        return self

    @classmethod
    def from_template(cls, template: str, value: Any) -> "Rule":
        """Caller-written fragment such as "category = %s"; quotes are stripped from both parts."""
        return cls(template=strip_quotes(str(template)), value=strip_quotes(value))

    @classmethod
    def where(cls, column: str, operator: "str | RuleOperator", value: Any) -> "Rule":
        if not IDENTIFIER_PATTERN.match(column or ""):
            raise ValueError(f"Invalid rule column {column!r}")
        op = RuleOperator.parse(operator)
        return cls(template=f"{column} {op.value} {RULE_PLACEHOLDER}", value=value)

    def render(self, placeholder: str) -> str:
        return self.template.replace(RULE_PLACEHOLDER, placeholder)

    def as_pair(self) -> tuple[str, Any]:
        return (self.template, self.value)


class Limit(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int = Field(default=0, ge=0)
    length: int = Field(default=0, ge=0)  # 0 = no limit

    def apply(self, rows: list) -> list:
        if not self.length:
            return rows
        return rows[self.start:self.start + self.length]


class LocatorConfig(BaseModel):
    """Immutable query configuration. Build it with LocatorConfigBuilder."""

    model_config = ConfigDict(frozen=True)

    locations_table: str = "locations"
    latitude_column: str = "lat"
    longitude_column: str = "lng"
    return_columns: str | tuple[str, ...] = "*"
    radius: int = Field(default=50, ge=0)
    distance_decimals: int = Field(default=1, ge=0)
    distance_adjustment: float = Field(default=1.2, gt=0)
    limit: Limit = Limit()
    unit_system: UnitSystem = UnitSystem.ENGLISH
    english_units: str = "mi"
    metric_units: str = "km"
    rules: tuple[Rule, ...] = ()
    position: Position | None = None

    @property
    def units(self) -> str:
        """Display label for the active unit system."""
        labels = {
            UnitSystem.ENGLISH: self.english_units,
            UnitSystem.METRIC: self.metric_units,
        }
        return labels[self.unit_system]

    @property
    def scale(self) -> float:
        return distance_scale(self.unit_system is UnitSystem.METRIC, self.distance_adjustment)

    @property
    def columns_sql(self) -> str:
        if isinstance(self.return_columns, str):
            return self.return_columns
        return ",".join(self.return_columns)


class LocationResult(BaseModel):
    radius: int
    units: str
    position: Position
    return_columns: str | list[str]
    rules: list[tuple[str, Any]] | None = None
    locations: list[dict[str, Any]]
    result_count: int
    total_locations: int
    limit_start: int
    limit_length: int
