"""Data models for GTFS records and conversion results."""

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Stop:
    """GTFS stop. Coordinates are None when missing or unparseable upstream."""

    stop_id: str
    name: str
    lat: float | None
    lon: float | None
    code: str | None = None
    description: str | None = None
    wheelchair_boarding: str | None = None
    parent_station: str | None = None
    timezone: str | None = None
    location_type: int | None = None


@dataclass(frozen=True)
class Route:
    """GTFS route."""

    route_id: str
    short_name: str | None = None
    long_name: str | None = None
    route_type: int | None = None
    color: str | None = None  # hex without '#'
    text_color: str | None = None  # hex without '#'


@dataclass(frozen=True)
class Trip:
    """GTFS trip."""

    trip_id: str
    route_id: str
    service_id: str | None = None
    shape_id: str | None = None
    headsign: str | None = None
    direction_id: int | None = None
    block_id: str | None = None


@dataclass(frozen=True)
class ShapePoint:
    """One row of shapes.txt."""

    shape_id: str
    lat: float | None
    lon: float | None
    sequence: int
    dist_traveled: float | None = None


@dataclass(frozen=True)
class StopTime:
    """GTFS stop time, reduced to what is needed to draw a trip through its stops."""

    trip_id: str
    stop_id: str
    stop_sequence: int


@dataclass(frozen=True)
class GTFSFeed:
    """Read-only snapshot of a fully loaded feed."""

    stops: tuple[Stop, ...] = ()
    trips: tuple[Trip, ...] = ()
    shape_points: tuple[ShapePoint, ...] = ()
    routes_by_id: Mapping[str, Route] = field(default_factory=dict)
    stop_times: tuple[StopTime, ...] = ()


@dataclass
class ProjectionReport:
    """Counts of emitted features and of records left out, keyed by reason.

    ``degraded`` counts features that were emitted with some properties
    missing, such as trips whose route reference does not resolve.
    """

    emitted: int = 0
    skipped: Counter[str] = field(default_factory=Counter)
    degraded: Counter[str] = field(default_factory=Counter)

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())

    def skip(self, reason: str) -> None:
        self.skipped[reason] += 1


@dataclass
class ValidationReport:
    """Report from checking a written GeoJSON file."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)


@dataclass
class ConversionReport:
    """Result of a conversion run."""

    tool_version: str
    created_at_iso: str
    inputs: dict[str, Any]
    output_path: str | None
    output_sha256: str | None
    stats: dict[str, int]


@dataclass
class ConvertConfig:
    """Configuration for conversion process."""

    input_path: str
    output_path: str | None = None  # None writes to stdout
    include_stops: bool = True
    include_shapes: bool = True
    fallback_to_stops: bool = False
    precision: int | None = None  # None keeps coordinates unrounded
    indent: int | None = None
