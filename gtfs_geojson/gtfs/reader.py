"""GTFS data reader producing an immutable feed snapshot."""

import csv
import io
import logging
import zipfile
from pathlib import Path
from types import MappingProxyType

from gtfs_geojson.gtfs.models import GTFSFeed, Route, ShapePoint, Stop, StopTime, Trip

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {
    "stops.txt": ("stop_id",),
    "routes.txt": ("route_id",),
    "trips.txt": ("trip_id", "route_id"),
    "shapes.txt": ("shape_id", "shape_pt_lat", "shape_pt_lon", "shape_pt_sequence"),
    "stop_times.txt": ("trip_id", "stop_id", "stop_sequence"),
}


def _clean(value: str | None) -> str | None:
    """Strip a CSV value, mapping empty strings to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_float(value: str | None) -> float | None:
    value = _clean(value)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _parse_int(value: str | None) -> int | None:
    value = _clean(value)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class GTFSReader:
    """Read a GTFS feed from a directory or a zip archive."""

    def __init__(self, gtfs_path: str, read_stop_times: bool = False) -> None:
        """Initialize reader with GTFS directory or archive path."""
        self.gtfs_path = Path(gtfs_path)
        if self.gtfs_path.is_dir():
            self.is_archive = False
        elif self.gtfs_path.is_file() and zipfile.is_zipfile(self.gtfs_path):
            self.is_archive = True
        else:
            raise ValueError(
                f"GTFS path not found or not a directory or zip archive: {gtfs_path}"
            )

        self.read_stop_times_enabled = read_stop_times

        # Data storage
        self.stops: list[Stop] = []
        self.routes_by_id: dict[str, Route] = {}
        self.trips: list[Trip] = []
        self.shape_points: list[ShapePoint] = []
        self.stop_times: list[StopTime] = []

    def read_all(self) -> None:
        """Read all GTFS files needed for conversion."""
        logger.info(f"Reading GTFS data from {self.gtfs_path}")
        self.read_stops()
        self.read_routes()
        self.read_trips()
        self.read_shapes()
        if self.read_stop_times_enabled:
            self.read_stop_times()
        logger.info(
            f"Loaded {len(self.stops)} stops, {len(self.routes_by_id)} routes, "
            f"{len(self.trips)} trips, {len(self.shape_points)} shape points, "
            f"{len(self.stop_times)} stop_times"
        )

    def feed(self) -> GTFSFeed:
        """Freeze loaded tables into a read-only snapshot."""
        return GTFSFeed(
            stops=tuple(self.stops),
            trips=tuple(self.trips),
            shape_points=tuple(self.shape_points),
            routes_by_id=MappingProxyType(dict(self.routes_by_id)),
            stop_times=tuple(self.stop_times),
        )

    def read_stops(self) -> None:
        """Read stops.txt."""
        seen: set[str] = set()
        for row in self._read_table("stops.txt", required=True):
            stop_id = _clean(row.get("stop_id"))
            if stop_id is None:
                logger.warning("stops.txt row without stop_id, skipping")
                continue
            if stop_id in seen:
                logger.warning(f"Duplicate stop_id {stop_id}, keeping first occurrence")
                continue
            seen.add(stop_id)

            self.stops.append(
                Stop(
                    stop_id=stop_id,
                    name=_clean(row.get("stop_name")) or "",
                    lat=_parse_float(row.get("stop_lat")),
                    lon=_parse_float(row.get("stop_lon")),
                    code=_clean(row.get("stop_code")),
                    description=_clean(row.get("stop_desc")),
                    wheelchair_boarding=_clean(row.get("wheelchair_boarding")),
                    parent_station=_clean(row.get("parent_station")),
                    timezone=_clean(row.get("stop_timezone")),
                    location_type=_parse_int(row.get("location_type")),
                )
            )

    def read_routes(self) -> None:
        """Read routes.txt."""
        for row in self._read_table("routes.txt", required=True):
            route_id = _clean(row.get("route_id"))
            if route_id is None:
                logger.warning("routes.txt row without route_id, skipping")
                continue
            self.routes_by_id[route_id] = Route(
                route_id=route_id,
                short_name=_clean(row.get("route_short_name")),
                long_name=_clean(row.get("route_long_name")),
                route_type=_parse_int(row.get("route_type")),
                color=_clean(row.get("route_color")),
                text_color=_clean(row.get("route_text_color")),
            )

    def read_trips(self) -> None:
        """Read trips.txt."""
        for row in self._read_table("trips.txt", required=True):
            trip_id = _clean(row.get("trip_id"))
            if trip_id is None:
                logger.warning("trips.txt row without trip_id, skipping")
                continue
            self.trips.append(
                Trip(
                    trip_id=trip_id,
                    route_id=_clean(row.get("route_id")) or "",
                    service_id=_clean(row.get("service_id")),
                    shape_id=_clean(row.get("shape_id")),
                    headsign=_clean(row.get("trip_headsign")),
                    direction_id=_parse_int(row.get("direction_id")),
                    block_id=_clean(row.get("block_id")),
                )
            )

    def read_shapes(self) -> None:
        """Read shapes.txt if present, in file order."""
        rows = self._read_table("shapes.txt", required=False)
        if rows is None:
            logger.info("shapes.txt not found, no shape geometries")
            return

        for row in rows:
            shape_id = _clean(row.get("shape_id"))
            sequence = _parse_int(row.get("shape_pt_sequence"))
            if shape_id is None or sequence is None:
                logger.warning(f"Unusable shapes.txt row, skipping: {row}")
                continue
            self.shape_points.append(
                ShapePoint(
                    shape_id=shape_id,
                    lat=_parse_float(row.get("shape_pt_lat")),
                    lon=_parse_float(row.get("shape_pt_lon")),
                    sequence=sequence,
                    dist_traveled=_parse_float(row.get("shape_dist_traveled")),
                )
            )

    def read_stop_times(self) -> None:
        """Read stop_times.txt if present."""
        rows = self._read_table("stop_times.txt", required=False)
        if rows is None:
            logger.info("stop_times.txt not found, no stop sequences")
            return

        for row in rows:
            trip_id = _clean(row.get("trip_id"))
            stop_id = _clean(row.get("stop_id"))
            stop_sequence = _parse_int(row.get("stop_sequence"))
            if trip_id is None or stop_id is None or stop_sequence is None:
                continue
            self.stop_times.append(
                StopTime(trip_id=trip_id, stop_id=stop_id, stop_sequence=stop_sequence)
            )

    def _read_table(self, filename: str, required: bool) -> list[dict[str, str]] | None:
        """Read one CSV table, returning None for a missing optional table."""
        if self.is_archive:
            rows = self._read_archive_table(filename)
        else:
            file_path = self.gtfs_path / filename
            if file_path.exists():
                with open(file_path, encoding="utf-8-sig", newline="") as f:
                    rows = self._parse_csv(filename, f)
            else:
                rows = None

        if rows is None and required:
            raise FileNotFoundError(f"Required file not found: {self.gtfs_path / filename}")
        return rows

    def _read_archive_table(self, filename: str) -> list[dict[str, str]] | None:
        with zipfile.ZipFile(self.gtfs_path) as archive:
            # Feeds are sometimes zipped with an enclosing folder
            members = [
                name for name in archive.namelist() if name.rsplit("/", 1)[-1] == filename
            ]
            if not members:
                return None
            with archive.open(min(members, key=len)) as raw:
                text = io.TextIOWrapper(raw, encoding="utf-8-sig", newline="")
                return self._parse_csv(filename, text)

    @staticmethod
    def _parse_csv(filename: str, f: io.TextIOBase) -> list[dict[str, str]]:
        reader = csv.DictReader(f)
        columns = set(reader.fieldnames or [])
        missing = [col for col in REQUIRED_COLUMNS.get(filename, ()) if col not in columns]
        if missing:
            raise ValueError(f"{filename} is missing required columns: {', '.join(missing)}")
        return list(reader)


def load_feed(gtfs_path: str, read_stop_times: bool = False) -> GTFSFeed:
    """Read a GTFS directory or archive and return its snapshot."""
    reader = GTFSReader(gtfs_path, read_stop_times=read_stop_times)
    reader.read_all()
    return reader.feed()
