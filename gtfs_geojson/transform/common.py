"""Helpers shared by the stop and shape projectors."""

import math

from gtfs_geojson.gtfs.models import GTFSFeed


def ensure_feed(feed: object) -> GTFSFeed:
    """Reject anything that is not a loaded feed snapshot."""
    if not isinstance(feed, GTFSFeed):
        raise TypeError(f"Expected a GTFSFeed snapshot, got {type(feed).__name__}")
    return feed


def is_valid_coordinate(lat: float | None, lon: float | None) -> bool:
    """True when both values are present, finite and within WGS84 bounds."""
    if lat is None or lon is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


# round() returns a float unchanged when asked for more digits than a double can hold
LOSSLESS_PRECISION = 400


def geometry_precision(precision: int | None) -> int:
    """Decimal places handed to geojson geometries; None keeps coordinates as read."""
    return LOSSLESS_PRECISION if precision is None else precision
