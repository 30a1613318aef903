"""Stop projection into Point features."""

import logging
from typing import Any

import geojson

from gtfs_geojson.gtfs.models import GTFSFeed, ProjectionReport, Stop
from gtfs_geojson.transform.common import ensure_feed, geometry_precision, is_valid_coordinate

logger = logging.getLogger(__name__)

WHEELCHAIR_BOARDING_LABELS = {
    "0": "unknown",
    "1": "available",
    "2": "not available",
}


def stop_properties(stop: Stop) -> dict[str, Any]:
    """Build the property mapping of a stop, leaving out absent optional fields."""
    optional = {
        "code": stop.code,
        "description": stop.description,
        "wheelchairBoarding": (
            WHEELCHAIR_BOARDING_LABELS.get(stop.wheelchair_boarding, stop.wheelchair_boarding)
            if stop.wheelchair_boarding is not None
            else None
        ),
        "parentStation": stop.parent_station,
        "timezone": stop.timezone,
        "locationType": stop.location_type,
    }

    properties: dict[str, Any] = {"id": stop.stop_id, "name": stop.name}
    properties.update({key: value for key, value in optional.items() if value is not None})
    return properties


def project_stop(stop: Stop, precision: int | None = None) -> geojson.Feature | None:
    """Project one stop, or return None when it has no usable coordinates."""
    if not is_valid_coordinate(stop.lat, stop.lon):
        return None

    return geojson.Feature(
        geometry=geojson.Point((stop.lon, stop.lat), precision=geometry_precision(precision)),
        properties=stop_properties(stop),
    )


def project_stops(
    feed: GTFSFeed,
    report: ProjectionReport | None = None,
    precision: int | None = None,
) -> list[geojson.Feature]:
    """Project every stop with a valid coordinate pair into a Point feature."""
    feed = ensure_feed(feed)
    if report is None:
        report = ProjectionReport()

    features: list[geojson.Feature] = []
    skipped = 0

    for stop in feed.stops:
        feature = project_stop(stop, precision)
        if feature is None:
            logger.debug(
                f"Stop {stop.stop_id} has invalid coordinates ({stop.lat}, {stop.lon}), skipping"
            )
            report.skip("invalid_coordinates")
            skipped += 1
            continue
        features.append(feature)

    report.emitted += len(features)
    logger.info(f"Projected {len(features)} stops, skipped {skipped}")
    return features
