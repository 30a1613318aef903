"""Trip shape projection into LineString features."""

import logging
from collections.abc import Iterable
from typing import Any

import geojson

from gtfs_geojson.gtfs.models import GTFSFeed, ProjectionReport, Route, ShapePoint, Trip
from gtfs_geojson.transform.common import ensure_feed, geometry_precision, is_valid_coordinate

logger = logging.getLogger(__name__)

Position = tuple[float, float]  # (lon, lat)


def build_shape_index(
    shape_points: Iterable[ShapePoint], report: ProjectionReport | None = None
) -> dict[str, list[Position]]:
    """
    Group shape points by shape id and order them by shape_pt_sequence.

    The sort is stable, so points sharing a sequence value keep their
    encounter order. Points with invalid coordinates are dropped from their
    shape.
    """
    grouped: dict[str, list[ShapePoint]] = {}
    for point in shape_points:
        if point.shape_id not in grouped:
            grouped[point.shape_id] = []
        grouped[point.shape_id].append(point)

    index: dict[str, list[Position]] = {}
    for shape_id, points in grouped.items():
        points.sort(key=lambda p: p.sequence)

        positions: list[Position] = []
        for point in points:
            if not is_valid_coordinate(point.lat, point.lon):
                logger.debug(
                    f"Shape {shape_id} point {point.sequence} has invalid coordinates, dropping"
                )
                if report is not None:
                    report.skip("invalid_shape_points")
                continue
            positions.append((point.lon, point.lat))

        index[shape_id] = positions

    logger.debug(f"Indexed {len(index)} shapes")
    return index


def build_stop_lines(feed: GTFSFeed) -> dict[str, list[Position]]:
    """Positions of each trip's stops ordered by stop_sequence."""
    stops_by_id = {stop.stop_id: stop for stop in feed.stops}

    stop_times_by_trip: dict[str, list[tuple[int, str]]] = {}
    for st in feed.stop_times:
        if st.trip_id not in stop_times_by_trip:
            stop_times_by_trip[st.trip_id] = []
        stop_times_by_trip[st.trip_id].append((st.stop_sequence, st.stop_id))

    lines: dict[str, list[Position]] = {}
    for trip_id, entries in stop_times_by_trip.items():
        entries.sort(key=lambda x: x[0])
        positions: list[Position] = []
        for _, stop_id in entries:
            stop = stops_by_id.get(stop_id)
            if stop is None or not is_valid_coordinate(stop.lat, stop.lon):
                continue
            positions.append((stop.lon, stop.lat))
        lines[trip_id] = positions

    return lines


def trip_properties(trip: Trip, route: Route | None) -> dict[str, Any]:
    """Build the property mapping of a trip feature, leaving out absent fields."""
    properties: dict[str, Any] = {"tripId": trip.trip_id}

    optional: dict[str, Any] = {
        "shapeId": trip.shape_id,
        "routeId": trip.route_id or None,
        "serviceId": trip.service_id,
        "headsign": trip.headsign,
        "directionId": trip.direction_id,
        "blockId": trip.block_id,
    }
    if route is not None:
        optional.update(
            {
                "routeShortName": route.short_name,
                "routeLongName": route.long_name,
                "routeType": route.route_type,
                "routeColor": f"#{route.color}" if route.color else None,
                "routeTextColor": f"#{route.text_color}" if route.text_color else None,
            }
        )

    properties.update({key: value for key, value in optional.items() if value is not None})
    return properties


def project_shapes(
    feed: GTFSFeed,
    report: ProjectionReport | None = None,
    precision: int | None = None,
    fallback_to_stops: bool = False,
) -> list[geojson.Feature]:
    """
    Project trips onto their shapes, one LineString feature per trip.

    Trips sharing a shape each get a feature with the same geometry. Trips
    without a shape, with an unknown shape, or whose shape has fewer than two
    valid points are left out. With ``fallback_to_stops``, trips without a
    shape are drawn through their stops instead.
    """
    feed = ensure_feed(feed)
    if report is None:
        report = ProjectionReport()

    index = build_shape_index(feed.shape_points, report)
    stop_lines = build_stop_lines(feed) if fallback_to_stops else {}

    features: list[geojson.Feature] = []
    skipped = 0

    for trip in feed.trips:
        if trip.shape_id is None:
            positions = stop_lines.get(trip.trip_id)
            if positions is None:
                logger.debug(f"Trip {trip.trip_id} has no shape, skipping")
                report.skip("no_shape")
                skipped += 1
                continue
        else:
            positions = index.get(trip.shape_id)
            if positions is None:
                logger.debug(f"Trip {trip.trip_id} references unknown shape {trip.shape_id}")
                report.skip("unknown_shape")
                skipped += 1
                continue

        if len(positions) < 2:
            logger.debug(f"Trip {trip.trip_id} has fewer than 2 positions, skipping")
            report.skip("short_shape")
            skipped += 1
            continue

        route = feed.routes_by_id.get(trip.route_id)
        if route is None:
            logger.debug(f"Trip {trip.trip_id} references unknown route {trip.route_id!r}")
            report.degraded["unknown_route"] += 1

        features.append(
            geojson.Feature(
                geometry=geojson.LineString(positions, precision=geometry_precision(precision)),
                properties=trip_properties(trip, route),
            )
        )

    report.emitted += len(features)
    logger.info(f"Projected {len(features)} trip shapes, skipped {skipped} trips")
    return features
