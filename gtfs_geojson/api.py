"""Public API for gtfs-geojson."""

import hashlib
import logging
from datetime import UTC, datetime

import geojson

from gtfs_geojson.gtfs.models import ConversionReport, ConvertConfig, GTFSFeed, ProjectionReport
from gtfs_geojson.gtfs.reader import load_feed
from gtfs_geojson.output.writer import assemble_feature_collection, write_geojson
from gtfs_geojson.transform.shapes import project_shapes
from gtfs_geojson.transform.stops import project_stops
from gtfs_geojson.version import VERSION

logger = logging.getLogger(__name__)


def build_feature_collection(
    feed: GTFSFeed,
    config: ConvertConfig,
    stop_report: ProjectionReport | None = None,
    shape_report: ProjectionReport | None = None,
) -> geojson.FeatureCollection:
    """Project a feed snapshot into a FeatureCollection, stops first."""
    stop_features: list[geojson.Feature] = []
    shape_features: list[geojson.Feature] = []

    if config.include_stops:
        stop_features = project_stops(feed, stop_report, precision=config.precision)

    if config.include_shapes:
        shape_features = project_shapes(
            feed,
            shape_report,
            precision=config.precision,
            fallback_to_stops=config.fallback_to_stops,
        )

    return assemble_feature_collection(stop_features, shape_features)


def convert(
    input_path: str,
    output_path: str | None = None,
    config: ConvertConfig | None = None,
) -> ConversionReport:
    """
    Convert a GTFS feed to a GeoJSON FeatureCollection.

    Args:
        input_path: Path to GTFS directory or zip archive
        output_path: Path to the output file; None falls back to
            config.output_path, then to stdout. Raises ValueError when it
            conflicts with config.output_path.
        config: Optional conversion configuration

    Returns:
        ConversionReport with projection statistics
    """
    if config is None:
        config = ConvertConfig(input_path=input_path, output_path=output_path)
    elif output_path is None:
        output_path = config.output_path
    elif config.output_path is not None and config.output_path != output_path:
        raise ValueError(
            f"output_path {output_path!r} conflicts with config.output_path {config.output_path!r}"
        )

    logger.info(f"Starting conversion: {input_path} -> {output_path or 'stdout'}")
    start_time = datetime.now(UTC)

    feed = load_feed(input_path, read_stop_times=config.fallback_to_stops)

    stop_report = ProjectionReport()
    shape_report = ProjectionReport()
    collection = build_feature_collection(feed, config, stop_report, shape_report)

    written = write_geojson(collection, output_path, indent=config.indent)

    checksum = None
    if written is not None:
        with open(written, "rb") as f:
            checksum = hashlib.sha256(f.read()).hexdigest()

    stats = {
        "stops": len(feed.stops),
        "trips": len(feed.trips),
        "stop_features": stop_report.emitted,
        "stops_skipped": stop_report.total_skipped,
        "trip_features": shape_report.emitted,
        "trips_skipped": sum(
            count
            for reason, count in shape_report.skipped.items()
            if reason != "invalid_shape_points"
        ),
        "invalid_shape_points": shape_report.skipped["invalid_shape_points"],
        "trips_without_route": shape_report.degraded["unknown_route"],
    }

    elapsed = (datetime.now(UTC) - start_time).total_seconds()
    logger.info(f"Conversion completed in {elapsed:.2f}s")

    return ConversionReport(
        tool_version=VERSION,
        created_at_iso=start_time.isoformat(),
        inputs={"gtfs_path": input_path},
        output_path=written,
        output_sha256=checksum,
        stats=stats,
    )
