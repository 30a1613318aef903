"""GeoJSON FeatureCollection assembly, writing and checking."""

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

import geojson

from gtfs_geojson.gtfs.models import ValidationReport

logger = logging.getLogger(__name__)


def assemble_feature_collection(
    *feature_groups: Iterable[geojson.Feature],
) -> geojson.FeatureCollection:
    """Concatenate feature sequences into one FeatureCollection."""
    features: list[geojson.Feature] = []
    for group in feature_groups:
        features.extend(group)
    return geojson.FeatureCollection(features)


def write_geojson(
    collection: geojson.FeatureCollection,
    output_path: str | None = None,
    indent: int | None = None,
) -> str | None:
    """Write a collection to a file, or to stdout when no path is given."""
    if output_path is None:
        sys.stdout.write(geojson.dumps(collection, sort_keys=True, indent=indent))
        sys.stdout.write("\n")
        return None

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        geojson.dump(collection, f, sort_keys=True, indent=indent)

    logger.info(f"Wrote {len(collection['features'])} features to {path}")
    return str(path)


def check_geojson_file(path: str) -> ValidationReport:
    """Load a GeoJSON file and check that it is a valid FeatureCollection."""
    logger.info(f"Checking GeoJSON output: {path}")

    file_path = Path(path)
    errors: list[str] = []
    warnings: list[str] = []

    if not file_path.is_file():
        return ValidationReport(valid=False, errors=[f"File not found: {path}"])

    try:
        with open(file_path, encoding="utf-8") as f:
            collection = geojson.load(f)
    except ValueError as e:
        return ValidationReport(valid=False, errors=[f"Not valid JSON: {e}"])

    if not isinstance(collection, geojson.FeatureCollection):
        kind = collection.get("type") if isinstance(collection, dict) else type(collection).__name__
        return ValidationReport(
            valid=False,
            errors=[f"Expected a FeatureCollection, got {kind!r}"],
        )

    errors.extend(str(err) for err in collection.errors())

    stats = {"features": 0, "points": 0, "linestrings": 0}
    for feature in collection["features"]:
        stats["features"] += 1
        geometry = feature.get("geometry")
        if geometry is None:
            warnings.append(f"Feature without geometry: {feature.get('properties')}")
        elif geometry["type"] == "Point":
            stats["points"] += 1
        elif geometry["type"] == "LineString":
            stats["linestrings"] += 1

    valid = len(errors) == 0

    if valid:
        logger.info("Check passed")
    else:
        logger.error(f"Check failed with {len(errors)} errors")

    return ValidationReport(valid=valid, errors=errors, warnings=warnings, stats=stats)
