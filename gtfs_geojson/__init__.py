"""GTFS to GeoJSON - Project GTFS stops and trip shapes into GeoJSON features."""

from gtfs_geojson.api import convert
from gtfs_geojson.transform.shapes import project_shapes
from gtfs_geojson.transform.stops import project_stops
from gtfs_geojson.version import VERSION

__version__ = VERSION
__all__ = ["VERSION", "convert", "project_shapes", "project_stops"]
