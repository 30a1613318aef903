"""Projection of GTFS records into GeoJSON features."""
