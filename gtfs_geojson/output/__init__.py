"""GeoJSON output."""
