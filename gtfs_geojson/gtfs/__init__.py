"""GTFS models and reader."""
