"""
Public ingestion interface – re-export loaders with stable names
so the CLI and tests can import from `geodraw.ingestion`.
"""

from .data_loader import (
    as_feature_collection,
    dump_geojson,
    fetch_geojson,
    load_circles_csv,
    load_geojson,
    load_geojson_file,
    load_geojson_text,
)

__all__ = [
    "as_feature_collection", "dump_geojson", "fetch_geojson",
    "load_circles_csv", "load_geojson", "load_geojson_file", "load_geojson_text",
]
