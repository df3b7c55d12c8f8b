"""Geodesic math, ring construction and GeoJSON helpers."""
