"""
Destination-point projection and closed-ring helpers for circle polygons.

Rings are lists of ``[lng, lat]`` positions (GeoJSON order). Winding is read
from the planar shoelace area over those pairs: positive means
counter-clockwise. This is only used to decide orientation, never to measure
area.
"""
from typing import List, NamedTuple, Sequence

import numpy as np

from .constants import EARTH_RADIUS_METERS, MIN_RING_STEPS

Position = List[float]
Ring = List[Position]


class GeoPoint(NamedTuple):
    lat: float
    lng: float


def _project(lat, lng, distance_meters, bearing_degrees):
    """
    Great-circle destination on the authalic sphere. Works on scalars or
    NumPy arrays (the bearings of a whole ring at once).
    """
    angular = distance_meters / EARTH_RADIUS_METERS
    theta = np.radians(bearing_degrees)
    phi1 = np.radians(lat)
    lam1 = np.radians(lng)

    sin_phi1, cos_phi1 = np.sin(phi1), np.cos(phi1)
    sin_d, cos_d = np.sin(angular), np.cos(angular)

    sin_phi2 = sin_phi1 * cos_d + cos_phi1 * sin_d * np.cos(theta)
    phi2 = np.arcsin(sin_phi2)
    lam2 = lam1 + np.arctan2(np.sin(theta) * sin_d * cos_phi1, cos_d - sin_phi1 * sin_phi2)
    return np.degrees(phi2), np.degrees(lam2)


def destination_point(center: GeoPoint, distance_meters: float, bearing_degrees: float) -> GeoPoint:
    """
    Move from ``center`` by ``distance_meters`` along ``bearing_degrees``.
    The result longitude is not wrapped into [-180, 180].
    """
    lat, lng = _project(center.lat, center.lng, distance_meters, bearing_degrees)
    return GeoPoint(float(lat), float(lng))


def ensure_closed_ring(coords: Sequence[Position]) -> Ring:
    """Return the ring with its first vertex repeated at the end if missing."""
    ring = [list(c) for c in coords]
    if not ring:
        return ring
    first, last = ring[0], ring[-1]
    if first[0] == last[0] and first[1] == last[1]:
        return ring
    return ring + [list(first)]


def signed_ring_area(coords: Sequence[Position]) -> float:
    """Planar shoelace area over (lng, lat) pairs; negative for clockwise rings."""
    if len(coords) < 2:
        return 0.0
    pts = np.asarray([c[:2] for c in coords], dtype=float)
    x, y = pts[:, 0], pts[:, 1]
    return float(np.sum(x[:-1] * y[1:] - x[1:] * y[:-1]) / 2)


def is_clockwise(coords: Sequence[Position]) -> bool:
    return signed_ring_area(coords) < 0


def ensure_winding(coords: Sequence[Position], clockwise: bool) -> Ring:
    """
    Close the ring and reverse it if its winding does not match the
    requested one. Idempotent; the input is left untouched.
    """
    closed = ensure_closed_ring(coords)
    if is_clockwise(closed) == clockwise:
        return closed
    return ensure_closed_ring(closed[::-1])


def circle_to_ring(center: GeoPoint, radius_meters: float, steps: int) -> Ring:
    """
    Approximate a circle with ``steps`` vertices at equal bearing increments
    of 360/steps, starting due North, closed by repeating the first vertex.

    Raises:
        ValueError: if steps is below 4
    """
    if steps < MIN_RING_STEPS:
        raise ValueError(f"steps must be >= {MIN_RING_STEPS}")
    bearings = np.arange(steps) / steps * 360
    lats, lngs = _project(center.lat, center.lng, radius_meters, bearings)
    pts = np.column_stack((lngs, lats)).tolist()
    # appended unconditionally: a zero radius still yields steps + 1 vertices
    return pts + [list(pts[0])]
