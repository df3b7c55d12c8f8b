"""
Ellipsoidal distance and initial bearing between two geographic points.

Vincenty's inverse solution on the WGS84 ellipsoid is tried first. Nearly
antipodal pairs can keep it from converging; those fall back to a single,
non-iterative pass over the same series (tagged "karney").
"""
import math
from typing import NamedTuple

from .constants import (
    MAGIC_SCALE,
    VINCENTY_MAX_ITERATIONS,
    VINCENTY_TOLERANCE,
    WGS84_A,
    WGS84_B,
    WGS84_F,
)

DEG_TO_RAD = math.pi / 180
RAD_TO_DEG = 180 / math.pi

# Second eccentricity squared, shared by both solutions
_EP2 = (WGS84_A ** 2 - WGS84_B ** 2) / WGS84_B ** 2


class DistanceBearing(NamedTuple):
    meters: float
    bearing_degrees: float
    algorithm: str
    iterations: int


class _Inverse(NamedTuple):
    distance_meters: float
    bearing_rad: float
    iterations: int
    converged: bool


def magic_round(value: float) -> float:
    """
    Round through a fixed 1e-9 integer scale to drop platform float jitter.
    NaN and infinities are returned unchanged.
    """
    scaled = value * MAGIC_SCALE
    if not math.isfinite(scaled):
        return value
    # half-up, not banker's rounding
    return math.floor(scaled + 0.5) / MAGIC_SCALE


def _to_radians(degrees: float) -> float:
    # math.sin/tan raise on infinities; NaN keeps the result NaN instead
    if not math.isfinite(degrees):
        return math.nan
    return magic_round(degrees) * DEG_TO_RAD


def normalize_bearing(rad: float) -> float:
    """Convert a bearing in radians to degrees in [0, 360)."""
    deg = (rad * RAD_TO_DEG) % 360
    # a tiny negative angle can round up to exactly 360
    if deg >= 360:
        deg = 0.0
    return deg


def _reduced(lat1: float, lat2: float):
    u1 = math.atan((1 - WGS84_F) * math.tan(_to_radians(lat1)))
    u2 = math.atan((1 - WGS84_F) * math.tan(_to_radians(lat2)))
    return math.sin(u1), math.cos(u1), math.sin(u2), math.cos(u2)


def _ellipsoid_distance(sigma: float, sin_sigma: float, cos_sigma: float,
                        cos_sq_alpha: float, cos_2sigma_m: float) -> float:
    u_sq = _EP2 * cos_sq_alpha
    A = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    B = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    delta_sigma = B * sin_sigma * (
        cos_2sigma_m + B / 4 * (
            cos_sigma * (-1 + 2 * cos_2sigma_m ** 2)
            - B / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma ** 2) * (-3 + 4 * cos_2sigma_m ** 2)
        )
    )
    return WGS84_B * A * (sigma - delta_sigma)


def vincenty_inverse(lat1: float, lon1: float, lat2: float, lon2: float) -> _Inverse:
    """
    Vincenty's iterative inverse solution.

    Iterates the longitude correction until it moves by no more than 1e-12
    rad or VINCENTY_MAX_ITERATIONS updates have been made. Coincident points
    short-circuit to a zero distance as soon as sin(sigma) is exactly 0.
    """
    sin_u1, cos_u1, sin_u2, cos_u2 = _reduced(lat1, lat2)
    L = _to_radians(lon2 - lon1)

    lam = L
    iterations = 0
    converged = False
    sin_sigma = cos_sigma = sigma = 0.0
    cos_sq_alpha = cos_2sigma_m = 0.0

    while iterations < VINCENTY_MAX_ITERATIONS:
        sin_lam = math.sin(lam)
        cos_lam = math.cos(lam)
        sin_sigma = math.sqrt(
            (cos_u2 * sin_lam) ** 2
            + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam) ** 2
        )
        if sin_sigma == 0:
            return _Inverse(0.0, 0.0, iterations, True)

        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = math.atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos_sq_alpha = 1 - sin_alpha ** 2
        # equatorial line: cos_sq_alpha == 0
        cos_2sigma_m = 0.0 if cos_sq_alpha == 0 else cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha
        C = WGS84_F / 16 * cos_sq_alpha * (4 + WGS84_F * (4 - 3 * cos_sq_alpha))

        lam_prev = lam
        lam = L + (1 - C) * WGS84_F * sin_alpha * (
            sigma + C * sin_sigma * (cos_2sigma_m + C * cos_sigma * (-1 + 2 * cos_2sigma_m ** 2))
        )
        iterations += 1

        if abs(lam - lam_prev) <= VINCENTY_TOLERANCE:
            converged = True
            break

    if not converged:
        return _Inverse(math.nan, 0.0, iterations, False)

    distance = _ellipsoid_distance(sigma, sin_sigma, cos_sigma, cos_sq_alpha, cos_2sigma_m)
    bearing = math.atan2(
        cos_u2 * math.sin(lam),
        cos_u1 * sin_u2 - sin_u1 * cos_u2 * math.cos(lam),
    )
    return _Inverse(distance, bearing, iterations, True)


def single_pass_inverse(lat1: float, lon1: float, lat2: float, lon2: float) -> _Inverse:
    """
    Non-iterative approximation: the Vincenty series evaluated once with
    lambda = L. Used when the iterative solution fails to converge.
    """
    sin_u1, cos_u1, sin_u2, cos_u2 = _reduced(lat1, lat2)
    L = _to_radians(lon2 - lon1)
    sin_L, cos_L = math.sin(L), math.cos(L)

    sin_sigma = math.sqrt(
        (cos_u2 * sin_L) ** 2 + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_L) ** 2
    )
    cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_L
    sigma = math.atan2(sin_sigma, cos_sigma)
    if sigma == 0:
        return _Inverse(0.0, 0.0, 0, True)

    sin_alpha = cos_u1 * cos_u2 * sin_L / math.sin(sigma)
    cos_sq_alpha = 1 - sin_alpha ** 2
    cos_2sigma_m = 0.0 if cos_sq_alpha == 0 else cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha

    distance = _ellipsoid_distance(sigma, sin_sigma, cos_sigma, cos_sq_alpha, cos_2sigma_m)
    bearing = math.atan2(cos_u2 * sin_L, cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_L)
    return _Inverse(distance, bearing, 0, True)


def distance_and_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> DistanceBearing:
    """
    Calculate the ellipsoidal distance (meters) and initial bearing (degrees
    from North, clockwise, in [0, 360)) from (lat1, lon1) to (lat2, lon2).

    Never raises: NaN input produces NaN output. ``iterations`` always
    reports how far the Vincenty attempt got, even when the fallback
    produced the answer.
    """
    vincenty = vincenty_inverse(lat1, lon1, lat2, lon2)
    if vincenty.converged:
        return DistanceBearing(
            meters=magic_round(vincenty.distance_meters),
            bearing_degrees=normalize_bearing(vincenty.bearing_rad),
            algorithm="vincenty",
            iterations=vincenty.iterations,
        )

    fallback = single_pass_inverse(lat1, lon1, lat2, lon2)
    return DistanceBearing(
        meters=magic_round(fallback.distance_meters),
        bearing_degrees=normalize_bearing(fallback.bearing_rad),
        algorithm="karney",
        iterations=vincenty.iterations,
    )
