"""
Ruler options and measurements in metric or imperial units.
"""
import copy
from typing import Any, Dict

from .constants import KM_TO_MILES
from .geodesic import distance_and_bearing, magic_round
from .rings import GeoPoint

MEASUREMENT_SYSTEMS = ("metric", "imperial")

MEASUREMENT_SYSTEM_DESCRIPTIONS = {
    "metric": "Meters / Kilometers",
    "imperial": "Feet / Miles",
}

_BASE_OPTIONS: Dict[str, Any] = {
    "position": "topleft",
    "circle_marker": {"color": "red", "radius": 2},
    "line_style": {"color": "red", "dash_array": "1,6"},
    "angle_unit": {"display": "°", "decimal": 2, "factor": None, "label": "Bearing:"},
}

_LENGTH_UNITS = {
    "metric": {"display": "km", "decimal": 2, "factor": None, "label": "Distance (km):"},
    "imperial": {"display": "mi", "decimal": 2, "factor": KM_TO_MILES, "label": "Distance (mi):"},
}


def get_ruler_options(system: str = "metric") -> Dict[str, Any]:
    """Build ruler options for a measurement system ("metric" or "imperial")."""
    if system not in _LENGTH_UNITS:
        raise ValueError(f"Unknown measurement system: {system!r}")
    options = copy.deepcopy(_BASE_OPTIONS)
    options["length_unit"] = dict(_LENGTH_UNITS[system])
    return options


def measure(start: GeoPoint, end: GeoPoint, system: str = "metric") -> Dict[str, Any]:
    """
    Measure from ``start`` to ``end`` the way the map ruler displays it:
    distance in km (or miles), bearing in degrees, plus the raw meters.
    """
    unit = get_ruler_options(system)["length_unit"]
    result = distance_and_bearing(start.lat, start.lng, end.lat, end.lng)
    factor = unit["factor"] if unit["factor"] is not None else 1
    return {
        "distance": magic_round(result.meters / 1000 * factor),
        "bearing": result.bearing_degrees,
        "meters": result.meters,
        "unit": unit["display"],
    }
