"""
Layer-cake baking: concentric circles into a core polygon plus donut rings.
"""
import logging
import uuid
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional

from ..utils.constants import CAKE_RING_GROWTH, MIN_RING_STEPS
from ..utils.geojson import feature_collection
from ..utils.rings import GeoPoint, circle_to_ring, ensure_winding
from . import config

logger = logging.getLogger(__name__)


def _first(record: Mapping[str, Any], *keys):
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


class Circle(NamedTuple):
    """A circle on the map: center (degrees) and radius (meters)."""
    lat: float
    lng: float
    radius: float

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Circle":
        """
        Build a circle from a dict. Accepts ``lat``/``latitude``,
        ``lng``/``lon``/``longitude`` and ``radius``/``radius_m``/``radius_meters``,
        or a nested ``center`` mapping.

        Raises:
            ValueError: if a field is missing or not numeric
        """
        center = record.get("center")
        source = center if isinstance(center, Mapping) else record
        lat = _first(source, "lat", "latitude")
        lng = _first(source, "lng", "lon", "longitude")
        radius = _first(record, "radius", "radius_m", "radius_meters")
        if lat is None or lng is None or radius is None:
            raise ValueError(f"Circle record missing lat/lng/radius: {record}")
        try:
            return cls(float(lat), float(lng), float(radius))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Circle record is not numeric: {record}") from e


def _meta(circle: Circle) -> Dict[str, float]:
    return {"lat": circle.lat, "lng": circle.lng, "radius": circle.radius}


def _core_feature(circle: Circle, steps: int) -> Dict[str, Any]:
    outer = ensure_winding(circle_to_ring(circle.center, circle.radius, steps), clockwise=False)
    return {
        "type": "Feature",
        "properties": {
            "id": str(uuid.uuid4()),
            "layer_index": 0,
            "radius_outer": circle.radius,
            "type": "core",
            "_meta": _meta(circle),
        },
        "geometry": {"type": "Polygon", "coordinates": [outer]},
    }


def _ring_feature(circle: Circle, inner_radius: float, layer_index: int, steps: int) -> Dict[str, Any]:
    outer = ensure_winding(circle_to_ring(circle.center, circle.radius, steps), clockwise=False)
    hole = ensure_winding(circle_to_ring(circle.center, inner_radius, steps), clockwise=True)
    return {
        "type": "Feature",
        "properties": {
            "id": str(uuid.uuid4()),
            "layer_index": layer_index,
            "radius_outer": circle.radius,
            "type": "ring",
            "_meta": _meta(circle),
        },
        "geometry": {"type": "Polygon", "coordinates": [outer, hole]},
    }


def bake_layer_cake(circles: Iterable[Circle], steps: int = 64) -> Dict[str, Any]:
    """
    Bake concentric circles into polygon features, smallest first.

    The smallest circle becomes the "core" (one counter-clockwise ring).
    Every larger circle becomes a "ring": its own circle as the CCW outer
    ring and the previous circle's radius as a clockwise hole. ``_meta``
    keeps each source center/radius so the cake can be re-edited later.

    Args:
        circles: Circle values (or dicts accepted by Circle.from_record)
        steps: vertices per ring, at least 4

    Returns:
        FeatureCollection ordered by ascending radius / layer_index
    """
    if steps < MIN_RING_STEPS:
        raise ValueError(f"steps must be >= {MIN_RING_STEPS}")
    circles = [c if isinstance(c, Circle) else Circle.from_record(c) for c in circles]
    ordered = sorted(circles, key=lambda c: c.radius)

    features: List[Dict[str, Any]] = []
    for index, circle in enumerate(ordered):
        if index == 0:
            features.append(_core_feature(circle, steps))
        else:
            features.append(_ring_feature(circle, ordered[index - 1].radius, index, steps))

    logger.debug(f"Baked {len(features)} cake layers with {steps} steps")
    return feature_collection(features)


class LayerCake:
    """
    Concentric circles being edited into a layer cake. All layers share one
    center; new rings grow from the largest one.
    """

    def __init__(self, initial: Circle, max_layers: Optional[int] = None):
        self.max_layers = max_layers if max_layers is not None else config.MAX_CAKE_LAYERS
        self.circles: List[Circle] = [initial]

    def __len__(self) -> int:
        return len(self.circles)

    def largest(self) -> Optional[Circle]:
        if not self.circles:
            return None
        return max(self.circles, key=lambda c: c.radius)

    def add_ring(self) -> Optional[Circle]:
        """Add a circle 1.5x the largest radius; None once the layer limit is hit."""
        if len(self.circles) >= self.max_layers:
            logger.info(f"Layer cake already has {len(self.circles)} layers, not adding")
            return None
        largest = self.largest()
        if largest is None:
            return None
        circle = largest._replace(radius=largest.radius * CAKE_RING_GROWTH)
        self.circles.append(circle)
        return circle

    def move_center(self, lat: float, lng: float) -> None:
        """Re-center every layer on (lat, lng)."""
        self.circles = [c._replace(lat=lat, lng=lng) for c in self.circles]

    def bake(self, steps: Optional[int] = None) -> Dict[str, Any]:
        return bake_layer_cake(self.circles, steps if steps is not None else config.CAKE_STEPS)
