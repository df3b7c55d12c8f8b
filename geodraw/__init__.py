"""
Geodesic and computational-geometry core of the map-drawing widget.
"""

from .models.cake import Circle, LayerCake, bake_layer_cake
from .models.feature_store import FeatureIdentityStore
from .models.workspace import DrawingWorkspace
from .utils.geodesic import DistanceBearing, distance_and_bearing
from .utils.geojson import (
    bbox_of_feature,
    bbox_of_feature_collection,
    bbox_to_bounds_pair,
    expand_multi_geometries,
    merge_polygons,
)
from .utils.rings import GeoPoint, circle_to_ring, destination_point, ensure_winding

__version__ = "0.1"

__all__ = [
    "Circle", "LayerCake", "bake_layer_cake",
    "FeatureIdentityStore", "DrawingWorkspace",
    "DistanceBearing", "distance_and_bearing",
    "bbox_of_feature", "bbox_of_feature_collection", "bbox_to_bounds_pair",
    "expand_multi_geometries", "merge_polygons",
    "GeoPoint", "circle_to_ring", "destination_point", "ensure_winding",
]
