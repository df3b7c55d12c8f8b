"""
Drawing workspace: the data side of the map controller.

Keeps a FeatureIdentityStore and applies the same normalization the map
applies on load (multi-geometry expansion), polygon merging and bounds
fitting, without any rendering.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from ..utils.geojson import (
    BoundsPair,
    expand_multi_geometries,
    is_multi_polygon,
    is_polygon,
    merge_polygons,
)
from .cake import Circle, bake_layer_cake
from .feature_store import FeatureIdentityStore
from . import config

logger = logging.getLogger(__name__)


class DrawingWorkspace:
    """Features drawn on, or loaded into, one map."""

    def __init__(self, store: Optional[FeatureIdentityStore] = None):
        self.store = store if store is not None else FeatureIdentityStore()

    # ---------- Data ----------
    def get_geojson(self) -> Dict[str, Any]:
        return self.store.to_feature_collection()

    def load_geojson(self, fc: Dict[str, Any]) -> List[str]:
        """Replace the current content with ``fc``."""
        self.clear()
        ids = self.add_features(fc)
        logger.info(f"Loaded {len(ids)} features")
        return ids

    def add_features(self, fc: Dict[str, Any]) -> List[str]:
        normalized = expand_multi_geometries(fc)
        return self.store.add(normalized)

    def update_feature(self, fid: str, feature: Dict[str, Any]) -> None:
        self.store.update(fid, feature)

    def remove_feature(self, fid: str) -> None:
        self.store.remove(fid)

    def clear(self) -> None:
        self.store.clear()

    # ---------- Editing ----------
    def merge_visible_polygons(self, properties: Optional[Dict[str, Any]] = None) -> Optional[str]:
        """
        Merge every polygon feature into one feature.

        The originals are removed and the merged feature is added under a
        new id. With a single polygon nothing changes and its id is
        returned; with none, None.
        """
        polygons = [
            f for f in self.get_geojson()["features"]
            if is_polygon(f.get("geometry")) or is_multi_polygon(f.get("geometry"))
        ]
        if len(polygons) <= 1:
            return polygons[0]["id"] if polygons else None

        merged = merge_polygons(polygons, properties)
        if merged is None:
            return None
        if properties is None:
            # inherited from the first polygon, which is about to be removed
            merged["properties"].pop("id", None)

        for feature in polygons:
            self.store.remove(feature["id"])
        [new_id] = self.store.add({"type": "FeatureCollection", "features": [merged]})
        logger.info(f"Merged {len(polygons)} polygons into {new_id}")
        return new_id

    def bake_cake(self, circles: Iterable[Circle], steps: Optional[int] = None) -> List[str]:
        """Bake concentric circles and add the resulting layers."""
        fc = bake_layer_cake(circles, steps if steps is not None else config.CAKE_STEPS)
        return self.store.add(fc)

    # ---------- View ----------
    def fit_bounds(self, padding_ratio: float = 0.05) -> Optional[BoundsPair]:
        """
        Bounds of the stored data, widened on every side by ``padding_ratio``
        of the latitude/longitude span.
        """
        bounds = self.store.bounds()
        if bounds is None:
            return None
        (south, west), (north, east) = bounds
        if padding_ratio <= 0:
            return bounds
        lat_pad = (north - south) * padding_ratio
        lng_pad = (east - west) * padding_ratio
        return [[south - lat_pad, west - lng_pad], [north + lat_pad, east + lng_pad]]
