"""
Id-centric in-memory store for normalized GeoJSON features.
"""
import copy
import logging
import time
import uuid
from typing import Any, Dict, Iterator, List, Optional

import geopandas as gpd

from ..utils.geojson import (
    BoundsPair,
    bbox_of_feature_collection,
    bbox_to_bounds_pair,
    feature_collection,
    normalize_id,
)

logger = logging.getLogger(__name__)

WGS84_CRS = "EPSG:4326"


def _stamp(feature: Dict[str, Any], fid: str) -> Dict[str, Any]:
    """Copy of ``feature`` with ``fid`` on both ``id`` and ``properties.id``."""
    stored = copy.deepcopy(feature)
    stored["id"] = fid
    props = stored.get("properties")
    if not isinstance(props, dict):
        props = {}
    props["id"] = fid
    stored["properties"] = props
    return stored


class FeatureIdentityStore:
    """
    Features keyed by a stable string id, kept in insertion order.

    Ids come from ``feature["id"]``, then ``properties["id"]``, else a new
    uuid4. Stored features are copies: callers' dicts are never modified.
    """

    def __init__(self) -> None:
        self._features: Dict[str, Dict[str, Any]] = {}

    # ---------- Lookup ----------
    def size(self) -> int:
        return len(self._features)

    def __len__(self) -> int:
        return len(self._features)

    def has(self, fid: str) -> bool:
        return fid in self._features

    def __contains__(self, fid: object) -> bool:
        return fid in self._features

    def get(self, fid: str) -> Optional[Dict[str, Any]]:
        return self._features.get(fid)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(list(self._features.values()))

    # ---------- CRUD Operations ----------
    def add(self, fc: Dict[str, Any]) -> List[str]:
        """
        Add every feature of a FeatureCollection.

        Returns:
            The resolved ids, in input order. A feature whose id is already
            stored replaces the earlier entry.
        """
        t0 = time.perf_counter()
        ids = []
        for feature in fc.get("features") or []:
            fid = normalize_id(feature) or str(uuid.uuid4())
            self._features[fid] = _stamp(feature, fid)
            ids.append(fid)
        elapsed_ms = (time.perf_counter() - t0) * 1000
        logger.debug(f"Added {len(ids)} features in {elapsed_ms:.1f} ms: {ids}")
        return ids

    def update(self, fid: str, feature: Dict[str, Any]) -> None:
        """Replace the feature stored under ``fid``; no-op for an unknown id."""
        if fid not in self._features:
            logger.warning(f"Cannot update feature {fid}: not in store")
            return
        self._features[fid] = _stamp(feature, fid)
        logger.debug(f"Updated feature {fid}")

    def remove(self, fid: str) -> None:
        """Remove a feature by id; no-op for an unknown id."""
        if self._features.pop(fid, None) is None:
            logger.warning(f"Cannot remove feature {fid}: not in store")
            return
        logger.debug(f"Removed feature {fid}")

    def clear(self) -> None:
        count = len(self._features)
        self._features.clear()
        logger.debug(f"Cleared {count} features")

    # ---------- Export ----------
    def to_feature_collection(self) -> Dict[str, Any]:
        """Snapshot of the stored features as a FeatureCollection."""
        return feature_collection(self._features.values())

    def bounds(self) -> Optional[BoundsPair]:
        """[[south, west], [north, east]] over the stored data, or None if empty."""
        if not self._features:
            return None
        bbox = bbox_of_feature_collection(self.to_feature_collection())
        if bbox is None:
            return None
        return bbox_to_bounds_pair(bbox)

    def to_geodataframe(self) -> gpd.GeoDataFrame:
        """Stored features as a GeoDataFrame (WGS84), one row per feature."""
        features = list(self._features.values())
        if not features:
            return gpd.GeoDataFrame({"id": []}, geometry=gpd.GeoSeries([], crs=WGS84_CRS))
        return gpd.GeoDataFrame.from_features(features, crs=WGS84_CRS)
