"""
GeoJSON normalization helpers: coordinate walking, bounding boxes,
Multi*/GeometryCollection flattening and polygon merging.

Everything works on plain RFC 7946 dicts. Absence is a value here: empty or
geometry-less input yields ``None`` rather than an exception.
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

Feature = Dict[str, Any]
FeatureCollection = Dict[str, Any]
Geometry = Dict[str, Any]
BBox = List[float]          # [min_lng, min_lat, max_lng, max_lat]
BoundsPair = List[List[float]]  # [[south, west], [north, east]]

POLYGON_TYPES = ("Polygon", "MultiPolygon")


def feature_collection(features: Iterable[Feature]) -> FeatureCollection:
    return {"type": "FeatureCollection", "features": list(features)}


def normalize_id(feature: Feature) -> Optional[str]:
    """Resolve a feature id from ``feature["id"]`` then ``properties["id"]``."""
    fid = feature.get("id")
    if fid is None:
        props = feature.get("properties")
        if isinstance(props, dict):
            fid = props.get("id")
    if fid is None:
        return None
    return str(fid)


# ──────────────────────────────────────────────────────────────────────────────
#  Coordinate walking / bounding boxes
# ──────────────────────────────────────────────────────────────────────────────
def each_coord(geometry: Geometry, callback: Callable[[List[float]], None]) -> None:
    """
    Call ``callback`` for every position of ``geometry``, recursing through
    nested GeometryCollections. Unknown geometry types are skipped.
    """
    gtype = geometry.get("type")
    coords = geometry.get("coordinates") or []
    if gtype == "Point":
        callback(coords)
    elif gtype in ("MultiPoint", "LineString"):
        for c in coords:
            callback(c)
    elif gtype in ("MultiLineString", "Polygon"):
        for part in coords:
            for c in part:
                callback(c)
    elif gtype == "MultiPolygon":
        for poly in coords:
            for ring in poly:
                for c in ring:
                    callback(c)
    elif gtype == "GeometryCollection":
        for child in geometry.get("geometries") or []:
            if child:
                each_coord(child, callback)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def bbox_of_feature(feature: Feature) -> Optional[BBox]:
    """
    Bounding box [min_lng, min_lat, max_lng, max_lat] of a single feature.
    Returns None when the feature has no geometry or no numeric position.
    """
    geom = feature.get("geometry")
    if not geom:
        return None

    box = [float("inf"), float("inf"), float("-inf"), float("-inf")]
    seen = False

    def visit(coord):
        nonlocal seen
        if len(coord) < 2:
            return
        lng, lat = coord[0], coord[1]
        if not (_is_number(lng) and _is_number(lat)):
            return
        seen = True
        box[0] = min(box[0], lng)
        box[1] = min(box[1], lat)
        box[2] = max(box[2], lng)
        box[3] = max(box[3], lat)

    each_coord(geom, visit)
    return box if seen else None


def bbox_of_feature_collection(fc: FeatureCollection) -> Optional[BBox]:
    """Bounding box over every feature of ``fc``; None if none has geometry."""
    result = None
    for feature in fc.get("features") or []:
        b = bbox_of_feature(feature)
        if b is None:
            continue
        if result is None:
            result = list(b)
            continue
        result = [
            min(result[0], b[0]),
            min(result[1], b[1]),
            max(result[2], b[2]),
            max(result[3], b[3]),
        ]
    return result


def bbox_to_bounds_pair(bbox: BBox) -> BoundsPair:
    """Convert a bbox to [[south, west], [north, east]]."""
    min_lng, min_lat, max_lng, max_lat = bbox
    return [[min_lat, min_lng], [max_lat, max_lng]]


# ──────────────────────────────────────────────────────────────────────────────
#  Flattening
# ──────────────────────────────────────────────────────────────────────────────
def _derived(props: Dict[str, Any], geometry: Geometry) -> Feature:
    return {"type": "Feature", "properties": dict(props), "geometry": geometry}


def expand_multi_geometries(fc: FeatureCollection) -> FeatureCollection:
    """
    Split Multi* geometries and GeometryCollections into single-geometry
    features:

    - MultiPolygon → one Polygon feature per polygon
    - MultiLineString → one LineString feature per line
    - MultiPoint → one Point feature per point
    - GeometryCollection → one feature per child geometry (one level only)

    Properties are shallow-copied onto every derived feature. Features with
    a null geometry are dropped; other features pass through unchanged.
    """
    out: List[Feature] = []
    for f in fc.get("features") or []:
        if not isinstance(f, dict) or f.get("type") != "Feature":
            continue
        geom = f.get("geometry")
        if not geom:
            continue
        props = f.get("properties") or {}
        gtype = geom.get("type")

        if gtype == "MultiPolygon":
            out.extend(_derived(props, {"type": "Polygon", "coordinates": poly})
                       for poly in geom["coordinates"])
        elif gtype == "MultiLineString":
            out.extend(_derived(props, {"type": "LineString", "coordinates": line})
                       for line in geom["coordinates"])
        elif gtype == "MultiPoint":
            out.extend(_derived(props, {"type": "Point", "coordinates": pt})
                       for pt in geom["coordinates"])
        elif gtype == "GeometryCollection":
            out.extend(_derived(props, child) for child in geom.get("geometries") or [])
        else:
            out.append(f)

    logger.debug("expanded %d features into %d", len(fc.get("features") or []), len(out))
    return feature_collection(out)


# ──────────────────────────────────────────────────────────────────────────────
#  Polygon merging
# ──────────────────────────────────────────────────────────────────────────────
def is_polygon(geometry: Optional[Geometry]) -> bool:
    return bool(geometry) and geometry.get("type") == "Polygon"


def is_multi_polygon(geometry: Optional[Geometry]) -> bool:
    return bool(geometry) and geometry.get("type") == "MultiPolygon"


def extract_polygon_coordinates(feature: Feature) -> List[List[List[List[float]]]]:
    """
    Ring-sets (outer ring followed by holes) of a polygon feature: one for a
    Polygon, one per part for a MultiPolygon, none for anything else.
    """
    geom = feature.get("geometry")
    if is_polygon(geom):
        return [geom["coordinates"]]
    if is_multi_polygon(geom):
        return list(geom["coordinates"])
    return []


def merge_polygons(features: Iterable[Feature],
                   properties: Optional[Dict[str, Any]] = None) -> Optional[Feature]:
    """
    Gather the ring-sets of every Polygon/MultiPolygon feature into a single
    feature. Other geometry kinds are ignored.

    This juxtaposes parts; it is not a topological union, so overlapping or
    touching polygons keep their own boundaries inside the MultiPolygon.

    Args:
        features: candidate features
        properties: properties of the result; defaults to those of the first
            polygon feature

    Returns:
        A Polygon feature for a single ring-set, a MultiPolygon feature for
        several, or None when there is nothing to merge.
    """
    polygon_features = [f for f in features
                        if f and (f.get("geometry") or {}).get("type") in POLYGON_TYPES]
    ring_sets = []
    for feature in polygon_features:
        ring_sets.extend(extract_polygon_coordinates(feature))

    if not ring_sets:
        return None

    if properties is None:
        properties = polygon_features[0].get("properties") or {}

    if len(ring_sets) == 1:
        geometry = {"type": "Polygon", "coordinates": ring_sets[0]}
    else:
        geometry = {"type": "MultiPolygon", "coordinates": ring_sets}
    return _derived(properties, geometry)


def merge_polygons_from_collection(fc: FeatureCollection,
                                   properties: Optional[Dict[str, Any]] = None) -> Optional[Feature]:
    """Merge the polygon features of a collection; None for an empty one."""
    features = fc.get("features") if fc else None
    if not features:
        return None
    return merge_polygons(features, properties)
