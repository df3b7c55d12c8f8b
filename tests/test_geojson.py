import pytest

from conftest import make_feature, square
from geodraw.utils.geojson import (
    bbox_of_feature,
    bbox_of_feature_collection,
    bbox_to_bounds_pair,
    each_coord,
    expand_multi_geometries,
    extract_polygon_coordinates,
    merge_polygons,
    merge_polygons_from_collection,
    normalize_id,
)


# ──────────────────────────────────────────────────────────────────────────────
#  Coordinate walking / bbox
# ──────────────────────────────────────────────────────────────────────────────
def test_each_coord_recurses_into_nested_collections():
    geometry = {"type": "GeometryCollection", "geometries": [
        {"type": "Point", "coordinates": [0, 0]},
        {"type": "GeometryCollection", "geometries": [
            {"type": "LineString", "coordinates": [[1, 1], [2, 2]]},
            {"type": "GeometryCollection", "geometries": [
                {"type": "Polygon", "coordinates": [square(5, 5)]},
            ]},
        ]},
    ]}
    seen = []
    each_coord(geometry, seen.append)
    assert len(seen) == 1 + 2 + 5
    assert seen[-1] == [5, 5]


def test_each_coord_ignores_unknown_types():
    seen = []
    each_coord({"type": "Circle", "coordinates": [0, 0]}, seen.append)
    assert seen == []


@pytest.mark.parametrize("geometry, expected", [
    ({"type": "Point", "coordinates": [1, 2]}, [1, 2, 1, 2]),
    ({"type": "MultiPoint", "coordinates": [[0, 0], [3, -1]]}, [0, -1, 3, 0]),
    ({"type": "LineString", "coordinates": [[-2, 0], [0, 1]]}, [-2, 0, 0, 1]),
    ({"type": "MultiLineString", "coordinates": [[[0, 0], [1, 1]], [[2, 2], [3, 3]]]}, [0, 0, 3, 3]),
    ({"type": "Polygon", "coordinates": [square(10, 10)]}, [10, 10, 11, 11]),
    ({"type": "MultiPolygon", "coordinates": [[square(20, 20)], [square(-5, 30)]]}, [-5, 20, 21, 31]),
])
def test_bbox_of_feature_each_geometry_kind(geometry, expected):
    assert bbox_of_feature(make_feature(geometry)) == expected


def test_bbox_of_feature_nested_geometry_collection():
    geometry = {"type": "GeometryCollection", "geometries": [
        {"type": "Point", "coordinates": [7, 7]},
        {"type": "GeometryCollection", "geometries": [
            {"type": "Point", "coordinates": [-3, 12]},
        ]},
    ]}
    assert bbox_of_feature(make_feature(geometry)) == [-3, 7, 7, 12]


def test_bbox_of_feature_without_coordinates():
    assert bbox_of_feature(make_feature(None)) is None
    assert bbox_of_feature(make_feature({"type": "GeometryCollection", "geometries": []})) is None
    assert bbox_of_feature(make_feature({"type": "Point", "coordinates": []})) is None
    assert bbox_of_feature(make_feature({"type": "Point", "coordinates": ["a", "b"]})) is None


def test_bbox_of_feature_collection(mixed_collection):
    assert bbox_of_feature_collection(mixed_collection) == [-2, -1, 41, 41]


def test_bbox_of_empty_feature_collection():
    assert bbox_of_feature_collection({"type": "FeatureCollection", "features": []}) is None
    only_empty = {"type": "FeatureCollection", "features": [make_feature(None)]}
    assert bbox_of_feature_collection(only_empty) is None


def test_bbox_to_bounds_pair():
    assert bbox_to_bounds_pair([1, 2, 3, 4]) == [[2, 1], [4, 3]]


# ──────────────────────────────────────────────────────────────────────────────
#  Flattening
# ──────────────────────────────────────────────────────────────────────────────
def test_expand_multi_geometries_counts(mixed_collection):
    """Multi* parts and collection children each become a feature; null geometry drops."""
    out = expand_multi_geometries(mixed_collection)
    # point 1 + mpoint 3 + line 1 + mline 2 + poly 1 + mpoly 3 + gc 2 + empty 0
    assert len(out["features"]) == 13
    kinds = [f["properties"]["kind"] for f in out["features"]]
    assert kinds.count("mpoly") == 3
    assert kinds.count("empty") == 0


def test_expand_multi_geometries_types(mixed_collection):
    out = expand_multi_geometries(mixed_collection)
    types = {f["geometry"]["type"] for f in out["features"]}
    assert types == {"Point", "LineString", "Polygon"}


def test_expand_copies_properties():
    source = make_feature({"type": "MultiPoint", "coordinates": [[0, 0], [1, 1]]}, name="x")
    out = expand_multi_geometries({"type": "FeatureCollection", "features": [source]})
    first, second = out["features"]
    assert first["properties"] == {"name": "x"}
    assert first["properties"] is not second["properties"]
    assert first["properties"] is not source["properties"]


def test_expand_passes_single_geometries_through(polygon_feature):
    out = expand_multi_geometries({"type": "FeatureCollection", "features": [polygon_feature]})
    assert out["features"] == [polygon_feature]


def test_expand_flattens_one_collection_level_only():
    nested = {"type": "GeometryCollection", "geometries": [
        {"type": "Point", "coordinates": [0, 0]},
        {"type": "GeometryCollection", "geometries": [
            {"type": "Point", "coordinates": [1, 1]},
            {"type": "Point", "coordinates": [2, 2]},
        ]},
    ]}
    out = expand_multi_geometries({"type": "FeatureCollection", "features": [make_feature(nested)]})
    assert [f["geometry"]["type"] for f in out["features"]] == ["Point", "GeometryCollection"]
    # the coordinate walk still sees the deeper points
    assert bbox_of_feature(out["features"][1]) == [1, 1, 2, 2]


def test_expand_skips_non_features():
    fc = {"type": "FeatureCollection", "features": [None, {"type": "Nope"}, make_feature(None)]}
    assert expand_multi_geometries(fc)["features"] == []


# ──────────────────────────────────────────────────────────────────────────────
#  Merging
# ──────────────────────────────────────────────────────────────────────────────
def test_merge_single_polygon(polygon_feature):
    merged = merge_polygons([polygon_feature])
    assert merged["geometry"]["type"] == "Polygon"
    assert merged["geometry"]["coordinates"] == polygon_feature["geometry"]["coordinates"]
    assert merged["properties"] == {"name": "a"}


def test_merge_two_polygons_juxtaposes_parts():
    """Overlapping polygons are not dissolved, only gathered."""
    p1 = make_feature({"type": "Polygon", "coordinates": [square(0, 0, 2)]}, name="p1")
    p2 = make_feature({"type": "Polygon", "coordinates": [square(1, 1, 2)]}, name="p2")
    merged = merge_polygons([p1, p2])
    assert merged["geometry"]["type"] == "MultiPolygon"
    assert merged["geometry"]["coordinates"] == [[square(0, 0, 2)], [square(1, 1, 2)]]
    assert merged["properties"] == {"name": "p1"}


def test_merge_keeps_holes_and_multipolygon_parts():
    donut = make_feature({"type": "Polygon", "coordinates": [square(0, 0, 10), square(2, 2, 1)]})
    multi = make_feature({"type": "MultiPolygon", "coordinates": [[square(20, 20)], [square(30, 30)]]})
    merged = merge_polygons([donut, multi])
    parts = merged["geometry"]["coordinates"]
    assert len(parts) == 3
    assert len(parts[0]) == 2


def test_merge_ignores_non_polygons(polygon_feature):
    point = make_feature({"type": "Point", "coordinates": [0, 0]}, name="pt")
    merged = merge_polygons([point, polygon_feature])
    assert merged["geometry"]["type"] == "Polygon"
    assert merged["properties"] == {"name": "a"}


def test_merge_explicit_properties(polygon_feature):
    merged = merge_polygons([polygon_feature, polygon_feature], {"name": "merged"})
    assert merged["properties"] == {"name": "merged"}


def test_merge_nothing_returns_none():
    assert merge_polygons([]) is None
    assert merge_polygons([make_feature({"type": "Point", "coordinates": [0, 0]})]) is None
    assert merge_polygons_from_collection({"type": "FeatureCollection", "features": []}) is None


def test_merge_from_collection(mixed_collection):
    merged = merge_polygons_from_collection(mixed_collection)
    # one Polygon plus the three MultiPolygon parts
    assert merged["geometry"]["type"] == "MultiPolygon"
    assert len(merged["geometry"]["coordinates"]) == 4
    assert merged["properties"] == {"kind": "poly"}


def test_extract_polygon_coordinates(polygon_feature):
    assert extract_polygon_coordinates(polygon_feature) == [[square(0, 0)]]
    assert extract_polygon_coordinates(make_feature({"type": "Point", "coordinates": [0, 0]})) == []
    assert extract_polygon_coordinates(make_feature(None)) == []


def test_normalize_id():
    assert normalize_id({"type": "Feature", "id": 7, "properties": {"id": "x"}}) == "7"
    assert normalize_id({"type": "Feature", "properties": {"id": "x"}}) == "x"
    assert normalize_id({"type": "Feature", "properties": None}) is None
