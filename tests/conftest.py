import pytest

from geodraw.models.cake import Circle


def make_feature(geometry, **properties):
    return {"type": "Feature", "properties": dict(properties), "geometry": geometry}


def square(x0, y0, size=1.0):
    """Closed counter-clockwise square ring starting at (x0, y0)."""
    return [[x0, y0], [x0 + size, y0], [x0 + size, y0 + size], [x0, y0 + size], [x0, y0]]


@pytest.fixture
def polygon_feature():
    """Fixture providing a unit-square polygon feature."""
    return make_feature({"type": "Polygon", "coordinates": [square(0, 0)]}, name="a")


@pytest.fixture
def mixed_collection():
    """Fixture providing a FeatureCollection with every geometry kind."""
    return {
        "type": "FeatureCollection",
        "features": [
            make_feature({"type": "Point", "coordinates": [1.0, 2.0]}, kind="point"),
            make_feature({"type": "MultiPoint", "coordinates": [[0, 0], [3, -1], [5, 5]]}, kind="mpoint"),
            make_feature({"type": "LineString", "coordinates": [[-2, 0], [0, 1]]}, kind="line"),
            make_feature({"type": "MultiLineString",
                          "coordinates": [[[0, 0], [1, 1]], [[2, 2], [3, 3]]]}, kind="mline"),
            make_feature({"type": "Polygon", "coordinates": [square(10, 10)]}, kind="poly"),
            make_feature({"type": "MultiPolygon",
                          "coordinates": [[square(20, 20)], [square(30, 30)], [square(40, 40)]]},
                         kind="mpoly"),
            make_feature({"type": "GeometryCollection", "geometries": [
                {"type": "Point", "coordinates": [7, 7]},
                {"type": "LineString", "coordinates": [[8, 8], [9, 9]]},
            ]}, kind="gc"),
            make_feature(None, kind="empty"),
        ],
    }


@pytest.fixture
def sample_circles():
    """Fixture providing three concentric circles, deliberately unsorted."""
    return [Circle(10.0, 20.0, 300.0), Circle(10.0, 20.0, 100.0), Circle(10.0, 20.0, 200.0)]
