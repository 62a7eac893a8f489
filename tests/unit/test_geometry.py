import pytest

from micoteca.common.errors import InvalidGeometry
from micoteca.common.geometry import Region, point_in_region, resolve_outer_ring, ring_contains

SQUARE = [[0, 0], [0, 10], [10, 10], [10, 0]]


def _polygon(ring):
    return {"type": "Polygon", "coordinates": [ring]}


def _feature(ring):
    return {"type": "Feature", "properties": {}, "geometry": _polygon(ring)}


def test_square_inside_and_outside():
    assert point_in_region(5, 5, _polygon(SQUARE)) is True
    assert point_in_region(15, 15, _polygon(SQUARE)) is False


def test_all_three_container_shapes_resolve_to_same_ring():
    polygon = _polygon(SQUARE)
    feature = _feature(SQUARE)
    collection = {"type": "FeatureCollection", "features": [feature]}

    expected = ((0.0, 0.0), (0.0, 10.0), (10.0, 10.0), (10.0, 0.0))
    assert resolve_outer_ring(polygon) == expected
    assert resolve_outer_ring(feature) == expected
    assert resolve_outer_ring(collection) == expected


def test_degenerate_triangle_from_site_example_is_outside():
    ring = [
        [8.694094635773297, 46.120140729708],
        [8.680504018714998, 46.03911225236175],
        [8.694094635773297, 46.120140729708],
    ]
    geojson = {"type": "FeatureCollection", "features": [_feature(ring)]}

    assert point_in_region(45.88196, 9.91806, geojson) is False
    assert point_in_region(45.882, 9.918, geojson) is False


def test_only_first_feature_of_collection_is_used():
    first = [[0, 0], [0, 1], [1, 1], [1, 0]]
    second = [[20, 20], [20, 30], [30, 30], [30, 20]]
    collection = {"type": "FeatureCollection", "features": [_feature(first), _feature(second)]}

    assert point_in_region(25, 25, collection) is False
    assert point_in_region(0.5, 0.5, collection) is True


def test_holes_are_ignored():
    outer = [[0, 0], [0, 10], [10, 10], [10, 0]]
    hole = [[4, 4], [4, 6], [6, 6], [6, 4]]
    polygon = {"type": "Polygon", "coordinates": [outer, hole]}

    assert point_in_region(5, 5, polygon) is True


def test_winding_direction_and_closing_vertex_do_not_matter():
    ccw = [[0, 0], [10, 0], [10, 10], [0, 10]]
    cw = list(reversed(ccw))
    closed = ccw + [ccw[0]]
    points = [(5, 5), (0.5, 9.5), (9.9, 0.1), (-1, 5), (5, 11), (12, 12)]

    for lat, lon in points:
        expected = point_in_region(lat, lon, _polygon(ccw))
        assert point_in_region(lat, lon, _polygon(cw)) is expected
        assert point_in_region(lat, lon, _polygon(closed)) is expected


def test_convex_polygon_interior_and_bounding_box_exterior():
    # Hexagon around (lat 45.9, lon 9.9).
    ring = [[9.8, 45.9], [9.85, 45.95], [9.95, 45.95], [10.0, 45.9], [9.95, 45.85], [9.85, 45.85]]
    region = Region.from_geojson(_polygon(ring))

    for lat, lon in [(45.9, 9.9), (45.92, 9.86), (45.88, 9.97), (45.94, 9.9)]:
        assert region.contains(lat, lon) is True
    for lat, lon in [(45.96, 9.9), (45.84, 9.9), (45.9, 9.79), (45.9, 10.01), (0, 0), (-45.9, -9.9)]:
        assert region.contains(lat, lon) is False


def test_point_in_region_is_idempotent():
    region = Region.from_geojson(_polygon(SQUARE))
    first = point_in_region(3.3, 7.7, region)
    second = point_in_region(3.3, 7.7, region)
    assert first is second is True


def test_concave_polygon_notch_is_outside():
    # U shape opening to the north.
    ring = [[0, 0], [10, 0], [10, 10], [7, 10], [7, 3], [3, 3], [3, 10], [0, 10]]
    region = Region.from_geojson(_polygon(ring))

    assert region.contains(5, 1.5) is True
    assert region.contains(8, 5) is False
    assert region.contains(8, 1.5) is True


def test_horizontal_edges_are_skipped():
    # L shape with a horizontal step edge at lat 5 between lon 5 and 10.
    ring = ((0.0, 0.0), (10.0, 0.0), (10.0, 5.0), (5.0, 5.0), (5.0, 10.0), (0.0, 10.0))

    assert ring_contains(ring, 7.0, 2.0) is True
    assert ring_contains(ring, 7.0, 7.0) is False
    assert ring_contains(ring, 2.5, 7.5) is True
    # On the latitude of a horizontal edge but left of or beyond the polygon.
    assert ring_contains(ring, 0.0, -5.0) is False
    assert ring_contains(ring, 5.0, 20.0) is False
    assert ring_contains(ring, 10.0, 20.0) is False


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "MultiPolygon", "coordinates": [[SQUARE]]},
        {"type": "Point", "coordinates": [1, 2]},
        {"coordinates": [SQUARE]},
        {"type": "FeatureCollection", "features": []},
        {"type": "FeatureCollection"},
        {"type": "Feature", "geometry": None},
        {"type": "Feature", "geometry": {"type": "LineString", "coordinates": SQUARE}},
        {"type": "Polygon", "coordinates": []},
        {"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]},
        {"type": "Polygon", "coordinates": [[[0, 0], [1, "x"], [2, 2]]]},
        {"type": "Polygon", "coordinates": [[[0, 0], [1], [2, 2]]]},
        "Polygon",
        None,
    ],
)
def test_invalid_geometry_raises_typed_error(payload):
    with pytest.raises(InvalidGeometry):
        point_in_region(0, 0, payload)


def test_region_rejects_short_ring_when_built_directly():
    with pytest.raises(InvalidGeometry):
        Region(ring=((0.0, 0.0), (1.0, 1.0)))


def test_invalid_geometry_carries_error_code():
    with pytest.raises(InvalidGeometry) as excinfo:
        Region.from_geojson({"type": "GeometryCollection"})
    assert excinfo.value.error_code == "INVALID_GEOMETRY"
