import pytest

from ride_map.errors import InvalidCoordinateError
from ride_map.models import BoundingExtent, Coord, Route


def test_coord_rejects_out_of_range_values():
    with pytest.raises(InvalidCoordinateError):
        Coord(91, 0)
    with pytest.raises(ValueError):
        Coord(0, -181)


def test_route_extent_covers_polyline():
    route = Route.from_polyline([Coord(1, 5), Coord(-2, 3), Coord(4, 4)])
    assert route.extent == BoundingExtent(min_lat=-2, min_lon=3, max_lat=4, max_lon=5)
    assert route.origin == Coord(1, 5)
    assert route.end == Coord(4, 4)


def test_route_needs_two_points():
    with pytest.raises(ValueError):
        Route.from_polyline([Coord(1, 1)])


def test_route_distance_defaults_to_polyline_length():
    route = Route.from_polyline([Coord(0, 0), Coord(0, 1)])
    assert route.distance_m == pytest.approx(111195, rel=1e-3)


def test_route_keeps_explicit_distance():
    route = Route.from_polyline([Coord(0, 0), Coord(0, 1)], distance_m=150000.0)
    assert route.distance_m == 150000.0
