"""
Tests for spherical geometry and AMap geometry parsing helpers.
"""

import math

import pytest

from geo_utils import (
    destination_point,
    haversine_distance,
    initial_bearing,
    is_point_in_prepared,
    parse_lnglat,
    parse_polyline,
    parse_rings,
    points_along,
    polyline_length_km,
    prepare_rings,
)

DEGREE_KM = 2 * math.pi * 6371.0088 / 360.0


class TestDistances:
    """Test cases for distance and bearing helpers."""

    def test_one_degree_of_latitude(self):
        assert haversine_distance(0, 0, 1, 0) == pytest.approx(DEGREE_KM, rel=1e-9)

    def test_bearing_east(self):
        assert initial_bearing((0, 0), (1, 0)) == pytest.approx(90.0)

    def test_destination_east(self):
        lng, lat = destination_point((0, 0), DEGREE_KM, 90.0)
        assert lng == pytest.approx(1.0, abs=1e-9)
        assert lat == pytest.approx(0.0, abs=1e-9)

    def test_polyline_length(self):
        assert polyline_length_km([(0, 0), (1, 0), (2, 0)]) == pytest.approx(2 * DEGREE_KM)


class TestPointsAlong:
    """Test cases for points_along."""

    def test_start(self):
        assert points_along([(0, 0), (2, 0)], [0]) == [(0, 0)]

    def test_middle(self):
        [(lng, lat)] = points_along([(0, 0), (2, 0)], [DEGREE_KM])
        assert lng == pytest.approx(1.0, abs=1e-9)
        assert lat == pytest.approx(0.0, abs=1e-9)

    def test_second_segment(self):
        [(lng, lat)] = points_along([(0, 0), (1, 0), (1, 1)], [DEGREE_KM * 1.5])
        assert lng == pytest.approx(1.0, abs=1e-6)
        assert lat == pytest.approx(0.5, abs=1e-6)

    def test_beyond_end_returns_last_vertex(self):
        assert points_along([(0, 0), (1, 0)], [10_000]) == [(1, 0)]

    def test_several_distances_in_one_pass(self):
        path = [(0, 0), (1, 0), (1, 1), (1, 2)]
        points = points_along(path, [0, DEGREE_KM * 0.5, DEGREE_KM * 1.5, DEGREE_KM * 2.5, 10_000])

        assert len(points) == 5
        assert points[0] == (0, 0)
        expected = [(0.5, 0.0), (1.0, 0.5), (1.0, 1.5)]
        for (lng, lat), (exp_lng, exp_lat) in zip(points[1:4], expected):
            assert lng == pytest.approx(exp_lng, abs=1e-6)
            assert lat == pytest.approx(exp_lat, abs=1e-6)
        assert points[4] == (1, 2)

    def test_repeated_distance(self):
        points = points_along([(0, 0), (2, 0)], [DEGREE_KM, DEGREE_KM])
        assert points[0] == points[1]

    def test_single_point_path(self):
        assert points_along([(3, 4)], [0, 5]) == [(3, 4), (3, 4)]


class TestParsing:
    """Test cases for "lng,lat" parsing."""

    def test_parse_lnglat(self):
        assert parse_lnglat(" 116.397 , 39.908 ") == (116.397, 39.908)

    @pytest.mark.parametrize("raw", ["北京市朝阳区", "1,2,3", "abc,1", "nan,1", "", "116.3abc,39.9", "5号楼,3单元"])
    def test_parse_lnglat_rejects(self, raw):
        assert parse_lnglat(raw) is None

    def test_parse_polyline(self):
        assert parse_polyline("116.1,39.9;116.2,39.95") == [(116.1, 39.9), (116.2, 39.95)]

    def test_parse_rings(self):
        rings = parse_rings("0,0;1,0;1,1|5,5;6,5;6,6")
        assert len(rings) == 2
        assert rings[1][0] == (5.0, 5.0)

    def test_parse_rings_empty(self):
        assert parse_rings("") == []


class TestPreparedRings:
    """Test cases for prepare_rings / is_point_in_prepared."""

    def setup_method(self):
        self.polygons = prepare_rings([[(0, 0), (1, 0), (1, 1), (0, 1)], [(5, 5), (6, 5), (6, 6), (5, 6)]])

    def test_inside_first_ring(self):
        assert is_point_in_prepared((0.5, 0.5), self.polygons)

    def test_inside_second_ring(self):
        assert is_point_in_prepared((5.5, 5.5), self.polygons)

    def test_boundary_counts_as_inside(self):
        assert is_point_in_prepared((1.0, 0.5), self.polygons)

    def test_outside(self):
        assert not is_point_in_prepared((3, 3), self.polygons)

    def test_degenerate_ring_ignored(self):
        assert prepare_rings([[(0, 0), (1, 1)]]) == []
        assert not is_point_in_prepared((0, 0), [])
