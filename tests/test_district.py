"""
Tests for province boundary loading and route province detection.
"""

import threading
import time

import pytest

from api.amap import AmapError
from services.district import (
    ProvinceInfo,
    fetch_province_boundary,
    fetch_province_list,
    preload_all,
    provinces_along_route,
    provinces_to_feature_collection,
)
from services.geo import group_by_province


def _ring(x0, x1, y0=0.0, y1=1.0):
    return f"{x0},{y0};{x1},{y0};{x1},{y1};{x0},{y1}"


COUNTRY_PAYLOAD = {
    "status": "1",
    "districts": [{
        "name": "中华人民共和国",
        "adcode": "100000",
        "districts": [
            {"name": "A省", "adcode": 110000, "center": "0.5,0.5"},
            {"name": "B省", "adcode": "120000", "center": "1.5,0.5"},
            {"name": "C省", "adcode": "130000", "center": "10.5,0.5"},
        ],
    }],
}

BOUNDARIES = {
    "110000": _ring(0, 1),
    "120000": _ring(1, 2),
    "130000": _ring(10, 11) + "|" + _ring(20, 21),
}


class FakeDistrictSearch:
    def __init__(self, amap, **options):
        self.amap = amap
        self.options = options

    def search(self, keywords):
        return self.amap.answer(keywords, self.options)


class FakeAmap:
    """Stand-in for AmapClient that answers district searches from memory."""

    def __init__(self, delay=0.0, failing=()):
        self.delay = delay
        self.failing = set(failing)
        self.searches = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def district_search(self, **options):
        return FakeDistrictSearch(self, **options)

    def answer(self, keywords, options):
        with self._lock:
            self.searches.append((keywords, options))
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if keywords in self.failing:
                raise AmapError("status", "INVALID_USER_KEY")
            if keywords == "中国":
                return COUNTRY_PAYLOAD
            if keywords in BOUNDARIES:
                return {"status": "1", "districts": [{"adcode": keywords, "polyline": BOUNDARIES[keywords]}]}
            return {"status": "1", "districts": []}
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def provinces():
    return fetch_province_list(FakeAmap())


class TestProvinceList:
    """Test cases for fetch_province_list / fetch_province_boundary."""

    def test_fetch_province_list(self):
        amap = FakeAmap()
        result = fetch_province_list(amap)

        assert [p.name for p in result] == ["A省", "B省", "C省"]
        assert result[0].adcode == "110000"
        assert result[0].center == (0.5, 0.5)
        assert result[0].rings is None
        assert amap.searches[0][1] == {"level": "country", "subdistrict": 1, "extensions": "base"}

    def test_fetch_province_boundary(self):
        amap = FakeAmap()
        rings = fetch_province_boundary(amap, "130000")

        assert len(rings) == 2
        assert rings[0][0] == (10.0, 0.0)
        assert amap.searches[0][1]["extensions"] == "all"

    def test_unknown_adcode_has_no_boundary(self):
        assert fetch_province_boundary(FakeAmap(), "999999") == []

    def test_vendor_error_propagates(self):
        with pytest.raises(AmapError):
            fetch_province_list(FakeAmap(failing={"中国"}))


class TestPreloadAll:
    """Test cases for bounded boundary preloading."""

    def test_returns_rings_by_adcode(self, provinces):
        rings_map = preload_all(FakeAmap(), provinces, limit=6)
        assert set(rings_map) == {"110000", "120000", "130000"}
        assert len(rings_map["130000"]) == 2

    def test_concurrency_is_bounded(self):
        many = [ProvinceInfo(name=f"P{i}", adcode=str(i), center=None) for i in range(12)]
        amap = FakeAmap(delay=0.02)
        rings_map = preload_all(amap, many, limit=3)

        assert len(rings_map) == 12
        assert len(amap.searches) == 12
        assert 1 <= amap.max_active <= 3

    def test_empty_list(self):
        amap = FakeAmap()
        assert preload_all(amap, [], limit=6) == {}
        assert amap.searches == []

    def test_any_failure_fails_the_whole_call(self, provinces):
        with pytest.raises(AmapError):
            preload_all(FakeAmap(failing={"120000"}), provinces, limit=2)


class TestProvincesAlongRoute:
    """Test cases for provinces_along_route."""

    def test_hits_in_first_seen_order(self, provinces):
        path = [(1.8, 0.5), (1.2, 0.5), (0.6, 0.5), (0.2, 0.5)]
        hit = provinces_along_route(FakeAmap(), path, provinces)

        assert [p.name for p in hit] == ["B省", "A省"]
        assert hit[0].rings == [[(1.0, 0.0), (2.0, 0.0), (2.0, 1.0), (1.0, 1.0)]]

    def test_original_province_objects_untouched(self, provinces):
        provinces_along_route(FakeAmap(), [(0.5, 0.5), (0.6, 0.5)], provinces)
        assert all(p.rings is None for p in provinces)

    def test_second_ring_counts(self, provinces):
        hit = provinces_along_route(FakeAmap(), [(20.5, 0.5), (20.6, 0.5)], provinces)
        assert [p.adcode for p in hit] == ["130000"]

    def test_long_paths_are_subsampled(self, provinces):
        # 1000 puntos en A salvo el último en B: con paso 5 no se muestrea el último
        path = [(0.5, 0.5)] * 999 + [(1.5, 0.5)]
        hit = provinces_along_route(FakeAmap(), path, provinces)
        assert [p.name for p in hit] == ["A省"]

    def test_no_province_hit(self, provinces):
        assert provinces_along_route(FakeAmap(), [(50.0, 50.0)], provinces) == []


class TestFeatureCollection:
    """Test cases for provinces_to_feature_collection."""

    def test_feeds_group_by_province(self, provinces):
        hit = provinces_along_route(FakeAmap(), [(0.2, 0.5), (1.8, 0.5)], provinces)
        fc = provinces_to_feature_collection(hit)

        assert [f["properties"]["adcode"] for f in fc["features"]] == ["110000", "120000"]
        assert fc["features"][0]["geometry"]["type"] == "MultiPolygon"

        segments = group_by_province(fc, [(0.1, 0.5), (1.9, 0.5)], step_meters=10000)
        assert [s.province for s in segments] == ["A省", "B省"]

    def test_provinces_without_rings_skipped(self):
        fc = provinces_to_feature_collection([ProvinceInfo(name="X", adcode="1", center=None)])
        assert fc == {"type": "FeatureCollection", "features": []}
