from address_check.distance import DistanceChecker
from address_check.models import HOUSE_NUMBER_TOO_FAR, WARNING
from address_check.pipeline import ListSink

from helpers import Builder, M_PER_DEG_MERCATOR


def _deg(m):
    # 赤道附近，投影米 -> 度
    return m / M_PER_DEG_MERCATOR


class TestDistanceChecker:

    def setup_method(self):
        self.b = Builder()
        self.sink = ListSink()

    def _check(self, house, streets, max_distance=200.0):
        DistanceChecker(self.b.ds, max_distance).check(house, streets, self.sink)
        return self.sink.findings

    def test_house_far_from_complete_street(self):
        street = self.b.street(0.0, 0.0, _deg(100))
        house = self.b.node(_deg(250), _deg(50), {"addr:housenumber": "1"})
        [f] = self._check(house, [street])
        assert f.code == HOUSE_NUMBER_TOO_FAR
        assert f.severity == WARNING
        assert f.primitives == (house.pid, street.pid)

    def test_incomplete_street_suppresses(self):
        street = self.b.street(0.0, 0.0, _deg(100), incomplete=True)
        house = self.b.node(_deg(250), _deg(50), {"addr:housenumber": "1"})
        assert self._check(house, [street]) == []

    def test_missing_street_node_counts_as_incomplete(self):
        a = self.b.node(0.0, 0.0)
        street = self.b.way([a], {"highway": "residential"})
        street.node_ids.append("n999")
        house = self.b.node(_deg(250), 0.0, {"addr:housenumber": "1"})
        assert self._check(house, [street]) == []

    def test_within_threshold(self):
        street = self.b.street(0.0, 0.0, _deg(100))
        house = self.b.node(_deg(150), _deg(50), {"addr:housenumber": "1"})
        assert self._check(house, [street]) == []

    def test_threshold_is_configurable(self):
        street = self.b.street(0.0, 0.0, _deg(100))
        house = self.b.node(_deg(150), _deg(50), {"addr:housenumber": "1"})
        assert len(self._check(house, [street], max_distance=100.0)) == 1

    def test_one_near_segment_is_enough(self):
        far_street = self.b.street(_deg(5000), 0.0, _deg(100))
        a = self.b.node(_deg(3000), 0.0)
        b = self.b.node(_deg(10), _deg(40))
        c = self.b.node(_deg(3000), _deg(100))
        near_street = self.b.way([a, b, c], {"highway": "residential"})
        house = self.b.node(0.0, _deg(40), {"addr:housenumber": "1"})
        assert self._check(house, [far_street, near_street]) == []

    def test_finding_lists_every_street(self):
        s1 = self.b.street(_deg(1000), 0.0, _deg(100))
        s2 = self.b.street(_deg(2000), 0.0, _deg(100))
        house = self.b.node(0.0, 0.0, {"addr:housenumber": "1"})
        [f] = self._check(house, [s1, s2])
        assert f.primitives == (house.pid, s1.pid, s2.pid)

    def test_building_way_uses_centroid(self):
        street = self.b.street(0.0, 0.0, _deg(100))
        corners = [
            self.b.node(_deg(190), 0.0),
            self.b.node(_deg(190), _deg(20)),
            self.b.node(_deg(230), _deg(20)),
            self.b.node(_deg(230), 0.0),
        ]
        building = self.b.way(corners + [corners[0]], {"building": "yes", "addr:housenumber": "1"})
        # 质心约在 210 m 处
        assert len(self._check(building, [street])) == 1
        self.sink.findings.clear()
        assert self._check(building, [street], max_distance=215.0) == []

    def test_way_without_nodes_skipped(self):
        street = self.b.street(0.0, 0.0, _deg(100))
        empty = self.b.way([], {"building": "yes", "addr:housenumber": "1"})
        assert self._check(empty, [street]) == []

    def test_node_without_coordinates_skipped(self):
        street = self.b.street(0.0, 0.0, _deg(100))
        house = self.b.node(None, None, {"addr:housenumber": "1"})
        assert self._check(house, [street]) == []

    def test_relation_house_skipped(self):
        street = self.b.street(0.0, 0.0, _deg(100))
        outer = self.b.way([self.b.node(1.0, 1.0), self.b.node(1.0, 1.001)])
        house = self.b.relation([("outer", outer)], {"type": "multipolygon", "addr:housenumber": "1"})
        assert self._check(house, [street]) == []

    def test_unresolved_segment_endpoint_skipped(self):
        a = self.b.node(None, None)
        b = self.b.node(0.0, _deg(100))
        street = self.b.way([a, b], {"highway": "residential"})
        house = self.b.node(0.0, _deg(50), {"addr:housenumber": "1"})
        # 唯一的线段不可用，街道本身完整，因此报告
        assert len(self._check(house, [street])) == 1

    def test_interpolation_checked_node_by_node(self):
        street = self.b.street(0.0, 0.0, _deg(1000))
        n1 = self.b.node(_deg(20), 0.0, {"addr:housenumber": "1"})
        mid = self.b.node(_deg(20), _deg(500))
        n9 = self.b.node(_deg(900), _deg(1000), {"addr:housenumber": "9"})
        interp = self.b.way([n1, mid, n9], {"addr:interpolation": "odd"})
        [f] = self._check(interp, [street])
        assert f.primitives == (n9.pid, street.pid)

    def test_interpolation_never_uses_aggregate_centroid(self):
        # 整体质心在街道附近，但两个端点都很远
        street = self.b.street(0.0, 0.0, _deg(100))
        n1 = self.b.node(_deg(500), 0.0, {"addr:housenumber": "1"})
        n3 = self.b.node(_deg(-500), 0.0, {"addr:housenumber": "3"})
        interp = self.b.way([n1, n3], {"addr:interpolation": "odd"})
        assert [f.primitives[0] for f in self._check(interp, [street])] == [n1.pid, n3.pid]
