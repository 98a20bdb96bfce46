import pytest

from address_check.models import Primitive, NODE, WARNING, OTHER, DUPLICATE_HOUSE_NUMBER
from address_check.scoring import DuplicateClassifier

from helpers import Builder, address, M_PER_DEG_LAT


def _prim(**extra):
    return Primitive("n1", NODE, address("1", **extra))


class TestDecisionTable:

    def setup_method(self):
        self.c = DuplicateClassifier()

    @pytest.mark.parametrize(
        "p_extra, q_extra, distance, expected",
        [
            ({"city": "A"}, {"city": "A"}, 5000.0, WARNING),
            ({"city": "A", "postcode": "1"}, {"city": "A"}, 5000.0, WARNING),
            ({"city": "A", "postcode": "1"}, {"city": "A", "postcode": "1"}, 5000.0, WARNING),
            ({"city": "A", "postcode": "1"}, {"city": "A", "postcode": "2"}, 5.0, OTHER),
            ({"city": "A"}, {"city": "B"}, 50.0, OTHER),
            ({"city": "A"}, {"city": "B"}, 200.0, None),
            ({"city": "A"}, {}, 5000.0, OTHER),
            ({"postcode": "1"}, {"postcode": "1"}, 5000.0, WARNING),
            ({"city": "A", "postcode": "1"}, {"postcode": "1"}, 5000.0, WARNING),
            ({"postcode": "1"}, {"postcode": "2"}, 199.9, WARNING),
            ({}, {}, 10.0, WARNING),
            ({}, {}, 200.0, OTHER),
            ({}, {"postcode": "1"}, 1000.0, OTHER),
            ({}, {}, None, OTHER),
        ],
    )
    def test_classify(self, p_extra, q_extra, distance, expected):
        p, q = _prim(**p_extra), _prim(**q_extra)
        assert self.c.classify(p, q, distance) == expected
        # 与比较顺序无关
        assert self.c.classify(q, p, distance) == expected

    def test_near_threshold_configurable(self):
        c = DuplicateClassifier(near_distance=50.0)
        assert c.classify(_prim(), _prim(), 100.0) == OTHER


class TestDuplicateFinding:

    def setup_method(self):
        self.b = Builder()
        self.c = DuplicateClassifier()

    def test_message_has_key_and_floored_distance(self):
        p = self.b.node(0.0, 0.0, address("12"))
        q = self.b.node(10.7 / M_PER_DEG_LAT, 0.0, address("12"))
        f = self.c.finding(self.b.ds, "MAINST 12", p, q)
        assert f.code == DUPLICATE_HOUSE_NUMBER
        assert f.severity == WARNING
        assert f.primitives == (p.pid, q.pid)
        assert f.description == "'MAINST 12' (10m)"

    def test_unresolved_center_shown_as_unknown(self):
        p = self.b.node(None, None, address("12"))
        q = self.b.node(0.0, 0.0, address("12"))
        f = self.c.finding(self.b.ds, "MAINST 12", p, q)
        assert f.severity == OTHER
        assert f.description == "'MAINST 12' (?m)"

    def test_different_cities_far_apart_not_reported(self):
        p = self.b.node(0.0, 0.0, address("12", city="A"))
        q = self.b.node(1.0, 0.0, address("12", city="B"))
        assert self.c.finding(self.b.ds, "MAINST 12", p, q) is None

    def test_way_distance_uses_bbox_center(self):
        a = self.b.node(0.0, 0.0)
        b = self.b.node(0.002, 0.0)
        w = self.b.way([a, b], address("12"))
        q = self.b.node(0.001, 0.0, address("12"))
        assert self.c.pair_distance(self.b.ds, w, q) == pytest.approx(0.0, abs=1e-6)
