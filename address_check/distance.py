from __future__ import annotations
import logging
from typing import List, Optional

from .dataset import Dataset
from .models import (
    Finding,
    Primitive,
    NODE,
    WAY,
    ADDR_HOUSE_NUMBER,
    ADDR_INTERPOLATION,
    CATEGORY_TITLES,
    HOUSE_NUMBER_TOO_FAR,
    WARNING,
)
from .utils import EastNorth, centroid, closest_point_to_segment, planar_distance

logger = logging.getLogger(__name__)


class DistanceChecker:
    """检查门牌对象与所属街道之间的投影距离是否在阈值内。"""

    def __init__(self, dataset: Dataset, max_distance: float = 200.0):
        self.dataset = dataset
        self.max_distance = max_distance

    def reference_point(self, house: Primitive) -> Optional[EastNorth]:
        if house.kind == NODE:
            return self.dataset.east_north(house)
        if house.kind == WAY:
            return centroid(self.dataset.east_north(n) for n in self.dataset.nodes_of(house))
        # relation（multipolygon 房屋）不做距离检查
        return None

    def check(self, house: Primitive, streets: List[Primitive], sink) -> None:
        if house.kind == WAY and house.has_key(ADDR_INTERPOLATION):
            # 插值线：逐个带门牌号的节点单独检查，不计算整体质心
            for n in self.dataset.nodes_of(house):
                if n is not None and n.has_key(ADDR_HOUSE_NUMBER):
                    self.check(n, streets, sink)
            return

        point = self.reference_point(house)
        if point is None:
            logger.debug("No reference point for %s, distance check skipped", house.pid)
            return

        has_incomplete = False
        for street in streets:
            if self._near(point, street):
                return
            if not has_incomplete and self.dataset.is_incomplete(street):
                has_incomplete = True

        # 街道未完整下载时距离不可信，不报告
        if has_incomplete:
            logger.debug("%s far from incomplete street, not reported", house.pid)
            return
        sink.append(Finding(
            severity=WARNING,
            code=HOUSE_NUMBER_TOO_FAR,
            message=CATEGORY_TITLES[HOUSE_NUMBER_TOO_FAR],
            primitives=(house.pid,) + tuple(s.pid for s in streets),
        ))

    def _near(self, point: EastNorth, street: Primitive) -> bool:
        nodes = self.dataset.nodes_of(street)
        for n1, n2 in zip(nodes, nodes[1:]):
            p1, p2 = self.dataset.east_north(n1), self.dataset.east_north(n2)
            if p1 is None or p2 is None:
                logger.warning("Skipped segment of street %s: unresolved endpoint", street.pid)
                continue
            closest = closest_point_to_segment(p1, p2, point)
            if planar_distance(closest, point) <= self.max_distance:
                return True
        return False
