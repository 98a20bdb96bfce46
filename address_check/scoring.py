from __future__ import annotations
import logging
from typing import Optional

from .dataset import Dataset
from .models import Finding, Primitive, ADDR_CITY, ADDR_POSTCODE, DUPLICATE_HOUSE_NUMBER, CATEGORY_TITLES, WARNING, OTHER
from .utils import haversine_m

logger = logging.getLogger(__name__)


def _same_postcode(p: Primitive, q: Primitive) -> bool:
    pc1, pc2 = p.get(ADDR_POSTCODE), q.get(ADDR_POSTCODE)
    return pc1 is not None and pc2 is not None and pc1 == pc2


class DuplicateClassifier:
    """两个规范化地址相同的对象：根据城市、邮编和距离决定严重级别（None 表示不报告）。"""

    def __init__(self, near_distance: float = 200.0):
        self.near_distance = near_distance

    def pair_distance(self, dataset: Dataset, p: Primitive, q: Primitive) -> Optional[float]:
        c1, c2 = dataset.bbox_center(p), dataset.bbox_center(q)
        if c1 is None or c2 is None:
            return None
        return haversine_m(c1[0], c1[1], c2[0], c2[1])

    def classify(self, p: Primitive, q: Primitive, distance: Optional[float]) -> Optional[str]:
        near = distance is not None and distance < self.near_distance
        city1, city2 = p.get(ADDR_CITY), q.get(ADDR_CITY)

        if city1 is not None and city2 is not None:
            if city1 == city2:
                if not p.has_key(ADDR_POSTCODE) or not q.has_key(ADDR_POSTCODE) or _same_postcode(p, q):
                    return WARNING
                # 城市相同而邮编不同：多半没问题，仅提示
                return OTHER
            # 只有城市不同：距离很近才提示，否则忽略
            return OTHER if near else None

        # 至少一方缺城市
        if _same_postcode(p, q):
            return WARNING
        return WARNING if near else OTHER

    def finding(self, dataset: Dataset, key: str, p: Primitive, q: Primitive) -> Optional[Finding]:
        distance = self.pair_distance(dataset, p, q)
        severity = self.classify(p, q, distance)
        if severity is None:
            logger.debug("Duplicate %s / %s ignored: different cities far apart", p.pid, q.pid)
            return None
        shown = str(int(distance)) if distance is not None else "?"
        return Finding(
            severity=severity,
            code=DUPLICATE_HOUSE_NUMBER,
            message=CATEGORY_TITLES[DUPLICATE_HOUSE_NUMBER],
            primitives=(p.pid, q.pid),
            description=f"'{key}' ({shown}m)",
        )
