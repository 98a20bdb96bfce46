from __future__ import annotations
import logging
from typing import Dict, List

from .dataset import Dataset
from .distance import DistanceChecker
from .models import (
    Finding,
    Primitive,
    WAY,
    ADDR_HOUSE_NUMBER,
    ADDR_STREET,
    ASSOCIATED_STREET,
    CATEGORY_TITLES,
    DUPLICATE_HOUSE_NUMBER,
    MULTIPLE_STREET_NAMES,
    WARNING,
)

logger = logging.getLogger(__name__)


def is_street_relation(p: Primitive) -> bool:
    return p.has_tag("type", ASSOCIATED_STREET)


class StreetRelationChecker:
    """associatedStreet 关系检查：重复门牌、街道名称不一致、门牌离街道过远。"""

    def __init__(self, dataset: Dataset, distance_checker: DistanceChecker):
        self.dataset = dataset
        self.distance_checker = distance_checker

    def check(self, rel: Primitive, sink) -> None:
        numbers: Dict[str, List[Primitive]] = {}
        name = rel.get("name")
        # dict 作为有序集合，保持成员顺序
        wrong_names: Dict[str, Primitive] = {}
        houses: Dict[str, Primitive] = {}
        streets: Dict[str, Primitive] = {}

        def mark_wrong(p: Primitive) -> None:
            if not wrong_names:
                wrong_names[rel.pid] = rel
            wrong_names[p.pid] = p

        for role, p in self.dataset.members_of(rel):
            if role == "house":
                houses[p.pid] = p
                number = p.get(ADDR_HOUSE_NUMBER)
                if number is not None:
                    numbers.setdefault(number.strip().upper(), []).append(p)
                if name is not None and p.has_key(ADDR_STREET) and p.get(ADDR_STREET) != name:
                    mark_wrong(p)
            elif role == "street":
                if p.kind == WAY:
                    streets[p.pid] = p
                if name is not None and p.has_tag_different("name", name):
                    mark_wrong(p)

        for number, dupes in numbers.items():
            if len(dupes) > 1:
                sink.append(Finding(
                    severity=WARNING,
                    code=DUPLICATE_HOUSE_NUMBER,
                    message=CATEGORY_TITLES[DUPLICATE_HOUSE_NUMBER],
                    primitives=tuple(d.pid for d in dupes),
                    description=f"House number '{number}' duplicated",
                ))

        if wrong_names:
            sink.append(Finding(
                severity=WARNING,
                code=MULTIPLE_STREET_NAMES,
                message=CATEGORY_TITLES[MULTIPLE_STREET_NAMES],
                primitives=tuple(wrong_names),
            ))

        if streets:
            street_list = list(streets.values())
            for house in houses.values():
                if self.dataset.is_usable(house):
                    self.distance_checker.check(house, street_list, sink)
                else:
                    logger.debug("House %s not usable, distance check skipped", house.pid)
