from __future__ import annotations
import logging
from typing import List

from .dataset import Dataset
from .models import (
    Finding,
    Primitive,
    RELATION,
    WAY,
    ADDR_HOUSE_NUMBER,
    ADDR_STREET,
    ADDR_PLACE,
    ADDR_NEIGHBOURHOOD,
    ADDR_INTERPOLATION,
    ASSOCIATED_STREET,
    CATEGORY_TITLES,
    HOUSE_NUMBER_WITHOUT_STREET,
    MULTIPLE_STREET_RELATIONS,
    WARNING,
    OTHER,
)

logger = logging.getLogger(__name__)


class ConflictChecker:
    """单对象检查：门牌号缺少街道、被多个 associatedStreet 关系引用。"""

    def __init__(self, dataset: Dataset):
        self.dataset = dataset

    def associated_streets(self, p: Primitive, sink) -> List[Primitive]:
        rels = [r for r in self.dataset.referrers(p) if r.kind == RELATION and r.has_tag("type", ASSOCIATED_STREET)]
        if len(rels) > 1:
            # 仅当关系名称不一致（或缺失）时才是 WARNING
            name = rels[0].get("name")
            if name is None or any(not r.has_tag("name", name) for r in rels):
                level = WARNING
            else:
                level = OTHER
            sink.append(Finding(
                severity=level,
                code=MULTIPLE_STREET_RELATIONS,
                message=CATEGORY_TITLES[MULTIPLE_STREET_RELATIONS],
                primitives=(p.pid,) + tuple(r.pid for r in rels),
            ))
        return rels

    def check(self, p: Primitive, sink) -> None:
        associated = self.associated_streets(p, sink)
        if not p.has_key(ADDR_HOUSE_NUMBER) or p.has_key(ADDR_STREET, ADDR_PLACE, ADDR_NEIGHBOURHOOD):
            return
        if associated:
            return
        for w in self.dataset.referrers(p):
            if w.kind == WAY and w.has_key(ADDR_INTERPOLATION) and w.has_key(ADDR_STREET):
                logger.debug("%s takes its street from interpolation %s", p.pid, w.pid)
                return
        sink.append(Finding(
            severity=WARNING,
            code=HOUSE_NUMBER_WITHOUT_STREET,
            message=CATEGORY_TITLES[HOUSE_NUMBER_WITHOUT_STREET],
            primitives=(p.pid,),
        ))
