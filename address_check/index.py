from __future__ import annotations
import logging
from typing import Dict, List, Set

from .dataset import Dataset
from .models import Primitive, ADDR_UNIT, NODE
from .normalize import has_address, is_poi, simplified_address

logger = logging.getLogger(__name__)


class AddressIndex:
    """全量扫描一次数据集，得到【规范化地址】→[对象...] 的映射，供重复门牌检测使用。"""

    def __init__(self) -> None:
        self.addresses: Dict[str, List[Primitive]] = {}
        self.ignored: Set[str] = set()

    @classmethod
    def build(cls, dataset: Dataset) -> "AddressIndex":
        idx = cls()
        for p in dataset.all_primitives():
            if p.deleted:
                continue
            if p.kind == NODE and p.has_key(ADDR_UNIT):
                idx._ignore_unit_referrers(dataset, p)
            if has_address(p):
                idx._collect(p)
        logger.info("Address index built: %d keys, %d ignored", len(idx.addresses), len(idx.ignored))
        return idx

    def _ignore_unit_referrers(self, dataset: Dataset, unit_node: Primitive) -> None:
        # 挂有 addr:unit 节点的建筑，同一地址出现多次是合理的
        for r in dataset.referrers(unit_node):
            if not has_address(r):
                continue
            key = simplified_address(r)
            if key not in self.ignored:
                self.ignored.add(key)
            elif key in self.addresses:
                del self.addresses[key]

    def _collect(self, p: Primitive) -> None:
        if is_poi(p):
            return
        key = simplified_address(p)
        if key not in self.ignored:
            self.addresses.setdefault(key, []).append(p)

    def is_ignored(self, key: str) -> bool:
        return key in self.ignored

    def bucket(self, key: str) -> List[Primitive]:
        return self.addresses.get(key, [])
