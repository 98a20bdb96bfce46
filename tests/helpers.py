from __future__ import annotations
import itertools
from typing import Dict, List, Optional, Tuple

from address_check.dataset import Dataset
from address_check.models import Member, Primitive, NODE, WAY, RELATION

# 赤道附近：1 度约 111 km
M_PER_DEG_LAT = 6378137.0 * 3.141592653589793 / 180.0
M_PER_DEG_MERCATOR = 6378137.0 * 3.141592653589793 / 180.0


class Builder:
    """测试用的小型数据集构造器"""

    def __init__(self) -> None:
        self.ds = Dataset()
        self._ids = itertools.count(1)

    def node(self, lat: Optional[float] = 0.0, lon: Optional[float] = 0.0,
             tags: Optional[Dict[str, str]] = None, **flags) -> Primitive:
        return self.ds.add(Primitive(f"n{next(self._ids)}", NODE, dict(tags or {}), lat=lat, lon=lon, **flags))

    def way(self, nodes: List[Primitive], tags: Optional[Dict[str, str]] = None, **flags) -> Primitive:
        return self.ds.add(Primitive(f"w{next(self._ids)}", WAY, dict(tags or {}),
                                     node_ids=[n.pid for n in nodes], **flags))

    def relation(self, members: List[Tuple[str, Primitive]], tags: Optional[Dict[str, str]] = None,
                 **flags) -> Primitive:
        return self.ds.add(Primitive(f"r{next(self._ids)}", RELATION, dict(tags or {}),
                                     members=[Member(role, p.pid) for role, p in members], **flags))

    def street(self, lat: float = 0.0, lon_from: float = 0.0, lon_to: float = 0.001,
               name: str = "Elm St", **flags) -> Primitive:
        a = self.node(lat, lon_from)
        b = self.node(lat, lon_to)
        return self.way([a, b], {"highway": "residential", "name": name}, **flags)


def address(number: str, street: str = "Main St", **extra: str) -> Dict[str, str]:
    tags = {"addr:housenumber": number, "addr:street": street}
    for k, v in extra.items():
        tags[f"addr:{k}"] = v
    return tags
