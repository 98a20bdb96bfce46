from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Literal, Optional, Set, Tuple

from pydantic import BaseModel

from .models import Member, Primitive, NODE, WAY, RELATION
from .utils import EastNorth, to_east_north

logger = logging.getLogger(__name__)

_PREFIX = {NODE: "n", WAY: "w", RELATION: "r"}


def make_pid(kind: str, osm_id: int | str) -> str:
    return f"{_PREFIX[kind]}{osm_id}"


class Dataset:
    """内存数据集：按句柄存放对象，反向引用索引只构建一次，不在对象间互相持有引用。"""

    def __init__(self, primitives: Optional[List[Primitive]] = None):
        self._prims: Dict[str, Primitive] = {}
        self._referrers: Optional[Dict[str, List[str]]] = None
        for p in primitives or []:
            self.add(p)

    def add(self, p: Primitive) -> Primitive:
        self._prims[p.pid] = p
        self._referrers = None
        return p

    def get(self, pid: str) -> Optional[Primitive]:
        return self._prims.get(pid)

    def __contains__(self, pid: object) -> bool:
        return pid in self._prims

    def __len__(self) -> int:
        return len(self._prims)

    def all_primitives(self) -> Iterator[Primitive]:
        return iter(list(self._prims.values()))

    def _build_referrers(self) -> Dict[str, List[str]]:
        # 反向索引：被引用对象 -> 引用它的 way / relation（按出现顺序、去重，已删除对象不计）
        idx: Dict[str, List[str]] = {}
        for p in self._prims.values():
            if p.deleted:
                continue
            refs = p.node_ids if p.kind == WAY else [m.ref for m in p.members]
            seen: Set[str] = set()
            for ref in refs:
                if ref in seen:
                    continue
                seen.add(ref)
                idx.setdefault(ref, []).append(p.pid)
        return idx

    def referrers(self, p: Primitive) -> List[Primitive]:
        if self._referrers is None:
            self._referrers = self._build_referrers()
        return [self._prims[r] for r in self._referrers.get(p.pid, [])]

    def nodes_of(self, way: Primitive) -> List[Optional[Primitive]]:
        """way 的节点列表，未下载的节点为 None"""
        return [self._prims.get(nid) for nid in way.node_ids]

    def members_of(self, rel: Primitive) -> List[Tuple[str, Primitive]]:
        out = []
        for m in rel.members:
            p = self._prims.get(m.ref)
            if p is not None:
                out.append((m.role, p))
        return out

    def east_north(self, node: Optional[Primitive]) -> Optional[EastNorth]:
        if node is None or node.kind != NODE:
            return None
        return to_east_north(node.lat, node.lon)

    def is_incomplete(self, p: Primitive) -> bool:
        if p.incomplete:
            return True
        if p.kind == WAY:
            return any(nid not in self._prims for nid in p.node_ids)
        return False

    def is_usable(self, p: Primitive) -> bool:
        return not p.deleted and not self.is_incomplete(p)

    def bbox_center(self, p: Primitive) -> Optional[Tuple[float, float]]:
        """包围盒中心 (lat, lon)；没有可用坐标时返回 None"""
        coords = self._collect_coords(p, set())
        if not coords:
            return None
        lats = [c[0] for c in coords]
        lons = [c[1] for c in coords]
        return ((min(lats) + max(lats)) / 2, (min(lons) + max(lons)) / 2)

    def _collect_coords(self, p: Primitive, visited: Set[str]) -> List[Tuple[float, float]]:
        if p.pid in visited:
            return []
        visited.add(p.pid)
        if p.kind == NODE:
            if p.lat is None or p.lon is None:
                return []
            return [(p.lat, p.lon)]
        if p.kind == WAY:
            children = [n for n in self.nodes_of(p) if n is not None]
        else:
            children = [m for _, m in self.members_of(p)]
        out: List[Tuple[float, float]] = []
        for c in children:
            out.extend(self._collect_coords(c, visited))
        return out


class ElementMember(BaseModel):
    type: Literal["node", "way", "relation"]
    ref: int
    role: str = ""


class Element(BaseModel):
    type: Literal["node", "way", "relation"]
    id: int
    lat: Optional[float] = None
    lon: Optional[float] = None
    tags: Dict[str, str] = {}
    nodes: List[int] = []
    members: List[ElementMember] = []
    incomplete: bool = False
    deleted: bool = False


def _element_to_primitive(el: Element) -> Primitive:
    return Primitive(
        pid=make_pid(el.type, el.id),
        kind=el.type,
        tags=dict(el.tags),
        lat=el.lat,
        lon=el.lon,
        node_ids=[make_pid(NODE, n) for n in el.nodes],
        members=[Member(m.role, make_pid(m.type, m.ref)) for m in el.members],
        incomplete=el.incomplete,
        deleted=el.deleted,
    )


def dataset_from_json(obj: Dict[str, Any]) -> Dataset:
    """读取 Overpass 风格的 {"elements": [...]}，逐条用 pydantic 校验"""
    ds = Dataset()
    for raw in obj.get("elements", []):
        ds.add(_element_to_primitive(Element.model_validate(raw)))
    logger.info("Loaded %d primitives", len(ds))
    return ds


def load_dataset(path: str | Path) -> Dataset:
    p = Path(path)
    return dataset_from_json(json.loads(p.read_text(encoding="utf-8")))
