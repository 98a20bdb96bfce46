from __future__ import annotations
import itertools
import random
from typing import Any, Dict, List, Tuple

from .models import (
    HOUSE_NUMBER_WITHOUT_STREET,
    DUPLICATE_HOUSE_NUMBER,
    HOUSE_NUMBER_TOO_FAR,
)


"""
地址数据合成器
1. 生成街道（way）、门牌（node）以及把两者关联起来的 associatedStreet 关系
2. 注入噪声，每种缺陷都记录到 labels 中，便于核对校验结果：
    重复地址：在原门牌旁复制一个相同地址的节点
    缺少街道：门牌号节点没有 addr:street，也不在任何关系中
    距离过远：关系中的一个门牌被移到约 1 km 以外
"""

STREET_NAMES = ["Mozartgasse", "Elm Street", "Hauptstrasse", "Rue de la Gare", "Via Roma", "Kirchweg"]

BASE_LAT = 47.0
BASE_LON = 8.0
STREET_SPACING = 0.005   # 约 550 m
STREET_LENGTH = 0.004    # 约 300 m
HOUSE_OFFSET = 0.0002    # 约 22 m


def generate_dataset(n_streets: int = 3, houses_per_street: int = 6, seed: int = 7,
                     noise: bool = True) -> Tuple[Dict[str, Any], List[Tuple[str, int]]]:
    """
    Return: (Overpass 风格的 {"elements": [...]}, [(对象句柄, 期望的问题类别), ...])
    """
    rng = random.Random(seed)
    ids = itertools.count(1)
    elements: List[Dict[str, Any]] = []
    labels: List[Tuple[str, int]] = []

    def node(lat: float, lon: float, tags: Dict[str, str] | None = None) -> Dict[str, Any]:
        el = {"type": "node", "id": next(ids), "lat": round(lat, 7), "lon": round(lon, 7), "tags": tags or {}}
        elements.append(el)
        return el

    for s in range(min(n_streets, len(STREET_NAMES))):
        name = STREET_NAMES[s]
        lat = BASE_LAT + s * STREET_SPACING
        street_nodes = [node(lat, BASE_LON + STREET_LENGTH * k / 3) for k in range(4)]
        street = {"type": "way", "id": next(ids), "nodes": [n["id"] for n in street_nodes],
                  "tags": {"highway": "residential", "name": name}}
        elements.append(street)

        houses = []
        for h in range(houses_per_street):
            lon = BASE_LON + STREET_LENGTH * (h + 0.5) / houses_per_street
            houses.append(node(lat + HOUSE_OFFSET, lon,
                               {"addr:housenumber": str(h + 1), "addr:street": name}))

        members = [{"type": "way", "ref": street["id"], "role": "street"}]
        members += [{"type": "node", "ref": hn["id"], "role": "house"} for hn in houses]
        elements.append({"type": "relation", "id": next(ids), "members": members,
                         "tags": {"type": "associatedStreet", "name": name}})

        if not noise:
            continue

        if rng.random() < 0.8:
            src = rng.choice(houses)
            dup = node(src["lat"] + 0.00003, src["lon"], dict(src["tags"]))
            labels.append((f"n{dup['id']}", DUPLICATE_HOUSE_NUMBER))
            labels.append((f"n{src['id']}", DUPLICATE_HOUSE_NUMBER))

        if rng.random() < 0.5:
            lost = node(lat - HOUSE_OFFSET, BASE_LON + rng.random() * STREET_LENGTH,
                        {"addr:housenumber": str(houses_per_street + 1)})
            labels.append((f"n{lost['id']}", HOUSE_NUMBER_WITHOUT_STREET))

        if rng.random() < 0.5:
            far = houses[-1]
            far["lat"] = round(far["lat"] + 0.01, 7)
            labels.append((f"n{far['id']}", HOUSE_NUMBER_TOO_FAR))

    return {"version": 0.6, "elements": elements}, labels
