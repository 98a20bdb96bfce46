from __future__ import annotations
import re

from .models import (
    Primitive,
    ADDR_HOUSE_NUMBER,
    ADDR_STREET,
    ADDR_PLACE,
    ADDR_HOUSE_NAME,
    ADDR_UNIT,
    ADDR_FLATS,
    POI_KEYS,
)

_STREET_NOISE = re.compile(r"[ -]")


def has_address(p: Primitive) -> bool:
    return p.has_key(ADDR_HOUSE_NUMBER) and p.has_key(ADDR_STREET, ADDR_PLACE)

def is_poi(p: Primitive) -> bool:
    return p.has_key(*POI_KEYS)

def simplify_street(name: str) -> str:
    # 忽略空格和连字符："Mozart-Gasse" / "Mozart Gasse" / "Mozartgasse" 视为相同
    return _STREET_NOISE.sub("", (name or "").upper())

def simplified_address(p: Primitive) -> str:
    """
    Return: 规范化地址键（街道/地点 门牌号 楼名 单元 户）
    调用方需保证 has_address(p) 为真
    """
    street = p.get(ADDR_STREET) if p.has_key(ADDR_STREET) else p.get(ADDR_PLACE)
    parts = [simplify_street(street or "")]
    for key in (ADDR_HOUSE_NUMBER, ADDR_HOUSE_NAME, ADDR_UNIT, ADDR_FLATS):
        parts.append(p.get(key, ""))
    return " ".join(parts).strip().upper()
