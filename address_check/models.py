from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

ADDR_HOUSE_NUMBER = "addr:housenumber"
ADDR_INTERPOLATION = "addr:interpolation"
ADDR_NEIGHBOURHOOD = "addr:neighbourhood"
ADDR_PLACE = "addr:place"
ADDR_STREET = "addr:street"
ADDR_CITY = "addr:city"
ADDR_UNIT = "addr:unit"
ADDR_FLATS = "addr:flats"
ADDR_HOUSE_NAME = "addr:housename"
ADDR_POSTCODE = "addr:postcode"
ASSOCIATED_STREET = "associatedStreet"

POI_KEYS: Tuple[str, ...] = ("shop", "amenity", "tourism", "leisure", "emergency", "craft", "entrance", "name")

NODE = "node"
WAY = "way"
RELATION = "relation"

# 严重级别：OTHER 为最低的提示级别
WARNING = "WARNING"
OTHER = "OTHER"

HOUSE_NUMBER_WITHOUT_STREET = 2601
DUPLICATE_HOUSE_NUMBER = 2602
MULTIPLE_STREET_NAMES = 2603
MULTIPLE_STREET_RELATIONS = 2604
HOUSE_NUMBER_TOO_FAR = 2605

CATEGORY_TITLES: Dict[int, str] = {
    HOUSE_NUMBER_WITHOUT_STREET: "House number without street",
    DUPLICATE_HOUSE_NUMBER: "Duplicate house numbers",
    MULTIPLE_STREET_NAMES: "Multiple street names in relation",
    MULTIPLE_STREET_RELATIONS: "Multiple associatedStreet relations",
    HOUSE_NUMBER_TOO_FAR: "House number too far from street",
}


@dataclass
class Member:
    role: str
    ref: str


@dataclass(eq=False)
class Primitive:
    pid: str
    kind: str
    tags: Dict[str, str] = field(default_factory=dict)
    lat: Optional[float] = None
    lon: Optional[float] = None
    node_ids: List[str] = field(default_factory=list)
    members: List[Member] = field(default_factory=list)
    incomplete: bool = False
    deleted: bool = False

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.tags.get(key, default)

    def has_key(self, *keys: str) -> bool:
        return any(k in self.tags for k in keys)

    def has_tag(self, key: str, value: str) -> bool:
        return self.tags.get(key) == value

    def has_tag_different(self, key: str, value: str) -> bool:
        v = self.tags.get(key)
        return v is not None and v != value


@dataclass(frozen=True)
class Finding:
    severity: str
    code: int
    message: str
    primitives: Tuple[str, ...]
    description: str = ""
