from __future__ import annotations
import math
from typing import Iterable, List, Optional, Tuple

# (east, north)，单位为投影米
EastNorth = Tuple[float, float]

_MERCATOR_R = 6378137.0
_MAX_LAT = 85.05112877980659


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    # WGS84 长半轴，与投影使用同一半径
    R = _MERCATOR_R
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dl = math.radians(lon2 - lon1)
    a = math.sin(dphi/2)**2 + math.cos(phi1)*math.cos(phi2)*math.sin(dl/2)**2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))
    return R * c

def to_east_north(lat: Optional[float], lon: Optional[float]) -> Optional[EastNorth]:
    """球面 Web Mercator 投影（编辑器默认投影），坐标缺失时返回 None"""
    if lat is None or lon is None:
        return None
    lat = max(-_MAX_LAT, min(_MAX_LAT, lat))
    east = _MERCATOR_R * math.radians(lon)
    north = _MERCATOR_R * math.log(math.tan(math.pi / 4 + math.radians(lat) / 2))
    return (east, north)

def planar_distance(a: EastNorth, b: EastNorth) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])

def centroid(points: Iterable[Optional[EastNorth]]) -> Optional[EastNorth]:
    pts: List[EastNorth] = [p for p in points if p is not None]
    if not pts:
        return None
    if len(pts) == 1:
        return pts[0]
    if len(pts) == 2:
        return ((pts[0][0] + pts[1][0]) / 2, (pts[0][1] + pts[1][1]) / 2)

    # 多边形面积质心；闭合方式的首尾重复点不影响结果
    area = east = north = 0.0
    n = len(pts)
    for i in range(n):
        x0, y0 = pts[i]
        x1, y1 = pts[(i + 1) % n]
        cross = x0 * y1 - x1 * y0
        area += cross
        east += (x0 + x1) * cross
        north += (y0 + y1) * cross
    if area != 0.0:
        area *= 3.0
        return (east / area, north / area)

    # 共线点：退化为算术平均
    return (sum(p[0] for p in pts) / n, sum(p[1] for p in pts) / n)

def closest_point_to_segment(a: EastNorth, b: EastNorth, p: EastNorth) -> EastNorth:
    ldx = b[0] - a[0]
    ldy = b[1] - a[1]
    if ldx == 0 and ldy == 0:
        return a
    pdx = p[0] - a[0]
    pdy = p[1] - a[1]
    offset = (pdx * ldx + pdy * ldy) / (ldx * ldx + ldy * ldy)
    if offset <= 0:
        return a
    if offset >= 1:
        return b
    return (a[0] + ldx * offset, a[1] + ldy * offset)
