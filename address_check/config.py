from __future__ import annotations
import json
import os
from dataclasses import dataclass
from pathlib import Path

MAX_STREET_DISTANCE_ENV = "ADDRESS_CHECK_MAX_STREET_DISTANCE"

@dataclass
class Config:
    db_path: str
    dataset_path: str
    max_street_distance: float = 200.0
    duplicate_near_distance: float = 200.0

def load_config(path: str | Path) -> Config:
    p = Path(path)
    raw = json.loads(p.read_text(encoding="utf-8"))
    max_dist = float(raw.get("max_street_distance", 200.0))
    # 环境变量优先（.env 由入口脚本通过 dotenv 加载）
    env_val = os.getenv(MAX_STREET_DISTANCE_ENV)
    if env_val:
        max_dist = float(env_val)
    return Config(
        db_path=raw["db_path"],
        dataset_path=raw["dataset_path"],
        max_street_distance=max_dist,
        duplicate_near_distance=float(raw.get("duplicate_near_distance", 200.0)),
    )
