from __future__ import annotations
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from .models import Finding

TABLE_SCHEMAS: Dict[str, List[str]] = {
    "findings": ["id", "run_id", "severity", "code", "message", "description", "primitives_json", "created_at"],
    "runs": ["run_id", "dataset_path", "n_findings", "summary_json", "created_at"],
}

def _now_str() -> str:
    return datetime.utcnow().isoformat(timespec="seconds")

def _empty_table(name: str) -> pd.DataFrame:
    return pd.DataFrame(columns=TABLE_SCHEMAS[name])

def _ensure_columns(df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    result = df.copy()
    for col in columns:
        if col not in result.columns:
            result[col] = None
    return result[columns]

def _clean_value(val: Any) -> Any:
    if val is None:
        return None
    try:
        if pd.isna(val):
            return None
    except (TypeError, ValueError):
        pass
    return val

def _row_to_dict(row: pd.Series) -> Dict[str, Any]:
    return {k: _clean_value(v) for k, v in row.to_dict().items()}

def _next_pk(df: pd.DataFrame, column: str = "id") -> int:
    if df.empty or column not in df.columns:
        return 1
    max_val = pd.to_numeric(df[column], errors="coerce").max()
    if pd.isna(max_val):
        return 1
    return int(max_val) + 1

class ExcelConnection:
    """简单的 Excel “连接”对象，维护内存表缓存并提供保存方法。"""
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.tables: Dict[str, pd.DataFrame] = {
            name: _empty_table(name) for name in TABLE_SCHEMAS
        }
        if self.path.exists():
            xls = pd.read_excel(self.path, sheet_name=None)
            for name, cols in TABLE_SCHEMAS.items():
                if name in xls:
                    self.tables[name] = _ensure_columns(xls[name], cols)

    def save(self) -> None:
        with pd.ExcelWriter(self.path, engine="openpyxl") as writer:
            for name, df in self.tables.items():
                df.to_excel(writer, sheet_name=name, index=False)

def connect(db_path: str | Path) -> ExcelConnection:
    return ExcelConnection(db_path)

def init_db(conn: ExcelConnection) -> None:
    conn.save()

def clear_table(conn: ExcelConnection, table: str) -> None:
    if table not in TABLE_SCHEMAS:
        raise ValueError(f"Unknown table: {table}")
    conn.tables[table] = _empty_table(table)
    conn.save()

def insert_run(conn: ExcelConnection, dataset_path: str, summary: Dict[str, Any]) -> int:
    df = conn.tables["runs"]
    run_id = _next_pk(df, "run_id")
    row = {
        "run_id": run_id,
        "dataset_path": dataset_path,
        "n_findings": summary.get("n_findings", 0),
        "summary_json": json.dumps(summary, ensure_ascii=False),
        "created_at": _now_str(),
    }
    conn.tables["runs"] = pd.concat([df, pd.DataFrame([row])], ignore_index=True)
    conn.save()
    return run_id

def insert_findings(conn: ExcelConnection, run_id: int, findings: List[Finding]) -> None:
    if not findings:
        return
    df = conn.tables["findings"]
    next_id = _next_pk(df)
    now = _now_str()
    rows = []
    for f in findings:
        rows.append({
            "id": next_id,
            "run_id": run_id,
            "severity": f.severity,
            "code": f.code,
            "message": f.message,
            "description": f.description,
            "primitives_json": json.dumps(list(f.primitives), ensure_ascii=False),
            "created_at": now,
        })
        next_id += 1
    conn.tables["findings"] = pd.concat([df, pd.DataFrame(rows)], ignore_index=True)
    conn.save()

def list_findings(conn: ExcelConnection, run_id: int | None = None) -> List[Dict[str, Any]]:
    df = conn.tables["findings"]
    if run_id is not None:
        df = df[pd.to_numeric(df["run_id"], errors="coerce") == run_id]
    out = []
    for _, row in df.iterrows():
        d = _row_to_dict(row)
        d["primitives"] = json.loads(d.pop("primitives_json") or "[]")
        out.append(d)
    return out
