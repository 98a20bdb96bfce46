from __future__ import annotations
import json
from pathlib import Path

from address_check.config import load_config
from address_check.simulate import generate_dataset

import dotenv
dotenv.load_dotenv()

"""
地址校验的仿真数据初始化脚本：生成带缺陷的样例数据集并写入 JSON，便于快速体验 cli_run。
1) 加载 config.default.json，确定数据集文件路径；
2) 生成 4 条街道 × 6 个门牌，并注入重复地址/缺街道/距离过远等缺陷；
3) 写入数据集与缺陷标签，提示下一步运行 cli_run。
"""

def main():
    root = Path(__file__).resolve().parent
    data_dir = root / "data"
    cfg = load_config(data_dir / "config.default.json")

    doc, labels = generate_dataset(n_streets=4, houses_per_street=6, seed=7)
    out_path = root / cfg.dataset_path
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")

    labels_path = out_path.with_name(out_path.stem + ".labels.json")
    labels_path.write_text(json.dumps(labels, ensure_ascii=False, indent=2), encoding="utf-8")

    print(f"Dataset written: {out_path}")
    print(f"Elements: {len(doc['elements'])}")
    print(f"Injected defects: {len(labels)}")
    print("Next: python cli_run.py")

if __name__ == "__main__":
    main()
