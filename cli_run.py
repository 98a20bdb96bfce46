from __future__ import annotations
import logging
from pathlib import Path
from address_check.config import load_config
from address_check.dataset import load_dataset
from address_check.db import connect, init_db, insert_run, insert_findings
from address_check.pipeline import AddressValidator, summarize

import dotenv
dotenv.load_dotenv()

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    root = Path(__file__).resolve().parent
    data_dir = root / "data"
    cfg = load_config(data_dir / "config.default.json")

    dataset_path = root / cfg.dataset_path
    dataset = load_dataset(dataset_path)
    findings = AddressValidator(cfg).run(dataset)
    summary = summarize(findings)

    conn = connect(root / cfg.db_path)
    init_db(conn)
    run_id = insert_run(conn, str(dataset_path), summary)
    insert_findings(conn, run_id, findings)

    print("Validation finished:", summary)
    print("Excel 报告位于:", cfg.db_path)

if __name__ == "__main__":
    main()
