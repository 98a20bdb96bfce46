from __future__ import annotations
import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from .config import Config
from .conflicts import ConflictChecker
from .dataset import Dataset
from .distance import DistanceChecker
from .index import AddressIndex
from .models import Finding, Primitive, CATEGORY_TITLES
from .normalize import has_address, is_poi, simplified_address
from .relations import StreetRelationChecker, is_street_relation
from .scoring import DuplicateClassifier

logger = logging.getLogger(__name__)


class ListSink:
    """只追加的结果收集器"""

    def __init__(self) -> None:
        self.findings: List[Finding] = []

    def append(self, finding: Finding) -> None:
        self.findings.append(finding)


class _RecordingSink:
    """转发到外部 sink，同时记录本次运行追加的结果"""

    def __init__(self, target: Any) -> None:
        self.target = target
        self.findings: List[Finding] = []

    def append(self, finding: Finding) -> None:
        self.findings.append(finding)
        self.target.append(finding)


class ValidationRun:
    """一次校验运行的上下文：数据集、惰性构建的地址索引、结果收集器。运行结束即丢弃。"""

    def __init__(self, dataset: Dataset, sink: Any):
        self.dataset = dataset
        self.sink = _RecordingSink(sink)
        self._index: Optional[AddressIndex] = None

    @property
    def findings(self) -> List[Finding]:
        return self.sink.findings

    def close(self) -> None:
        self._index = None

    @property
    def index(self) -> AddressIndex:
        if self._index is None:
            self._index = AddressIndex.build(self.dataset)
        return self._index


class AddressValidator:
    """地址校验主流程：逐个对象执行 缺街道检查 -> 重复地址检查 -> associatedStreet 关系检查。"""

    def __init__(self, cfg: Optional[Config] = None):
        self.max_street_distance = cfg.max_street_distance if cfg else 200.0
        self.classifier = DuplicateClassifier(cfg.duplicate_near_distance if cfg else 200.0)

    def start_run(self, dataset: Dataset, sink: Any = None) -> ValidationRun:
        return ValidationRun(dataset, sink if sink is not None else ListSink())

    def end_run(self, run: ValidationRun) -> None:
        run.close()

    def visit(self, run: ValidationRun, p: Primitive) -> None:
        ConflictChecker(run.dataset).check(p, run.sink)
        self.check_duplicates(run, p)
        if is_street_relation(p):
            distance_checker = DistanceChecker(run.dataset, self.max_street_distance)
            StreetRelationChecker(run.dataset, distance_checker).check(p, run.sink)

    def check_duplicates(self, run: ValidationRun, p: Primitive) -> None:
        index = run.index
        if is_poi(p) or not has_address(p):
            return
        key = simplified_address(p)
        if index.is_ignored(key):
            return
        for other in index.bucket(key):
            if other is p:
                continue
            finding = self.classifier.finding(run.dataset, key, p, other)
            if finding is not None:
                run.sink.append(finding)

    def run(self, dataset: Dataset, sink: Any = None) -> List[Finding]:
        run = self.start_run(dataset, sink)
        visited = 0
        for p in dataset.all_primitives():
            if p.deleted:
                continue
            self.visit(run, p)
            visited += 1
        self.end_run(run)

        findings = run.findings
        logger.info("Validated %d primitives, %d findings", visited, len(findings))
        return findings


def summarize(findings: List[Finding]) -> Dict[str, Any]:
    by_code = Counter(f.code for f in findings)
    by_severity = Counter(f.severity for f in findings)
    return {
        "n_findings": len(findings),
        "by_category": {CATEGORY_TITLES[c]: n for c, n in sorted(by_code.items())},
        "by_severity": dict(by_severity),
    }
