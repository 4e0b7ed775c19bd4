"""
求解指标

批量求解基准的逐局记录与汇总
"""
from typing import Dict, List, Optional, Sequence
from dataclasses import dataclass, field
from collections import Counter
import numpy as np

from .search import SolveResult


@dataclass(frozen=True)
class SeriesStats:
    """一组数值的描述统计"""
    count: int
    mean: float
    std: float
    min: float
    max: float

    @classmethod
    def of(cls, values: Sequence[float]) -> "SeriesStats":
        """空序列返回全零；std 为样本标准差"""
        if len(values) == 0:
            return cls(0, 0.0, 0.0, 0.0, 0.0)
        arr = np.asarray(values, dtype=np.float64)
        std = float(arr.std(ddof=1)) if arr.size > 1 else 0.0
        return cls(
            count=int(arr.size),
            mean=float(arr.mean()),
            std=std,
            min=float(arr.min()),
            max=float(arr.max()),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "count": self.count,
            "mean": self.mean,
            "std": self.std,
            "min": self.min,
            "max": self.max,
        }


@dataclass
class DealRecord:
    """单局求解记录"""
    seed: Optional[int]
    found: bool
    steps: int
    nodes: int
    elapsed_ms: float
    stop_reason: str
    confidence: Optional[int] = None


@dataclass
class SolveMetrics:
    """
    批量求解指标收集器

    节点数与用时统计全部局面；解长只统计已解局面，启发式置信度只统计未解局面。

    Example:
        metrics = SolveMetrics()
        for seed in seeds:
            metrics.add(seed, solver.solve(GameState.initial(seed=seed)))
        print(metrics.summary())
    """
    records: List[DealRecord] = field(default_factory=list)

    def add(self, seed: Optional[int], result: SolveResult) -> DealRecord:
        stats = result.stats
        record = DealRecord(
            seed=seed,
            found=result.found,
            steps=result.num_steps,
            nodes=stats.nodes_expanded,
            elapsed_ms=stats.elapsed_ms,
            stop_reason=stats.stop_reason,
            confidence=None if result.found else result.heuristic.win_probability,
        )
        self.records.append(record)
        return record

    @property
    def num_deals(self) -> int:
        return len(self.records)

    @property
    def solved(self) -> List[DealRecord]:
        return [r for r in self.records if r.found]

    @property
    def solve_rate(self) -> float:
        if not self.records:
            return 0.0
        return float(np.mean([r.found for r in self.records]))

    def stop_reasons(self) -> Dict[str, int]:
        return dict(Counter(r.stop_reason for r in self.records))

    def series(self) -> Dict[str, SeriesStats]:
        """按指标名汇总；没有样本的指标不出现"""
        unsolved = [r for r in self.records if not r.found]
        columns = {
            "nodes": [r.nodes for r in self.records],
            "elapsed_ms": [r.elapsed_ms for r in self.records],
            "solution_steps": [r.steps for r in self.solved],
            "heuristic_confidence": [r.confidence for r in unsolved],
        }
        return {name: SeriesStats.of(values) for name, values in columns.items() if values}

    def summary(self) -> Dict[str, object]:
        """汇总为可直接写入 JSON 的字典"""
        return {
            "deals": self.num_deals,
            "solved": len(self.solved),
            "solve_rate": self.solve_rate,
            "stop_reasons": self.stop_reasons(),
            "stats": {name: s.to_dict() for name, s in self.series().items()},
        }

    def reset(self):
        self.records.clear()
