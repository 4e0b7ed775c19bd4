"""
求解器配置

定义搜索预算与启发式权重
"""
from dataclasses import dataclass, asdict
from typing import Dict, Any, Tuple


@dataclass
class SolverConfig:
    """
    搜索配置

    Attributes:
        max_depth: 单条路径上的最大步数 (移动与翻牌都计入)
        time_limit_ms: 墙钟时间上限 (毫秒)
        max_nodes: 最多展开的节点数
        check_interval: 每展开多少个节点检查一次截止时间
        draw_only_when_stuck: 只有在没有通往未访问状态的移动时才翻牌
    """
    # 搜索预算
    max_depth: int = 200
    time_limit_ms: int = 10000
    max_nodes: int = 200000

    # 截止时间检查间隔
    check_interval: int = 256

    # 翻牌策略
    draw_only_when_stuck: bool = True

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.time_limit_ms < 0:
            raise ValueError(f"time_limit_ms must be non-negative, got {self.time_limit_ms}")
        if self.max_nodes < 1:
            raise ValueError(f"max_nodes must be positive, got {self.max_nodes}")
        if self.check_interval < 1:
            raise ValueError(f"check_interval must be positive, got {self.check_interval}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'SolverConfig':
        """从字典创建配置 (忽略未知键)"""
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class HeuristicWeights:
    """
    启发式评估权重

    胜率 = 特征向量 · win_weights，特征顺序为:
    (常数项, 完成进度, 可用移动数, 暗牌数, 空列数, 牌库过大, 无移动可走)

    Attributes:
        win_weights: 胜率线性权重
        phase_move_factors: 各阶段剩余牌数到预计步数的系数
        hidden_move_factor: 每张暗牌额外的预计步数
        large_stock_threshold: 牌库超过此张数视为过大
        min_confidence / max_confidence: 胜率截断区间
        min_moves / max_moves: 预计步数截断区间
        winnable_threshold: 胜率高于此值视为可解
    """
    win_weights: Tuple[float, ...] = (60.0, 25.0, 8.0, -1.0, 12.0, -15.0, -30.0)

    phase_move_factors: Tuple[Tuple[str, float], ...] = (
        ("opening", 0.85),
        ("early", 0.85),
        ("mid-early", 0.75),
        ("middle", 0.65),
        ("late", 0.6),
        ("endgame", 0.5),
    )
    hidden_move_factor: float = 0.4

    large_stock_threshold: int = 16

    min_confidence: float = 5.0
    max_confidence: float = 95.0
    min_moves: int = 5
    max_moves: int = 150

    winnable_threshold: float = 25.0

    def __post_init__(self):
        if len(self.win_weights) != 7:
            raise ValueError(f"Expected 7 win weights, got {len(self.win_weights)}")
        self.win_weights = tuple(float(w) for w in self.win_weights)
        self.phase_move_factors = tuple(
            (str(name), float(factor)) for name, factor in self.phase_move_factors
        )

    def move_factor(self, phase: str) -> float:
        for name, factor in self.phase_move_factors:
            if name == phase:
                return factor
        raise KeyError(f"Unknown game phase: {phase}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'HeuristicWeights':
        """从字典创建配置 (忽略未知键)"""
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        if "phase_move_factors" in filtered and isinstance(filtered["phase_move_factors"], dict):
            filtered["phase_move_factors"] = tuple(filtered["phase_move_factors"].items())
        return cls(**filtered)


DEFAULT_SOLVER_CONFIG = SolverConfig()

# 提示使用的短预算
HINT_SOLVER_CONFIG = SolverConfig(time_limit_ms=2000, max_nodes=20000)
