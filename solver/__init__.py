"""
Solver Layer - 有界搜索与启发式评估

Modules:
    config: 搜索预算与启发式权重
    features: 局面特征提取
    heuristic: 启发式局面评估
    search: 显式栈深度优先求解器
    hint: 单步提示
    api: 求解请求处理
    metrics: 批量求解指标
"""
from .config import (
    SolverConfig,
    HeuristicWeights,
    DEFAULT_SOLVER_CONFIG,
    HINT_SOLVER_CONFIG,
)

from .features import (
    PositionFeatures,
    FeatureBuilder,
    FEATURE_NAMES,
    FEATURE_DIM,
    game_phase,
)

from .heuristic import HeuristicEstimate, evaluate_position

from .search import (
    Solver,
    SolveResult,
    SolutionStep,
    SearchStats,
    replay,
    solve,
)

from .hint import suggest_move

from .api import handle_solve_request, result_to_response

from .metrics import SeriesStats, SolveMetrics, DealRecord

__all__ = [
    # config
    "SolverConfig",
    "HeuristicWeights",
    "DEFAULT_SOLVER_CONFIG",
    "HINT_SOLVER_CONFIG",
    # features
    "PositionFeatures",
    "FeatureBuilder",
    "FEATURE_NAMES",
    "FEATURE_DIM",
    "game_phase",
    # heuristic
    "HeuristicEstimate",
    "evaluate_position",
    # search
    "Solver",
    "SolveResult",
    "SolutionStep",
    "SearchStats",
    "replay",
    "solve",
    # hint
    "suggest_move",
    # api
    "handle_solve_request",
    "result_to_response",
    # metrics
    "SeriesStats",
    "SolveMetrics",
    "DealRecord",
]
