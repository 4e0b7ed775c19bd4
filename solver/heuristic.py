"""
启发式局面评估

搜索在预算内未找到解时的回退结果。所有数值都是近似值。
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import numpy as np

from klondike.state import GameState

from .config import HeuristicWeights
from .features import FeatureBuilder, PositionFeatures


@dataclass(frozen=True)
class HeuristicEstimate:
    """
    启发式评估结果

    Attributes:
        win_probability: 胜率估计 (百分比，[5, 95])
        estimated_moves: 预计还需要的步数 ([5, 150])
        is_winnable: 是否可能获胜
        phase: 对局阶段
        features: 评估所用的特征
        approximate: 恒为 True
    """
    win_probability: int
    estimated_moves: int
    is_winnable: bool
    phase: str
    features: PositionFeatures
    approximate: bool = field(default=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "winProbability": self.win_probability,
            "estimatedMoves": self.estimated_moves,
            "isWinnable": self.is_winnable,
            "phase": self.phase,
            "approximate": self.approximate,
            "features": self.features.to_dict(),
        }


def _estimate_moves(features: PositionFeatures, weights: HeuristicWeights) -> float:
    remaining = features.remaining_cards
    estimate = round(remaining * weights.move_factor(features.phase))
    estimate += features.hidden_cards * weights.hidden_move_factor

    # 可选移动多时路线更短，少时通常要反复翻牌库
    if features.available_moves >= 5:
        estimate -= 5
    elif features.available_moves <= 1:
        estimate += 10
    return estimate


def evaluate_position(
    state: GameState,
    weights: Optional[HeuristicWeights] = None,
) -> HeuristicEstimate:
    """
    评估局面

    胜率为特征向量与线性权重的点积；无移动且牌库、废牌堆都为空时视为死局。

    Args:
        state: 游戏状态
        weights: 启发式权重

    Returns:
        HeuristicEstimate (approximate=True)
    """
    if weights is None:
        weights = HeuristicWeights()

    builder = FeatureBuilder(large_stock_threshold=weights.large_stock_threshold)
    features = builder.extract(state)

    if state.is_complete:
        return HeuristicEstimate(
            win_probability=int(weights.max_confidence),
            estimated_moves=weights.min_moves,
            is_winnable=True,
            phase=features.phase,
            features=features,
        )

    vec = builder.to_vector(features)
    raw = float(np.dot(vec, np.asarray(weights.win_weights, dtype=np.float32)))
    win_probability = int(round(float(
        np.clip(raw, weights.min_confidence, weights.max_confidence)
    )))

    deadlocked = (
        features.available_moves == 0
        and features.stock_size == 0
        and features.waste_size == 0
    )
    if deadlocked:
        win_probability = int(weights.min_confidence)
        moves = weights.max_moves
    else:
        moves = int(np.clip(
            _estimate_moves(features, weights), weights.min_moves, weights.max_moves
        ))

    return HeuristicEstimate(
        win_probability=win_probability,
        estimated_moves=moves,
        is_winnable=not deadlocked and win_probability > weights.winnable_threshold,
        phase=features.phase,
        features=features,
    )
