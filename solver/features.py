"""
局面特征提取

把 GameState 转换为启发式评估使用的特征向量
"""
from dataclasses import dataclass
from typing import Dict
import numpy as np

from klondike.cards import DECK_SIZE
from klondike.moves import MoveGenerator
from klondike.state import GameState

# 阶段划分 (按完成进度)
OPENING_MOVES = 5
PHASE_THRESHOLDS = (
    (0.1, "early"),
    (0.3, "mid-early"),
    (0.6, "middle"),
    (0.85, "late"),
)

FEATURE_NAMES = (
    "bias",
    "progress",
    "available_moves",
    "hidden_cards",
    "empty_columns",
    "large_stock",
    "no_moves",
)
FEATURE_DIM = len(FEATURE_NAMES)


def game_phase(progress: float, moves: int) -> str:
    """
    根据完成进度与已走步数判断对局阶段

    Args:
        progress: 基础牌堆张数 / 52
        moves: 已执行的移动数

    Returns:
        opening / early / mid-early / middle / late / endgame
    """
    if moves <= OPENING_MOVES:
        return "opening"
    for threshold, name in PHASE_THRESHOLDS:
        if progress < threshold:
            return name
    return "endgame"


@dataclass(frozen=True)
class PositionFeatures:
    """
    局面特征

    Attributes:
        foundation_cards: 基础牌堆总张数
        progress: 完成进度 [0, 1]
        available_moves: 当前可执行的移动数 (不含翻牌)
        hidden_cards: 牌桌暗牌数
        empty_columns: 空列数
        stock_size: 牌库张数
        waste_size: 废牌堆张数
        moves: 已执行的移动数
        phase: 对局阶段
    """
    foundation_cards: int
    progress: float
    available_moves: int
    hidden_cards: int
    empty_columns: int
    stock_size: int
    waste_size: int
    moves: int
    phase: str

    @property
    def remaining_cards(self) -> int:
        return DECK_SIZE - self.foundation_cards

    def to_dict(self) -> Dict[str, float]:
        return {
            "foundationCards": self.foundation_cards,
            "progress": round(self.progress, 4),
            "availableMoves": self.available_moves,
            "hiddenCards": self.hidden_cards,
            "emptyColumns": self.empty_columns,
            "stockSize": self.stock_size,
            "wasteSize": self.waste_size,
        }


class FeatureBuilder:
    """
    特征构建器

    Example:
        builder = FeatureBuilder()
        features = builder.extract(state)
        vec = builder.to_vector(features)
    """

    def __init__(self, large_stock_threshold: int = 16):
        """
        Args:
            large_stock_threshold: 牌库超过此张数视为过大
        """
        self.large_stock_threshold = large_stock_threshold

    def extract(self, state: GameState) -> PositionFeatures:
        foundation_cards = state.foundation_count
        progress = foundation_cards / DECK_SIZE
        return PositionFeatures(
            foundation_cards=foundation_cards,
            progress=progress,
            available_moves=MoveGenerator(state).count(),
            hidden_cards=state.hidden_count,
            empty_columns=state.empty_columns,
            stock_size=len(state.stock),
            waste_size=len(state.waste),
            moves=state.moves,
            phase=game_phase(progress, state.moves),
        )

    def to_vector(self, features: PositionFeatures) -> np.ndarray:
        """
        特征 -> (FEATURE_DIM,) float32 向量

        顺序见 FEATURE_NAMES
        """
        return np.array([
            1.0,
            features.progress,
            features.available_moves,
            features.hidden_cards,
            features.empty_columns,
            1.0 if features.stock_size > self.large_stock_threshold else 0.0,
            1.0 if features.available_moves == 0 else 0.0,
        ], dtype=np.float32)

    def build(self, state: GameState) -> np.ndarray:
        """直接从状态构建特征向量"""
        return self.to_vector(self.extract(state))
