"""
牌组生成与洗牌

洗牌使用可注入的随机源，便于测试与求解器基准复现。
"""
from typing import List, Optional
import random

from .cards import Card, SUITS, RANKS


def create_deck() -> List[Card]:
    """创建按花色、牌面值排序的 52 张牌 (全部背面朝上)"""
    return [Card(suit, rank, face_up=False) for suit in SUITS for rank in RANKS]


def shuffle_deck(deck: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Fisher-Yates 洗牌

    从最后一个位置开始，与 [0, i] 内均匀随机的位置交换。

    Args:
        deck: 原牌组 (不会被修改)
        rng: 随机源，默认使用新的未设种子的 random.Random

    Returns:
        洗好的新列表
    """
    if rng is None:
        rng = random.Random()
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def create_shuffled_deck(
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> List[Card]:
    """
    创建洗好的牌组

    Args:
        rng: 随机源 (优先)
        seed: 随机种子，仅在未提供 rng 时使用
    """
    if rng is None and seed is not None:
        rng = random.Random(seed)
    return shuffle_deck(create_deck(), rng)
