"""
发牌

第 k 列 (从 1 开始) 得到 k 张牌，只有最上面一张正面朝上，
剩余 24 张按发牌顺序成为牌库。
"""
from typing import List, Optional
import random
import time

from .cards import Card
from .deck import create_shuffled_deck
from .state import GameState, NUM_TABLEAUX, DRAW_MODES


def deal_new_game(
    draw_mode: int = 1,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    deck: Optional[List[Card]] = None,
) -> GameState:
    """
    发一局新牌

    按行发牌: 第一轮给第 1-7 列各一张，第二轮给第 2-7 列各一张，依此类推，
    因此每列中牌的先后顺序与牌组顺序一致。

    Args:
        draw_mode: 每次翻牌数 (1 或 3)
        rng: 随机源
        seed: 随机种子 (未提供 rng 时使用)
        deck: 指定牌组 (用于复现特定牌局)，不提供则洗一副新牌

    Returns:
        初始游戏状态
    """
    if draw_mode not in DRAW_MODES:
        raise ValueError(f"Invalid draw mode: {draw_mode}")

    if deck is None:
        deck = create_shuffled_deck(rng=rng, seed=seed)
    elif len(deck) != 52:
        raise ValueError(f"Deck must contain 52 cards, got {len(deck)}")

    columns: List[List[Card]] = [[] for _ in range(NUM_TABLEAUX)]
    card_index = 0
    for col in range(NUM_TABLEAUX):
        for row in range(col, NUM_TABLEAUX):
            columns[row].append(deck[card_index].flipped(False))
            card_index += 1

    # 翻开每列最上面的牌
    for pile in columns:
        pile[-1] = pile[-1].flipped(True)

    stock = tuple(card.flipped(False) for card in deck[card_index:])

    return GameState(
        stock=stock,
        waste=(),
        foundations=((), (), (), ()),
        tableaux=tuple(tuple(pile) for pile in columns),
        draw_mode=draw_mode,
        moves=0,
        score=0,
        start_time=time.time(),
        is_complete=False,
    )


def new_game_like(
    state: GameState,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> GameState:
    """使用相同的翻牌模式重新发牌"""
    return deal_new_game(draw_mode=state.draw_mode, rng=rng, seed=seed)
