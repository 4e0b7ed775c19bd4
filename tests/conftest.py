"""测试共用的局面构造工具"""
from typing import Dict, List, Optional
import time

import pytest

from klondike.cards import Card, SUITS, DECK_SIZE
from klondike.deck import create_deck
from klondike.serialize import deserialize_card
from klondike.state import GameState


def build_state(
    tableaux: Optional[Dict[int, List[str]]] = None,
    foundations: Optional[Dict[str, int]] = None,
    waste: Optional[List[str]] = None,
    stock: Optional[List[str]] = None,
    draw_mode: int = 1,
    moves: int = 0,
) -> GameState:
    """
    由牌编码构造局面

    Args:
        tableaux: 列号 -> 牌编码列表 (自下而上)
        foundations: 花色字母 -> 顶牌牌面值 (从 A 连续放到该值)
        waste: 废牌堆牌编码
        stock: 牌库牌编码；为 None 时其余所有牌背面朝上放入牌库
    """
    tableaux = tableaux or {}
    foundations = foundations or {}

    foundation_piles = []
    for suit in SUITS:
        top = foundations.get(suit.value, 0)
        foundation_piles.append(tuple(Card(suit, r, face_up=True) for r in range(1, top + 1)))

    tableau_piles = tuple(
        tuple(deserialize_card(t) for t in tableaux.get(n, [])) for n in range(1, 8)
    )
    waste_pile = tuple(deserialize_card(t) for t in (waste or []))

    if stock is None:
        used = {c.id for pile in foundation_piles for c in pile}
        used.update(c.id for pile in tableau_piles for c in pile)
        used.update(c.id for c in waste_pile)
        stock_pile = tuple(c for c in create_deck() if c.id not in used)
    else:
        stock_pile = tuple(deserialize_card(t) for t in stock)

    foundation_count = sum(len(p) for p in foundation_piles)
    return GameState(
        stock=stock_pile,
        waste=waste_pile,
        foundations=tuple(foundation_piles),
        tableaux=tableau_piles,
        draw_mode=draw_mode,
        moves=moves,
        start_time=time.time(),
        is_complete=foundation_count == DECK_SIZE,
    )


@pytest.fixture
def make_state():
    return build_state


@pytest.fixture
def dealt_state():
    return GameState.initial(seed=42)
