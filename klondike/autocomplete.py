"""
自动收牌

反复把"安全"的牌移到基础牌堆:
- A 和 2 总是安全的
- 其余牌只有当两个异色基础牌堆都已到达 rank - 1 时才安全
"""
from typing import Iterator, List, Optional, Tuple

from .cards import Card, SUITS
from .moves import Move, PileId, TABLEAU_IDS
from .rules import RuleEngine
from .state import GameState

# 自动收牌的最大步数
MAX_AUTOCOMPLETE_MOVES = 52


def is_safe_to_auto_move(card: Card, state: GameState) -> bool:
    """判断牌是否可以安全地自动移到基础牌堆"""
    if card.rank <= 2:
        return True
    required_rank = card.rank - 1
    for suit in SUITS:
        if suit.color == card.color:
            continue
        if state.foundation_rank(suit) < required_rank:
            return False
    return True


def _foundation_target(card: Card, state: GameState) -> Optional[PileId]:
    if RuleEngine.can_place_on_foundation(card, state.foundation(card.suit)):
        return PileId.foundation(card.suit)
    return None


def find_autocomplete_moves(state: GameState) -> List[Move]:
    """
    查找所有可以自动执行的基础牌堆移动

    先检查废牌堆顶牌，再依次检查第 1-7 列的顶牌 (必须正面朝上)。

    Args:
        state: 当前状态

    Returns:
        候选移动列表
    """
    moves = []
    sources = [PileId.WASTE] + list(TABLEAU_IDS)
    for source in sources:
        pile = state.get_pile(source)
        if not pile:
            continue
        top = pile[-1]
        if not top.face_up:
            continue
        target = _foundation_target(top, state)
        if target is not None and is_safe_to_auto_move(top, state):
            moves.append(Move.create(source, target, (top,)))
    return moves


def iter_auto_moves(
    state: GameState,
    max_moves: int = MAX_AUTOCOMPLETE_MOVES,
) -> Iterator[Tuple[Move, GameState]]:
    """
    逐步执行自动收牌

    每轮执行第一个候选移动，直到没有候选、达到步数上限或移动失败。

    Yields:
        (执行的移动, 执行后的状态)
    """
    current = state
    for _ in range(max_moves):
        candidates = find_autocomplete_moves(current)
        if not candidates:
            return
        result = RuleEngine.apply_move(candidates[0], current)
        if not result.success:
            return
        current = result.state
        yield candidates[0], current


def auto_complete(state: GameState, max_moves: int = MAX_AUTOCOMPLETE_MOVES) -> GameState:
    """
    执行自动收牌

    结果不一定是完成的局面，但一定是合法局面。

    Args:
        state: 当前状态
        max_moves: 最多执行的移动数

    Returns:
        新状态
    """
    current = state
    for _, current in iter_auto_moves(state, max_moves):
        pass
    return current


def can_auto_complete(state: GameState) -> bool:
    """是否存在可自动执行的移动"""
    return len(find_autocomplete_moves(state)) > 0
