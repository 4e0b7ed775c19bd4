"""
规则引擎 - 放置判定、移动合法性验证、状态转移

所有方法都是纯函数，无状态。非法移动返回失败结果，不抛异常，不修改输入状态。
"""
from typing import List, Sequence, Optional

from .cards import Card, Rank, DECK_SIZE
from .moves import Move, MoveResult, PileId, PileKind
from .state import GameState


class RuleEngine:
    """
    Klondike 规则引擎

    提供放置判定、可移动序列识别、移动验证与状态转移等功能
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def can_place_on_foundation(card: Card, foundation_cards: Sequence[Card]) -> bool:
        """
        检查牌能否放到基础牌堆

        Args:
            card: 要放置的牌
            foundation_cards: 基础牌堆当前的牌

        Returns:
            空牌堆只接受 A；否则必须同花色且比顶牌大 1
        """
        if not foundation_cards:
            return card.rank == Rank.ACE
        top = foundation_cards[-1]
        return card.suit == top.suit and card.rank == top.rank + 1

    @staticmethod
    def can_place_on_tableau(cards_to_place: Sequence[Card], tableau_cards: Sequence[Card]) -> bool:
        """
        检查一组牌能否放到牌桌列上

        只检查被移动序列最底下的一张牌与目标列顶牌的关系。

        Args:
            cards_to_place: 被移动的牌 (自下而上)
            tableau_cards: 目标列当前的牌

        Returns:
            空列只接受 K；否则必须颜色相反且比顶牌小 1
        """
        if not cards_to_place:
            return False
        card = cards_to_place[0]
        if not tableau_cards:
            return card.rank == Rank.KING
        top = tableau_cards[-1]
        return card.rank == top.rank - 1 and card.color != top.color

    @staticmethod
    def is_valid_sequence(cards: Sequence[Card]) -> bool:
        """检查牌序列是否全部正面朝上、颜色交替且逐张递减 1"""
        for i, card in enumerate(cards):
            if not card.face_up:
                return False
            if i > 0:
                prev = cards[i - 1]
                if card.rank != prev.rank - 1 or card.color == prev.color:
                    return False
        return True

    @staticmethod
    def get_movable_tableau_cards(pile: Sequence[Card]) -> List[Card]:
        """
        获取牌桌列末尾可以整体移动的牌

        从末尾向前扫描，遇到背面朝上的牌或序列断开即停止。

        Args:
            pile: 牌桌列

        Returns:
            可移动的牌 (自下而上)
        """
        if not pile:
            return []
        start = len(pile) - 1
        if not pile[start].face_up:
            return []
        while start > 0:
            below = pile[start - 1]
            upper = pile[start]
            if not below.face_up:
                break
            if below.rank != upper.rank + 1 or below.color == upper.color:
                break
            start -= 1
        return list(pile[start:])

    @staticmethod
    def _validate(move: Move, state: GameState) -> Optional[str]:
        """返回非法原因，合法时返回 None"""
        if not move.cards:
            return "No cards to move"
        if move.from_pile == move.to_pile:
            return "Source and destination are the same pile"

        from_kind = move.from_pile.kind
        to_kind = move.to_pile.kind
        if from_kind == PileKind.STOCK:
            return "Cards cannot be moved out of the stock; draw instead"
        if to_kind not in (PileKind.FOUNDATION, PileKind.TABLEAU):
            return f"Cannot move cards onto {move.to_pile.value}"

        from_cards = state.get_pile(move.from_pile)
        n = len(move.cards)
        if len(from_cards) < n:
            return "Source pile does not hold the moved cards"
        trailing = from_cards[len(from_cards) - n:]
        for pile_card, moved in zip(trailing, move.cards):
            if not pile_card.same_card(moved):
                return "Moved cards are not the top cards of the source pile"
        if not all(c.face_up for c in trailing):
            return "Face-down cards cannot be moved"

        if from_kind == PileKind.TABLEAU:
            if n > len(RuleEngine.get_movable_tableau_cards(from_cards)):
                return "Cards do not form a movable sequence"
        elif n != 1:
            return f"Only one card can be moved from {move.from_pile.value}"

        to_cards = state.get_pile(move.to_pile)
        if to_kind == PileKind.FOUNDATION:
            if n != 1:
                return "Only one card can be moved to a foundation"
            card = trailing[0]
            if card.suit != move.to_pile.suit:
                return f"{card.label} does not belong on {move.to_pile.value}"
            if not RuleEngine.can_place_on_foundation(card, to_cards):
                return f"{card.label} cannot be placed on {move.to_pile.value}"
            return None

        if not RuleEngine.can_place_on_tableau(trailing, to_cards):
            return f"{trailing[0].label} cannot be placed on {move.to_pile.value}"
        return None

    @staticmethod
    def is_valid_move(move: Move, state: GameState) -> bool:
        """
        验证移动是否合法

        Args:
            move: 移动
            state: 当前状态

        Returns:
            是否合法
        """
        return RuleEngine._validate(move, state) is None

    @staticmethod
    def apply_move(move: Move, state: GameState) -> MoveResult:
        """
        执行移动

        非法移动返回失败结果，输入状态不受影响。
        源列露出的背面牌会被翻开，移动数加 1，并重新计算是否完成。

        Args:
            move: 移动
            state: 当前状态

        Returns:
            MoveResult
        """
        error = RuleEngine._validate(move, state)
        if error is not None:
            return MoveResult.fail(error)

        n = len(move.cards)
        from_cards = state.get_pile(move.from_pile)
        moved = from_cards[len(from_cards) - n:]
        remaining = from_cards[:len(from_cards) - n]

        if move.from_pile.kind == PileKind.TABLEAU and remaining and not remaining[-1].face_up:
            remaining = remaining[:-1] + (remaining[-1].flipped(True),)

        to_cards = state.get_pile(move.to_pile) + moved
        foundation_count = state.foundation_count
        if move.to_pile.kind == PileKind.FOUNDATION:
            foundation_count += n
        if move.from_pile.kind == PileKind.FOUNDATION:
            foundation_count -= n

        new_state = state.with_piles(
            {move.from_pile: remaining, move.to_pile: to_cards},
            moves=state.moves + 1,
            is_complete=foundation_count == DECK_SIZE,
        )
        return MoveResult.ok(new_state)

    @staticmethod
    def make_move(state: GameState, move: Move) -> MoveResult:
        """apply_move 的别名 (参数顺序为 状态, 移动)"""
        return RuleEngine.apply_move(move, state)

    @staticmethod
    def draw_from_stock(state: GameState) -> GameState:
        """
        从牌库翻牌

        牌库非空时，从牌库前端取 min(draw_mode, 牌库张数) 张，
        翻开后按原顺序放到废牌堆顶；牌库为空时，废牌堆倒序、翻面后成为新牌库。
        翻牌不计入移动数。

        Args:
            state: 当前状态

        Returns:
            新状态
        """
        if state.stock:
            count = min(state.draw_mode, len(state.stock))
            drawn = tuple(c.flipped(True) for c in state.stock[:count])
            return state.with_piles({
                PileId.STOCK: state.stock[count:],
                PileId.WASTE: state.waste + drawn,
            })

        recycled = tuple(c.flipped(False) for c in reversed(state.waste))
        return state.with_piles({
            PileId.STOCK: recycled,
            PileId.WASTE: (),
        })

    @staticmethod
    def can_draw(state: GameState) -> bool:
        """牌库或废牌堆中是否还有牌"""
        return bool(state.stock or state.waste)

    @staticmethod
    def is_game_complete(state: GameState) -> bool:
        """四个基础牌堆共 52 张即完成"""
        return state.foundation_count == DECK_SIZE
