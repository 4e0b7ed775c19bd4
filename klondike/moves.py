"""
牌堆标识、移动定义与移动生成器

一次 Move 表示把某个牌堆顶部连续的若干张牌移到另一个牌堆。
从牌库翻牌 (stock -> waste) 不是 Move，由 RuleEngine.draw_from_stock 处理。
"""
from enum import Enum
from dataclasses import dataclass
from typing import List, Tuple, Optional, TYPE_CHECKING
import time

from .cards import Card, Suit, SUITS, Rank
from .errors import InvalidMoveError

if TYPE_CHECKING:
    from .state import GameState


class PileKind(Enum):
    """牌堆类型"""
    STOCK = "stock"
    WASTE = "waste"
    FOUNDATION = "foundation"
    TABLEAU = "tableau"


class PileId(str, Enum):
    """牌堆标识 (值即线格式中的名称)"""
    STOCK = "stock"
    WASTE = "waste"
    FOUNDATION_SPADES = "foundation-spades"
    FOUNDATION_HEARTS = "foundation-hearts"
    FOUNDATION_DIAMONDS = "foundation-diamonds"
    FOUNDATION_CLUBS = "foundation-clubs"
    TABLEAU_1 = "tableau-1"
    TABLEAU_2 = "tableau-2"
    TABLEAU_3 = "tableau-3"
    TABLEAU_4 = "tableau-4"
    TABLEAU_5 = "tableau-5"
    TABLEAU_6 = "tableau-6"
    TABLEAU_7 = "tableau-7"

    @property
    def kind(self) -> PileKind:
        if self is PileId.STOCK:
            return PileKind.STOCK
        if self is PileId.WASTE:
            return PileKind.WASTE
        if self.value.startswith("foundation-"):
            return PileKind.FOUNDATION
        return PileKind.TABLEAU

    @property
    def suit(self) -> Suit:
        """基础牌堆对应的花色"""
        if self.kind != PileKind.FOUNDATION:
            raise ValueError(f"{self.value} is not a foundation pile")
        return FOUNDATION_IDS_TO_SUIT[self]

    @property
    def number(self) -> int:
        """牌桌列号 (1-7)"""
        if self.kind != PileKind.TABLEAU:
            raise ValueError(f"{self.value} is not a tableau pile")
        return int(self.value.rsplit("-", 1)[1])

    @classmethod
    def foundation(cls, suit: Suit) -> 'PileId':
        return cls(f"foundation-{suit.full_name}")

    @classmethod
    def tableau(cls, number: int) -> 'PileId':
        if not 1 <= number <= 7:
            raise ValueError(f"Invalid tableau number: {number}")
        return cls(f"tableau-{number}")


FOUNDATION_IDS: Tuple[PileId, ...] = tuple(PileId.foundation(s) for s in SUITS)
TABLEAU_IDS: Tuple[PileId, ...] = tuple(PileId.tableau(n) for n in range(1, 8))
FOUNDATION_IDS_TO_SUIT = dict(zip(FOUNDATION_IDS, SUITS))


@dataclass(frozen=True, slots=True)
class Move:
    """
    不可变移动表示

    Attributes:
        from_pile: 源牌堆
        to_pile: 目标牌堆
        cards: 被移动的牌 (自下而上)
        timestamp: 毫秒时间戳
    """
    from_pile: PileId
    to_pile: PileId
    cards: Tuple[Card, ...]
    timestamp: float = 0.0

    @classmethod
    def create(cls, from_pile: PileId, to_pile: PileId, cards) -> 'Move':
        """创建移动并记录当前时间"""
        return cls(
            from_pile=PileId(from_pile),
            to_pile=PileId(to_pile),
            cards=tuple(cards),
            timestamp=time.time() * 1000,
        )

    @property
    def base_card(self) -> Optional[Card]:
        """被移动序列最底下的牌"""
        return self.cards[0] if self.cards else None

    @property
    def move_type(self) -> str:
        """如 "waste_to_foundation" """
        return f"{self.from_pile.kind.value}_to_{self.to_pile.kind.value}"

    def __len__(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        cards = " ".join(c.label for c in self.cards)
        return f"{cards}: {self.from_pile.value} -> {self.to_pile.value}"


@dataclass(frozen=True)
class MoveResult:
    """
    移动结果

    规则引擎不为非法移动抛异常，而是返回 success=False 的结果。
    """
    success: bool
    state: Optional['GameState'] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, state: 'GameState') -> 'MoveResult':
        return cls(success=True, state=state)

    @classmethod
    def fail(cls, error: str) -> 'MoveResult':
        return cls(success=False, error=error)

    def unwrap(self) -> 'GameState':
        """获取新状态，失败时抛出 InvalidMoveError"""
        if not self.success or self.state is None:
            raise InvalidMoveError(self.error or "Invalid move")
        return self.state

    def __bool__(self) -> bool:
        return self.success


class MoveGenerator:
    """
    合法移动生成器

    根据当前状态生成所有可能的移动，按类别分组。
    生成的每个移动都通过 RuleEngine.is_valid_move 校验。
    """

    def __init__(self, state: 'GameState'):
        """
        Args:
            state: 当前游戏状态
        """
        self.state = state

    def _is_valid(self, move: Move) -> bool:
        from .rules import RuleEngine
        return RuleEngine.is_valid_move(move, self.state)

    def gen_foundation_moves(self) -> List[Move]:
        """生成废牌堆/牌桌顶牌到基础牌堆的移动"""
        result = []
        sources = [PileId.WASTE] + list(TABLEAU_IDS)
        for source in sources:
            pile = self.state.get_pile(source)
            if not pile or not pile[-1].face_up:
                continue
            card = pile[-1]
            move = Move(source, PileId.foundation(card.suit), (card,))
            if self._is_valid(move):
                result.append(move)
        return result

    def gen_tableau_moves(self) -> List[Move]:
        """
        生成牌桌之间的移动

        对每个可移动序列，从最长到最短尝试所有长度，
        目标为除源列外的所有列。翻开暗牌或把 K 放到空列的移动排在前面。
        """
        from .rules import RuleEngine

        preferred = []
        others = []
        for source in TABLEAU_IDS:
            pile = self.state.get_pile(source)
            movable = RuleEngine.get_movable_tableau_cards(pile)
            for length in range(len(movable), 0, -1):
                cards = tuple(movable[-length:])
                remaining = pile[:len(pile) - length]
                for dest in TABLEAU_IDS:
                    if dest == source:
                        continue
                    dest_pile = self.state.get_pile(dest)
                    # 整列 K 挪到另一空列等于原地不动
                    if not dest_pile and not remaining:
                        continue
                    move = Move(source, dest, cards)
                    if not self._is_valid(move):
                        continue
                    exposes_hidden = bool(remaining) and not remaining[-1].face_up
                    king_to_empty = not dest_pile and cards[0].rank == Rank.KING
                    if exposes_hidden or king_to_empty:
                        preferred.append(move)
                    else:
                        others.append(move)
        return preferred + others

    def gen_waste_moves(self) -> List[Move]:
        """生成废牌堆顶牌到牌桌的移动"""
        result = []
        waste = self.state.waste
        if not waste:
            return result
        card = waste[-1]
        for dest in TABLEAU_IDS:
            move = Move(PileId.WASTE, dest, (card,))
            if self._is_valid(move):
                result.append(move)
        return result

    def generate_all(self) -> List[Move]:
        """
        按优先级生成所有移动

        Returns:
            基础牌堆移动 + 牌桌移动 + 废牌堆到牌桌移动
        """
        return (
            self.gen_foundation_moves()
            + self.gen_tableau_moves()
            + self.gen_waste_moves()
        )

    def count(self) -> int:
        """当前可立即执行的移动数"""
        return len(self.generate_all())
