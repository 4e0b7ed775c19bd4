"""
游戏状态定义

使用不可变数据结构，支持:
- 哈希 (用于求解器的访问集合)
- 结构共享: 每次状态转移只替换被修改的牌堆，其余牌堆元组在新旧状态间共享
- 易于序列化
"""
from dataclasses import dataclass, replace
from typing import Dict, Tuple, Optional, Iterator
import random
import time

import numpy as np

from .cards import Card, Suit, SUITS, DECK_SIZE, NUM_RANKS, cards_to_array
from .moves import PileId, PileKind
from .errors import InvariantViolation

Pile = Tuple[Card, ...]

DRAW_MODES: Tuple[int, ...] = (1, 3)
NUM_TABLEAUX = 7


@dataclass(frozen=True)
class GameState:
    """
    不可变游戏状态

    只能由发牌器创建，之后只能被规则引擎的纯函数替换，不能原地修改。

    Attributes:
        stock: 牌库 (背面朝上，索引 0 为下一张被翻出的牌)
        waste: 废牌堆 (正面朝上，最后一张在最上面)
        foundations: 基础牌堆，顺序为 ♠ ♥ ♦ ♣
        tableaux: 七列牌桌，索引 0 对应 tableau-1
        draw_mode: 每次翻牌数 (1 或 3)
        moves: 已执行的移动数 (翻牌不计)
        score: 分数
        start_time: 开局时间 (秒)
        is_complete: 是否已完成
    """
    stock: Pile
    waste: Pile
    foundations: Tuple[Pile, ...]
    tableaux: Tuple[Pile, ...]
    draw_mode: int = 1
    moves: int = 0
    score: int = 0
    start_time: float = 0.0
    is_complete: bool = False

    def __post_init__(self):
        if self.draw_mode not in DRAW_MODES:
            raise ValueError(f"Invalid draw mode: {self.draw_mode}")
        if len(self.foundations) != len(SUITS):
            raise ValueError(f"Expected 4 foundations, got {len(self.foundations)}")
        if len(self.tableaux) != NUM_TABLEAUX:
            raise ValueError(f"Expected 7 tableaux, got {len(self.tableaux)}")

    @classmethod
    def initial(
        cls,
        draw_mode: int = 1,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> 'GameState':
        """
        创建初始游戏状态

        Args:
            draw_mode: 每次翻牌数
            seed: 随机种子
            rng: 随机源

        Returns:
            发好牌的初始状态
        """
        from .dealer import deal_new_game
        return deal_new_game(draw_mode=draw_mode, rng=rng, seed=seed)

    @classmethod
    def empty(cls, draw_mode: int = 1) -> 'GameState':
        """所有牌堆为空的状态 (用于构造测试局面)"""
        return cls(
            stock=(),
            waste=(),
            foundations=((),) * len(SUITS),
            tableaux=((),) * NUM_TABLEAUX,
            draw_mode=draw_mode,
            start_time=time.time(),
        )

    def get_pile(self, pile_id: PileId) -> Pile:
        """按标识获取牌堆"""
        pile_id = PileId(pile_id)
        kind = pile_id.kind
        if kind == PileKind.STOCK:
            return self.stock
        if kind == PileKind.WASTE:
            return self.waste
        if kind == PileKind.FOUNDATION:
            return self.foundations[SUITS.index(pile_id.suit)]
        return self.tableaux[pile_id.number - 1]

    def with_piles(self, piles: Dict[PileId, Pile], **changes) -> 'GameState':
        """
        替换若干牌堆后的新状态

        未涉及的牌堆直接共享。

        Args:
            piles: 牌堆标识 -> 新牌堆
            **changes: 其他字段的修改 (moves、is_complete 等)
        """
        stock = self.stock
        waste = self.waste
        foundations = list(self.foundations)
        tableaux = list(self.tableaux)

        for pile_id, cards in piles.items():
            kind = pile_id.kind
            cards = tuple(cards)
            if kind == PileKind.STOCK:
                stock = cards
            elif kind == PileKind.WASTE:
                waste = cards
            elif kind == PileKind.FOUNDATION:
                foundations[SUITS.index(pile_id.suit)] = cards
            else:
                tableaux[pile_id.number - 1] = cards

        return replace(
            self,
            stock=stock,
            waste=waste,
            foundations=tuple(foundations),
            tableaux=tuple(tableaux),
            **changes,
        )

    def foundation(self, suit: Suit) -> Pile:
        return self.foundations[SUITS.index(suit)]

    def tableau(self, number: int) -> Pile:
        """获取第 number 列 (1-7)"""
        return self.tableaux[number - 1]

    def foundation_rank(self, suit: Suit) -> int:
        """基础牌堆当前的最高牌面值 (空为 0)"""
        pile = self.foundation(suit)
        return pile[-1].rank if pile else 0

    @property
    def foundation_count(self) -> int:
        return sum(len(f) for f in self.foundations)

    @property
    def hidden_count(self) -> int:
        """牌桌上背面朝上的牌数"""
        return sum(1 for pile in self.tableaux for c in pile if not c.face_up)

    @property
    def empty_columns(self) -> int:
        return sum(1 for pile in self.tableaux if not pile)

    def iter_piles(self) -> Iterator[Tuple[PileId, Pile]]:
        """依次遍历所有牌堆"""
        yield PileId.STOCK, self.stock
        yield PileId.WASTE, self.waste
        for suit, pile in zip(SUITS, self.foundations):
            yield PileId.foundation(suit), pile
        for i, pile in enumerate(self.tableaux):
            yield PileId.tableau(i + 1), pile

    def all_cards(self) -> Iterator[Card]:
        for _, pile in self.iter_piles():
            yield from pile

    @property
    def total_cards(self) -> int:
        return sum(len(pile) for _, pile in self.iter_piles())

    def card_vector(self) -> np.ndarray:
        """所有牌的 52 维计数向量"""
        return cards_to_array(self.all_cards())

    def check_invariants(self):
        """
        校验状态不变量

        Raises:
            InvariantViolation: 任一不变量被破坏
        """
        # 52 张牌，不重复不丢失
        counts = self.card_vector()
        if not np.array_equal(counts, np.ones(DECK_SIZE, dtype=counts.dtype)):
            missing = int(np.sum(counts == 0))
            duplicated = int(np.sum(counts > 1))
            raise InvariantViolation(
                f"Card conservation violated: {missing} missing, {duplicated} duplicated"
            )

        for card in self.stock:
            if card.face_up:
                raise InvariantViolation(f"Face-up card in stock: {card.label}")
        for card in self.waste:
            if not card.face_up:
                raise InvariantViolation(f"Face-down card in waste: {card.label}")

        # 基础牌堆: 同花色，A 起严格递增
        for suit, pile in zip(SUITS, self.foundations):
            for expected_rank, card in enumerate(pile, start=1):
                if card.suit != suit or card.rank != expected_rank or not card.face_up:
                    raise InvariantViolation(
                        f"Foundation {suit.full_name} out of order at {card.label}"
                    )
            if len(pile) > NUM_RANKS:
                raise InvariantViolation(f"Foundation {suit.full_name} overfull")

        # 牌桌: 暗牌只在底部，明牌部分为交替颜色递减序列
        for number, pile in enumerate(self.tableaux, start=1):
            seen_face_up = False
            prev = None
            for card in pile:
                if card.face_up:
                    if seen_face_up and (
                        prev.rank != card.rank + 1 or prev.color == card.color
                    ):
                        raise InvariantViolation(
                            f"Tableau {number} breaks sequence at {card.label}"
                        )
                    seen_face_up = True
                elif seen_face_up:
                    raise InvariantViolation(
                        f"Tableau {number} has face-down card above face-up cards"
                    )
                prev = card

        if self.is_complete != (self.foundation_count == DECK_SIZE):
            raise InvariantViolation("is_complete flag out of sync with foundations")
