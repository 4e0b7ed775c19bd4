"""
牌的定义与编码

Klondike 使用一副 52 张的标准扑克牌：
- 四种花色 ♠ ♥ ♦ ♣
- 每种花色 A(1) 到 K(13)
"""
from enum import Enum, IntEnum
from dataclasses import dataclass, replace
from typing import Iterable, Tuple, Dict
import numpy as np


class Rank(IntEnum):
    """特殊牌面值"""
    ACE = 1
    JACK = 11
    QUEEN = 12
    KING = 13


class Color(Enum):
    """花色颜色"""
    RED = "red"
    BLACK = "black"


class Suit(Enum):
    """花色 (值为线格式中使用的字母)"""
    SPADES = "s"
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"

    @property
    def symbol(self) -> str:
        return SUIT_SYMBOLS[self]

    @property
    def color(self) -> Color:
        if self in (Suit.HEARTS, Suit.DIAMONDS):
            return Color.RED
        return Color.BLACK

    @property
    def full_name(self) -> str:
        return self.name.lower()

    @classmethod
    def from_letter(cls, letter: str) -> 'Suit':
        return cls(letter)


# 花色顺序 (与基础牌堆顺序一致)
SUITS: Tuple[Suit, ...] = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)

RANKS: Tuple[int, ...] = tuple(range(1, 14))

NUM_RANKS = 13
DECK_SIZE = 52

SUIT_SYMBOLS: Dict[Suit, str] = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
}

# 牌面值到显示字符的映射
RANK_TO_STR: Dict[int, str] = {
    1: 'A', 2: '2', 3: '3', 4: '4', 5: '5', 6: '6', 7: '7',
    8: '8', 9: '9', 10: '10', 11: 'J', 12: 'Q', 13: 'K',
}

# 显示字符到牌面值的映射
STR_TO_RANK: Dict[str, int] = {v: k for k, v in RANK_TO_STR.items()}


@dataclass(frozen=True, slots=True)
class Card:
    """
    不可变的牌

    翻面不会修改原对象，而是通过 flipped() 生成新的牌。
    牌的身份由 id 决定 (花色 + 牌面值)，与朝向无关。

    Attributes:
        suit: 花色
        rank: 牌面值 1-13
        face_up: 是否正面朝上
    """
    suit: Suit
    rank: int
    face_up: bool = False

    def __post_init__(self):
        if not 1 <= self.rank <= NUM_RANKS:
            raise ValueError(f"Invalid rank: {self.rank}")

    @property
    def id(self) -> str:
        return f"{self.suit.symbol}-{self.rank}"

    @property
    def color(self) -> Color:
        return self.suit.color

    @property
    def is_red(self) -> bool:
        return self.suit.color == Color.RED

    @property
    def index(self) -> int:
        """在 52 维向量中的位置"""
        return card_index(self.suit, self.rank)

    @property
    def label(self) -> str:
        """如 "Q♥" """
        return f"{RANK_TO_STR[self.rank]}{self.suit.symbol}"

    def flipped(self, face_up: bool) -> 'Card':
        """返回指定朝向的新牌"""
        if self.face_up == face_up:
            return self
        return replace(self, face_up=face_up)

    def same_card(self, other: 'Card') -> bool:
        """按身份比较 (忽略朝向)"""
        return self.suit == other.suit and self.rank == other.rank

    def __str__(self) -> str:
        if not self.face_up:
            return f"[{self.label}]"
        return self.label


def card_index(suit: Suit, rank: int) -> int:
    """花色与牌面值到 0-51 索引"""
    return SUITS.index(suit) * NUM_RANKS + (rank - 1)


def cards_to_array(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌集合转换为 52 维计数向量

    第 i 维为索引 i 对应的牌出现的次数，合法局面中每一维至多为 1。

    Args:
        cards: 牌序列

    Returns:
        52 维 numpy 数组
    """
    arr = np.zeros(DECK_SIZE, dtype=np.int32)
    for card in cards:
        arr[card.index] += 1
    return arr


def cards_to_str(cards: Iterable[Card]) -> str:
    """将牌序列转换为可读字符串"""
    return " ".join(str(c) for c in cards)


def is_opposite_color(a: Card, b: Card) -> bool:
    return a.color != b.color
