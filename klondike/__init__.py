"""
Klondike Engine - 纯游戏逻辑 (无求解器依赖)

Modules:
    cards: 牌定义与编码
    moves: 牌堆标识、移动与移动生成
    deck: 牌组生成与洗牌
    state: 不可变游戏状态
    dealer: 发牌
    rules: 规则引擎
    autocomplete: 自动收牌
    serialize: 线格式编解码
    session: 撤销/重做会话与对局摘要
"""
from .cards import (
    Card,
    Suit,
    Color,
    Rank,
    SUITS,
    RANKS,
    DECK_SIZE,
    RANK_TO_STR,
    STR_TO_RANK,
    cards_to_array,
    cards_to_str,
)

from .errors import (
    KlondikeError,
    InvalidMoveError,
    MalformedStateError,
    InvariantViolation,
)

from .moves import (
    PileKind,
    PileId,
    Move,
    MoveResult,
    MoveGenerator,
    FOUNDATION_IDS,
    TABLEAU_IDS,
)

from .deck import create_deck, shuffle_deck, create_shuffled_deck

from .state import GameState, DRAW_MODES

from .dealer import deal_new_game, new_game_like

from .rules import RuleEngine

from .autocomplete import (
    find_autocomplete_moves,
    auto_complete,
    iter_auto_moves,
    can_auto_complete,
    is_safe_to_auto_move,
)

from .serialize import (
    serialize_card,
    deserialize_card,
    serialize_game_state,
    deserialize_game_state,
    serialize_move,
    deserialize_move,
    state_key,
    describe_game_state,
)

from .session import GameSession, GameSummary

__all__ = [
    # cards
    "Card",
    "Suit",
    "Color",
    "Rank",
    "SUITS",
    "RANKS",
    "DECK_SIZE",
    "RANK_TO_STR",
    "STR_TO_RANK",
    "cards_to_array",
    "cards_to_str",
    # errors
    "KlondikeError",
    "InvalidMoveError",
    "MalformedStateError",
    "InvariantViolation",
    # moves
    "PileKind",
    "PileId",
    "Move",
    "MoveResult",
    "MoveGenerator",
    "FOUNDATION_IDS",
    "TABLEAU_IDS",
    # deck
    "create_deck",
    "shuffle_deck",
    "create_shuffled_deck",
    # state
    "GameState",
    "DRAW_MODES",
    # dealer
    "deal_new_game",
    "new_game_like",
    # rules
    "RuleEngine",
    # autocomplete
    "find_autocomplete_moves",
    "auto_complete",
    "iter_auto_moves",
    "can_auto_complete",
    "is_safe_to_auto_move",
    # serialize
    "serialize_card",
    "deserialize_card",
    "serialize_game_state",
    "deserialize_game_state",
    "serialize_move",
    "deserialize_move",
    "state_key",
    "describe_game_state",
    # session
    "GameSession",
    "GameSummary",
]
