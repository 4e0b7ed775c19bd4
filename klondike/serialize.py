"""
游戏状态序列化

线格式 (供建议层使用):
    {
        "stock": [...], "waste": [...],
        "foundations": {"s": [...], "h": [...], "d": [...], "c": [...]},
        "tableaux": {"1": [...], ..., "7": [...]},
        "drawMode": 1, "moves": 0
    }

每张牌编码为 3 个字符: 花色字母 (s/h/d/c) + 十六进制牌面值 (1-d) + 朝向 (1 正面 / 0 背面)，
例如 "hc1" 表示正面朝上的红桃 Q。
"""
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union
import json
import time

from .cards import Card, Suit, SUITS, DECK_SIZE, NUM_RANKS
from .errors import InvariantViolation, MalformedStateError
from .moves import Move, PileId
from .state import GameState, NUM_TABLEAUX, DRAW_MODES

PILE_KEYS: Tuple[str, ...] = ("stock", "waste", "foundations", "tableaux")
TABLEAU_KEYS: Tuple[str, ...] = tuple(str(n) for n in range(1, NUM_TABLEAUX + 1))


def serialize_card(card: Card) -> str:
    """牌 -> 3 字符编码"""
    return f"{card.suit.value}{card.rank:x}{'1' if card.face_up else '0'}"


def deserialize_card(token: str) -> Card:
    """
    3 字符编码 -> 牌

    Raises:
        MalformedStateError: 编码非法
    """
    if not isinstance(token, str) or len(token) != 3:
        raise MalformedStateError(f"Invalid card token: {token!r}")
    try:
        suit = Suit.from_letter(token[0])
        rank = int(token[1], 16)
    except ValueError:
        raise MalformedStateError(f"Invalid card token: {token!r}") from None
    if not 1 <= rank <= NUM_RANKS or token[2] not in "01":
        raise MalformedStateError(f"Invalid card token: {token!r}")
    return Card(suit, rank, face_up=token[2] == "1")


def _encode_pile(cards: Sequence[Card]) -> List[str]:
    return [serialize_card(c) for c in cards]


def _decode_pile(tokens: Any, name: str) -> Tuple[Card, ...]:
    if not isinstance(tokens, list):
        raise MalformedStateError(f"Pile {name} must be a list")
    return tuple(deserialize_card(t) for t in tokens)


def state_to_dict(state: GameState) -> Dict[str, Any]:
    """GameState -> 线格式字典"""
    return {
        "stock": _encode_pile(state.stock),
        "waste": _encode_pile(state.waste),
        "foundations": {
            suit.value: _encode_pile(pile)
            for suit, pile in zip(SUITS, state.foundations)
        },
        "tableaux": {
            key: _encode_pile(pile)
            for key, pile in zip(TABLEAU_KEYS, state.tableaux)
        },
        "drawMode": state.draw_mode,
        "moves": state.moves,
    }


def state_from_dict(data: Mapping[str, Any]) -> GameState:
    """
    线格式字典 -> GameState

    校验形状、52 张牌与状态不变量，不猜测缺失的内容。

    Raises:
        MalformedStateError: 缺少牌堆、编码非法、牌数不是 52、有重复牌或破坏不变量
    """
    if not isinstance(data, Mapping):
        raise MalformedStateError("Serialized state must be an object")
    missing = [k for k in PILE_KEYS if k not in data]
    if missing:
        raise MalformedStateError(f"Missing pile keys: {', '.join(missing)}")

    foundations_data = data["foundations"]
    tableaux_data = data["tableaux"]
    if not isinstance(foundations_data, Mapping):
        raise MalformedStateError("foundations must be an object")
    if not isinstance(tableaux_data, Mapping):
        raise MalformedStateError("tableaux must be an object")
    tableaux_data = {str(k): v for k, v in tableaux_data.items()}

    stock = _decode_pile(data["stock"], "stock")
    waste = _decode_pile(data["waste"], "waste")

    foundations = []
    for suit in SUITS:
        if suit.value not in foundations_data:
            raise MalformedStateError(f"Missing foundation: {suit.value}")
        pile = _decode_pile(foundations_data[suit.value], f"foundation {suit.value}")
        if any(c.suit != suit for c in pile):
            raise MalformedStateError(f"Foundation {suit.value} holds cards of another suit")
        foundations.append(pile)

    tableaux = []
    for key in TABLEAU_KEYS:
        if key not in tableaux_data:
            raise MalformedStateError(f"Missing tableau: {key}")
        tableaux.append(_decode_pile(tableaux_data[key], f"tableau {key}"))

    draw_mode = data.get("drawMode", 1)
    moves = data.get("moves", 0)
    if type(draw_mode) is not int or draw_mode not in DRAW_MODES:
        raise MalformedStateError(f"Invalid drawMode: {draw_mode!r}")
    if not isinstance(moves, int) or isinstance(moves, bool) or moves < 0:
        raise MalformedStateError(f"Invalid moves: {moves!r}")

    all_cards = list(stock) + list(waste)
    for pile in foundations + tableaux:
        all_cards.extend(pile)
    if len(all_cards) != DECK_SIZE:
        raise MalformedStateError(f"Expected 52 cards, got {len(all_cards)}")
    if len({c.id for c in all_cards}) != DECK_SIZE:
        raise MalformedStateError("Duplicate cards in serialized state")

    foundation_count = sum(len(f) for f in foundations)
    state = GameState(
        stock=stock,
        waste=waste,
        foundations=tuple(foundations),
        tableaux=tuple(tableaux),
        draw_mode=draw_mode,
        moves=moves,
        start_time=time.time(),
        is_complete=foundation_count == DECK_SIZE,
    )
    # 朝向、基础牌堆顺序与牌桌序列不合法的局面同样拒绝
    try:
        state.check_invariants()
    except InvariantViolation as e:
        raise MalformedStateError(f"Invalid state: {e}") from e
    return state


def serialize_game_state(state: GameState) -> str:
    """GameState -> 紧凑 JSON 字符串"""
    return json.dumps(state_to_dict(state), separators=(",", ":"))


def deserialize_game_state(serialized: Union[str, bytes]) -> GameState:
    """
    紧凑 JSON 字符串 -> GameState

    与 serialize_game_state 互为逆运算 (牌堆内容、顺序与朝向完全一致)。

    Raises:
        MalformedStateError: 输入无法解析或形状非法
    """
    try:
        data = json.loads(serialized)
    except (TypeError, ValueError) as e:
        raise MalformedStateError(f"Invalid JSON: {e}") from e
    return state_from_dict(data)


def serialize_move(move: Move) -> str:
    """Move -> JSON 字符串"""
    return json.dumps({
        "from": move.from_pile.value,
        "to": move.to_pile.value,
        "cards": _encode_pile(move.cards),
        "timestamp": move.timestamp,
    })


def deserialize_move(serialized: str) -> Move:
    """JSON 字符串 -> Move"""
    try:
        data = json.loads(serialized)
        return Move(
            from_pile=PileId(data["from"]),
            to_pile=PileId(data["to"]),
            cards=_decode_pile(data["cards"], "move"),
            timestamp=data.get("timestamp", 0.0),
        )
    except (TypeError, ValueError, KeyError) as e:
        raise MalformedStateError(f"Invalid move: {e}") from e


def state_key(state: GameState) -> str:
    """
    状态键 (用于求解器的访问集合)

    只包含牌堆内容，不包含移动数等计数器，使不同路径到达的同一局面合并。
    """
    parts = [
        "".join(serialize_card(c) for c in state.stock),
        "".join(serialize_card(c) for c in state.waste),
        ",".join(str(len(f)) for f in state.foundations),
    ]
    parts.extend("".join(serialize_card(c) for c in pile) for pile in state.tableaux)
    return "/".join(parts)


def describe_game_state(state: GameState) -> str:
    """
    可读的多行局面描述 (有损，不能用于还原)

    Returns:
        如:
            Stock: 24 cards
            Waste: empty
            Foundations - spades: empty, hearts: A, ...
            Tableau 1: K♠
            Tableau 2: 1 face-down, 7♥
            Moves: 0, Draw mode: 1
    """
    lines = [f"Stock: {len(state.stock)} cards"]
    if state.waste:
        lines.append(f"Waste: {state.waste[-1].label} ({len(state.waste)} total)")
    else:
        lines.append("Waste: empty")

    foundation_descs = []
    for suit, pile in zip(SUITS, state.foundations):
        top = pile[-1].label if pile else "empty"
        foundation_descs.append(f"{suit.full_name}: {top}")
    lines.append(f"Foundations - {', '.join(foundation_descs)}")

    for number, pile in enumerate(state.tableaux, start=1):
        face_down = sum(1 for c in pile if not c.face_up)
        face_up = [c.label for c in pile if c.face_up]
        desc = f"Tableau {number}: "
        if face_down:
            desc += f"{face_down} face-down"
            if face_up:
                desc += ", "
        if face_up:
            desc += "-".join(face_up)
        elif not face_down:
            desc += "empty"
        lines.append(desc)

    lines.append(f"Moves: {state.moves}, Draw mode: {state.draw_mode}")
    return "\n".join(lines)
