"""自动收牌测试"""
import pytest

from klondike.autocomplete import (
    MAX_AUTOCOMPLETE_MOVES,
    auto_complete,
    iter_auto_moves,
    can_auto_complete,
    find_autocomplete_moves,
    is_safe_to_auto_move,
)
from klondike.moves import PileId, PileKind
from klondike.serialize import deserialize_card

# 四列 K-Q-J，基础牌堆都到 10
ENDGAME_TABLEAUX = {
    1: ["sd1", "hc1", "sb1"],
    2: ["hd1", "sc1", "hb1"],
    3: ["dd1", "cc1", "db1"],
    4: ["cd1", "dc1", "cb1"],
}
ENDGAME_FOUNDATIONS = {"s": 10, "h": 10, "d": 10, "c": 10}


class TestIsSafe:
    """安全判定测试"""

    def test_aces_and_twos_always_safe(self, make_state):
        state = make_state()
        assert is_safe_to_auto_move(deserialize_card("s11"), state)
        assert is_safe_to_auto_move(deserialize_card("h21"), state)

    def test_safe_when_opposite_colors_caught_up(self, make_state):
        state = make_state(foundations={"h": 2, "s": 2, "c": 2})
        assert is_safe_to_auto_move(deserialize_card("h31"), state)

    def test_unsafe_when_opposite_color_behind(self, make_state):
        state = make_state(foundations={"h": 2, "s": 1, "c": 2})
        assert not is_safe_to_auto_move(deserialize_card("h31"), state)

    def test_same_color_ignored(self, make_state):
        state = make_state(foundations={"h": 2, "s": 2, "c": 2, "d": 0})
        assert is_safe_to_auto_move(deserialize_card("h31"), state)


class TestFindMoves:
    """候选移动测试"""

    def test_waste_checked_first(self, make_state):
        state = make_state(waste=["h11"], tableaux={1: ["s11"]})
        moves = find_autocomplete_moves(state)
        assert [m.from_pile for m in moves] == [PileId.WASTE, PileId.TABLEAU_1]

    def test_face_down_top_ignored(self, make_state):
        state = make_state(tableaux={1: ["s10"]}, stock=[])
        assert find_autocomplete_moves(state) == []

    def test_unsafe_card_skipped(self, make_state):
        state = make_state(foundations={"h": 2, "s": 1, "c": 2}, waste=["h31"])
        assert not can_auto_complete(state)


class TestAutoComplete:
    """auto_complete 测试"""

    def test_finishes_endgame(self, make_state):
        state = make_state(tableaux=ENDGAME_TABLEAUX, foundations=ENDGAME_FOUNDATIONS)
        final = auto_complete(state)
        assert final.is_complete
        assert final.moves == 12
        final.check_invariants()

    def test_input_unchanged(self, make_state):
        state = make_state(tableaux=ENDGAME_TABLEAUX, foundations=ENDGAME_FOUNDATIONS)
        auto_complete(state)
        assert state.foundation_count == 40

    def test_max_moves(self, make_state):
        state = make_state(tableaux=ENDGAME_TABLEAUX, foundations=ENDGAME_FOUNDATIONS)
        assert auto_complete(state, max_moves=3).moves == 3

    def test_stops_without_candidates(self, dealt_state):
        final = auto_complete(dealt_state)
        final.check_invariants()
        assert final.moves <= MAX_AUTOCOMPLETE_MOVES


class TestIterAutoMoves:
    """iter_auto_moves 测试"""

    def test_yields_each_step(self, make_state):
        state = make_state(tableaux=ENDGAME_TABLEAUX, foundations=ENDGAME_FOUNDATIONS)
        steps = list(iter_auto_moves(state))
        assert len(steps) == 12
        assert all(move.to_pile.kind == PileKind.FOUNDATION for move, _ in steps)
        assert [s.foundation_count for _, s in steps] == list(range(41, 53))
        assert steps[-1][1].is_complete

    def test_respects_max_moves(self, make_state):
        state = make_state(tableaux=ENDGAME_TABLEAUX, foundations=ENDGAME_FOUNDATIONS)
        assert len(list(iter_auto_moves(state, max_moves=5))) == 5

    def test_empty_without_candidates(self, make_state):
        state = make_state(tableaux={1: ["sd1"]})
        assert list(iter_auto_moves(state)) == []
