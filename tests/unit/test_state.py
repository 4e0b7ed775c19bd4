"""游戏状态测试"""
import dataclasses

import pytest
import numpy as np

from klondike.cards import Suit
from klondike.errors import InvariantViolation
from klondike.moves import PileId
from klondike.state import GameState


class TestGameStateInitial:
    """GameState 初始化测试"""

    def test_initial_state(self):
        state = GameState.initial(seed=42)
        assert state.draw_mode == 1
        assert state.total_cards == 52
        assert state.hidden_count == 21
        assert state.empty_columns == 0
        assert state.foundation_count == 0

    def test_initial_deterministic(self):
        assert GameState.initial(seed=42).tableaux == GameState.initial(seed=42).tableaux

    def test_empty(self):
        state = GameState.empty(draw_mode=3)
        assert state.total_cards == 0
        assert state.empty_columns == 7

    def test_invalid_draw_mode(self):
        with pytest.raises(ValueError):
            GameState.empty(draw_mode=2)

    def test_wrong_pile_counts(self):
        with pytest.raises(ValueError):
            GameState(stock=(), waste=(), foundations=((),) * 3, tableaux=((),) * 7)
        with pytest.raises(ValueError):
            GameState(stock=(), waste=(), foundations=((),) * 4, tableaux=((),) * 6)


class TestImmutability:
    """不可变性测试"""

    def test_frozen(self, dealt_state):
        with pytest.raises(dataclasses.FrozenInstanceError):
            dealt_state.moves = 3

    def test_piles_are_tuples(self, dealt_state):
        assert isinstance(dealt_state.stock, tuple)
        assert all(isinstance(p, tuple) for p in dealt_state.tableaux)

    def test_with_piles_shares_untouched(self, dealt_state):
        new_state = dealt_state.with_piles({PileId.WASTE: ()}, moves=1)
        assert new_state.moves == 1
        assert dealt_state.moves == 0
        for old, new in zip(dealt_state.tableaux, new_state.tableaux):
            assert old is new
        assert new_state.stock is dealt_state.stock


class TestPileAccess:
    """牌堆访问测试"""

    def test_get_pile(self, dealt_state):
        assert dealt_state.get_pile(PileId.STOCK) is dealt_state.stock
        assert dealt_state.get_pile(PileId.TABLEAU_3) is dealt_state.tableaux[2]
        assert dealt_state.get_pile("tableau-7") is dealt_state.tableaux[6]

    def test_foundation_lookup(self, make_state):
        state = make_state(foundations={"h": 3})
        assert state.foundation_rank(Suit.HEARTS) == 3
        assert state.foundation_rank(Suit.SPADES) == 0
        assert len(state.get_pile(PileId.FOUNDATION_HEARTS)) == 3

    def test_iter_piles(self, dealt_state):
        ids = [pile_id for pile_id, _ in dealt_state.iter_piles()]
        assert len(ids) == 13
        assert ids[0] == PileId.STOCK

    def test_card_vector(self, dealt_state):
        vec = dealt_state.card_vector()
        assert np.array_equal(vec, np.ones(52, dtype=vec.dtype))


class TestInvariants:
    """不变量校验测试"""

    def test_dealt_state_valid(self, dealt_state):
        dealt_state.check_invariants()

    def test_missing_card(self, dealt_state):
        broken = dealt_state.with_piles({PileId.STOCK: dealt_state.stock[1:]})
        with pytest.raises(InvariantViolation):
            broken.check_invariants()

    def test_duplicate_card(self, dealt_state):
        broken = dealt_state.with_piles({PileId.STOCK: dealt_state.stock[1:] + dealt_state.stock[2:3]})
        with pytest.raises(InvariantViolation):
            broken.check_invariants()

    def test_face_up_stock(self, dealt_state):
        stock = (dealt_state.stock[0].flipped(True),) + dealt_state.stock[1:]
        with pytest.raises(InvariantViolation):
            dealt_state.with_piles({PileId.STOCK: stock}).check_invariants()

    def test_foundation_out_of_order(self, make_state):
        state = make_state(foundations={"s": 2})
        pile = (state.foundations[0][1], state.foundations[0][0])
        with pytest.raises(InvariantViolation):
            state.with_piles({PileId.FOUNDATION_SPADES: pile}).check_invariants()

    def test_broken_tableau_sequence(self, make_state):
        # Q♠ 上放 J♣: 同色
        state = make_state(tableaux={1: ["sc1", "cb1"]})
        with pytest.raises(InvariantViolation):
            state.check_invariants()

    def test_face_down_above_face_up(self, make_state):
        state = make_state(tableaux={1: ["sc1", "hb0"]})
        with pytest.raises(InvariantViolation):
            state.check_invariants()

    def test_complete_flag(self, make_state):
        state = make_state(foundations={"s": 13, "h": 13, "d": 13, "c": 13})
        assert state.is_complete
        state.check_invariants()
        with pytest.raises(InvariantViolation):
            dataclasses.replace(state, is_complete=False).check_invariants()
