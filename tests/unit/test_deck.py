"""牌组与发牌测试"""
import random

import pytest

from klondike.cards import DECK_SIZE
from klondike.deck import create_deck, shuffle_deck, create_shuffled_deck
from klondike.dealer import deal_new_game, new_game_like


class TestCreateDeck:
    """create_deck 测试"""

    def test_size_and_uniqueness(self):
        deck = create_deck()
        assert len(deck) == DECK_SIZE
        assert len({c.id for c in deck}) == DECK_SIZE

    def test_all_face_down(self):
        assert not any(c.face_up for c in create_deck())


class TestShuffle:
    """洗牌测试"""

    def test_is_permutation(self):
        deck = create_deck()
        shuffled = shuffle_deck(deck, random.Random(1))
        assert sorted(c.id for c in shuffled) == sorted(c.id for c in deck)

    def test_does_not_mutate_input(self):
        deck = create_deck()
        before = list(deck)
        shuffle_deck(deck, random.Random(1))
        assert deck == before

    def test_seed_reproducible(self):
        assert create_shuffled_deck(seed=7) == create_shuffled_deck(seed=7)
        assert create_shuffled_deck(seed=7) != create_shuffled_deck(seed=8)

    def test_injected_rng(self):
        a = create_shuffled_deck(rng=random.Random(3))
        b = create_shuffled_deck(rng=random.Random(3))
        assert a == b


class TestDeal:
    """发牌测试"""

    @pytest.mark.parametrize("seed", [0, 1, 42, 2024])
    def test_deal_shape(self, seed):
        state = deal_new_game(seed=seed)
        for k, pile in enumerate(state.tableaux, start=1):
            assert len(pile) == k
            assert pile[-1].face_up
            assert not any(c.face_up for c in pile[:-1])
        assert len(state.stock) == 24
        assert not any(c.face_up for c in state.stock)
        assert state.waste == ()
        assert all(f == () for f in state.foundations)
        assert state.moves == 0
        assert state.score == 0
        assert not state.is_complete

    def test_deal_conserves_cards(self):
        deal_new_game(seed=5).check_invariants()

    def test_row_wise_deal_order(self):
        deck = create_deck()
        state = deal_new_game(deck=deck)
        # 第一轮给每列各一张
        assert [pile[0].id for pile in state.tableaux] == [c.id for c in deck[:7]]
        # 第二列的第二张是第二轮的第一张
        assert state.tableaux[1][1].id == deck[7].id
        assert [c.id for c in state.stock] == [c.id for c in deck[28:]]

    def test_draw_mode(self):
        assert deal_new_game(draw_mode=3, seed=1).draw_mode == 3

    def test_invalid_draw_mode(self):
        with pytest.raises(ValueError):
            deal_new_game(draw_mode=2)

    def test_invalid_deck(self):
        with pytest.raises(ValueError):
            deal_new_game(deck=create_deck()[:51])

    def test_new_game_like(self):
        state = deal_new_game(draw_mode=3, seed=1)
        assert new_game_like(state, seed=2).draw_mode == 3
