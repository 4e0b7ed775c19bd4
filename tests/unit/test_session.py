"""游戏会话测试"""
import pytest

from klondike.autocomplete import iter_auto_moves
from klondike.moves import Move, PileId
from klondike.serialize import deserialize_card, state_key
from klondike.session import GameSession, GameSummary


def cards(*tokens):
    return tuple(deserialize_card(t) for t in tokens)


@pytest.fixture
def endgame(make_state):
    return make_state(
        tableaux={
            1: ["sd1", "hc1", "sb1"],
            2: ["hd1", "sc1", "hb1"],
            3: ["dd1", "cc1", "db1"],
            4: ["cd1", "dc1", "cb1"],
        },
        foundations={"s": 10, "h": 10, "d": 10, "c": 10},
    )


class TestNewGame:
    """开局测试"""

    def test_default_session(self):
        session = GameSession()
        assert session.state.total_cards == 52
        assert not session.can_undo
        assert not session.can_redo

    def test_new_game_resets(self, dealt_state):
        session = GameSession(dealt_state)
        session.draw()
        session.record_hint()
        state = session.new_game(seed=1, draw_mode=3)
        assert state.draw_mode == 3
        assert session.draw_count == 0
        assert session.hints_used == 0
        assert not session.can_undo

    def test_new_game_keeps_draw_mode(self):
        session = GameSession()
        session.new_game(draw_mode=3, seed=1)
        assert session.new_game(seed=2).draw_mode == 3


class TestMoves:
    """移动与翻牌测试"""

    def test_make_move(self, endgame):
        session = GameSession(endgame)
        move = Move(PileId.TABLEAU_1, PileId.FOUNDATION_SPADES, cards("sb1"))
        assert session.make_move(move)
        assert session.history == [move]
        assert session.state.moves == 1

    def test_rejected_move_keeps_state(self, endgame):
        session = GameSession(endgame)
        move = Move(PileId.TABLEAU_1, PileId.FOUNDATION_HEARTS, cards("sb1"))
        assert not session.make_move(move)
        assert session.state is endgame
        assert session.history == []
        assert not session.can_undo

    def test_draw_not_counted_as_move(self, dealt_state):
        session = GameSession(dealt_state)
        assert session.draw()
        assert session.draw_count == 1
        assert session.state.moves == 0
        assert len(session.state.waste) == 1

    def test_draw_with_nothing_left(self, make_state):
        session = GameSession(make_state(stock=[], waste=[]))
        assert not session.draw()
        assert not session.can_undo


class TestUndoRedo:
    """撤销/重做测试"""

    def test_undo_move(self, endgame):
        session = GameSession(endgame)
        session.make_move(Move(PileId.TABLEAU_1, PileId.FOUNDATION_SPADES, cards("sb1")))
        assert session.undo()
        assert session.state is endgame
        assert session.history == []
        assert session.can_redo

    def test_undo_draw(self, dealt_state):
        session = GameSession(dealt_state)
        session.draw()
        session.undo()
        assert session.state is dealt_state
        assert session.draw_count == 0

    def test_redo_restores(self, endgame):
        session = GameSession(endgame)
        first = Move(PileId.TABLEAU_1, PileId.FOUNDATION_SPADES, cards("sb1"))
        second = Move(PileId.TABLEAU_2, PileId.FOUNDATION_HEARTS, cards("hb1"))
        session.make_move(first)
        session.make_move(second)
        after = session.state
        session.undo()
        session.undo()
        assert session.redo()
        assert session.history == [first]
        assert session.redo()
        assert session.history == [first, second]
        assert session.state is after
        assert not session.redo()

    def test_new_move_clears_redo(self, endgame):
        session = GameSession(endgame)
        session.make_move(Move(PileId.TABLEAU_1, PileId.FOUNDATION_SPADES, cards("sb1")))
        session.undo()
        session.make_move(Move(PileId.TABLEAU_2, PileId.FOUNDATION_HEARTS, cards("hb1")))
        assert not session.can_redo

    def test_undo_empty(self):
        assert not GameSession().undo()


class TestAutoComplete:
    """会话自动收牌测试"""

    def test_wins_and_single_undo(self, endgame):
        session = GameSession(endgame)
        assert session.auto_complete() == 12
        assert session.is_won
        assert len(session.history) == 12
        session.undo()
        assert state_key(session.state) == state_key(endgame)
        assert session.history == []

    def test_history_matches_engine(self, endgame):
        session = GameSession(endgame)
        session.auto_complete(max_moves=4)
        expected = [move for move, _ in iter_auto_moves(endgame, max_moves=4)]
        assert [(m.from_pile, m.cards) for m in session.history] == [
            (m.from_pile, m.cards) for m in expected
        ]
        assert session.state.foundation_count == endgame.foundation_count + 4

    def test_nothing_to_do(self, dealt_state):
        session = GameSession(dealt_state)
        applied = session.auto_complete()
        assert session.can_undo == (applied > 0)


class TestSummary:
    """对局摘要测试"""

    def test_summary_fields(self, endgame):
        session = GameSession(endgame)
        session.record_hint()
        session.auto_complete()
        summary = session.summary()
        assert isinstance(summary, GameSummary)
        assert summary.completed
        assert summary.moves == 12
        assert summary.draws == 0
        assert summary.hints_used == 1
        assert summary.time_elapsed_ms >= 0

    def test_efficiency(self, endgame):
        session = GameSession(endgame)
        assert session.efficiency(12) is None
        session.auto_complete()
        assert session.efficiency(12) == 100
        assert session.efficiency(6) == 50
