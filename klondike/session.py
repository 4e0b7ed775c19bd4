"""
游戏会话

包装不可变的 GameState，提供撤销/重做、移动历史与对局摘要。
统计层只读取 summary()，不接触引擎内部表示。
"""
from dataclasses import dataclass
from typing import List, Optional
import logging
import random
import time

from .autocomplete import iter_auto_moves, MAX_AUTOCOMPLETE_MOVES
from .dealer import deal_new_game
from .moves import Move
from .rules import RuleEngine
from .state import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSummary:
    """
    对局摘要 (提供给统计/持久化层)

    Attributes:
        completed: 是否获胜
        moves: 移动数
        draws: 翻牌次数
        time_elapsed_ms: 用时 (毫秒)
        score: 分数
        draw_mode: 翻牌模式
        hints_used: 使用提示次数
    """
    completed: bool
    moves: int
    draws: int
    time_elapsed_ms: int
    score: int
    draw_mode: int
    hints_used: int = 0


@dataclass
class _Snapshot:
    state: GameState
    history_len: int
    draw_count: int


class GameSession:
    """
    单局游戏会话

    所有状态变化都通过 RuleEngine 产生新的 GameState，会话只保存引用。
    翻牌也可以撤销，但不计入移动数。
    """

    def __init__(self, state: Optional[GameState] = None):
        self._state: GameState = state if state is not None else deal_new_game()
        self.history: List[Move] = []
        self.draw_count = 0
        self.hints_used = 0
        self._undo_stack: List[_Snapshot] = []
        self._redo_stack: List[_Snapshot] = []
        self._redo_history: List[Move] = []
        self._finished_at: Optional[float] = None

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def can_undo(self) -> bool:
        return len(self._undo_stack) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._redo_stack) > 0

    @property
    def is_won(self) -> bool:
        return self._state.is_complete

    def new_game(
        self,
        draw_mode: Optional[int] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> GameState:
        """
        重新开局

        Args:
            draw_mode: 翻牌模式，默认沿用当前局
            seed: 随机种子
            rng: 随机源
        """
        if draw_mode is None:
            draw_mode = self._state.draw_mode
        self._state = deal_new_game(draw_mode=draw_mode, rng=rng, seed=seed)
        self.history = []
        self.draw_count = 0
        self.hints_used = 0
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._redo_history.clear()
        self._finished_at = None
        logger.debug(f"New game dealt (draw mode {draw_mode})")
        return self._state

    def _push_undo(self):
        self._undo_stack.append(
            _Snapshot(self._state, len(self.history), self.draw_count)
        )
        self._redo_stack.clear()
        self._redo_history.clear()

    def _mark_finished(self):
        if self._state.is_complete and self._finished_at is None:
            self._finished_at = time.time()
            logger.info(f"Game won in {self._state.moves} moves")

    def make_move(self, move: Move) -> bool:
        """
        执行移动

        Returns:
            是否成功；失败时会话状态不变
        """
        result = RuleEngine.apply_move(move, self._state)
        if not result.success:
            logger.debug(f"Rejected move {move}: {result.error}")
            return False
        self._push_undo()
        self._state = result.state
        self.history.append(move)
        self._mark_finished()
        return True

    def draw(self) -> bool:
        """
        翻牌 (牌库为空时回收废牌堆)

        Returns:
            牌库和废牌堆都为空时返回 False
        """
        if not RuleEngine.can_draw(self._state):
            return False
        self._push_undo()
        self._state = RuleEngine.draw_from_stock(self._state)
        self.draw_count += 1
        return True

    def auto_complete(self, max_moves: int = MAX_AUTOCOMPLETE_MOVES) -> int:
        """
        自动收牌，整个过程作为一步撤销

        Returns:
            执行的移动数
        """
        applied = 0
        snapshot = _Snapshot(self._state, len(self.history), self.draw_count)
        for move, state in iter_auto_moves(self._state, max_moves):
            self._state = state
            self.history.append(move)
            applied += 1
        if applied:
            self._undo_stack.append(snapshot)
            self._redo_stack.clear()
            self._redo_history.clear()
            self._mark_finished()
        return applied

    def undo(self) -> bool:
        if not self._undo_stack:
            return False
        snapshot = self._undo_stack.pop()
        self._redo_stack.append(
            _Snapshot(self._state, len(self.history), self.draw_count)
        )
        self._redo_history = self.history[snapshot.history_len:] + self._redo_history
        self.history = self.history[:snapshot.history_len]
        self._state = snapshot.state
        self.draw_count = snapshot.draw_count
        return True

    def redo(self) -> bool:
        if not self._redo_stack:
            return False
        snapshot = self._redo_stack.pop()
        self._undo_stack.append(
            _Snapshot(self._state, len(self.history), self.draw_count)
        )
        replayed = snapshot.history_len - len(self.history)
        self.history = self.history + self._redo_history[:replayed]
        self._redo_history = self._redo_history[replayed:]
        self._state = snapshot.state
        self.draw_count = snapshot.draw_count
        return True

    def record_hint(self):
        self.hints_used += 1

    def summary(self) -> GameSummary:
        """生成对局摘要"""
        end = self._finished_at if self._finished_at is not None else time.time()
        elapsed = max(0, int((end - self._state.start_time) * 1000))
        return GameSummary(
            completed=self._state.is_complete,
            moves=self._state.moves,
            draws=self.draw_count,
            time_elapsed_ms=elapsed,
            score=self._state.score,
            draw_mode=self._state.draw_mode,
            hints_used=self.hints_used,
        )

    def efficiency(self, optimal_moves: int) -> Optional[int]:
        """
        与分析基线相比的效率 (百分比)

        Args:
            optimal_moves: 求解器给出的移动数

        Returns:
            未完成或没有移动时返回 None
        """
        actual = len(self.history)
        if not self._state.is_complete or actual == 0:
            return None
        return round(optimal_moves / actual * 100)
