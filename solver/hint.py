"""
单步提示

先用短预算求解，找到解时返回解的第一步；
否则返回优先级最高的合法移动，再否则建议翻牌。
"""
from typing import Optional
import logging

from klondike.moves import MoveGenerator
from klondike.rules import RuleEngine
from klondike.state import GameState

from .config import SolverConfig, HINT_SOLVER_CONFIG
from .search import Solver, SolutionStep

logger = logging.getLogger(__name__)


def suggest_move(
    state: GameState,
    config: Optional[SolverConfig] = None,
) -> Optional[SolutionStep]:
    """
    给出下一步建议

    Args:
        state: 当前状态
        config: 求解配置，默认使用短预算的 HINT_SOLVER_CONFIG

    Returns:
        建议的一步；对局已完成或无事可做时返回 None
    """
    if state.is_complete:
        return None

    result = Solver(config or HINT_SOLVER_CONFIG).solve(state)
    if result.found and result.sequence:
        return result.sequence[0]

    moves = MoveGenerator(state).generate_all()
    if moves:
        logger.debug(f"No solution for hint, falling back to {moves[0]}")
        return SolutionStep.of_move(moves[0])

    if RuleEngine.can_draw(state):
        return SolutionStep.draw()
    return None
