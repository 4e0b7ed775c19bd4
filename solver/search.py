"""
有界深度优先求解器

在规则引擎的状态转移函数上做显式栈深度优先搜索:
- 访问集合以 state_key 为键，只在一次 solve 调用内有效
- 深度上限、节点上限与周期性检查的墙钟截止时间
- 找到的第一个完成局面即返回 (可行解，不保证最短)
- 未找到时返回启发式评估
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging
import time

from klondike.errors import InvalidMoveError
from klondike.moves import Move, MoveGenerator, PileId
from klondike.rules import RuleEngine
from klondike.serialize import state_key
from klondike.state import GameState

from .config import SolverConfig, HeuristicWeights
from .heuristic import HeuristicEstimate, evaluate_position

logger = logging.getLogger(__name__)

# 停止原因
STOP_SOLVED = "solved"
STOP_EXHAUSTED = "exhausted"
STOP_TIMEOUT = "timeout"
STOP_NODE_LIMIT = "node_limit"


@dataclass(frozen=True)
class SolutionStep:
    """
    解中的一步: 一次移动或一次翻牌

    Attributes:
        kind: "move" 或 "draw"
        move: kind 为 "move" 时的移动
    """
    kind: str
    move: Optional[Move] = None

    @classmethod
    def of_move(cls, move: Move) -> 'SolutionStep':
        return cls(kind="move", move=move)

    @classmethod
    def draw(cls) -> 'SolutionStep':
        return cls(kind="draw")

    @property
    def is_draw(self) -> bool:
        return self.kind == "draw"

    def apply(self, state: GameState) -> GameState:
        """
        在状态上执行这一步

        Raises:
            InvalidMoveError: 移动非法或没有牌可翻
        """
        if self.is_draw:
            if not RuleEngine.can_draw(state):
                raise InvalidMoveError("Nothing to draw: stock and waste are empty")
            return RuleEngine.draw_from_stock(state)
        return RuleEngine.apply_move(self.move, state).unwrap()

    def to_dict(self, move_number: int) -> Dict[str, Any]:
        """线格式: {move, from, to, card, moveNumber}"""
        if self.is_draw:
            return {
                "move": "draw_stock",
                "from": PileId.STOCK.value,
                "to": PileId.WASTE.value,
                "card": "stock",
                "moveNumber": move_number,
            }
        return {
            "move": self.move.move_type,
            "from": self.move.from_pile.value,
            "to": self.move.to_pile.value,
            "card": self.move.base_card.label,
            "moveNumber": move_number,
        }

    def __str__(self) -> str:
        return "draw" if self.is_draw else str(self.move)


@dataclass
class SearchStats:
    """
    搜索统计

    Attributes:
        nodes_expanded: 展开的节点数
        max_depth_reached: 到达的最大深度
        elapsed_ms: 用时 (毫秒)
        stop_reason: solved / exhausted / timeout / node_limit
        depth_limited: 是否有节点因深度上限被截断
    """
    nodes_expanded: int = 0
    max_depth_reached: int = 0
    elapsed_ms: float = 0.0
    stop_reason: str = STOP_EXHAUSTED
    depth_limited: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodesExpanded": self.nodes_expanded,
            "maxDepthReached": self.max_depth_reached,
            "elapsedMs": round(self.elapsed_ms, 1),
            "stopReason": self.stop_reason,
            "depthLimited": self.depth_limited,
        }


@dataclass
class SolveResult:
    """
    求解结果

    found 为 True 时 sequence 可以从输入状态重放到完成局面；
    否则 heuristic 给出近似评估。
    """
    found: bool
    sequence: List[SolutionStep] = field(default_factory=list)
    heuristic: Optional[HeuristicEstimate] = None
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def num_steps(self) -> int:
        return len(self.sequence)

    @property
    def num_moves(self) -> int:
        """不含翻牌的移动数"""
        return sum(1 for step in self.sequence if not step.is_draw)

    def sequence_dicts(self) -> List[Dict[str, Any]]:
        return [step.to_dict(i) for i, step in enumerate(self.sequence, start=1)]


@dataclass
class _Node:
    """搜索节点，通过父指针回溯路径，避免复制路径列表"""
    state: GameState
    parent: Optional['_Node']
    step: Optional[SolutionStep]
    depth: int

    def path(self) -> List[SolutionStep]:
        steps = []
        node = self
        while node is not None and node.step is not None:
            steps.append(node.step)
            node = node.parent
        steps.reverse()
        return steps


def replay(state: GameState, sequence: Sequence[SolutionStep]) -> GameState:
    """
    从 state 开始依次执行 sequence

    Returns:
        最终状态

    Raises:
        InvalidMoveError: 某一步非法
    """
    current = state
    for i, step in enumerate(sequence, start=1):
        try:
            current = step.apply(current)
        except InvalidMoveError as e:
            raise InvalidMoveError(f"Step {i} ({step}) is illegal: {e}") from e
    return current


class Solver:
    """
    求解器

    实例只保存配置，多次 solve 调用之间不共享任何状态。

    Example:
        solver = Solver(SolverConfig(time_limit_ms=2000))
        result = solver.solve(state)
        if result.found:
            final = replay(state, result.sequence)
    """

    def __init__(
        self,
        config: Optional[SolverConfig] = None,
        weights: Optional[HeuristicWeights] = None,
    ):
        self.config = config or SolverConfig()
        self.weights = weights or HeuristicWeights()

    def _children(
        self,
        node: _Node,
        visited: set,
    ) -> List[_Node]:
        """
        按优先级生成子节点

        基础牌堆移动、牌桌移动、废牌堆到牌桌移动，最后是翻牌。
        已访问的子状态直接丢弃。
        """
        state = node.state
        depth = node.depth + 1
        children = []
        for move in MoveGenerator(state).generate_all():
            result = RuleEngine.apply_move(move, state)
            if not result.success:
                continue
            if state_key(result.state) in visited:
                continue
            children.append(_Node(result.state, node, SolutionStep.of_move(move), depth))

        if RuleEngine.can_draw(state) and not (self.config.draw_only_when_stuck and children):
            drawn = RuleEngine.draw_from_stock(state)
            if state_key(drawn) not in visited:
                children.append(_Node(drawn, node, SolutionStep.draw(), depth))
        return children

    def _search(
        self,
        root: GameState,
        max_depth: int,
        time_limit_ms: int,
    ) -> Tuple[Optional[_Node], SearchStats]:
        config = self.config
        stats = SearchStats()
        start = time.monotonic()
        deadline = start + time_limit_ms / 1000.0

        visited = set()
        stack: List[_Node] = [_Node(root, None, None, 0)]

        while stack:
            node = stack.pop()
            if node.state.is_complete:
                stats.stop_reason = STOP_SOLVED
                stats.elapsed_ms = (time.monotonic() - start) * 1000
                return node, stats

            key = state_key(node.state)
            if key in visited:
                continue

            if stats.nodes_expanded % config.check_interval == 0 and time.monotonic() >= deadline:
                stats.stop_reason = STOP_TIMEOUT
                break
            if stats.nodes_expanded >= config.max_nodes:
                stats.stop_reason = STOP_NODE_LIMIT
                break

            visited.add(key)
            stats.nodes_expanded += 1
            stats.max_depth_reached = max(stats.max_depth_reached, node.depth)

            if node.depth >= max_depth:
                stats.depth_limited = True
                continue

            # 逆序压栈，使优先级最高的子节点最先弹出
            stack.extend(reversed(self._children(node, visited)))

        stats.elapsed_ms = (time.monotonic() - start) * 1000
        return None, stats

    def solve(
        self,
        state: GameState,
        max_depth: Optional[int] = None,
        time_limit_ms: Optional[int] = None,
    ) -> SolveResult:
        """
        搜索从 state 到完成局面的步骤序列

        超时、超深度或超节点数都不是错误，而是返回 found=False 与启发式评估。

        Args:
            state: 起始状态
            max_depth: 深度上限，默认取配置
            time_limit_ms: 时间上限 (毫秒)，默认取配置

        Returns:
            SolveResult
        """
        if max_depth is None:
            max_depth = self.config.max_depth
        if time_limit_ms is None:
            time_limit_ms = self.config.time_limit_ms
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        if time_limit_ms < 0:
            raise ValueError(f"time_limit_ms must be non-negative, got {time_limit_ms}")

        node, stats = self._search(state, max_depth, time_limit_ms)
        logger.debug(
            f"Search stopped ({stats.stop_reason}): {stats.nodes_expanded} nodes, "
            f"depth {stats.max_depth_reached}, {stats.elapsed_ms:.0f}ms"
        )

        if node is not None:
            sequence = node.path()
            logger.info(f"Solution found: {len(sequence)} steps in {stats.elapsed_ms:.0f}ms")
            return SolveResult(found=True, sequence=sequence, stats=stats)

        estimate = evaluate_position(state, self.weights)
        logger.info(
            f"No solution within budget ({stats.stop_reason}), "
            f"heuristic win probability {estimate.win_probability}%"
        )
        return SolveResult(found=False, heuristic=estimate, stats=stats)


def solve(
    state: GameState,
    config: Optional[SolverConfig] = None,
    **kwargs,
) -> SolveResult:
    """Solver(config).solve(state, ...) 的便捷函数"""
    return Solver(config).solve(state, **kwargs)
