"""
求解请求处理

请求:
    {"gameState": "<serialized>", "maxDepth": 200, "timeLimitMs": 10000}
响应:
    {
        "success": true,
        "isWinnable": true, "optimalMoves": 87, "confidence": 95,
        "approximate": false,
        "optimalSequence": [{"move", "from", "to", "card", "moveNumber"}, ...],
        "stats": {...}
    }
序列化状态非法时返回 success=false 与 error，不猜测状态。
"""
from typing import Any, Dict, Mapping, Optional
import logging
import math

from klondike.errors import MalformedStateError
from klondike.serialize import deserialize_game_state

from .config import SolverConfig
from .search import Solver, SolveResult

logger = logging.getLogger(__name__)

# 找到完整解时报告的置信度
SOLVED_CONFIDENCE = 95


def _read_int(request: Mapping[str, Any], *keys: str) -> Optional[int]:
    for key in keys:
        if key in request and request[key] is not None:
            value = request[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise MalformedStateError(f"{key} must be a number, got {value!r}")
            if isinstance(value, float) and not math.isfinite(value):
                raise MalformedStateError(f"{key} must be finite, got {value!r}")
            value = int(value)
            if value < 0:
                raise MalformedStateError(f"{key} must be non-negative, got {value}")
            return value
    return None


def result_to_response(result: SolveResult) -> Dict[str, Any]:
    """SolveResult -> 响应字典"""
    if result.found:
        return {
            "success": True,
            "isWinnable": True,
            "optimalMoves": result.num_steps,
            "confidence": SOLVED_CONFIDENCE,
            "approximate": False,
            "optimalSequence": result.sequence_dicts(),
            "stats": result.stats.to_dict(),
        }

    estimate = result.heuristic
    return {
        "success": True,
        "isWinnable": estimate.is_winnable,
        "optimalMoves": estimate.estimated_moves,
        "confidence": estimate.win_probability,
        "approximate": True,
        "phase": estimate.phase,
        "features": estimate.features.to_dict(),
        "stats": result.stats.to_dict(),
    }


def error_response(message: str) -> Dict[str, Any]:
    return {
        "success": False,
        "isWinnable": False,
        "optimalMoves": 0,
        "confidence": 0,
        "error": message,
    }


def handle_solve_request(
    request: Mapping[str, Any],
    config: Optional[SolverConfig] = None,
) -> Dict[str, Any]:
    """
    处理一次求解请求

    maxDepth / timeLimitMs 缺省时取配置默认值，timeLimit 作为 timeLimitMs 的别名。

    Args:
        request: 请求字典
        config: 求解配置

    Returns:
        响应字典
    """
    if not isinstance(request, Mapping):
        logger.warning("Rejected solve request: request is not an object")
        return error_response("Request must be an object")

    serialized = request.get("gameState")
    if not serialized:
        logger.warning("Rejected solve request: missing gameState")
        return error_response("Missing gameState")

    try:
        state = deserialize_game_state(serialized)
        max_depth = _read_int(request, "maxDepth")
        time_limit_ms = _read_int(request, "timeLimitMs", "timeLimit")
    except MalformedStateError as e:
        logger.warning(f"Rejected solve request: {e}")
        return error_response(str(e))

    result = Solver(config).solve(state, max_depth=max_depth, time_limit_ms=time_limit_ms)
    return result_to_response(result)
