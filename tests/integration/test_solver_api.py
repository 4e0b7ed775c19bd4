"""求解请求与求解正确性集成测试"""
import json

import pytest

from klondike.serialize import serialize_game_state, deserialize_game_state, state_to_dict
from klondike.state import GameState
from solver.api import handle_solve_request
from solver.config import SolverConfig
from solver.search import Solver, replay

ENDGAME_TABLEAUX = {
    1: ["sd1", "hc1", "sb1"],
    2: ["hd1", "sc1", "hb1"],
    3: ["dd1", "cc1", "db1"],
    4: ["cd1", "dc1", "cb1"],
}


class TestHandleSolveRequest:
    """handle_solve_request 测试"""

    def test_solved_response(self, make_state):
        state = make_state(
            tableaux=ENDGAME_TABLEAUX,
            foundations={"s": 10, "h": 10, "d": 10, "c": 10},
        )
        response = handle_solve_request({
            "gameState": serialize_game_state(state),
            "maxDepth": 50,
            "timeLimitMs": 5000,
        })
        assert response["success"]
        assert response["isWinnable"]
        assert response["confidence"] == 95
        assert response["approximate"] is False
        sequence = response["optimalSequence"]
        assert response["optimalMoves"] == len(sequence) == 12
        assert [s["moveNumber"] for s in sequence] == list(range(1, 13))
        assert all(s["move"] == "tableau_to_foundation" for s in sequence)

    def test_heuristic_response(self, dealt_state):
        response = handle_solve_request({
            "gameState": serialize_game_state(dealt_state),
            "timeLimit": 0,
        })
        assert response["success"]
        assert response["approximate"] is True
        assert "optimalSequence" not in response
        assert 5 <= response["confidence"] <= 95
        assert 5 <= response["optimalMoves"] <= 150
        assert response["phase"] == "opening"
        assert response["stats"]["stopReason"] == "timeout"

    def test_defaults_from_config(self, dealt_state):
        config = SolverConfig(max_nodes=5)
        response = handle_solve_request(
            {"gameState": serialize_game_state(dealt_state)}, config
        )
        assert response["success"]
        assert response["stats"]["stopReason"] == "node_limit"

    def test_missing_state(self):
        response = handle_solve_request({"maxDepth": 10})
        assert not response["success"]
        assert "gameState" in response["error"]

    def test_not_an_object(self):
        assert not handle_solve_request(["gameState"])["success"]

    def test_malformed_state(self, dealt_state):
        data = state_to_dict(dealt_state)
        data["stock"] = data["stock"][:-1]
        response = handle_solve_request({"gameState": json.dumps(data)})
        assert not response["success"]
        assert "52" in response["error"]

    def test_garbage_state(self):
        response = handle_solve_request({"gameState": "garbage"})
        assert not response["success"]
        assert response["error"]

    @pytest.mark.parametrize("value", ["fast", -5, True, float("nan"), float("inf"), float("-inf")])
    def test_invalid_budget(self, dealt_state, value):
        response = handle_solve_request({
            "gameState": serialize_game_state(dealt_state),
            "maxDepth": value,
        })
        assert not response["success"]

    def test_non_finite_budget_from_wire(self, dealt_state):
        raw = '{"gameState": %s, "timeLimitMs": Infinity}' % json.dumps(
            serialize_game_state(dealt_state)
        )
        response = handle_solve_request(json.loads(raw))
        assert not response["success"]
        assert "timeLimitMs" in response["error"]

    def test_out_of_order_foundation_rejected(self, make_state):
        data = state_to_dict(make_state(tableaux={1: ["s31"]}))
        data["foundations"]["s"], data["tableaux"]["1"] = data["tableaux"]["1"], []
        response = handle_solve_request({"gameState": json.dumps(data)})
        assert not response["success"]

    def test_response_is_json(self, dealt_state):
        response = handle_solve_request({
            "gameState": serialize_game_state(dealt_state),
            "timeLimitMs": 0,
        })
        json.dumps(response)


class TestSolverSoundness:
    """找到的解一定能重放到完成局面"""

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5, 6])
    def test_replay_reaches_complete(self, seed):
        state = GameState.initial(seed=seed)
        config = SolverConfig(time_limit_ms=1500, max_nodes=20000)
        result = Solver(config).solve(state)
        if result.found:
            assert replay(state, result.sequence).is_complete
            assert len(result.sequence) <= config.max_depth
        else:
            assert result.heuristic.approximate
            assert result.stats.stop_reason in ("timeout", "node_limit", "exhausted")

    def test_wire_roundtrip_solution(self, make_state):
        state = make_state(
            tableaux={1: ["sd1"], 2: ["hd1"], 3: ["dd1"], 4: ["cd1"]},
            foundations={"s": 11, "h": 12, "d": 12, "c": 12},
            stock=["sc0"],
            draw_mode=3,
        )
        restored = deserialize_game_state(serialize_game_state(state))
        result = Solver().solve(restored)
        assert result.found
        assert replay(state, result.sequence).is_complete
