#!/usr/bin/env python3
"""
终端对局脚本

Usage:
    python scripts/play.py --mode play              # 自己玩
    python scripts/play.py --mode watch --seed 7    # 观看求解器解一局
    python scripts/play.py --draw-mode 3
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional
import time

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from klondike import (
    GameSession,
    Move,
    PileId,
    RuleEngine,
    describe_game_state,
)
from klondike.cards import cards_to_str
from solver import Solver, SolverConfig, suggest_move, replay

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)

HELP = """命令:
  d                 翻牌
  m <from> <to> [n] 移动 n 张牌 (默认 1)，牌堆: w=废牌堆, f=基础牌堆, 1-7=牌桌列
  a                 自动收牌
  h                 提示
  u / r             撤销 / 重做
  q                 退出"""


def parse_args():
    parser = argparse.ArgumentParser(description="Klondike Play")

    parser.add_argument(
        "--mode",
        type=str,
        default="play",
        choices=["play", "watch"],
        help="Mode: play yourself or watch the solver",
    )
    parser.add_argument("--seed", type=int, default=None, help="Deal seed")
    parser.add_argument("--draw-mode", type=int, default=1, choices=[1, 3])
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between steps in watch mode")

    # 求解器参数
    parser.add_argument("--max-depth", type=int, default=200)
    parser.add_argument("--time-limit-ms", type=int, default=10000)
    parser.add_argument("--max-nodes", type=int, default=200000)

    return parser.parse_args()


def print_board(session: GameSession):
    """打印牌桌"""
    state = session.state
    print("\n" + "=" * 60)
    waste_top = str(state.waste[-1]) if state.waste else "--"
    print(f"牌库: {len(state.stock):2d}   废牌堆: {waste_top}   移动: {state.moves}")
    foundations = "  ".join(
        str(pile[-1]) if pile else "--" for pile in state.foundations
    )
    print(f"基础牌堆: {foundations}")
    print("-" * 60)
    for number, pile in enumerate(state.tableaux, start=1):
        print(f"  {number}: {cards_to_str(pile) if pile else '(空)'}")
    print("=" * 60)


def resolve_pile(token: str, session: GameSession, source: Optional[PileId] = None) -> PileId:
    """把命令中的牌堆简写解析为 PileId"""
    if token == "w":
        return PileId.WASTE
    if token == "f":
        # 基础牌堆由源牌堆顶牌的花色决定
        if source is None:
            raise ValueError("Foundation is only valid as a destination")
        pile = session.state.get_pile(source)
        if not pile:
            raise ValueError(f"{source.value} is empty")
        return PileId.foundation(pile[-1].suit)
    return PileId.tableau(int(token))


def build_move(args: List[str], session: GameSession) -> Move:
    if len(args) not in (2, 3):
        raise ValueError("Usage: m <from> <to> [n]")
    source = resolve_pile(args[0], session)
    dest = resolve_pile(args[1], session, source)
    count = int(args[2]) if len(args) == 3 else 1
    pile = session.state.get_pile(source)
    if count < 1 or count > len(pile):
        raise ValueError(f"Cannot move {count} cards from {source.value}")
    return Move.create(source, dest, pile[len(pile) - count:])


def play_game(args):
    """自己玩"""
    session = GameSession()
    session.new_game(draw_mode=args.draw_mode, seed=args.seed)
    config = SolverConfig(
        max_depth=args.max_depth,
        time_limit_ms=min(args.time_limit_ms, 2000),
        max_nodes=args.max_nodes,
    )
    print(HELP)

    while not session.is_won:
        print_board(session)
        try:
            line = input("\n> ").strip()
        except EOFError:
            break
        if not line:
            continue
        cmd, *rest = line.split()

        if cmd == "q":
            print("退出游戏")
            break
        elif cmd == "d":
            if not session.draw():
                print("牌库和废牌堆都已空")
        elif cmd == "m":
            try:
                move = build_move(rest, session)
            except ValueError as e:
                print(f"无效命令: {e}")
                continue
            if not session.make_move(move):
                error = RuleEngine.apply_move(move, session.state).error
                print(f"非法移动: {error}")
        elif cmd == "a":
            print(f"自动收牌 {session.auto_complete()} 张")
        elif cmd == "h":
            session.record_hint()
            step = suggest_move(session.state, config)
            print(f"提示: {step}" if step is not None else "没有可走的步")
        elif cmd == "u":
            if not session.undo():
                print("无法撤销")
        elif cmd == "r":
            if not session.redo():
                print("无法重做")
        else:
            print(HELP)

    summary = session.summary()
    print("\n" + "=" * 60)
    print("恭喜你赢了!" if summary.completed else "对局未完成")
    print(f"移动: {summary.moves}  翻牌: {summary.draws}  提示: {summary.hints_used}")
    print(f"用时: {summary.time_elapsed_ms / 1000:.1f}s")
    print("=" * 60)


def watch_game(args):
    """观看求解器解一局"""
    session = GameSession()
    state = session.new_game(draw_mode=args.draw_mode, seed=args.seed)
    print(describe_game_state(state))

    solver = Solver(SolverConfig(
        max_depth=args.max_depth,
        time_limit_ms=args.time_limit_ms,
        max_nodes=args.max_nodes,
    ))
    result = solver.solve(state)

    if not result.found:
        estimate = result.heuristic
        print("\n在预算内没有找到解")
        print(
            f"估计胜率: {estimate.win_probability}%  "
            f"估计步数: {estimate.estimated_moves}  阶段: {estimate.phase} (近似)"
        )
        return

    for i, step in enumerate(result.sequence, start=1):
        if step.is_draw:
            session.draw()
        else:
            session.make_move(step.move)
        print_board(session)
        print(f"第 {i} 步: {step}")
        time.sleep(args.delay)

    final = replay(state, result.sequence)
    print("\n" + "=" * 60)
    print(f"求解完成: {result.num_steps} 步 ({result.num_moves} 次移动)，完成: {final.is_complete}")
    print(f"展开节点: {result.stats.nodes_expanded}  用时: {result.stats.elapsed_ms:.0f}ms")
    print("=" * 60)


def main():
    args = parse_args()

    print("=" * 60)
    print("Klondike 接龙")
    print("=" * 60)

    if args.mode == "watch":
        watch_game(args)
    elif args.mode == "play":
        play_game(args)


if __name__ == "__main__":
    main()
