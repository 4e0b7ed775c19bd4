#!/usr/bin/env python3
"""
批量求解基准

Usage:
    python scripts/solve.py --deals 20 --seed 0
    python scripts/solve.py --deals 50 --draw-mode 3 --time-limit-ms 2000 --output results.json
    python scripts/solve.py --config solver.json --verify
"""
import argparse
import logging
import sys
from pathlib import Path
import json

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from klondike import GameState
from solver import Solver, SolverConfig, SolveMetrics, replay

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Klondike Solver Benchmark")

    # 牌局
    parser.add_argument("--deals", type=int, default=10, help="Number of deals")
    parser.add_argument("--seed", type=int, default=0, help="First deal seed")
    parser.add_argument("--draw-mode", type=int, default=1, choices=[1, 3])

    # 求解器参数 (覆盖配置文件)
    parser.add_argument("--config", type=str, help="Solver config JSON file")
    parser.add_argument("--max-depth", type=int)
    parser.add_argument("--time-limit-ms", type=int)
    parser.add_argument("--max-nodes", type=int)
    parser.add_argument("--always-draw", action="store_true", help="Try a draw at every node")

    # 其他
    parser.add_argument("--verify", action="store_true", help="Replay every solution")
    parser.add_argument("--output", type=str, help="Output file for results")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")

    return parser.parse_args()


def build_config(args) -> SolverConfig:
    """配置文件 + 命令行覆盖"""
    values = {}
    if args.config:
        with open(args.config) as f:
            values.update(json.load(f))
    if args.max_depth is not None:
        values["max_depth"] = args.max_depth
    if args.time_limit_ms is not None:
        values["time_limit_ms"] = args.time_limit_ms
    if args.max_nodes is not None:
        values["max_nodes"] = args.max_nodes
    if args.always_draw:
        values["draw_only_when_stuck"] = False
    return SolverConfig.from_dict(values)


def run_benchmark(args) -> SolveMetrics:
    config = build_config(args)
    solver = Solver(config)
    metrics = SolveMetrics()

    logger.info(f"Solving {args.deals} deals (draw mode {args.draw_mode}) with {config}")

    for seed in range(args.seed, args.seed + args.deals):
        state = GameState.initial(draw_mode=args.draw_mode, seed=seed)
        result = solver.solve(state)
        record = metrics.add(seed, result)

        if result.found and args.verify:
            final = replay(state, result.sequence)
            if not final.is_complete:
                logger.error(f"Seed {seed}: replayed solution does not complete the game")
                sys.exit(1)

        if args.verbose:
            outcome = f"solved in {record.steps} steps" if record.found else (
                f"not solved ({record.stop_reason}), confidence {record.confidence}%"
            )
            logger.info(
                f"Seed {seed}: {outcome}, {record.nodes} nodes, {record.elapsed_ms:.0f}ms"
            )

    return metrics


def main():
    args = parse_args()
    metrics = run_benchmark(args)
    summary = metrics.summary()

    logger.info("=" * 50)
    logger.info("Benchmark Results")
    logger.info("=" * 50)
    logger.info(f"Deals: {summary['deals']}")
    logger.info(f"Solved: {summary['solved']} ({summary['solve_rate']:.2%})")
    logger.info(f"Stop reasons: {summary['stop_reasons']}")
    for name, stats in summary["stats"].items():
        logger.info(f"{name}: mean {stats['mean']:.1f}, std {stats['std']:.1f}, max {stats['max']:.1f}")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "summary": summary,
                "deals": [record.__dict__ for record in metrics.records],
            }, f, indent=2)
        logger.info(f"Results saved to {args.output}")


if __name__ == "__main__":
    main()
