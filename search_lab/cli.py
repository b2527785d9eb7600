from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence

from .nqueens import (
    ENGINES,
    NQueensResult,
    NQueensStep,
    render_nqueens_board,
    solve_incrementally,
    solve_nqueens,
)
from .settings import load_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed < 1:
        raise argparse.ArgumentTypeError("Value must be >= 1.")
    return parsed


def _print_stats(stats: dict[str, Any]) -> None:
    print(f"Nodes visited: {stats['nodes_visited']}")
    print(f"Nodes expanded: {stats['nodes_expanded']}")
    print(f"Backtracks: {stats['backtracks']}")
    print(f"Elapsed: {stats['elapsed_ms']:.3f} ms")


def _print_nqueens(result: NQueensResult) -> None:
    print(f"N-Queens size: {result.size}")
    print(f"Engine: {result.engine}")
    _print_stats(result.stats.to_dict())
    print()
    if result.placement is None:
        print("No solution exists for this board size.")
        return
    print(render_nqueens_board(result.size, result.placement))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="search-lab",
        description="Search Lab: A* and resumable backtracking on N-Queens.",
    )
    parser.add_argument("--config", help="JSON settings file.")
    parser.add_argument("--verbose", "-v", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    solve = subparsers.add_parser("solve", help="Find one N-Queens solution.")
    solve.add_argument("--size", "-n", type=_positive_int)
    solve.add_argument("--engine", choices=ENGINES)
    solve.add_argument("--json", action="store_true")

    steps = subparsers.add_parser(
        "steps", help="Drive the incremental backtracking solver step by step."
    )
    steps.add_argument("--size", "-n", type=_positive_int)
    steps.add_argument("--max-steps", type=_positive_int)
    steps.add_argument("--trace", action="store_true", help="Print every candidate.")
    steps.add_argument("--json", action="store_true")

    benchmark = subparsers.add_parser(
        "benchmark", help="Compare both engines across board sizes."
    )
    benchmark.add_argument("--sizes", nargs="+", type=_positive_int, default=[4, 6, 8, 10])
    benchmark.add_argument("--engines", nargs="+", choices=ENGINES, default=list(ENGINES))
    benchmark.add_argument("--json", action="store_true")

    return parser


def _configure_logging(verbose: bool, level_name: str) -> None:
    level = logging.DEBUG if verbose else getattr(logging, level_name.upper())
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S")


def _run_solve(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    result = solve_nqueens(
        args.size or settings["board_size"],
        engine=args.engine or settings["engine"],
    )
    if args.json:
        print(json.dumps(result.to_dict(include_board=True), indent=2))
    else:
        _print_nqueens(result)
    return 0


def _run_steps(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    size = args.size or settings["board_size"]
    max_steps = args.max_steps or settings["max_steps"]

    step: NQueensStep = solve_incrementally(size)
    trace: list[list[list[int]]] = []
    advances = 0
    while True:
        if args.trace:
            queens = list(step.candidate or ())
            if args.json:
                trace.append([list(square) for square in queens])
            else:
                print(f"step {advances}: {queens}")
        if step.is_final or advances >= max_steps:
            break
        step = step.advance()
        advances += 1

    if not step.is_final:
        logger.warning(f"Stopped after {advances} steps without finishing the search")

    if args.json:
        payload: dict[str, object] = {
            "size": size,
            "steps": advances,
            "finished": step.is_final,
            "candidate": [list(square) for square in step.candidate or ()],
            "stats": step.stats.to_dict(),
        }
        if args.trace:
            payload["trace"] = trace
        print(json.dumps(payload, indent=2))
        return 0

    print(f"N-Queens size: {size}")
    print(f"Steps: {advances}")
    _print_stats(step.stats.to_dict())
    print()
    if not step.is_final:
        print(f"Search paused after {advances} steps; current candidate:")
    elif step.candidate is None:
        print("No solution exists for this board size.")
        return 0
    print(render_nqueens_board(size, step.candidate or ()))
    return 0


def _run_benchmark(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    rows: list[dict[str, Any]] = []
    for size in args.sizes:
        for engine in args.engines:
            result = solve_nqueens(size, engine=engine)
            rows.append(
                {
                    "size": size,
                    "engine": engine,
                    "solved": result.solved,
                    "nodes_visited": result.stats.nodes_visited,
                    "nodes_expanded": result.stats.nodes_expanded,
                    "elapsed_ms": result.stats.elapsed_ms,
                }
            )

    if args.json:
        print(json.dumps(rows, indent=2))
    else:
        print("size  engine        solved  visited   expanded  elapsed_ms")
        for row in rows:
            print(
                f"{row['size']:>4}  "
                f"{row['engine']:<12}  "
                f"{'yes' if row['solved'] else 'no':>6}  "
                f"{row['nodes_visited']:>7}  "
                f"{row['nodes_expanded']:>9}  "
                f"{row['elapsed_ms']:>10.3f}"
            )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
        _configure_logging(args.verbose, settings["log_level"])
        if args.command == "solve":
            return _run_solve(args, settings)
        if args.command == "steps":
            return _run_steps(args, settings)
        if args.command == "benchmark":
            return _run_benchmark(args, settings)
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(f"Unknown command: {args.command}", file=sys.stderr)
    return 2
