"""Command-line interface for the Skyscrapers generator and solver."""

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from .benchmark import StopLevelBenchmark
from .benchmark.visualizer import Visualizer
from .config import SolverConfig, EXECUTOR_KINDS
from .core.board import SkyscrapersBoard
from .core.hints import HintSet
from .core.validator import matches_hints
from .generator import SkyscrapersGenerator, Difficulty
from .logging_utils import set_level
from .solvers import ParallelSolver, SequentialSolver, SearchMode


def main(argv: Optional[List[str]] = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Skyscrapers Puzzle Generator & Parallel Solver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate 3 hard 5x5 puzzles
  python -m skyscrapers.cli generate --size 5 --count 3 --difficulty hard

  # Find every board matching a hint set, in parallel
  python -m skyscrapers.cli solve --hints "2,1,3,2;2,3,1,2;2,3,1,2;3,2,1,2" --parallel

  # Compare stop levels on 6x6 puzzles
  python -m skyscrapers.cli benchmark --size 6 --puzzles 3 --output results/
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Generate Skyscrapers puzzles")
    gen_parser.add_argument(
        "--size", type=int, default=4,
        help="Board size (default: 4)"
    )
    gen_parser.add_argument(
        "--count", "-n", type=int, default=5,
        help="Number of puzzles to generate (default: 5)"
    )
    gen_parser.add_argument(
        "--difficulty", "-d",
        choices=["easy", "medium", "hard", "all"],
        default="medium",
        help="Difficulty level (default: medium)"
    )
    gen_parser.add_argument(
        "--output", "-o", type=str, default=None,
        help="Output file for puzzles (JSON format)"
    )
    gen_parser.add_argument(
        "--folder", type=str, default="puzzles",
        help="Folder for plain-text puzzle files (default: puzzles)"
    )
    gen_parser.add_argument(
        "--seed", "-s", type=int, default=None,
        help="Random seed for reproducibility"
    )

    # Solve command
    solve_parser = subparsers.add_parser("solve", help="Find boards matching a hint set")
    hints_group = solve_parser.add_mutually_exclusive_group(required=True)
    hints_group.add_argument(
        "--hints", type=str,
        help='Hints as "TOP;RIGHT;BOTTOM;LEFT", comma-separated, 0 for none'
    )
    hints_group.add_argument(
        "--hints-file", type=str,
        help="Plain-text file with four hint rows"
    )
    _add_search_arguments(solve_parser)
    solve_parser.add_argument(
        "--limit", "-l", type=int, default=None,
        help="Stop after this many boards (default: find all)"
    )
    solve_parser.add_argument(
        "--output", "-o", type=str, default=None,
        help="Directory to write each solution as plain text"
    )
    solve_parser.add_argument(
        "--quiet", "-q", action="store_true",
        help="Do not print the boards"
    )

    # Check command
    check_parser = subparsers.add_parser("check", help="Validate a board file")
    check_parser.add_argument(
        "--board", "-b", type=str, required=True,
        help="Plain-text board, one row per line"
    )
    check_group = check_parser.add_mutually_exclusive_group()
    check_group.add_argument("--hints", type=str, help="Hints to check against")
    check_group.add_argument("--hints-file", type=str, help="Hint file to check against")

    # Benchmark command
    bench_parser = subparsers.add_parser("benchmark", help="Compare parallel stop levels")
    bench_parser.add_argument(
        "--size", type=int, default=5,
        help="Board size (default: 5)"
    )
    bench_parser.add_argument(
        "--puzzles", "-n", type=int, default=5,
        help="Number of puzzles (default: 5)"
    )
    bench_parser.add_argument(
        "--stop-levels", type=int, nargs="+", default=None,
        help="Stop levels to test (default: half a row, one row, two rows)"
    )
    bench_parser.add_argument(
        "--difficulty", "-d",
        choices=["easy", "medium", "hard"],
        default="hard",
        help="Difficulty of generated puzzles (default: hard)"
    )
    bench_parser.add_argument(
        "--workers", "-w", type=int, default=None,
        help="Worker count (default: CPU count)"
    )
    bench_parser.add_argument(
        "--executor", choices=EXECUTOR_KINDS, default=None,
        help="Pool kind (default: process)"
    )
    bench_parser.add_argument(
        "--output", "-o", type=str, default="results",
        help="Output directory for results (default: results)"
    )
    bench_parser.add_argument(
        "--seed", "-s", type=int, default=42,
        help="Random seed for reproducibility (default: 42)"
    )
    bench_parser.add_argument(
        "--no-charts", action="store_true",
        help="Skip chart generation"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "generate":
        cmd_generate(args)
    elif args.command == "solve":
        cmd_solve(args)
    elif args.command == "check":
        cmd_check(args)
    elif args.command == "benchmark":
        cmd_benchmark(args)


def _add_search_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--parallel", "-p", action="store_true",
        help="Split the search across workers"
    )
    parser.add_argument(
        "--stop-level", type=int, default=None,
        help="Cell index at which to split (default: one row)"
    )
    parser.add_argument(
        "--workers", "-w", type=int, default=None,
        help="Worker count (default: CPU count)"
    )
    parser.add_argument(
        "--executor", choices=EXECUTOR_KINDS, default=None,
        help="Pool kind (default: process)"
    )
    parser.add_argument(
        "--deferred-hints", action="store_true",
        help="Only check hints on complete boards"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Show search statistics and debug logging"
    )


def _load_hints(args) -> Optional[HintSet]:
    """Read hints from --hints or --hints-file; exit on malformed input."""
    try:
        if getattr(args, "hints", None):
            return HintSet.from_string(args.hints)
        if getattr(args, "hints_file", None):
            with open(args.hints_file, "r") as f:
                return HintSet.from_text(f.read())
    except (OSError, ValueError) as e:
        print(f"Error reading hints: {e}", file=sys.stderr)
        sys.exit(1)
    return None


def cmd_generate(args):
    """Handle the generate command."""
    generator = SkyscrapersGenerator(args.size, seed=args.seed)

    if args.difficulty == "all":
        difficulties = list(Difficulty)
    else:
        difficulties = [Difficulty(args.difficulty)]

    all_puzzles = []

    for difficulty in difficulties:
        print(f"\nGenerating {args.count} {difficulty.value} {args.size}x{args.size} puzzles...")
        pairs = [generator.generate_with_solution(difficulty) for _ in range(args.count)]

        for i, (puzzle, solution) in enumerate(pairs, 1):
            all_puzzles.append({
                "difficulty": difficulty.value,
                "index": i,
                "size": args.size,
                "hints": puzzle.hints.to_dict(),
                "solution": solution.grid.tolist(),
                "clues": puzzle.hints.constrained_count()
            })

            print(f"\n--- {difficulty.value.capitalize()} Puzzle {i} "
                  f"({puzzle.hints.constrained_count()} hints) ---")
            print(puzzle)

        diff_dir = os.path.join(args.folder, difficulty.value)
        SkyscrapersGenerator.save_to_folder(pairs, diff_dir, prefix=f"puzzle_{difficulty.value}")

    print(f"\nPuzzles also saved individually in the '{args.folder}/' directory")

    if args.output:
        with open(args.output, "w") as f:
            json.dump(all_puzzles, f, indent=2)
        print(f"\nAll puzzles saved to {args.output}")

    print(f"\nTotal puzzles generated: {len(all_puzzles)}")


def cmd_solve(args):
    """Handle the solve command."""
    if args.verbose:
        set_level(logging.DEBUG)

    hints = _load_hints(args)

    try:
        mode = SearchMode.exhaustive() if args.limit is None else SearchMode.cap(args.limit)
        config = SolverConfig.from_env(
            stop_level=args.stop_level,
            workers=args.workers,
            executor=args.executor,
            show_progress=args.verbose,
            incremental_hints=not args.deferred_hints,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.parallel:
        solver = ParallelSolver(hints.size, hints, config=config)
    else:
        solver = SequentialSolver(hints.size, hints, incremental_hints=config.incremental_hints)

    print("Hints:")
    print(hints)
    print(f"\nSolving with {solver.name}...")

    boards, stats = solver.solve(mode)

    print(f"Found {len(boards)} board(s) in {stats.time_seconds:.4f}s")
    if args.verbose:
        print(f"  Nodes explored: {stats.nodes_explored:,}")
        print(f"  Backtracks: {stats.backtracks:,}")
        print(f"  Memory: {stats.memory_bytes / 1024:.2f} KB")
        if args.parallel:
            print(f"  Units: {stats.units:,} ({stats.failed_units} failed)")

    if not args.quiet:
        for i, board in enumerate(boards, 1):
            print(f"\n--- Solution {i} ---")
            print(board)

    if args.output:
        os.makedirs(args.output, exist_ok=True)
        for i, board in enumerate(boards, 1):
            board.save_to_file(os.path.join(args.output, f"solution_{i}.txt"))
        print(f"\nSolutions saved to {args.output}/")


def cmd_check(args):
    """Handle the check command."""
    try:
        board = SkyscrapersBoard.load_from_file(args.board)
    except (OSError, ValueError) as e:
        print(f"Error reading board: {e}", file=sys.stderr)
        sys.exit(1)

    hints = _load_hints(args)
    if hints is None:
        hints = board.compute_hints()
    elif hints.size != board.size:
        print(f"Error: hints are for size {hints.size}, board is {board.size}", file=sys.stderr)
        sys.exit(1)
    else:
        board.set_hints(hints)

    print(board)
    latin = board.check_validity()
    print(f"\nLatin square: {'yes' if latin else 'no'}")

    valid = matches_hints(board, hints)
    print(f"Matches hints: {'yes' if valid else 'no'}")

    if not valid:
        sys.exit(1)


def cmd_benchmark(args):
    """Handle the benchmark command."""
    try:
        config = SolverConfig.from_env(workers=args.workers, executor=args.executor)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    benchmark = StopLevelBenchmark(
        size=args.size,
        puzzles=args.puzzles,
        stop_levels=args.stop_levels,
        difficulty=Difficulty(args.difficulty),
        config=config,
        seed=args.seed
    )

    print("=" * 60)
    print("SKYSCRAPERS STOP LEVEL BENCHMARK")
    print("=" * 60)
    print(f"Board size: {args.size}x{args.size}")
    print(f"Puzzles: {args.puzzles}")
    print(f"Stop levels: {benchmark.stop_levels}")
    print(f"Workers: {config.workers} ({config.executor})")
    print(f"Output directory: {args.output}")
    print("=" * 60)

    results = benchmark.run()
    summary = benchmark.get_summary()

    print("\n" + "=" * 60)
    print("RESULTS SUMMARY")
    print("=" * 60)

    if summary["sequential"]:
        print(f"\nSequential: {summary['sequential']['avg_time_seconds']:.4f}s avg")

    print("\nBy stop level:")
    print("-" * 50)
    for level, stats in summary["results_by_stop_level"].items():
        print(f"\nStop level {level}:")
        print(f"  Avg Units: {stats['avg_units']:.0f}")
        print(f"  Avg Time: {stats['avg_time_seconds']:.4f}s")
        print(f"  Avg Speedup: {stats['avg_speedup']:.2f}x")

    best = benchmark.best_stop_level()
    if best is not None:
        print(f"\nBest stop level: {best}")

    benchmark.save_results(args.output)

    if not args.no_charts:
        print("\nGenerating charts...")
        visualizer = Visualizer(results, args.output)
        charts = visualizer.generate_all()
        visualizer.generate_summary_table()
        print(f"Charts saved to {args.output}/")
        for chart in charts:
            print(f"  - {os.path.basename(chart)}")

    print("\n" + "=" * 60)
    print("Benchmark complete!")


if __name__ == "__main__":
    main()
