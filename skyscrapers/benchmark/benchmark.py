"""Benchmark the parallel search across stop levels against the sequential baseline."""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import List, Dict, Any, Optional
import json
import os

from tqdm import tqdm

from ..config import SolverConfig
from ..core.board import SkyscrapersBoard
from ..generator import SkyscrapersGenerator, Difficulty
from ..solvers import SequentialSolver, ParallelSolver, SolverStats

SEQUENTIAL = "Sequential"
PARALLEL = "Parallel"


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""
    puzzle_id: int
    size: int
    algorithm: str
    stop_level: Optional[int]
    units: int
    solutions: int
    time_seconds: float
    nodes_explored: int
    failed_units: int = 0
    speedup: float = 1.0
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "puzzle_id": self.puzzle_id,
            "size": self.size,
            "algorithm": self.algorithm,
            "stop_level": self.stop_level,
            "units": self.units,
            "solutions": self.solutions,
            "time_seconds": self.time_seconds,
            "nodes_explored": self.nodes_explored,
            "failed_units": self.failed_units,
            "speedup": self.speedup,
            **self.extra
        }


class StopLevelBenchmark:
    """
    Compare stop levels for the parallel search.

    Each generated puzzle is solved exhaustively once sequentially and once
    per stop level in parallel; speedups are relative to the sequential run
    on the same puzzle.
    """

    def __init__(
        self,
        size: int = 5,
        puzzles: int = 5,
        stop_levels: Optional[List[int]] = None,
        difficulty: Difficulty = Difficulty.HARD,
        config: Optional[SolverConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize the benchmark.

        Args:
            size: Board size of the generated puzzles.
            puzzles: Number of puzzles to generate.
            stop_levels: Split depths to test (default: half a row, one row, two rows).
            difficulty: Difficulty preset for the puzzles.
            config: Base parallel settings; stop_level is overridden per run.
            seed: Random seed for reproducibility.
        """
        self.size = size
        self.puzzles_count = puzzles
        self.stop_levels = stop_levels or sorted({max(1, size // 2), size, 2 * size})
        self.difficulty = difficulty
        self.config = config or SolverConfig()
        self.seed = seed

        self.puzzles: List[SkyscrapersBoard] = []
        self.results: List[BenchmarkResult] = []

    def generate_puzzles(self) -> None:
        """Generate all puzzles for benchmarking."""
        generator = SkyscrapersGenerator(self.size, seed=self.seed)

        print("Generating puzzles...")
        self.puzzles = [
            generator.generate(self.difficulty)
            for _ in tqdm(range(self.puzzles_count), desc="Puzzles")
        ]

    def run(self, show_progress: bool = True) -> List[BenchmarkResult]:
        """
        Run the full benchmark suite.

        Returns:
            List of BenchmarkResult objects.
        """
        if not self.puzzles:
            self.generate_puzzles()

        self.results = []
        total_tests = len(self.puzzles) * (len(self.stop_levels) + 1)
        pbar = tqdm(total=total_tests, desc="Benchmarking", disable=not show_progress)

        for puzzle_id, puzzle in enumerate(self.puzzles):
            baseline = self._run_sequential(puzzle_id, puzzle)
            self.results.append(baseline)
            pbar.update(1)

            for level in self.stop_levels:
                result = self._run_parallel(puzzle_id, puzzle, level)
                if result.time_seconds > 0:
                    result.speedup = baseline.time_seconds / result.time_seconds
                self.results.append(result)
                pbar.update(1)

        pbar.close()
        return self.results

    def _run_sequential(self, puzzle_id: int, puzzle: SkyscrapersBoard) -> BenchmarkResult:
        solver = SequentialSolver(
            puzzle.size, puzzle.hints, incremental_hints=self.config.incremental_hints
        )
        _, stats = solver.solve()
        return self._to_result(puzzle_id, SEQUENTIAL, None, stats)

    def _run_parallel(self, puzzle_id: int, puzzle: SkyscrapersBoard, stop_level: int) -> BenchmarkResult:
        config = replace(self.config, stop_level=stop_level, show_progress=False)
        solver = ParallelSolver(puzzle.size, puzzle.hints, config=config)
        _, stats = solver.solve()
        return self._to_result(puzzle_id, PARALLEL, stop_level, stats)

    def _to_result(
        self,
        puzzle_id: int,
        algorithm: str,
        stop_level: Optional[int],
        stats: SolverStats
    ) -> BenchmarkResult:
        return BenchmarkResult(
            puzzle_id=puzzle_id,
            size=self.size,
            algorithm=algorithm,
            stop_level=stop_level,
            units=stats.units,
            solutions=stats.solutions,
            time_seconds=stats.time_seconds,
            nodes_explored=stats.nodes_explored,
            failed_units=stats.failed_units,
            extra=dict(stats.extra)
        )

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics from benchmark results."""
        sequential = [r for r in self.results if r.algorithm == SEQUENTIAL]
        summary = {
            "size": self.size,
            "total_puzzles": len(sequential),
            "workers": self.config.workers,
            "executor": self.config.executor,
            "sequential": {},
            "results_by_stop_level": {},
        }

        if sequential:
            times = [r.time_seconds for r in sequential]
            summary["sequential"] = {
                "avg_time_seconds": sum(times) / len(times),
                "max_time_seconds": max(times),
                "min_time_seconds": min(times),
            }

        for level in self.stop_levels:
            level_results = [
                r for r in self.results
                if r.algorithm == PARALLEL and r.stop_level == level
            ]
            if level_results:
                times = [r.time_seconds for r in level_results]
                speedups = [r.speedup for r in level_results]
                summary["results_by_stop_level"][str(level)] = {
                    "avg_time_seconds": sum(times) / len(times),
                    "avg_speedup": sum(speedups) / len(speedups),
                    "avg_units": sum(r.units for r in level_results) / len(level_results),
                    "failed_units": sum(r.failed_units for r in level_results),
                }

        return summary

    def best_stop_level(self) -> Optional[int]:
        """Stop level with the highest average speedup."""
        by_level = self.get_summary()["results_by_stop_level"]
        if not by_level:
            return None
        best = max(by_level.items(), key=lambda item: item[1]["avg_speedup"])
        return int(best[0])

    def save_results(self, output_dir: str) -> None:
        """Save benchmark results and generated puzzles to files."""
        os.makedirs(output_dir, exist_ok=True)

        results_file = os.path.join(output_dir, "benchmark_results.json")
        with open(results_file, "w") as f:
            json.dump([r.to_dict() for r in self.results], f, indent=2)

        summary_file = os.path.join(output_dir, "benchmark_summary.json")
        with open(summary_file, "w") as f:
            json.dump(self.get_summary(), f, indent=2)

        puzzles_dir = os.path.join(output_dir, "puzzles")
        SkyscrapersGenerator.save_to_folder(
            [(puzzle, None) for puzzle in self.puzzles],
            puzzles_dir,
            prefix=f"puzzle_{self.size}x{self.size}"
        )

        print(f"Results and puzzles saved to {output_dir}")

    def to_dataframe(self):
        """Convert results to pandas DataFrame (requires pandas)."""
        try:
            import pandas as pd
            return pd.DataFrame([r.to_dict() for r in self.results])
        except ImportError:
            raise ImportError("pandas is required for DataFrame conversion")
