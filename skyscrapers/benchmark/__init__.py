"""Benchmark module for tuning the parallel search."""

from .benchmark import StopLevelBenchmark, BenchmarkResult
from .visualizer import Visualizer

__all__ = ["StopLevelBenchmark", "BenchmarkResult", "Visualizer"]
