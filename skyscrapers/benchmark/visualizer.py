"""Visualization utilities for stop-level benchmark results."""

from __future__ import annotations
import os
from typing import List

import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np

from .benchmark import BenchmarkResult, PARALLEL, SEQUENTIAL


class Visualizer:
    """
    Chart generator for stop-level benchmark results.

    Plots how the split depth affects solve time, speedup and unit count.
    """

    COLORS = {
        SEQUENTIAL: "#e74c3c",  # Red
        PARALLEL: "#3498db",    # Blue
    }

    def __init__(self, results: List[BenchmarkResult], output_dir: str = "results"):
        """
        Initialize the visualizer.

        Args:
            results: List of benchmark results.
            output_dir: Directory to save generated charts.
        """
        self.results = results
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

        plt.style.use('seaborn-v0_8-whitegrid')
        sns.set_palette("husl")

    def generate_all(self) -> List[str]:
        """
        Generate all charts.

        Returns:
            List of paths to generated chart files.
        """
        return [
            self.plot_time_by_stop_level(),
            self.plot_speedup(),
            self.plot_units(),
        ]

    def _parallel(self) -> List[BenchmarkResult]:
        return [r for r in self.results if r.algorithm == PARALLEL]

    def _levels(self) -> List[int]:
        return sorted(set(r.stop_level for r in self._parallel()))

    def plot_time_by_stop_level(self) -> str:
        """Line chart of parallel solve time per stop level with the sequential baseline."""
        fig, ax = plt.subplots(figsize=(10, 6))

        parallel = self._parallel()
        sns.lineplot(
            x=[r.stop_level for r in parallel],
            y=[r.time_seconds for r in parallel],
            marker="o",
            color=self.COLORS[PARALLEL],
            label=PARALLEL,
            ax=ax
        )

        sequential = [r.time_seconds for r in self.results if r.algorithm == SEQUENTIAL]
        if sequential:
            ax.axhline(
                np.mean(sequential),
                color=self.COLORS[SEQUENTIAL],
                linestyle="--",
                label=f"{SEQUENTIAL} (mean)"
            )

        ax.set_xlabel('Stop level (cells assigned before splitting)', fontsize=12)
        ax.set_ylabel('Time (seconds)', fontsize=12)
        ax.set_title('Solve Time by Stop Level', fontsize=14, fontweight='bold')
        ax.set_ylim(bottom=0)
        ax.legend()

        plt.tight_layout()
        path = os.path.join(self.output_dir, "time_by_stop_level.png")
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close()

        return path

    def plot_speedup(self) -> str:
        """Bar chart of average speedup over the sequential search."""
        fig, ax = plt.subplots(figsize=(10, 6))

        levels = self._levels()
        speedups = [
            np.mean([r.speedup for r in self._parallel() if r.stop_level == level])
            for level in levels
        ]

        bars = ax.bar([str(level) for level in levels], speedups,
                      color=self.COLORS[PARALLEL], edgecolor='black', linewidth=0.5)

        for bar, speedup in zip(bars, speedups):
            height = bar.get_height()
            ax.annotate(f'{speedup:.2f}x',
                        xy=(bar.get_x() + bar.get_width() / 2, height),
                        xytext=(0, 3),
                        textcoords="offset points",
                        ha='center', va='bottom', fontsize=10)

        ax.axhline(1.0, color=self.COLORS[SEQUENTIAL], linestyle="--", linewidth=1)
        ax.set_xlabel('Stop level', fontsize=12)
        ax.set_ylabel('Speedup vs sequential', fontsize=12)
        ax.set_title('Parallel Speedup by Stop Level', fontsize=14, fontweight='bold')

        plt.tight_layout()
        path = os.path.join(self.output_dir, "speedup_by_stop_level.png")
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close()

        return path

    def plot_units(self) -> str:
        """Bar chart of how many units each stop level produces."""
        fig, ax = plt.subplots(figsize=(10, 6))

        levels = self._levels()
        units = [
            np.mean([r.units for r in self._parallel() if r.stop_level == level])
            for level in levels
        ]

        sns.barplot(x=[str(level) for level in levels], y=units, color="#9b59b6", ax=ax)
        ax.set_yscale('log')
        ax.set_xlabel('Stop level', fontsize=12)
        ax.set_ylabel('Units (log scale)', fontsize=12)
        ax.set_title('Work Units per Stop Level', fontsize=14, fontweight='bold')

        plt.tight_layout()
        path = os.path.join(self.output_dir, "units_by_stop_level.png")
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close()

        return path

    def generate_summary_table(self) -> str:
        """Write a markdown table of per-level averages."""
        lines = [
            "| Stop level | Avg units | Avg time (s) | Avg speedup |",
            "|---|---|---|---|",
        ]

        sequential = [r.time_seconds for r in self.results if r.algorithm == SEQUENTIAL]
        if sequential:
            lines.append(f"| sequential | 1 | {np.mean(sequential):.4f} | 1.00x |")

        for level in self._levels():
            level_results = [r for r in self._parallel() if r.stop_level == level]
            lines.append(
                f"| {level} "
                f"| {np.mean([r.units for r in level_results]):.0f} "
                f"| {np.mean([r.time_seconds for r in level_results]):.4f} "
                f"| {np.mean([r.speedup for r in level_results]):.2f}x |"
            )

        path = os.path.join(self.output_dir, "summary_table.md")
        with open(path, "w") as f:
            f.write("\n".join(lines) + "\n")
        return path
