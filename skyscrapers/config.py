"""
Default settings for the Skyscrapers search engine.

Edit the module-level defaults to change behaviour globally, or build a
SolverConfig per run. SolverConfig.from_env() reads overrides from
SKYSCRAPERS_STOP_LEVEL, SKYSCRAPERS_WORKERS and SKYSCRAPERS_EXECUTOR.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Optional

# ==== Parallel search ====================================================

# Cell index at which the search tree is split into units.
# None means "one full row", i.e. the board size.
DEFAULT_STOP_LEVEL: Optional[int] = None

# Worker count; None means os.cpu_count()
DEFAULT_WORKERS: Optional[int] = None

# "process" gives real parallelism, "thread" avoids process start-up cost
DEFAULT_EXECUTOR: str = "process"

EXECUTOR_KINDS = ("process", "thread")

# ==== Sequential search ==================================================

# Check LEFT/TOP hints on partial lines and RIGHT/BOTTOM hints as soon as
# a line completes, instead of only on full boards.
DEFAULT_INCREMENTAL_HINTS: bool = True

# ==== Environment variables ==============================================

ENV_STOP_LEVEL = "SKYSCRAPERS_STOP_LEVEL"
ENV_WORKERS = "SKYSCRAPERS_WORKERS"
ENV_EXECUTOR = "SKYSCRAPERS_EXECUTOR"


def _default_workers() -> int:
    return DEFAULT_WORKERS or os.cpu_count() or 1


@dataclass
class SolverConfig:
    """Settings for a parallel search run."""
    stop_level: Optional[int] = DEFAULT_STOP_LEVEL
    workers: int = field(default_factory=_default_workers)
    executor: str = DEFAULT_EXECUTOR
    show_progress: bool = False
    incremental_hints: bool = DEFAULT_INCREMENTAL_HINTS

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.executor not in EXECUTOR_KINDS:
            raise ValueError(
                f"executor must be one of {EXECUTOR_KINDS}, got {self.executor!r}"
            )
        if self.stop_level is not None and self.stop_level < 0:
            raise ValueError(f"stop_level must be non-negative, got {self.stop_level}")

    @classmethod
    def from_env(cls, **overrides) -> SolverConfig:
        """
        Build a config from environment variables.

        Keyword overrides that are not None take precedence over the
        environment.
        """
        values = {}

        stop_level = os.environ.get(ENV_STOP_LEVEL)
        if stop_level:
            values["stop_level"] = _parse_int(ENV_STOP_LEVEL, stop_level)

        workers = os.environ.get(ENV_WORKERS)
        if workers:
            values["workers"] = _parse_int(ENV_WORKERS, workers)

        executor = os.environ.get(ENV_EXECUTOR)
        if executor:
            values["executor"] = executor.strip().lower()

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def resolve_stop_level(self, size: int) -> int:
        """Effective stop level for a board size, clamped to [0, N*N]."""
        level = size if self.stop_level is None else self.stop_level
        return max(0, min(level, size * size))


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
