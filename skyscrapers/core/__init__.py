"""Core module for Skyscrapers board representation and validation."""

from .board import SkyscrapersBoard
from .hints import Edge, HintSet
from .visibility import count_visibility
from .validator import is_valid_placement, matches_hints, has_unique_solution

__all__ = [
    "SkyscrapersBoard",
    "Edge",
    "HintSet",
    "count_visibility",
    "is_valid_placement",
    "matches_hints",
    "has_unique_solution",
]
