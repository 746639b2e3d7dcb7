"""Generator module for creating Skyscrapers puzzles."""

from .generator import SkyscrapersGenerator, Difficulty

__all__ = ["SkyscrapersGenerator", "Difficulty"]
