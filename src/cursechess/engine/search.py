"""Shared engine search models, difficulty tiers and protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cursechess.core.move import Move
    from cursechess.core.snapshot import Snapshot


class Difficulty(IntEnum):
    """Computer-opponent strength tiers."""

    EASY = 1
    MEDIUM = 2
    HARD = 3


# Tier → (plies, probability of playing a random legal move instead).
DIFFICULTY_SETTINGS: dict[Difficulty, tuple[int, float]] = {
    Difficulty.EASY: (2, 0.3),
    Difficulty.MEDIUM: (3, 0.0),
    Difficulty.HARD: (4, 0.0),
}


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single move computation."""

    depth: int = 3
    random_move_probability: float = 0.0

    @classmethod
    def for_difficulty(cls, difficulty: Difficulty) -> SearchLimits:
        depth, randomness = DIFFICULTY_SETTINGS[Difficulty(difficulty)]
        return cls(depth=depth, random_move_probability=randomness)


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search.

    ``score`` is white-relative: positive favors white.
    """

    best_move: Move | None
    score: int
    depth: int
    nodes: int


class IEngine(Protocol):
    """Protocol for engines used by the game layer."""

    def search(self, snapshot: Snapshot, limits: SearchLimits) -> SearchResult: ...
