"""Chess engine package: alpha-beta search, evaluation and difficulty tiers.

The PyQt6 worker lives in :mod:`cursechess.engine.qt_bridge` and is imported
explicitly, so the engine works without the ``qt`` extra installed.
"""

from cursechess.engine.alphabeta import MATE_SCORE, SearchEngine, order_moves
from cursechess.engine.evaluation import PIECE_VALUES, evaluate, piece_square_bonus
from cursechess.engine.search import (
    DIFFICULTY_SETTINGS,
    Difficulty,
    IEngine,
    SearchLimits,
    SearchResult,
)

__all__ = [
    "DIFFICULTY_SETTINGS",
    "Difficulty",
    "IEngine",
    "MATE_SCORE",
    "PIECE_VALUES",
    "SearchEngine",
    "SearchLimits",
    "SearchResult",
    "evaluate",
    "order_moves",
    "piece_square_bonus",
]
