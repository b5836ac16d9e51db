"""Core domain layer — chess rules with the curse-variant hook, no external dependencies.

Quick start::

    from cursechess.core import RuleEngine

    rules = RuleEngine()
    print(rules.legal_moves(6, 4))   # e2 pawn → [(5, 4), (4, 4)]
    result = rules.move(6, 4, 4, 4)  # 1. e4
"""

from cursechess.core.board import Board
from cursechess.core.enums import (
    CastleSide,
    CastlingRights,
    Color,
    GameStatus,
    MovementProfile,
    PieceType,
)
from cursechess.core.move import Move
from cursechess.core.move_generator import DEFAULT_ALTERED_PROFILES, MoveGenerator
from cursechess.core.notation import STARTING_FEN, state_from_fen, state_to_fen
from cursechess.core.piece import Piece
from cursechess.core.rule_engine import RuleEngine
from cursechess.core.serialization import StateFormatError
from cursechess.core.snapshot import Snapshot
from cursechess.core.state import GameState, MoveRecord, MoveResult
from cursechess.core.types import Coord, in_bounds, parse_square, square_name

__all__ = [
    # Enums / flags
    "CastleSide",
    "CastlingRights",
    "Color",
    "GameStatus",
    "MovementProfile",
    "PieceType",
    # Types / helpers
    "Coord",
    "in_bounds",
    "parse_square",
    "square_name",
    # Domain objects
    "Board",
    "GameState",
    "Move",
    "MoveGenerator",
    "MoveRecord",
    "MoveResult",
    "Piece",
    "RuleEngine",
    "Snapshot",
    # Variant
    "DEFAULT_ALTERED_PROFILES",
    # Persistence / notation
    "STARTING_FEN",
    "StateFormatError",
    "state_from_fen",
    "state_to_fen",
]
