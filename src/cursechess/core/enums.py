"""Core enumerations and flags for the chess domain."""

from __future__ import annotations

from enum import Enum, IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    def __str__(self) -> str:
        return self.name.lower()


class CastleSide(IntEnum):
    """Which rook a king move castles with, if any."""

    NONE = 0
    KINGSIDE = 1
    QUEENSIDE = 2


class CastlingRights(IntFlag):
    """Bitmask for castling availability."""

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH


class GameStatus(Enum):
    """Lifecycle of a game as seen by the rule engine."""

    ACTIVE = "active"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.ACTIVE


class MovementProfile(IntEnum):
    """Movement shape a piece uses when generating moves.

    ``KING_STEP`` keeps pawn diagonal captures and adds king-like steps onto
    empty squares; ``KING_STEP_CAPTURE`` lets those steps capture as well.
    """

    STANDARD = 0
    KING_STEP = 1
    KING_STEP_CAPTURE = 2
