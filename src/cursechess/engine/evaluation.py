"""Static evaluation: material plus piece-square tables.

Tables are laid out from white's point of view with row 0 = rank 8, the same
orientation as the board; black pieces read them mirrored vertically.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from cursechess.core.board import Board
from cursechess.core.enums import Color, PieceType

PIECE_VALUES: Mapping[PieceType, int] = MappingProxyType(
    {
        PieceType.PAWN: 100,
        PieceType.KNIGHT: 320,
        PieceType.BISHOP: 330,
        PieceType.ROOK: 500,
        PieceType.QUEEN: 900,
        PieceType.KING: 20_000,
    }
)

_Table = tuple[tuple[int, ...], ...]

_PAWN_TABLE: _Table = (
    (0, 0, 0, 0, 0, 0, 0, 0),
    (50, 50, 50, 50, 50, 50, 50, 50),
    (10, 10, 20, 30, 30, 20, 10, 10),
    (5, 5, 10, 25, 25, 10, 5, 5),
    (0, 0, 0, 20, 20, 0, 0, 0),
    (5, -5, -10, 0, 0, -10, -5, 5),
    (5, 10, 10, -20, -20, 10, 10, 5),
    (0, 0, 0, 0, 0, 0, 0, 0),
)

_KNIGHT_TABLE: _Table = (
    (-50, -40, -30, -30, -30, -30, -40, -50),
    (-40, -20, 0, 0, 0, 0, -20, -40),
    (-30, 0, 10, 15, 15, 10, 0, -30),
    (-30, 5, 15, 20, 20, 15, 5, -30),
    (-30, 0, 15, 20, 20, 15, 0, -30),
    (-30, 5, 10, 15, 15, 10, 5, -30),
    (-40, -20, 0, 5, 5, 0, -20, -40),
    (-50, -40, -30, -30, -30, -30, -40, -50),
)

_BISHOP_TABLE: _Table = (
    (-20, -10, -10, -10, -10, -10, -10, -20),
    (-10, 0, 0, 0, 0, 0, 0, -10),
    (-10, 0, 5, 10, 10, 5, 0, -10),
    (-10, 5, 5, 10, 10, 5, 5, -10),
    (-10, 0, 10, 10, 10, 10, 0, -10),
    (-10, 10, 10, 10, 10, 10, 10, -10),
    (-10, 5, 0, 0, 0, 0, 5, -10),
    (-20, -10, -10, -10, -10, -10, -10, -20),
)

_ROOK_TABLE: _Table = (
    (0, 0, 0, 0, 0, 0, 0, 0),
    (5, 10, 10, 10, 10, 10, 10, 5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (0, 0, 0, 5, 5, 0, 0, 0),
)

_QUEEN_TABLE: _Table = (
    (-20, -10, -10, -5, -5, -10, -10, -20),
    (-10, 0, 0, 0, 0, 0, 0, -10),
    (-10, 0, 5, 5, 5, 5, 0, -10),
    (-5, 0, 5, 5, 5, 5, 0, -5),
    (0, 0, 5, 5, 5, 5, 0, -5),
    (-10, 5, 5, 5, 5, 5, 0, -10),
    (-10, 0, 5, 0, 0, 0, 0, -10),
    (-20, -10, -10, -5, -5, -10, -10, -20),
)

# Middlegame king: stay behind the pawn shield.
_KING_TABLE: _Table = (
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-20, -30, -30, -40, -40, -30, -30, -20),
    (-10, -20, -20, -20, -20, -20, -20, -10),
    (20, 20, 0, 0, 0, 0, 20, 20),
    (20, 30, 10, 0, 0, 10, 30, 20),
)

PIECE_SQUARE_TABLES: Mapping[PieceType, _Table] = MappingProxyType(
    {
        PieceType.PAWN: _PAWN_TABLE,
        PieceType.KNIGHT: _KNIGHT_TABLE,
        PieceType.BISHOP: _BISHOP_TABLE,
        PieceType.ROOK: _ROOK_TABLE,
        PieceType.QUEEN: _QUEEN_TABLE,
        PieceType.KING: _KING_TABLE,
    }
)


def piece_square_bonus(piece_type: PieceType, color: Color, row: int, col: int) -> int:
    """Positional bonus for a piece of *color* on (*row*, *col*)."""
    table_row = row if color == Color.WHITE else 7 - row
    return PIECE_SQUARE_TABLES[piece_type][table_row][col]


def evaluate(board: Board) -> int:
    """Material + position, white minus black (positive favors white)."""
    score = 0
    for row, col, piece in board.occupied():
        value = PIECE_VALUES[piece.piece_type] + piece_square_bonus(
            piece.piece_type, piece.color, row, col
        )
        if piece.color == Color.WHITE:
            score += value
        else:
            score -= value
    return score
