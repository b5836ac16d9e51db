"""Curses earned by capturing: thresholds, readiness and activation.

A piece that reaches its capture threshold becomes *ready*. Activating the
curse spends the player's turn:

* pawn: from now on it also steps like a king (see ``MovementProfile``);
* knight: swaps squares with another own piece (not the king);
* rook: no ability yet.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from cursechess.core.enums import PieceType
from cursechess.core.piece import Piece
from cursechess.core.rule_engine import RuleEngine
from cursechess.core.state import MoveResult
from cursechess.core.types import Coord, in_bounds, square_name

_LOGGER = logging.getLogger(__name__)

CURSE_THRESHOLDS: Mapping[PieceType, int] = MappingProxyType(
    {
        PieceType.PAWN: 2,
        PieceType.KNIGHT: 3,
        PieceType.ROOK: 5,
    }
)


# Promotion row, indexed by int(Color).
_LAST_ROW: tuple[int, int] = (0, 7)


class CurseError(ValueError):
    """A curse cannot be activated on the requested piece."""


def register_capture(piece: Piece) -> bool:
    """Count a capture made by *piece*.

    Returns True exactly when this capture makes the curse ready.
    """
    threshold = CURSE_THRESHOLDS.get(piece.piece_type)
    if threshold is None:
        return False
    piece.capture_count += 1
    if piece.special_ready or piece.special_used or piece.capture_count < threshold:
        return False
    piece.special_ready = True
    return True


def is_curse_ready(piece: Piece | None) -> bool:
    return piece is not None and piece.special_ready and not piece.special_used


def activate_curse(
    rules: RuleEngine,
    row: int,
    col: int,
    swap_with: Coord | None = None,
) -> MoveResult:
    """Activate the curse of the piece on (*row*, *col*) and pass the turn.

    *swap_with* is the knight's swap partner. Raises :class:`CurseError`
    when the piece is missing or not ready, when its side is in check, or
    when the piece type has no ability. The game is left untouched then.
    """
    if rules.status.is_terminal:
        raise CurseError("The game is over")
    if not in_bounds(row, col):
        raise CurseError(f"Square out of range: {(row, col)}")
    label = square_name(row, col)
    piece = rules.piece_at(row, col)
    if piece is None or piece.color != rules.turn_side:
        raise CurseError(f"No piece of the side to move on {label}")
    if not is_curse_ready(piece):
        raise CurseError(f"Curse of {piece.piece_type} on {label} is not ready")
    if rules.is_in_check():
        raise CurseError("A curse cannot be used while in check")

    if piece.piece_type == PieceType.PAWN:
        _spend(piece)
    elif piece.piece_type == PieceType.KNIGHT:
        _swap_knight(rules, (row, col), piece, swap_with)
    else:
        raise CurseError(f"No curse ability for {piece.piece_type}")

    _LOGGER.debug("%s %s curse activated on %s", piece.color, piece.piece_type, label)
    return rules.pass_turn()


def _spend(piece: Piece) -> None:
    piece.special_ready = False
    piece.special_used = True


def _swap_knight(
    rules: RuleEngine,
    origin: Coord,
    knight: Piece,
    swap_with: Coord | None,
) -> None:
    if swap_with is None:
        raise CurseError("Knight curse needs a piece to swap with")
    if not in_bounds(*swap_with) or swap_with == origin:
        raise CurseError(f"Invalid swap square: {swap_with}")
    partner = rules.piece_at(*swap_with)
    if (
        partner is None
        or partner.color != knight.color
        or partner.piece_type == PieceType.KING
    ):
        raise CurseError(
            f"Knight cannot swap with the piece on {square_name(*swap_with)}"
        )

    if partner.piece_type == PieceType.PAWN and origin[0] == _LAST_ROW[int(partner.color)]:
        raise CurseError("A pawn cannot be swapped onto its last rank")

    rules.swap_pieces(origin, swap_with)
    _spend(knight)
