"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from cursechess.core.enums import CastleSide, PieceType
from cursechess.core.types import Coord, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable candidate move, produced by the move generator."""

    from_row: int
    from_col: int
    to_row: int
    to_col: int
    is_capture: bool = False
    castle_side: CastleSide = CastleSide.NONE
    is_en_passant: bool = False
    promotion: PieceType | None = None

    @property
    def origin(self) -> Coord:
        return self.from_row, self.from_col

    @property
    def target(self) -> Coord:
        return self.to_row, self.to_col

    @property
    def is_castle(self) -> bool:
        return self.castle_side != CastleSide.NONE

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = square_name(self.from_row, self.from_col) + square_name(
            self.to_row, self.to_col
        )
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)
