"""Snapshot — the minimal position the search simulates on."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from cursechess.core.board import Board
from cursechess.core.enums import CastlingRights, Color, MovementProfile, PieceType
from cursechess.core.move import Move
from cursechess.core.move_generator import (
    DEFAULT_ALTERED_PROFILES,
    MoveGenerator,
    apply_move,
    next_castling,
    next_en_passant,
)
from cursechess.core.types import Coord


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Board + side to move + castling + en passant, copied on every move."""

    board: Board
    side_to_move: Color = Color.WHITE
    castling: CastlingRights = CastlingRights.ALL
    en_passant: Coord | None = None

    def generator(
        self,
        altered_profiles: Mapping[PieceType, MovementProfile] = DEFAULT_ALTERED_PROFILES,
    ) -> MoveGenerator:
        return MoveGenerator(self.board, self.castling, self.en_passant, altered_profiles)

    def play(self, move: Move) -> Snapshot:
        """New snapshot with *move* applied; this one is left untouched."""
        piece = self.board.piece_at(move.from_row, move.from_col)
        if piece is None:
            raise ValueError(f"No piece on {move.origin}")
        return Snapshot(
            board=apply_move(self.board, move),
            side_to_move=self.side_to_move.opposite,
            castling=next_castling(self.castling, piece, move),
            en_passant=next_en_passant(piece, move),
        )
