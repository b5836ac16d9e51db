"""Piece object with its variant capability flags."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from cursechess.core.enums import Color, MovementProfile, PieceType

# FEN character ↔ (Color, PieceType)
_CHAR_MAP: dict[str, tuple[Color, PieceType]] = {
    "P": (Color.WHITE, PieceType.PAWN),
    "N": (Color.WHITE, PieceType.KNIGHT),
    "B": (Color.WHITE, PieceType.BISHOP),
    "R": (Color.WHITE, PieceType.ROOK),
    "Q": (Color.WHITE, PieceType.QUEEN),
    "K": (Color.WHITE, PieceType.KING),
    "p": (Color.BLACK, PieceType.PAWN),
    "n": (Color.BLACK, PieceType.KNIGHT),
    "b": (Color.BLACK, PieceType.BISHOP),
    "r": (Color.BLACK, PieceType.ROOK),
    "q": (Color.BLACK, PieceType.QUEEN),
    "k": (Color.BLACK, PieceType.KING),
}

_FEN_CHARS: dict[tuple[Color, PieceType], str] = {v: k for k, v in _CHAR_MAP.items()}


@dataclass(slots=True)
class Piece:
    """A chess piece placed on the board.

    ``id`` is assigned once at board setup and follows the piece from square
    to square. ``capture_count``, ``special_ready`` and ``special_used`` belong
    to the curse collaborator; the move generator only reads ``special_used``
    (through :meth:`movement_profile`).
    """

    color: Color
    piece_type: PieceType
    id: int = 0
    capture_count: int = 0
    special_ready: bool = False
    special_used: bool = False

    # ── Variant hook ─────────────────────────────────────────────────────

    def movement_profile(
        self, altered: Mapping[PieceType, MovementProfile]
    ) -> MovementProfile:
        """Movement shape for this piece given the altered-profile table."""
        if not self.special_used:
            return MovementProfile.STANDARD
        return altered.get(self.piece_type, MovementProfile.STANDARD)

    def promoted(self, piece_type: PieceType) -> Piece:
        """Same physical piece (id, capture count) as a new piece type."""
        return Piece(
            self.color,
            piece_type,
            id=self.id,
            capture_count=self.capture_count,
        )

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        return _FEN_CHARS[(self.color, self.piece_type)]

    @classmethod
    def from_char(cls, char: str, piece_id: int = 0) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        try:
            color, ptype = _CHAR_MAP[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(color, ptype, id=piece_id)
