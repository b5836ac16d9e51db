"""Game state records: the live state, history entries and move results."""

from __future__ import annotations

from dataclasses import dataclass, field

from cursechess.core.board import Board
from cursechess.core.enums import CastlingRights, Color, GameStatus, PieceType
from cursechess.core.move import Move
from cursechess.core.snapshot import Snapshot
from cursechess.core.types import Coord


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single entry in the move history."""

    side: Color
    piece_type: PieceType
    from_square: str
    to_square: str
    captured: PieceType | None = None
    promoted_to: PieceType | None = None


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of :meth:`RuleEngine.move`.

    Check and mate flags describe the side that is now to move.
    """

    ok: bool
    captured: PieceType | None = None
    promotion: PieceType | None = None
    is_check: bool = False
    is_checkmate: bool = False
    is_stalemate: bool = False
    move: Move | None = None

    @classmethod
    def rejected(cls) -> MoveResult:
        return cls(ok=False)


@dataclass(slots=True)
class GameState:
    """Everything the rule engine owns for one game."""

    board: Board
    turn_side: Color = Color.WHITE
    move_history: list[MoveRecord] = field(default_factory=list)
    en_passant: Coord | None = None
    castling: CastlingRights = CastlingRights.ALL
    status: GameStatus = GameStatus.ACTIVE
    winner: Color | None = None

    @classmethod
    def initial(cls) -> GameState:
        """Standard starting state, white to move."""
        return cls(board=Board.initial())

    def snapshot(self) -> Snapshot:
        return Snapshot(self.board, self.turn_side, self.castling, self.en_passant)
