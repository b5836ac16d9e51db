"""RuleEngine — authoritative legality checks and state transitions."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from cursechess.core import serialization
from cursechess.core.board import Board
from cursechess.core.enums import (
    CastlingRights,
    Color,
    GameStatus,
    MovementProfile,
    PieceType,
)
from cursechess.core.move import Move
from cursechess.core.move_generator import (
    DEFAULT_ALTERED_PROFILES,
    MoveGenerator,
    apply_move,
    next_castling,
    next_en_passant,
)
from cursechess.core.notation import state_from_fen, state_to_fen
from cursechess.core.piece import Piece
from cursechess.core.snapshot import Snapshot
from cursechess.core.state import GameState, MoveRecord, MoveResult
from cursechess.core.types import Coord, in_bounds, square_name

_LOGGER = logging.getLogger(__name__)


class RuleEngine:
    """Owns one :class:`GameState` and is the only path that mutates it.

    Every mutating call either commits completely or leaves the state as it
    was. The engine does not refuse moves on a finished game by itself: in a
    terminal state the side to move has no legal moves, so :meth:`move`
    rejects everything, but callers should check :attr:`status` first.
    Access must be serialised by the caller (no internal locking).
    """

    __slots__ = ("_state", "_altered")

    def __init__(
        self,
        altered_profiles: Mapping[PieceType, MovementProfile] = DEFAULT_ALTERED_PROFILES,
    ) -> None:
        self._altered = altered_profiles
        self._state = GameState.initial()

    @classmethod
    def from_fen(
        cls,
        fen: str,
        altered_profiles: Mapping[PieceType, MovementProfile] = DEFAULT_ALTERED_PROFILES,
    ) -> RuleEngine:
        """Engine set up on the position described by *fen*."""
        engine = cls(altered_profiles)
        state = state_from_fen(fen)
        engine._state = state
        engine._refresh_status(winner_if_mated=state.turn_side.opposite)
        return engine

    def reset(self) -> None:
        """Start a new game from the standard position."""
        self._state = GameState.initial()

    # ── Read access ──────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def board(self) -> Board:
        return self._state.board

    @property
    def turn_side(self) -> Color:
        return self._state.turn_side

    @property
    def status(self) -> GameStatus:
        return self._state.status

    @property
    def winner(self) -> Color | None:
        return self._state.winner

    @property
    def move_history(self) -> list[MoveRecord]:
        return self._state.move_history

    @property
    def castling(self) -> CastlingRights:
        return self._state.castling

    @property
    def en_passant(self) -> Coord | None:
        return self._state.en_passant

    @property
    def altered_profiles(self) -> Mapping[PieceType, MovementProfile]:
        return self._altered

    def piece_at(self, row: int, col: int) -> Piece | None:
        return self._state.board.piece_at(row, col)

    def snapshot(self) -> Snapshot:
        """Read-only view for the search (copy-on-write on every move)."""
        return self._state.snapshot()

    def to_fen(self) -> str:
        return state_to_fen(self._state)

    # ── Legality ─────────────────────────────────────────────────────────

    def legal_moves(self, row: int, col: int) -> list[Coord]:
        """Destination squares the piece on (*row*, *col*) may move to."""
        destinations: list[Coord] = []
        for move in self.legal_move_list(row, col):
            if move.target not in destinations:
                destinations.append(move.target)
        return destinations

    def legal_move_list(self, row: int, col: int) -> list[Move]:
        """Full legal :class:`Move` objects for the piece on (*row*, *col*)."""
        if not in_bounds(row, col):
            return []
        piece = self._state.board.piece_at(row, col)
        if piece is None or piece.color != self._state.turn_side:
            return []
        return self._generator().legal_moves_from(row, col)

    def all_legal_moves(self) -> list[Move]:
        """Every legal move for the side to move."""
        return self._generator().generate_legal_moves(self._state.turn_side)

    def is_in_check(self, color: Color | None = None) -> bool:
        side = self._state.turn_side if color is None else color
        return self._generator().is_in_check(side)

    # ── Transition ───────────────────────────────────────────────────────

    def move(
        self,
        from_row: int,
        from_col: int,
        to_row: int,
        to_col: int,
        promotion: PieceType = PieceType.QUEEN,
    ) -> MoveResult:
        """Play a move for the side to move; ``ok=False`` leaves state as it was."""
        state = self._state
        candidates = [
            m
            for m in self.legal_move_list(from_row, from_col)
            if m.target == (to_row, to_col)
        ]
        if candidates and candidates[0].promotion is not None:
            candidates = [m for m in candidates if m.promotion == promotion]
        if not candidates:
            _LOGGER.debug(
                "Rejected move %s -> %s for %s",
                (from_row, from_col),
                (to_row, to_col),
                state.turn_side,
            )
            return MoveResult.rejected()

        move = candidates[0]
        board = state.board
        piece = board.piece_at(from_row, from_col)
        assert piece is not None

        captured: PieceType | None = None
        if move.is_en_passant:
            captured = PieceType.PAWN
        else:
            target = board.piece_at(to_row, to_col)
            if target is not None:
                captured = target.piece_type

        next_board = apply_move(board, move)
        castling = next_castling(state.castling, piece, move)
        en_passant = next_en_passant(piece, move)
        record = MoveRecord(
            side=piece.color,
            piece_type=piece.piece_type,
            from_square=square_name(from_row, from_col),
            to_square=square_name(to_row, to_col),
            captured=captured,
            promoted_to=move.promotion,
        )

        mover = state.turn_side
        opponent = mover.opposite
        gen = MoveGenerator(next_board, castling, en_passant, self._altered)
        in_check = gen.is_in_check(opponent)
        has_moves = gen.has_legal_move(opponent)

        # Commit
        state.board = next_board
        state.castling = castling
        state.en_passant = en_passant
        state.move_history.append(record)
        state.turn_side = opponent
        self._set_outcome(in_check, has_moves, winner_if_mated=mover)

        return MoveResult(
            ok=True,
            captured=captured,
            promotion=move.promotion,
            is_check=in_check and has_moves,
            is_checkmate=in_check and not has_moves,
            is_stalemate=not in_check and not has_moves,
            move=move,
        )

    # ── External effects ─────────────────────────────────────────────────

    def swap_pieces(self, first: Coord, second: Coord) -> None:
        """Exchange the contents of two squares without any legality check."""
        if not (in_bounds(*first) and in_bounds(*second)):
            raise ValueError(f"Square out of range: {first} / {second}")
        board = self._state.board.copy()
        a, b = board[first], board[second]
        board[first] = None
        board[second] = a
        board[first] = b
        self._state.board = board

    def pass_turn(self) -> MoveResult:
        """Give the move to the opponent without playing one.

        Used by abilities that consume a turn. Clears the en-passant target
        and re-evaluates check and mate for the new side to move.
        """
        state = self._state
        mover = state.turn_side
        state.en_passant = None
        state.turn_side = mover.opposite
        gen = self._generator()
        in_check = gen.is_in_check(state.turn_side)
        has_moves = gen.has_legal_move(state.turn_side)
        self._set_outcome(in_check, has_moves, winner_if_mated=mover)
        return MoveResult(
            ok=True,
            is_check=in_check and has_moves,
            is_checkmate=in_check and not has_moves,
            is_stalemate=not in_check and not has_moves,
        )

    # ── Persistence ──────────────────────────────────────────────────────

    def serialize(self) -> str:
        """JSON text holding the full game state."""
        return serialization.dumps(self._state)

    def deserialize(self, text: str) -> None:
        """Replace the state with *text*; on error the current state is kept."""
        self._state = serialization.loads(text)

    # ── Internal ─────────────────────────────────────────────────────────

    def _generator(self) -> MoveGenerator:
        state = self._state
        return MoveGenerator(state.board, state.castling, state.en_passant, self._altered)

    def _refresh_status(self, winner_if_mated: Color) -> None:
        gen = self._generator()
        side = self._state.turn_side
        self._set_outcome(gen.is_in_check(side), gen.has_legal_move(side), winner_if_mated)

    def _set_outcome(self, in_check: bool, has_moves: bool, winner_if_mated: Color) -> None:
        state = self._state
        if has_moves:
            state.status = GameStatus.ACTIVE
            state.winner = None
        elif in_check:
            state.status = GameStatus.CHECKMATE
            state.winner = winner_if_mated
            _LOGGER.info("Checkmate: %s wins", winner_if_mated)
        else:
            state.status = GameStatus.STALEMATE
            state.winner = None
            _LOGGER.info("Stalemate after %d moves", len(state.move_history))


