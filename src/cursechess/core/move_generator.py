"""Legal and pseudo-legal move generation + attack detection.

The generator is a pure function of a board reader plus castling rights and
the en-passant target. It is shared by :class:`~cursechess.core.rule_engine.RuleEngine`
and by the search, which feeds it copied snapshots.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Protocol

from cursechess.core.board import Board
from cursechess.core.enums import (
    CastleSide,
    CastlingRights,
    Color,
    MovementProfile,
    PieceType,
)
from cursechess.core.move import Move
from cursechess.core.piece import Piece
from cursechess.core.types import Coord

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

DEFAULT_ALTERED_PROFILES: Mapping[PieceType, MovementProfile] = MappingProxyType(
    {PieceType.PAWN: MovementProfile.KING_STEP}
)

# Indexed by int(Color).
_PAWN_STEP: tuple[int, int] = (-1, 1)
_PAWN_START_ROW: tuple[int, int] = (6, 1)
_PROMOTION_ROW: tuple[int, int] = (0, 7)
_HOME_ROW: tuple[int, int] = (7, 0)
_KING_HOME_COL = 4

_CASTLE_FLAGS: tuple[tuple[CastlingRights, CastlingRights], ...] = (
    (CastlingRights.WHITE_KINGSIDE, CastlingRights.WHITE_QUEENSIDE),
    (CastlingRights.BLACK_KINGSIDE, CastlingRights.BLACK_QUEENSIDE),
)
_BOTH_CASTLES: tuple[CastlingRights, CastlingRights] = (
    CastlingRights.WHITE_BOTH,
    CastlingRights.BLACK_BOTH,
)
_ROOK_CORNERS: dict[Coord, CastlingRights] = {
    (7, 0): CastlingRights.WHITE_QUEENSIDE,
    (7, 7): CastlingRights.WHITE_KINGSIDE,
    (0, 0): CastlingRights.BLACK_QUEENSIDE,
    (0, 7): CastlingRights.BLACK_KINGSIDE,
}


class BoardReader(Protocol):
    """Read-only board capability the generator depends on."""

    def piece_at(self, row: int, col: int) -> Piece | None: ...

    def king_square(self, color: Color) -> Coord | None: ...


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Coord, ...], ...], ...]:
    table: list[tuple[tuple[Coord, ...], ...]] = []
    for row in range(8):
        row_targets: list[tuple[Coord, ...]] = []
        for col in range(8):
            row_targets.append(
                tuple(
                    (row + dr, col + dc)
                    for dr, dc in offsets
                    if 0 <= row + dr < 8 and 0 <= col + dc < 8
                )
            )
        table.append(tuple(row_targets))
    return tuple(table)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[tuple[Coord, ...], ...], ...], ...]:
    table: list[tuple[tuple[tuple[Coord, ...], ...], ...]] = []
    for row in range(8):
        row_rays: list[tuple[tuple[Coord, ...], ...]] = []
        for col in range(8):
            square_rays: list[tuple[Coord, ...]] = []
            for dr, dc in directions:
                r, c = row + dr, col + dc
                ray: list[Coord] = []
                while 0 <= r < 8 and 0 <= c < 8:
                    ray.append((r, c))
                    r += dr
                    c += dc
                square_rays.append(tuple(ray))
            row_rays.append(tuple(square_rays))
        table.append(tuple(row_rays))
    return tuple(table)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)


# -- Attack detection ------------------------------------------------------


def is_square_attacked(
    board: BoardReader,
    row: int,
    col: int,
    by_color: Color,
    altered: Mapping[PieceType, MovementProfile] = DEFAULT_ALTERED_PROFILES,
) -> bool:
    """Is (*row*, *col*) attacked by any piece of *by_color*?"""
    # Pawns capture towards their direction of travel, whatever their profile.
    pawn_row = row - _PAWN_STEP[int(by_color)]
    if 0 <= pawn_row < 8:
        for pawn_col in (col - 1, col + 1):
            if 0 <= pawn_col < 8:
                piece = board.piece_at(pawn_row, pawn_col)
                if (
                    piece is not None
                    and piece.color == by_color
                    and piece.piece_type == PieceType.PAWN
                ):
                    return True

    for r, c in _KNIGHT_TARGETS[row][col]:
        piece = board.piece_at(r, c)
        if (
            piece is not None
            and piece.color == by_color
            and piece.piece_type == PieceType.KNIGHT
        ):
            return True

    for r, c in _KING_TARGETS[row][col]:
        piece = board.piece_at(r, c)
        if piece is None or piece.color != by_color:
            continue
        if piece.piece_type == PieceType.KING:
            return True
        if (
            piece.movement_profile(altered) == MovementProfile.KING_STEP_CAPTURE
        ):
            return True

    for ray in _BISHOP_RAYS[row][col]:
        for r, c in ray:
            piece = board.piece_at(r, c)
            if piece is None:
                continue
            if piece.color == by_color and piece.piece_type in (
                PieceType.BISHOP,
                PieceType.QUEEN,
            ):
                return True
            break

    for ray in _ROOK_RAYS[row][col]:
        for r, c in ray:
            piece = board.piece_at(r, c)
            if piece is None:
                continue
            if piece.color == by_color and piece.piece_type in (
                PieceType.ROOK,
                PieceType.QUEEN,
            ):
                return True
            break

    return False


def is_in_check(
    board: BoardReader,
    color: Color,
    altered: Mapping[PieceType, MovementProfile] = DEFAULT_ALTERED_PROFILES,
) -> bool:
    """Is *color*'s king attacked? A missing king is never in check."""
    king_sq = board.king_square(color)
    if king_sq is None:
        return False
    return is_square_attacked(board, king_sq[0], king_sq[1], color.opposite, altered)


# -- Transition helpers ----------------------------------------------------


def apply_move(board: Board, move: Move) -> Board:
    """Return a copy of *board* with *move* played; *board* is left untouched."""
    result = board.copy()
    piece = result.piece_at(move.from_row, move.from_col)
    if piece is None:
        raise ValueError(f"No piece on {move.origin}")

    result.set_piece(move.from_row, move.from_col, None)

    # En passant: the captured pawn sits beside the origin square.
    if move.is_en_passant:
        result.set_piece(move.from_row, move.to_col, None)

    if move.promotion is not None:
        piece = piece.promoted(move.promotion)
    result.set_piece(move.to_row, move.to_col, piece)

    # Slide the rook for castling
    if move.castle_side == CastleSide.KINGSIDE:
        result.set_piece(move.from_row, 5, result.piece_at(move.from_row, 7))
        result.set_piece(move.from_row, 7, None)
    elif move.castle_side == CastleSide.QUEENSIDE:
        result.set_piece(move.from_row, 3, result.piece_at(move.from_row, 0))
        result.set_piece(move.from_row, 0, None)

    return result


def next_castling(castling: CastlingRights, piece: Piece, move: Move) -> CastlingRights:
    """Castling rights after *piece* plays *move*."""
    if piece.piece_type == PieceType.KING:
        castling &= ~_BOTH_CASTLES[int(piece.color)]

    for sq in (move.origin, move.target):
        corner = _ROOK_CORNERS.get(sq)
        if corner is not None:
            castling &= ~corner
    return castling


def next_en_passant(piece: Piece, move: Move) -> Coord | None:
    """En-passant target created by *move* (only after a double pawn push)."""
    if piece.piece_type == PieceType.PAWN and abs(move.to_row - move.from_row) == 2:
        return (move.from_row + move.to_row) // 2, move.from_col
    return None


class MoveGenerator:
    """Generates legal moves for one board state.

    The board is never mutated; check-safety is tested on copies produced by
    :func:`apply_move`.
    """

    __slots__ = ("_board", "_castling", "_en_passant", "_altered")

    def __init__(
        self,
        board: Board,
        castling: CastlingRights = CastlingRights.NONE,
        en_passant: Coord | None = None,
        altered_profiles: Mapping[PieceType, MovementProfile] = DEFAULT_ALTERED_PROFILES,
    ) -> None:
        self._board = board
        self._castling = castling
        self._en_passant = en_passant
        self._altered = altered_profiles

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self, color: Color) -> list[Move]:
        """All strictly legal moves for *color*."""
        legal: list[Move] = []
        for row, col, _ in self._board.occupied(color):
            legal.extend(self.legal_moves_from(row, col))
        return legal

    def legal_moves_from(self, row: int, col: int) -> list[Move]:
        """Legal moves for the piece on (*row*, *col*)."""
        piece = self._board.piece_at(row, col)
        if piece is None:
            return []
        color = piece.color
        altered = self._altered
        return [
            move
            for move in self.pseudo_legal_moves_from(row, col)
            if not is_in_check(apply_move(self._board, move), color, altered)
        ]

    def has_legal_move(self, color: Color) -> bool:
        """Whether *color* has at least one legal move."""
        for row, col, _ in self._board.occupied(color):
            for move in self.pseudo_legal_moves_from(row, col):
                if not is_in_check(apply_move(self._board, move), color, self._altered):
                    return True
        return False

    def generate_pseudo_legal_moves(self, color: Color) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        for row, col, _ in self._board.occupied(color):
            moves.extend(self.pseudo_legal_moves_from(row, col))
        return moves

    def pseudo_legal_moves_from(self, row: int, col: int) -> list[Move]:
        piece = self._board.piece_at(row, col)
        moves: list[Move] = []
        if piece is None:
            return moves

        pt = piece.piece_type
        if pt == PieceType.PAWN:
            self._gen_pawn(row, col, piece, moves)
        elif pt == PieceType.KNIGHT:
            self._gen_steps(row, col, piece.color, _KNIGHT_TARGETS[row][col], moves)
        elif pt == PieceType.BISHOP:
            self._gen_sliding(row, col, piece.color, _BISHOP_RAYS[row][col], moves)
        elif pt == PieceType.ROOK:
            self._gen_sliding(row, col, piece.color, _ROOK_RAYS[row][col], moves)
        elif pt == PieceType.QUEEN:
            self._gen_sliding(row, col, piece.color, _QUEEN_RAYS[row][col], moves)
        else:
            self._gen_steps(row, col, piece.color, _KING_TARGETS[row][col], moves)
            self._gen_castling(row, col, piece.color, moves)
        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return is_in_check(self._board, color, self._altered)

    def is_square_attacked(self, row: int, col: int, by_color: Color) -> bool:
        """Is (*row*, *col*) attacked by any piece of *by_color*?"""
        return is_square_attacked(self._board, row, col, by_color, self._altered)

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, row: int, col: int, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        color = piece.color
        step = _PAWN_STEP[int(color)]
        profile = piece.movement_profile(self._altered)
        ahead = row + step

        if profile == MovementProfile.STANDARD:
            if 0 <= ahead < 8 and board.is_empty(ahead, col):
                self._add_pawn_move(row, col, ahead, col, color, False, moves)
                if row == _PAWN_START_ROW[int(color)]:
                    two_ahead = row + 2 * step
                    if board.is_empty(two_ahead, col):
                        moves.append(Move(row, col, two_ahead, col))
        else:
            for r, c in _KING_TARGETS[row][col]:
                target = board.piece_at(r, c)
                if target is None:
                    # The en-passant square is reached by the capture below.
                    if (r, c) == self._en_passant and r == ahead and c != col:
                        continue
                    self._add_pawn_move(row, col, r, c, color, False, moves)
                elif (
                    profile == MovementProfile.KING_STEP_CAPTURE
                    and target.color != color
                ):
                    self._add_pawn_move(row, col, r, c, color, True, moves)

        if not 0 <= ahead < 8:
            return

        for c in (col - 1, col + 1):
            if not 0 <= c < 8:
                continue
            target = board.piece_at(ahead, c)
            if target is not None:
                # KING_STEP_CAPTURE already covered every adjacent capture.
                if (
                    target.color != color
                    and profile != MovementProfile.KING_STEP_CAPTURE
                ):
                    self._add_pawn_move(row, col, ahead, c, color, True, moves)
            elif (ahead, c) == self._en_passant:
                passed = board.piece_at(row, c)
                if (
                    passed is not None
                    and passed.color != color
                    and passed.piece_type == PieceType.PAWN
                ):
                    moves.append(
                        Move(row, col, ahead, c, is_capture=True, is_en_passant=True)
                    )

    @staticmethod
    def _add_pawn_move(
        row: int,
        col: int,
        to_row: int,
        to_col: int,
        color: Color,
        is_capture: bool,
        moves: list[Move],
    ) -> None:
        if to_row == _PROMOTION_ROW[int(color)]:
            for pt in PROMOTION_TYPES:
                moves.append(Move(row, col, to_row, to_col, is_capture, promotion=pt))
        else:
            moves.append(Move(row, col, to_row, to_col, is_capture))

    def _gen_steps(
        self,
        row: int,
        col: int,
        color: Color,
        targets: tuple[Coord, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for r, c in targets:
            target = board.piece_at(r, c)
            if target is None:
                moves.append(Move(row, col, r, c))
            elif target.color != color:
                moves.append(Move(row, col, r, c, is_capture=True))

    def _gen_sliding(
        self,
        row: int,
        col: int,
        color: Color,
        rays: tuple[tuple[Coord, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for r, c in ray:
                target = board.piece_at(r, c)
                if target is None:
                    moves.append(Move(row, col, r, c))
                    continue
                if target.color != color:
                    moves.append(Move(row, col, r, c, is_capture=True))
                break

    def _gen_castling(self, row: int, col: int, color: Color, moves: list[Move]) -> None:
        home = _HOME_ROW[int(color)]
        if (row, col) != (home, _KING_HOME_COL):
            return

        kingside, queenside = _CASTLE_FLAGS[int(color)]
        if not self._castling & (kingside | queenside):
            return

        opponent = color.opposite
        if self.is_square_attacked(home, _KING_HOME_COL, opponent):
            return

        board = self._board
        if (
            self._castling & kingside
            and self._has_home_rook(home, 7, color)
            and board.is_empty(home, 5)
            and board.is_empty(home, 6)
            and not self.is_square_attacked(home, 5, opponent)
            and not self.is_square_attacked(home, 6, opponent)
        ):
            moves.append(Move(row, col, home, 6, castle_side=CastleSide.KINGSIDE))

        if (
            self._castling & queenside
            and self._has_home_rook(home, 0, color)
            and board.is_empty(home, 1)
            and board.is_empty(home, 2)
            and board.is_empty(home, 3)
            and not self.is_square_attacked(home, 3, opponent)
            and not self.is_square_attacked(home, 2, opponent)
        ):
            moves.append(Move(row, col, home, 2, castle_side=CastleSide.QUEENSIDE))

    def _has_home_rook(self, row: int, col: int, color: Color) -> bool:
        rook = self._board.piece_at(row, col)
        return (
            rook is not None
            and rook.color == color
            and rook.piece_type == PieceType.ROOK
        )
