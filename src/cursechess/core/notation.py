"""FEN parsing and serialization for setting up positions."""

from __future__ import annotations

from cursechess.core.board import Board
from cursechess.core.enums import CastlingRights, Color
from cursechess.core.piece import Piece
from cursechess.core.state import GameState
from cursechess.core.types import parse_square, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def board_from_fen(placement: str) -> Board:
    """Parse the piece-placement field; ids are assigned 1.. in row-major order."""
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {placement!r}")
    board = Board()
    next_id = 1
    for row, rank_text in enumerate(ranks):
        col = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {placement!r}")
                col += step
            else:
                if col >= 8:
                    raise ValueError(f"Invalid FEN rank width: {placement!r}")
                board.set_piece(row, col, Piece.from_char(ch, next_id))
                next_id += 1
                col += 1
            if col > 8:
                raise ValueError(f"Invalid FEN rank width: {placement!r}")
        if col != 8:
            raise ValueError(f"Invalid FEN rank width: {placement!r}")
    return board


def state_from_fen(fen: str) -> GameState:
    """Parse a FEN string into a fresh :class:`GameState` (clocks are ignored)."""
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]
    board = board_from_fen(placement)

    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    castling = CastlingRights.NONE
    if castling_part != "-":
        rights = dict(_CASTLING_CHARS)
        for ch in castling_part:
            if ch not in rights:
                raise ValueError(f"Invalid FEN castling field: {castling_part!r}")
            castling |= rights[ch]

    en_passant = None
    if ep_part != "-":
        en_passant = parse_square(ep_part)
        if en_passant[0] not in (2, 5):
            raise ValueError(f"Invalid FEN en-passant square: {ep_part!r}")

    return GameState(
        board=board,
        turn_side=side,
        en_passant=en_passant,
        castling=castling,
    )


def board_to_fen(board: Board) -> str:
    ranks: list[str] = []
    for cells in board.rows():
        text = ""
        empty = 0
        for piece in cells:
            if piece is None:
                empty += 1
                continue
            if empty:
                text += str(empty)
                empty = 0
            text += str(piece)
        if empty:
            text += str(empty)
        ranks.append(text)
    return "/".join(ranks)


def state_to_fen(state: GameState) -> str:
    """FEN for *state*; the halfmove clock is written as 0."""
    castling = "".join(ch for ch, flag in _CASTLING_CHARS if state.castling & flag)
    ep = state.en_passant
    fullmove = len(state.move_history) // 2 + 1
    return " ".join(
        (
            board_to_fen(state.board),
            "w" if state.turn_side == Color.WHITE else "b",
            castling or "-",
            square_name(*ep) if ep is not None else "-",
            "0",
            str(fullmove),
        )
    )
