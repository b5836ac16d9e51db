"""JSON serialisation of :class:`GameState`.

The wire shape is a plain JSON object::

    {
      "board": [[null | {"type", "color", "id", "capture_count",
                         "special_ready", "special_used"}, ...8], ...8],
      "turn_side": "white",
      "move_history": [{"side", "piece", "from", "to", "captured", "promoted_to"}],
      "en_passant": "e3" | null,
      "castling_rights": {"white": {"kingside", "queenside"}, "black": {...}},
      "status": "active" | "checkmate" | "stalemate",
      "winner": "white" | "black" | null
    }
"""

from __future__ import annotations

import json
from typing import Any

from cursechess.core.board import Board
from cursechess.core.enums import CastlingRights, Color, GameStatus, PieceType
from cursechess.core.piece import Piece
from cursechess.core.state import GameState, MoveRecord
from cursechess.core.types import parse_square, square_name

_COLORS: dict[str, Color] = {str(c): c for c in Color}
_PIECE_TYPES: dict[str, PieceType] = {str(pt): pt for pt in PieceType}
_STATUSES: dict[str, GameStatus] = {s.value: s for s in GameStatus}

_CASTLE_KEYS: tuple[tuple[Color, str, CastlingRights], ...] = (
    (Color.WHITE, "kingside", CastlingRights.WHITE_KINGSIDE),
    (Color.WHITE, "queenside", CastlingRights.WHITE_QUEENSIDE),
    (Color.BLACK, "kingside", CastlingRights.BLACK_KINGSIDE),
    (Color.BLACK, "queenside", CastlingRights.BLACK_QUEENSIDE),
)

_PIECE_FLAGS = ("special_ready", "special_used")


class StateFormatError(ValueError):
    """Serialised game state has the wrong shape or values."""


# ── Encoding ─────────────────────────────────────────────────────────────


def piece_to_dict(piece: Piece) -> dict[str, Any]:
    return {
        "type": str(piece.piece_type),
        "color": str(piece.color),
        "id": piece.id,
        "capture_count": piece.capture_count,
        "special_ready": piece.special_ready,
        "special_used": piece.special_used,
    }


def record_to_dict(record: MoveRecord) -> dict[str, Any]:
    return {
        "side": str(record.side),
        "piece": str(record.piece_type),
        "from": record.from_square,
        "to": record.to_square,
        "captured": str(record.captured) if record.captured else None,
        "promoted_to": str(record.promoted_to) if record.promoted_to else None,
    }


def state_to_dict(state: GameState) -> dict[str, Any]:
    """JSON-compatible dict holding every field of *state*."""
    rights: dict[str, dict[str, bool]] = {"white": {}, "black": {}}
    for color, key, flag in _CASTLE_KEYS:
        rights[str(color)][key] = bool(state.castling & flag)

    ep = state.en_passant
    return {
        "board": [
            [piece_to_dict(p) if p is not None else None for p in cells]
            for cells in state.board.rows()
        ],
        "turn_side": str(state.turn_side),
        "move_history": [record_to_dict(r) for r in state.move_history],
        "en_passant": square_name(*ep) if ep is not None else None,
        "castling_rights": rights,
        "status": state.status.value,
        "winner": str(state.winner) if state.winner is not None else None,
    }


def dumps(state: GameState) -> str:
    return json.dumps(state_to_dict(state))


# ── Decoding ─────────────────────────────────────────────────────────────


def _field(data: dict[str, Any], key: str, where: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise StateFormatError(f"Missing {key!r} in {where}") from None


def _lookup(table: dict[str, Any], value: Any, what: str) -> Any:
    if not isinstance(value, str) or value not in table:
        raise StateFormatError(f"Invalid {what}: {value!r}")
    return table[value]


def _optional(table: dict[str, Any], value: Any, what: str) -> Any:
    return None if value is None else _lookup(table, value, what)


def _square(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise StateFormatError(f"Invalid {what}: {value!r}")
    try:
        parse_square(value)
    except ValueError as exc:
        raise StateFormatError(str(exc)) from None
    return value


def piece_from_dict(data: Any) -> Piece:
    if not isinstance(data, dict):
        raise StateFormatError(f"Invalid piece entry: {data!r}")
    piece_id = _field(data, "id", "piece")
    capture_count = _field(data, "capture_count", "piece")
    for key, value in (("id", piece_id), ("capture_count", capture_count)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise StateFormatError(f"Invalid piece {key}: {value!r}")
    flags = [_field(data, key, "piece") for key in _PIECE_FLAGS]
    if not all(isinstance(flag, bool) for flag in flags):
        raise StateFormatError(f"Invalid piece flags: {flags!r}")
    return Piece(
        color=_lookup(_COLORS, _field(data, "color", "piece"), "piece color"),
        piece_type=_lookup(_PIECE_TYPES, _field(data, "type", "piece"), "piece type"),
        id=piece_id,
        capture_count=capture_count,
        special_ready=flags[0],
        special_used=flags[1],
    )


def record_from_dict(data: Any) -> MoveRecord:
    if not isinstance(data, dict):
        raise StateFormatError(f"Invalid move record: {data!r}")
    return MoveRecord(
        side=_lookup(_COLORS, _field(data, "side", "move record"), "side"),
        piece_type=_lookup(
            _PIECE_TYPES, _field(data, "piece", "move record"), "piece type"
        ),
        from_square=_square(_field(data, "from", "move record"), "from square"),
        to_square=_square(_field(data, "to", "move record"), "to square"),
        captured=_optional(
            _PIECE_TYPES, _field(data, "captured", "move record"), "captured type"
        ),
        promoted_to=_optional(
            _PIECE_TYPES, _field(data, "promoted_to", "move record"), "promotion"
        ),
    )


def _board_from_list(rows: Any) -> Board:
    if not isinstance(rows, list) or len(rows) != 8:
        raise StateFormatError("Board must have 8 rows")
    grid: list[list[Piece | None]] = []
    seen_ids: set[int] = set()
    for cells in rows:
        if not isinstance(cells, list) or len(cells) != 8:
            raise StateFormatError("Board rows must have 8 squares")
        row: list[Piece | None] = []
        for cell in cells:
            piece = None if cell is None else piece_from_dict(cell)
            if piece is not None and piece.id:
                if piece.id in seen_ids:
                    raise StateFormatError(f"Duplicate piece id: {piece.id}")
                seen_ids.add(piece.id)
            row.append(piece)
        grid.append(row)
    return Board.from_rows(grid)


def _castling_from_dict(data: Any) -> CastlingRights:
    if not isinstance(data, dict):
        raise StateFormatError(f"Invalid castling rights: {data!r}")
    castling = CastlingRights.NONE
    for color, key, flag in _CASTLE_KEYS:
        side = _field(data, str(color), "castling rights")
        if not isinstance(side, dict):
            raise StateFormatError(f"Invalid castling rights: {data!r}")
        value = _field(side, key, f"{color} castling rights")
        if not isinstance(value, bool):
            raise StateFormatError(f"Invalid castling flag: {value!r}")
        if value:
            castling |= flag
    return castling


def state_from_dict(data: Any) -> GameState:
    """Build a :class:`GameState`; raises :class:`StateFormatError` on bad input."""
    if not isinstance(data, dict):
        raise StateFormatError("Game state must be a JSON object")

    history = _field(data, "move_history", "state")
    if not isinstance(history, list):
        raise StateFormatError("move_history must be a list")

    ep_text = _field(data, "en_passant", "state")
    en_passant = None if ep_text is None else parse_square(_square(ep_text, "en passant"))

    return GameState(
        board=_board_from_list(_field(data, "board", "state")),
        turn_side=_lookup(_COLORS, _field(data, "turn_side", "state"), "turn side"),
        move_history=[record_from_dict(entry) for entry in history],
        en_passant=en_passant,
        castling=_castling_from_dict(_field(data, "castling_rights", "state")),
        status=_lookup(_STATUSES, _field(data, "status", "state"), "status"),
        winner=_optional(_COLORS, _field(data, "winner", "state"), "winner"),
    )


def loads(text: str) -> GameState:
    try:
        data = json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        raise StateFormatError(f"Invalid JSON: {exc}") from None
    return state_from_dict(data)
