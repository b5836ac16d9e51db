"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator

from cursechess.core.enums import Color, PieceType
from cursechess.core.piece import Piece
from cursechess.core.types import Coord

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 8x8 grid with a king-square cache.

    :meth:`copy` duplicates the grid rows but shares the :class:`Piece`
    objects, so snapshots are cheap and piece identity survives a move.
    """

    __slots__ = ("_grid", "_king_squares")

    def __init__(self) -> None:
        self._grid: list[list[Piece | None]] = [[None] * 8 for _ in range(8)]
        # [color] -> king square cache (None if king missing).
        self._king_squares: list[Coord | None] = [None, None]

    # -- Element access -----------------------------------------------------

    def piece_at(self, row: int, col: int) -> Piece | None:
        return self._grid[row][col]

    def set_piece(self, row: int, col: int, piece: Piece | None) -> None:
        old_piece = self._grid[row][col]
        if (
            old_piece is not None
            and old_piece.piece_type == PieceType.KING
            and self._king_squares[int(old_piece.color)] == (row, col)
        ):
            self._king_squares[int(old_piece.color)] = None

        self._grid[row][col] = piece

        if piece is not None and piece.piece_type == PieceType.KING:
            self._king_squares[int(piece.color)] = (row, col)

    def __getitem__(self, coord: Coord) -> Piece | None:
        return self._grid[coord[0]][coord[1]]

    def __setitem__(self, coord: Coord, piece: Piece | None) -> None:
        self.set_piece(coord[0], coord[1], piece)

    def is_empty(self, row: int, col: int) -> bool:
        return self._grid[row][col] is None

    # -- Query helpers ------------------------------------------------------

    def king_square(self, color: Color) -> Coord | None:
        """Square of *color*'s king, or None when it is missing."""
        return self._king_squares[int(color)]

    def occupied(self, color: Color | None = None) -> Iterator[tuple[int, int, Piece]]:
        """Yield ``(row, col, piece)`` for every piece (of *color*, if given)."""
        for row, cells in enumerate(self._grid):
            for col, piece in enumerate(cells):
                if piece is not None and (color is None or piece.color == color):
                    yield row, col, piece

    def find_piece(self, piece_id: int) -> Coord | None:
        """Square of the piece carrying *piece_id*."""
        for row, col, piece in self.occupied():
            if piece.id == piece_id:
                return row, col
        return None

    def rows(self) -> list[list[Piece | None]]:
        """Row lists of the grid (row 0 first)."""
        return [cells.copy() for cells in self._grid]

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._grid = [cells.copy() for cells in self._grid]
        b._king_squares = self._king_squares.copy()
        return b

    def clear(self) -> None:
        self._grid = [[None] * 8 for _ in range(8)]
        self._king_squares = [None, None]

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position with ids 1..32 in row-major order."""
        b = cls()
        for col, pt in enumerate(_BACK_RANK):
            b.set_piece(0, col, Piece(Color.BLACK, pt))
            b.set_piece(1, col, Piece(Color.BLACK, PieceType.PAWN))
            b.set_piece(6, col, Piece(Color.WHITE, PieceType.PAWN))
            b.set_piece(7, col, Piece(Color.WHITE, pt))
        for piece_id, (_, _, piece) in enumerate(b.occupied(), start=1):
            piece.id = piece_id
        return b

    @classmethod
    def from_rows(cls, rows: list[list[Piece | None]]) -> Board:
        """Build a board from 8 rows of 8 cells (row 0 = rank 8)."""
        if len(rows) != 8 or any(len(cells) != 8 for cells in rows):
            raise ValueError("Board must have 8 rows of 8 squares")
        b = cls()
        for row, cells in enumerate(rows):
            for col, piece in enumerate(cells):
                if piece is not None:
                    b.set_piece(row, col, piece)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        lines: list[str] = []
        for row, cells in enumerate(self._grid):
            text = " ".join(str(p) if p else "." for p in cells)
            lines.append(f"{8 - row} {text}")
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
