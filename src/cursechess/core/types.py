"""Coordinate type alias and square-label helpers.

Board layout (row-major, as displayed with black at the top):
    row 0 = rank 8 (a8 .. h8)
    row 7 = rank 1 (a1 .. h1)
    col 0 = file a, col 7 = file h
"""

from __future__ import annotations

from typing import TypeAlias

Coord: TypeAlias = tuple[int, int]  # (row, col), each 0–7


def in_bounds(row: int, col: int) -> bool:
    """Whether (*row*, *col*) lies on the board."""
    return 0 <= row < 8 and 0 <= col < 8


def square_name(row: int, col: int) -> str:
    """Human-readable name, e.g. (0, 4) → 'e8', (7, 0) → 'a1'."""
    return chr(ord("a") + col) + str(8 - row)


def parse_square(name: str) -> Coord:
    """Parse square name, e.g. 'e2' → (6, 4)."""
    if len(name) != 2 or name[0] not in "abcdefgh" or name[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return 8 - int(name[1]), ord(name[0]) - ord("a")
