"""Target grid builders shared by the test modules."""

from __future__ import annotations

from qrtetris_board import in_anchor


def anchors_only(n: int = 21) -> list[list[int]]:
    """Target whose dark cells are exactly the three corner regions."""
    return [[1 if in_anchor(x, y, n) else 0 for x in range(n)] for y in range(n)]


def all_dark(n: int = 21) -> list[list[int]]:
    return [[1] * n for _ in range(n)]


def with_cells(base: list[list[int]], cells, value: int = 1) -> list[list[int]]:
    grid = [row[:] for row in base]
    for x, y in cells:
        grid[y][x] = value
    return grid


class FixedSequence:
    """Piece source cycling through a fixed list of shape keys."""

    def __init__(self, shapes):
        if not shapes:
            raise ValueError("FixedSequence needs at least one shape")
        self.shapes = list(shapes)
        self.i = 0

    def next_piece(self) -> str:
        t = self.shapes[self.i % len(self.shapes)]
        self.i += 1
        return t
