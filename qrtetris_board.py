"""Grid model: target + fill matrices, anchor seeding, lock"""
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from qrtetris_config import CONFIG

Matrix = List[List[int]]


def in_anchor(x: int, y: int, n: int) -> bool:
    """True if (x, y) lies in one of the three finder-pattern corners.

    Top-left is ANCHOR_SIZE square, top-right is ANCHOR_FAR_SIZE wide and
    bottom-left ANCHOR_FAR_SIZE tall. Extents are clamped to n, so on tiny
    grids the regions may overlap and the anchor area is their union.
    """
    near = min(CONFIG["ANCHOR_SIZE"], n)
    far = min(CONFIG["ANCHOR_FAR_SIZE"], n)
    if x < near and y < near:
        return True
    if x >= n - far and y < near:
        return True
    if x < near and y >= n - far:
        return True
    return False


@dataclass
class Grid:
    target: Matrix
    fill: Matrix = field(default_factory=list)

    def __post_init__(self):
        self.n = len(self.target)
        if any(len(row) != self.n for row in self.target):
            raise ValueError("target grid must be square")
        # frozen copy; the target never changes for the life of a grid
        self.target = [[1 if v else 0 for v in row] for row in self.target]
        if not self.fill:
            self.seed_anchors()

    # queries

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.n and 0 <= y < self.n

    def is_occupied(self, x: int, y: int) -> bool:
        return self.fill[y][x] == 1

    def remaining(self) -> int:
        return sum(1 for y in range(self.n) for x in range(self.n)
                   if self.target[y][x] and not self.fill[y][x])

    def is_complete(self) -> bool:
        for y in range(self.n):
            for x in range(self.n):
                if self.target[y][x] == 1 and self.fill[y][x] != 1:
                    return False
        return True

    # mutation

    def seed_anchors(self) -> None:
        """Replace fill with the anchor-seeded baseline."""
        n = self.n
        self.fill = [[self.target[y][x] if in_anchor(x, y, n) else 0 for x in range(n)]
                     for y in range(n)]

    def lock(self, cells: Iterable[Tuple[int, int]]) -> int:
        """Fill every given cell that is in bounds, dark in target and still empty.

        Cells over background or already filled are dropped; returns how many
        were newly placed.
        """
        placed = 0
        for x, y in set(cells):
            if not self.in_bounds(x, y):
                continue
            if self.target[y][x] == 1 and self.fill[y][x] == 0:
                self.fill[y][x] = 1
                placed += 1
        return placed
