"""Piece model, shapes, rotation and the placement gate"""
from dataclasses import dataclass
from typing import Dict, List, Tuple

from qrtetris_board import Grid

# minimal bounding boxes, 1s are blocks
SHAPES: Dict[str, List[List[int]]] = {
    "I": [[1,1,1,1]],
    "O": [[1,1],[1,1]],
    "T": [[0,1,0],[1,1,1]],
    "S": [[0,1,1],[1,1,0]],
    "Z": [[1,1,0],[0,1,1]],
    "J": [[1,0,0],[1,1,1]],
    "L": [[0,0,1],[1,1,1]],
}

COLORS: Dict[str, Tuple[int,int,int]] = {
    "I": (0,255,255),
    "O": (255,255,0),
    "T": (128,0,128),
    "S": (0,255,0),
    "Z": (255,0,0),
    "J": (0,0,255),
    "L": (255,165,0),
}

def rotate_cw(m): return [list(r) for r in zip(*m[::-1])]

@dataclass
class Piece:
    t: str
    shape: List[List[int]]
    x: int
    y: int

    @property
    def width(self) -> int: return len(self.shape[0])

    @property
    def height(self) -> int: return len(self.shape)

    @property
    def color(self) -> Tuple[int,int,int]: return COLORS[self.t]

    @staticmethod
    def spawn(t: str, grid_width: int) -> "Piece":
        s = [r[:] for r in SHAPES[t]]
        return Piece(t, s, (grid_width - len(s[0])) // 2, 0)

    def moved(self, dx: int, dy: int) -> "Piece":
        return Piece(self.t, [r[:] for r in self.shape], self.x + dx, self.y + dy)

    def cells(self, x=None, y=None) -> List[Tuple[int,int]]:
        """Absolute occupied cells, at the current origin or a candidate one."""
        ox = self.x if x is None else x
        oy = self.y if y is None else y
        return [(ox + c, oy + r) for r, row in enumerate(self.shape)
                for c, v in enumerate(row) if v]


def spawn(grid_width: int, rng) -> Piece:
    """New piece of a shape drawn from rng, top row, horizontally centered."""
    return Piece.spawn(rng.next_piece(), grid_width)


def rotate(piece: Piece) -> Piece:
    """Clockwise turn about the origin; the input piece is left untouched."""
    return Piece(piece.t, rotate_cw(piece.shape), piece.x, piece.y)


def can_move_to(piece: Piece, x: int, y: int, grid: Grid) -> bool:
    for bx, by in piece.cells(x, y):
        if not grid.in_bounds(bx, by): return False
        if grid.is_occupied(bx, by): return False
    return True


def try_move(grid: Grid, piece: Piece, dx: int, dy: int):
    """Return the shifted piece, or None if the target placement is invalid."""
    if can_move_to(piece, piece.x + dx, piece.y + dy, grid):
        return piece.moved(dx, dy)
    return None


def try_rotate(grid: Grid, piece: Piece):
    """Return the rotated piece, or None; no kicks are attempted."""
    test = rotate(piece)
    if can_move_to(test, test.x, test.y, grid):
        return test
    return None
