"""Piece randomizer"""
import random
from typing import Optional

SHAPE_ORDER = ["I", "O", "T", "S", "Z", "J", "L"]


class PieceRandom:
    """Uniform shape picker. seed=None draws from OS entropy."""
    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def next_piece(self) -> str:
        return self._rng.choice(SHAPE_ORDER)

