"""
Game session: state machine over one target grid.

The session owns the grid and the live piece. Presentation code drives it
with tick() once per frame and apply() for control actions; both return a
Snapshot, which is all a renderer needs to draw.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

import pygame

from qrtetris_board import Grid, Matrix
from qrtetris_config import CONFIG
from qrtetris_piece import Piece, spawn, try_move, try_rotate
from qrtetris_rng import PieceRandom
from qrtetris_target import detect_qr, extract, load_image

log = logging.getLogger(__name__)


class Status(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class Action(Enum):
    MOVE_LEFT = "left"
    MOVE_RIGHT = "right"
    SOFT_DROP = "down"
    ROTATE_CW = "rotate"
    LOCK_NOW = "place"
    TOGGLE_PAUSE = "pause"
    RESET = "reset"


MOVES = {
    Action.MOVE_LEFT: (-1, 0),
    Action.MOVE_RIGHT: (1, 0),
    Action.SOFT_DROP: (0, 1),
}


@dataclass(frozen=True)
class Snapshot:
    status: Status
    target: Tuple[Tuple[int, ...], ...]
    fill: Tuple[Tuple[int, ...], ...]
    piece: Optional[Piece]
    placed: int
    total: int
    just_completed: bool = False

    @property
    def progress(self) -> int:
        """Percent of non-anchor target cells covered, halves rounded up."""
        if self.total == 0:
            return 100
        return (200 * self.placed + self.total) // (2 * self.total)

    @property
    def remaining(self) -> int:
        return self.total - self.placed


def _frozen(m: Matrix) -> Tuple[Tuple[int, ...], ...]:
    return tuple(tuple(row) for row in m)


class Game:
    def __init__(self, rng=None, detector: Optional[Callable[[pygame.Surface], bool]] = detect_qr):
        self.rng = rng if rng is not None else PieceRandom(CONFIG["SEED"])
        self.detector = detector
        self.status = Status.NOT_STARTED
        self.grid: Optional[Grid] = None
        self.piece: Optional[Piece] = None
        self.placed = 0
        self.total = 0
        self.drop_timer = 0
        self._just_completed = False
        self._listeners: List[Callable[[Snapshot], None]] = []

    # -- session lifecycle ----------------------------------------------------

    def load(self, path) -> Snapshot:
        """Start a session from an image file; DecodeError leaves state as is."""
        return self.load_surface(load_image(path))

    def load_surface(self, surface: pygame.Surface) -> Snapshot:
        target, _ = extract(surface, self.detector)
        return self.start(target)

    def start(self, target: Matrix) -> Snapshot:
        self._just_completed = False
        self.grid = Grid(target)
        self.total = self.grid.remaining()
        self.placed = 0
        self.drop_timer = 0
        self.piece = spawn(self.grid.n, self.rng)
        self.status = Status.RUNNING
        log.info("session started: %dx%d grid, %d blocks to place",
                 self.grid.n, self.grid.n, self.total)
        self._check_complete()
        return self.snapshot()

    def stop(self) -> Snapshot:
        """Tear the session down; later ticks are no-ops."""
        self._just_completed = False
        self.status = Status.NOT_STARTED
        self.grid = None
        self.piece = None
        self.placed = self.total = self.drop_timer = 0
        return self.snapshot()

    def reset(self) -> Snapshot:
        """Drop all non-anchor progress on the current target."""
        self._just_completed = False
        if self.grid is None:
            return self.snapshot()
        self.grid.seed_anchors()
        self.placed = 0
        self.drop_timer = 0
        self.piece = spawn(self.grid.n, self.rng)
        self.status = Status.RUNNING
        log.info("session reset")
        self._check_complete()
        return self.snapshot()

    def on_complete(self, fn: Callable[[Snapshot], None]) -> None:
        self._listeners.append(fn)

    # -- per-frame step -------------------------------------------------------

    def tick(self) -> Snapshot:
        self._just_completed = False
        if self.status is not Status.RUNNING:
            return self.snapshot()
        self.drop_timer += 1
        if self.drop_timer >= CONFIG["DROP_INTERVAL_TICKS"]:
            moved = try_move(self.grid, self.piece, 0, 1)
            if moved:
                self.piece = moved
                self.drop_timer = 0
            else:
                self._lock()
        return self.snapshot()

    def apply(self, action: Action) -> Snapshot:
        self._just_completed = False
        if action is Action.RESET:
            return self.reset()
        if action is Action.TOGGLE_PAUSE:
            if self.status is Status.RUNNING:
                self.status = Status.PAUSED
            elif self.status is Status.PAUSED:
                self.status = Status.RUNNING
            return self.snapshot()
        if self.status is not Status.RUNNING:
            return self.snapshot()

        if action in MOVES:
            moved = try_move(self.grid, self.piece, *MOVES[action])
            if moved:
                self.piece = moved
        elif action is Action.ROTATE_CW:
            turned = try_rotate(self.grid, self.piece)
            if turned:
                self.piece = turned
        elif action is Action.LOCK_NOW:
            self._lock()
        return self.snapshot()

    # -- internals ------------------------------------------------------------

    def _lock(self) -> None:
        n = self.grid.lock(self.piece.cells())
        self.placed += n
        log.debug("locked %s at (%d,%d): %d new cells, %d/%d",
                  self.piece.t, self.piece.x, self.piece.y, n, self.placed, self.total)
        self.piece = spawn(self.grid.n, self.rng)
        self.drop_timer = 0
        self._check_complete()

    def _check_complete(self) -> None:
        if self.status is Status.COMPLETED or not self.grid.is_complete():
            return
        self.status = Status.COMPLETED
        self._just_completed = True
        log.info("puzzle complete (%d blocks placed)", self.placed)
        snap = self.snapshot()
        for fn in self._listeners:
            fn(snap)

    def snapshot(self) -> Snapshot:
        if self.grid is None:
            return Snapshot(self.status, (), (), None, 0, 0, False)
        piece = self.piece.moved(0, 0) if self.piece else None
        return Snapshot(self.status, _frozen(self.grid.target), _frozen(self.grid.fill),
                        piece, self.placed, self.total, self._just_completed)
