"""Game session: gravity, controls, lock, completion, pause, reset."""

from __future__ import annotations

import pytest

from helpers import FixedSequence, all_dark, anchors_only, with_cells
from qrtetris_config import CONFIG
from qrtetris_game import Action, Game, Snapshot, Status
from qrtetris_target import DecodeError

DROP = CONFIG["DROP_INTERVAL_TICKS"]


def _game(target, shapes=("O",)) -> Game:
    game = Game(rng=FixedSequence(list(shapes)), detector=lambda s: True)
    game.start(target)
    return game


def _ticks(game: Game, n: int) -> Snapshot:
    snap = game.snapshot()
    for _ in range(n):
        snap = game.tick()
    return snap


# -- session start ------------------------------------------------------------


def test_new_game_is_not_started():
    game = Game(rng=FixedSequence(["O"]))
    snap = game.snapshot()
    assert snap.status is Status.NOT_STARTED
    assert snap.piece is None
    assert game.tick().status is Status.NOT_STARTED
    assert game.apply(Action.MOVE_LEFT).status is Status.NOT_STARTED
    assert game.reset().status is Status.NOT_STARTED


def test_start_counts_blocks_outside_anchors():
    target = with_cells(anchors_only(), [(10, 10), (11, 11), (12, 12)])
    snap = _game(target).snapshot()
    assert snap.status is Status.RUNNING
    assert snap.total == 3
    assert snap.placed == 0
    assert snap.piece.t == "O"
    assert (snap.piece.x, snap.piece.y) == (9, 0)


def test_anchors_only_target_completes_at_start():
    seen = []
    game = Game(rng=FixedSequence(["O"]))
    game.on_complete(seen.append)
    snap = game.start(anchors_only())
    assert snap.total == 0
    assert snap.status is Status.COMPLETED
    assert snap.just_completed is True
    assert snap.progress == 100
    assert len(seen) == 1


def test_start_from_surface(white_surface):
    game = Game(rng=FixedSequence(["O"]), detector=lambda s: True)
    snap = game.load_surface(white_surface(100, 100))
    assert len(snap.target) == 25
    # all background: nothing to place
    assert snap.status is Status.COMPLETED


def test_failed_extraction_leaves_session_untouched(white_surface):
    game = Game(rng=FixedSequence(["O"]), detector=lambda s: False)
    game.start(with_cells(anchors_only(), [(10, 10)]))
    game.apply(Action.MOVE_RIGHT)
    _ticks(game, 7)
    before = game.snapshot()
    timer = game.drop_timer
    with pytest.raises(DecodeError):
        game.load_surface(white_surface(100, 100))
    assert game.snapshot() == before
    assert game.drop_timer == timer


def test_failed_load_from_file_leaves_session_untouched(tmp_path):
    path = tmp_path / "bad.png"
    path.write_bytes(b"\x00\x01 garbage")
    game = _game(all_dark())
    before = game.snapshot()
    with pytest.raises(DecodeError):
        game.load(path)
    assert game.snapshot() == before


# -- gravity ------------------------------------------------------------------


def test_gravity_moves_one_row_per_interval():
    game = _game(all_dark())
    assert _ticks(game, DROP - 1).piece.y == 0
    assert game.tick().piece.y == 1
    assert _ticks(game, DROP - 1).piece.y == 1
    assert game.tick().piece.y == 2


def test_gravity_locks_when_blocked():
    game = _game(all_dark())
    for _ in range(19):
        game.apply(Action.SOFT_DROP)
    assert game.snapshot().piece.y == 19      # O rests on the floor
    assert game.apply(Action.SOFT_DROP).piece.y == 19
    snap = _ticks(game, DROP)
    assert snap.placed == 4
    assert snap.piece.y == 0                  # replacement spawned
    for x, y in [(9, 19), (10, 19), (9, 20), (10, 20)]:
        assert snap.fill[y][x] == 1


def test_one_gravity_step_per_tick():
    game = _game(all_dark())
    game.drop_timer = DROP * 5
    assert game.tick().piece.y == 1
    assert game.drop_timer == 0


# -- controls -----------------------------------------------------------------


def test_moves_commit_only_when_valid():
    game = _game(all_dark())
    assert game.apply(Action.MOVE_LEFT).piece.x == 9      # anchor at x=8
    assert game.apply(Action.MOVE_RIGHT).piece.x == 10
    assert game.apply(Action.SOFT_DROP).piece.y == 1
    for _ in range(10):
        game.apply(Action.MOVE_RIGHT)
    assert game.snapshot().piece.x == 11                   # top-right anchor
    for _ in range(8):
        game.apply(Action.SOFT_DROP)
    for _ in range(10):
        game.apply(Action.MOVE_RIGHT)
    assert game.snapshot().piece.x == 19                   # right wall


def test_rotate_rejected_outright():
    game = _game(all_dark(), shapes=("I",))
    snap = game.apply(Action.ROTATE_CW)
    assert snap.piece.shape == [[1, 1, 1, 1]]
    assert (snap.piece.x, snap.piece.y) == (8, 0)


def test_rotate_commits():
    game = _game(all_dark(), shapes=("I",))
    game.apply(Action.MOVE_RIGHT)
    snap = game.apply(Action.ROTATE_CW)
    assert snap.piece.shape == [[1], [1], [1], [1]]


def test_lock_now_counts_only_target_cells():
    target = with_cells(anchors_only(), [(9, 0), (10, 1), (15, 15)])
    game = _game(target)
    snap = game.apply(Action.LOCK_NOW)
    assert snap.placed == 2
    assert snap.fill[0][9] == 1 and snap.fill[1][10] == 1
    assert snap.fill[0][10] == 0 and snap.fill[1][9] == 0
    assert snap.status is Status.RUNNING
    assert game.drop_timer == 0


def test_lock_over_background_places_nothing():
    target = with_cells(anchors_only(), [(15, 15)])
    game = _game(target)
    snap = game.apply(Action.LOCK_NOW)
    assert snap.placed == 0
    assert snap.piece is not None


# -- completion ---------------------------------------------------------------


def test_completion_is_one_shot():
    seen = []
    target = with_cells(anchors_only(), [(9, 0), (10, 0), (9, 1), (10, 1)])
    game = _game(target)
    game.on_complete(seen.append)
    snap = game.apply(Action.LOCK_NOW)
    assert snap.status is Status.COMPLETED
    assert snap.just_completed
    assert snap.placed == snap.total == 4
    assert snap.progress == 100
    assert len(seen) == 1

    after = game.apply(Action.LOCK_NOW)
    assert after.placed == 4
    assert not after.just_completed
    assert game.tick().status is Status.COMPLETED
    assert game.apply(Action.TOGGLE_PAUSE).status is Status.COMPLETED
    assert game.apply(Action.MOVE_RIGHT).piece == snap.piece
    assert len(seen) == 1


def test_partial_progress_is_not_complete():
    target = with_cells(anchors_only(), [(9, 0), (10, 0), (15, 15)])
    snap = _game(target).apply(Action.LOCK_NOW)
    assert snap.status is Status.RUNNING
    assert snap.placed == 2 and snap.total == 3
    assert snap.progress == 67
    assert snap.remaining == 1


@pytest.mark.parametrize(
    "placed, total, pct",
    [(0, 10, 0), (1, 3, 33), (1, 2, 50), (1, 8, 13), (3, 8, 38), (5, 5, 100), (0, 0, 100)],
)
def test_progress_rounds_half_up(placed, total, pct):
    snap = Snapshot(Status.RUNNING, (), (), None, placed, total)
    assert snap.progress == pct


# -- pause / resume -----------------------------------------------------------


def test_pause_freezes_and_resume_keeps_accumulator():
    game = _game(all_dark())
    _ticks(game, DROP // 2)
    assert game.apply(Action.TOGGLE_PAUSE).status is Status.PAUSED
    snap = _ticks(game, DROP * 3)
    assert snap.piece.y == 0
    assert game.drop_timer == DROP // 2
    assert game.apply(Action.SOFT_DROP).piece.y == 0
    assert game.apply(Action.LOCK_NOW).placed == 0
    assert game.apply(Action.TOGGLE_PAUSE).status is Status.RUNNING
    _ticks(game, DROP - DROP // 2 - 1)
    assert game.snapshot().piece.y == 0
    assert game.tick().piece.y == 1


# -- reset / stop -------------------------------------------------------------


def test_reset_restores_anchor_baseline():
    target = with_cells(anchors_only(), [(9, 0), (10, 0), (15, 15)])
    game = _game(target)
    baseline = game.snapshot().fill
    game.apply(Action.LOCK_NOW)
    game.apply(Action.TOGGLE_PAUSE)
    _ticks(game, 5)
    snap = game.apply(Action.RESET)
    assert snap.fill == baseline
    assert snap.placed == 0
    assert snap.total == 3
    assert snap.status is Status.RUNNING
    assert (snap.piece.x, snap.piece.y) == (9, 0)
    assert game.drop_timer == 0


def test_reset_after_completion_reopens_puzzle():
    target = with_cells(anchors_only(), [(9, 0), (10, 0), (9, 1), (10, 1)])
    game = _game(target)
    game.apply(Action.LOCK_NOW)
    snap = game.reset()
    assert snap.status is Status.RUNNING
    assert snap.placed == 0 and snap.total == 4


def test_stop_halts_ticks():
    game = _game(all_dark())
    _ticks(game, 10)
    snap = game.stop()
    assert snap.status is Status.NOT_STARTED
    assert snap.piece is None
    after = _ticks(game, DROP * 2)
    assert after == snap
    assert game.apply(Action.LOCK_NOW) == snap
