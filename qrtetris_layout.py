# qrtetris_layout.py
from dataclasses import dataclass
from qrtetris_config import CONFIG

@dataclass
class Dims:
    cell: int
    margin: int
    panel_w: int
    board_w: int
    board_h: int
    total_w: int
    total_h: int
    board_x: int
    board_y: int
    panel_x: int
    panel_y: int

def cell_size_for(n: int, window_w: int, window_h: int) -> int:
    """Largest cell that fits the board in the configured window share."""
    if n <= 0: return 20
    by_w = window_w * CONFIG["WIDTH_FRACTION"] / n
    by_h = window_h * CONFIG["HEIGHT_FRACTION"] / n
    cell = min(by_w, by_h, CONFIG["MAX_CELL"])
    return max(CONFIG["MIN_CELL"], int(cell))

def compute_dims(n: int, window_w: int = None, window_h: int = None) -> Dims:
    window_w = window_w or CONFIG["WINDOW_W"]
    window_h = window_h or CONFIG["WINDOW_H"]
    cell = cell_size_for(n, window_w, window_h)
    margin = 16
    panel_w = 220

    board_w = n * cell
    board_h = n * cell

    total_w = margin + board_w + margin + panel_w + margin
    total_h = margin + max(board_h, 360) + margin

    board_x = margin
    board_y = margin
    panel_x = board_x + board_w + margin
    panel_y = margin

    return Dims(
        cell=cell, margin=margin, panel_w=panel_w,
        board_w=board_w, board_h=board_h,
        total_w=total_w, total_h=total_h,
        board_x=board_x, board_y=board_y,
        panel_x=panel_x, panel_y=panel_y
    )
