"""
Rendering helpers for the QR puzzle window.

- Pre-render cell Surfaces (filled, target hint, background, per-piece color).
- Pre-render the static background (panel frame) when Dims change.
- Cache HUD text surfaces; re-render only when values change.
"""
from __future__ import annotations
import pygame
from dataclasses import dataclass
from typing import Dict, Optional
from qrtetris_layout import Dims
from qrtetris_piece import COLORS
from qrtetris_game import Snapshot, Status

FILLED = (0,0,0)
HINT = (200,200,255)
EMPTY = (255,255,255)
LINE = (204,204,204)
BG = (240,240,240)
TEXT = (40,44,70)

@dataclass
class HudCache:
    placed: int = -1
    remaining: int = -1
    progress: int = -1
    status: Optional[Status] = None
    title: Optional[pygame.Surface] = None
    placed_s: Optional[pygame.Surface] = None
    remaining_s: Optional[pygame.Surface] = None
    progress_s: Optional[pygame.Surface] = None
    status_s: Optional[pygame.Surface] = None
    message: str = ""
    message_s: Optional[pygame.Surface] = None
    controls: Optional[list] = None

class RenderAssets:
    """Holds all pre-rendered assets for fast blitting."""
    def __init__(self, dims: Dims, font: pygame.font.Font):
        self.dims = dims
        self.font = font
        self._make_static()
        self._make_cells()
        self.hud = HudCache()

    def _make_static(self):
        d = self.dims
        self.bg = pygame.Surface((d.total_w, d.total_h))
        self.bg.fill(BG)
        panel_rect = pygame.Rect(d.panel_x, d.panel_y, d.panel_w, d.total_h - 2*d.margin)
        pygame.draw.rect(self.bg, (228,230,240), panel_rect)
        pygame.draw.rect(self.bg, (180,185,205), panel_rect, 1)

    def _make_cells(self):
        c = self.dims.cell
        def tile(col, alpha=255):
            s = pygame.Surface((c, c), pygame.SRCALPHA)
            s.fill((*col, alpha))
            pygame.draw.rect(s, LINE if col != FILLED else (102,102,102), (0,0,c,c), 1)
            return s
        self.filled = tile(FILLED)
        self.hint = tile(HINT, 102)
        self.empty = tile(EMPTY)
        self.piece_surf: Dict[str, pygame.Surface] = {}
        for t, col in COLORS.items():
            s = pygame.Surface((c, c), pygame.SRCALPHA)
            s.fill((*col, 204))
            pygame.draw.rect(s, (0,0,0), (0,0,c,c), 1)
            self.piece_surf[t] = s

    def cell_pos(self, x: int, y: int):
        return (self.dims.board_x + x*self.dims.cell, self.dims.board_y + y*self.dims.cell)

    def draw(self, screen: pygame.Surface, snap: Snapshot, message: str = ""):
        screen.blit(self.bg, (0,0))
        for y, row in enumerate(snap.target):
            for x, v in enumerate(row):
                if snap.fill[y][x]: surf = self.filled
                elif v: surf = self.hint
                else: surf = self.empty
                screen.blit(surf, self.cell_pos(x, y))
        p = snap.piece
        if p is not None and snap.status is not Status.COMPLETED:
            for cx, cy in p.cells():
                screen.blit(self.piece_surf[p.t], self.cell_pos(cx, cy))
        self.draw_panel_hud(screen, snap, message)

    def draw_panel_hud(self, screen: pygame.Surface, snap: Snapshot, message: str = ""):
        d = self.dims
        f = self.font
        if self.hud.title is None:
            self.hud.title = f.render("QR Tetris", True, TEXT)
        if snap.placed != self.hud.placed:
            self.hud.placed = snap.placed
            self.hud.placed_s = f.render(f"Placed: {snap.placed}", True, TEXT)
        if snap.remaining != self.hud.remaining:
            self.hud.remaining = snap.remaining
            self.hud.remaining_s = f.render(f"Remaining: {snap.remaining}", True, TEXT)
        if snap.progress != self.hud.progress:
            self.hud.progress = snap.progress
            self.hud.progress_s = f.render(f"Progress: {snap.progress}%", True, TEXT)
        if snap.status != self.hud.status:
            self.hud.status = snap.status
            label = {Status.PAUSED: "PAUSED", Status.COMPLETED: "COMPLETE!"}.get(snap.status, "")
            self.hud.status_s = f.render(label, True, (200,40,60))
        if message != self.hud.message or self.hud.message_s is None:
            self.hud.message = message
            self.hud.message_s = f.render(message, True, (200,40,60))
        screen.blit(self.hud.title, (d.panel_x + 12, d.panel_y + 12))
        screen.blit(self.hud.placed_s, (d.panel_x + 12, d.panel_y + 44))
        screen.blit(self.hud.remaining_s, (d.panel_x + 12, d.panel_y + 68))
        screen.blit(self.hud.progress_s, (d.panel_x + 12, d.panel_y + 92))
        screen.blit(self.hud.status_s, (d.panel_x + 12, d.panel_y + 126))
        if message:
            screen.blit(self.hud.message_s, (d.panel_x + 12, d.panel_y + 146))
        if not self.hud.controls:
            self.hud.controls = [
                f.render("Controls:", True, TEXT),
                f.render("←/→ Move", True, (90,95,130)),
                f.render("↑ Rotate", True, (90,95,130)),
                f.render("↓ Soft drop", True, (90,95,130)),
                f.render("Enter Place", True, (90,95,130)),
                f.render("Space Pause", True, (90,95,130)),
                f.render("R Reset • Esc New image", True, (90,95,130)),
            ]
        y = d.panel_y + 180
        for surf in self.hud.controls:
            screen.blit(surf, (d.panel_x + 12, y)); y += 20


def draw_upload_screen(screen: pygame.Surface, font: pygame.font.Font, message: str = ""):
    w, h = screen.get_size()
    screen.fill(BG)
    lines = ["Drop a QR code image onto this window", "or pass its path on the command line"]
    y = h // 2 - 30
    for text in lines:
        s = font.render(text, True, TEXT)
        screen.blit(s, s.get_rect(center=(w // 2, y))); y += 28
    if message:
        s = font.render(message, True, (200,40,60))
        screen.blit(s, s.get_rect(center=(w // 2, y + 20)))
