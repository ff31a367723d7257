"""Pytest fixtures: headless SDL and in-memory images."""

from __future__ import annotations

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest


@pytest.fixture
def white_surface():
    def make(w: int, h: int) -> pygame.Surface:
        s = pygame.Surface((w, h), 0, 32)
        s.fill((255, 255, 255))
        return s
    return make
