"""Keyboard -> control action mapping"""
from typing import Optional
import pygame
from qrtetris_game import Action

KEYMAP = {
    pygame.K_LEFT: Action.MOVE_LEFT,
    pygame.K_RIGHT: Action.MOVE_RIGHT,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_UP: Action.ROTATE_CW,
    pygame.K_RETURN: Action.LOCK_NOW,
    pygame.K_KP_ENTER: Action.LOCK_NOW,
    pygame.K_SPACE: Action.TOGGLE_PAUSE,
    pygame.K_r: Action.RESET,
}

def action_for(event) -> Optional[Action]:
    if event.type != pygame.KEYDOWN: return None
    return KEYMAP.get(event.key)
