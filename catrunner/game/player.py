# catrunner/game/player.py
from __future__ import annotations
import pygame
from dataclasses import dataclass
from .config import (
    PLAYER_X, PLAYER_W, PLAYER_H, GROUND_Y, GRAVITY, JUMP_FORCE
)

@dataclass
class Player:
    """
    Pixel cat with a single vertical degree of freedom.
    - y is the FEET line (y grows downward), never below GROUND_Y
    - x is fixed; the world scrolls toward it
    """
    x: float = float(PLAYER_X)
    y: float = float(GROUND_Y)
    vy: float = 0.0
    grounded: bool = True
    w: int = PLAYER_W
    h: int = PLAYER_H

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y - self.h), self.w, self.h)

    def box(self) -> tuple[float, float, float, float]:
        """(left, top, width, height) in world coords, anchored at the feet."""
        return self.x, self.y - self.h, float(self.w), float(self.h)

    def jump(self, running: bool) -> bool:
        """Impulse jump, only from the ground while the run is live. Returns True if performed."""
        if not running or not self.grounded:
            return False
        self.vy = -JUMP_FORCE
        self.grounded = False
        return True

    def update_physics(self):
        """One frame of gravity + integration, then ground clamp. Per frame, not scaled by dt."""
        self.vy += GRAVITY
        self.y += self.vy
        if self.y >= GROUND_Y:
            self.y = float(GROUND_Y)
            self.vy = 0.0
            self.grounded = True

    def reset(self):
        self.y = float(GROUND_Y)
        self.vy = 0.0
        self.grounded = True
