# catrunner/env/observations.py
from __future__ import annotations
from typing import Iterable, List, Sequence
import numpy as np

from catrunner.game.config import (
    WIDTH, GROUND_Y, PLAYER_W, JUMP_FORCE, BASE_SPEED, MAX_SPEED
)

# How many upcoming obstacles the agent sees
N_AHEAD = 3
OBS_SIZE = 4 + 4 * N_AHEAD
# Tallest thing we normalize against: highest bird top above ground
MAX_LIFT_PX = 160.0
MAX_OBSTACLE_W = 120.0
# Sentinel for an empty slot: far away, no size
EMPTY_SLOT = (1.0, 0.0, 0.0, 0.0)

def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)

def _norm_vy(vy: float) -> float:
    """Jump impulse is the largest speed the cat ever has -> [-1, 1]."""
    return max(-1.0, min(1.0, vy / JUMP_FORCE))

def obstacles_ahead(player, obstacles: Iterable, n: int = N_AHEAD) -> List:
    """Obstacles whose right edge is still ahead of the player's left edge, nearest first."""
    ahead = [o for o in obstacles if o.x + o.w > player.x]
    ahead.sort(key=lambda o: o.x)
    return ahead[:n]

def build_observation(player, obstacles: Sequence, speed: float) -> np.ndarray:
    """
    Returns a fixed (16,) float32 vector:
      [ y_lift_norm, vy_norm, grounded, speed_norm,
        dx, w, top, lift   (next obstacle)
        dx, w, top, lift   (second)
        dx, w, top, lift ] (third)
    - y_lift_norm: feet height above ground / MAX_LIFT_PX, in [0,1]
    - vy_norm in [-1,1] (negative = rising)
    - dx: gap between the cat's nose and the obstacle / WIDTH, 0 when overlapping
    - top / lift: obstacle top and bottom heights above ground / MAX_LIFT_PX
    - missing slots are (1, 0, 0, 0)
    """
    feats: List[float] = [
        _clamp01((GROUND_Y - float(player.y)) / MAX_LIFT_PX),
        _norm_vy(float(player.vy)),
        1.0 if player.grounded else 0.0,
        _clamp01((float(speed) - BASE_SPEED) / (MAX_SPEED - BASE_SPEED)),
    ]

    nose_x = float(player.x) + PLAYER_W
    upcoming = obstacles_ahead(player, obstacles)
    for o in upcoming:
        feats.extend([
            _clamp01((o.x - nose_x) / WIDTH),
            _clamp01(o.w / MAX_OBSTACLE_W),
            _clamp01((GROUND_Y - (o.y - o.h)) / MAX_LIFT_PX),
            _clamp01((GROUND_Y - o.y) / MAX_LIFT_PX),
        ])
    for _ in range(N_AHEAD - len(upcoming)):
        feats.extend(EMPTY_SLOT)

    return np.asarray(feats, dtype=np.float32)
