# catrunner/game/difficulty.py
"""
Score-driven difficulty curve (Dino style): level and speed rise in steps of
score, birds unlock after BIRD_MIN_SCORE.
"""
from __future__ import annotations
import math

from .config import (
    LEVEL_EVERY, MAX_LEVEL,
    BASE_SPEED, MAX_SPEED, SPEED_STEP_EVERY, SPEED_STEP_INC, SPEED_EASING,
    BIRD_MIN_SCORE, BIRD_BASE_PROB, BIRD_PROB_PER_LEVEL, BIRD_MAX_PROB,
)


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def level_for_score(score: float) -> int:
    return int(clamp(1 + math.floor(score / LEVEL_EVERY), 1, MAX_LEVEL))


def target_speed(score: float) -> float:
    steps = math.floor(score / SPEED_STEP_EVERY)
    return clamp(BASE_SPEED + steps * SPEED_STEP_INC, BASE_SPEED, MAX_SPEED)


def eased_speed(speed: float, score: float) -> float:
    """One easing step toward the target. Applied once per frame, not scaled by dt."""
    return speed + (target_speed(score) - speed) * SPEED_EASING


def bird_enabled(score: float) -> bool:
    return score >= BIRD_MIN_SCORE


def bird_probability(score: float, level: int) -> float:
    if not bird_enabled(score):
        return 0.0
    return clamp(BIRD_BASE_PROB + (level - 1) * BIRD_PROB_PER_LEVEL, BIRD_BASE_PROB, BIRD_MAX_PROB)


def score_gain(dt: float, level: int, speed: float) -> float:
    """Score accrued over `dt` step units; grows with level and current speed."""
    return dt * (2 + level * 0.2) * (speed / 6)
