# catrunner/tests/test_difficulty.py
"""
Difficulty curve checks.

Usage (from repo root):
  python -m pytest catrunner/tests/test_difficulty.py
  python -m catrunner.tests.test_difficulty
"""
from __future__ import annotations
import math

from catrunner.game.config import BASE_SPEED, MAX_SPEED, MAX_LEVEL
from catrunner.game.difficulty import (
    level_for_score, target_speed, eased_speed, bird_enabled, bird_probability, score_gain,
)

SCORES = [s * 0.5 for s in range(0, 80_000, 37)] + [1e9]


def test_level_steps_every_300():
    assert level_for_score(0) == 1
    assert level_for_score(250) == 1
    assert level_for_score(299.999) == 1
    assert level_for_score(300) == 2
    assert level_for_score(899) == 3
    assert level_for_score(1e9) == MAX_LEVEL, "level must cap at 99"


def test_level_monotonic():
    levels = [level_for_score(s) for s in SCORES]
    assert all(a <= b for a, b in zip(levels, levels[1:])), "level decreased with score"
    assert all(1 <= lv <= MAX_LEVEL for lv in levels)


def test_target_speed_monotonic_and_bounded():
    speeds = [target_speed(s) for s in SCORES]
    assert all(a <= b for a, b in zip(speeds, speeds[1:])), "target speed decreased with score"
    assert all(BASE_SPEED <= v <= MAX_SPEED for v in speeds)
    assert target_speed(99) == BASE_SPEED
    assert math.isclose(target_speed(100), 3.35)
    assert target_speed(1e9) == MAX_SPEED


def test_speed_eases_toward_target():
    # start speed is above the score-0 target, so it drifts down
    assert math.isclose(eased_speed(3.2, 0), 3.2 + (3.0 - 3.2) * 0.08)
    v = 3.2
    for _ in range(500):
        v = eased_speed(v, 2000)
    assert math.isclose(v, target_speed(2000), rel_tol=1e-6)


def test_bird_unlock_at_200():
    assert not bird_enabled(150)
    assert bird_probability(150, level_for_score(150)) == 0.0
    assert bird_enabled(200)
    assert math.isclose(bird_probability(200, level_for_score(200)), 0.05)
    assert math.isclose(bird_probability(600, 3), 0.11)
    assert bird_probability(1e9, MAX_LEVEL) == 0.5


def test_score_gain_grows_with_level_and_speed():
    assert score_gain(0.0, 5, 8.0) == 0.0
    assert math.isclose(score_gain(1.0, 1, 6.0), 2.2)
    assert score_gain(1.0, 10, 6.0) > score_gain(1.0, 1, 6.0)
    assert score_gain(1.0, 1, 9.0) > score_gain(1.0, 1, 6.0)


def main():
    for name, fn in sorted(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
            print(f"✓ {name}")
    print("🎉 Difficulty checks passed")


if __name__ == "__main__":
    main()
