# catrunner/tests/test_player.py
import math

from catrunner.game.config import GROUND_Y, PLAYER_X, PLAYER_W, PLAYER_H
from catrunner.game.player import Player


def test_starts_grounded_at_fixed_x():
    p = Player()
    assert p.x == PLAYER_X and p.y == GROUND_Y and p.grounded and p.vy == 0.0
    assert p.box() == (PLAYER_X, GROUND_Y - PLAYER_H, PLAYER_W, PLAYER_H)
    assert p.rect.bottom == GROUND_Y


def test_jump_then_gravity():
    p = Player()
    assert p.jump(running=True)
    assert p.vy == -13.5 and not p.grounded
    p.update_physics()
    assert math.isclose(p.vy, -12.8)
    assert math.isclose(p.y, GROUND_Y - 12.8)
    assert not p.grounded


def test_jump_ignored_when_airborne_or_not_running():
    p = Player()
    assert not p.jump(running=False)
    assert p.grounded and p.vy == 0.0
    p.jump(running=True)
    p.update_physics()
    vy = p.vy
    assert not p.jump(running=True), "double jump must be ignored"
    assert p.vy == vy


def test_lands_and_never_sinks_below_ground():
    p = Player()
    p.jump(running=True)
    frames = 0
    while True:
        p.update_physics()
        frames += 1
        assert p.y <= GROUND_Y
        if p.grounded:
            break
        assert frames < 200, "player never landed"
    assert p.y == GROUND_Y and p.vy == 0.0
    # apex is about v^2 / 2g above the ground
    assert 35 <= frames <= 42


def test_reset_puts_cat_back_on_ground():
    p = Player()
    p.jump(running=True)
    for _ in range(5):
        p.update_physics()
    p.reset()
    assert p.y == GROUND_Y and p.vy == 0.0 and p.grounded
