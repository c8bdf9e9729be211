# catrunner/tests/test_session.py
from __future__ import annotations
import json
import math
import random

from catrunner.game.clock import Quality, QualityMonitor, SimulationClock
from catrunner.game.config import GROUND_Y, PLAYER_X, FRAME_MS, MAX_FRAME_MS, HIGH_SCORE_KEY
from catrunner.game.highscore import MemoryHighScoreStore, FileHighScoreStore
from catrunner.game.level import Obstacle, ObstacleKind
from catrunner.game.session import GameSim, Command


class RecordingHud:
    def __init__(self):
        self.calls = []

    def update(self, score, level, high_score):
        self.calls.append((score, level, high_score))


def run_frames(sim: GameSim, n: int, t0: float = 0.0) -> float:
    t = t0
    for _ in range(n):
        sim.tick(t)
        t += FRAME_MS
    return t


def crash(sim: GameSim, t: float) -> float:
    """Drop a cactus onto the cat and run one frame."""
    sim.level.obstacles.append(Obstacle(ObstacleKind.CACTUS, PLAYER_X, GROUND_Y, 30, 40))
    sim.tick(t)
    return t + FRAME_MS


# -------------------- Clock / quality --------------------

def test_clock_first_frame_is_zero_then_normalized():
    c = SimulationClock()
    assert c.advance(5000.0) == 0.0
    assert c.inst_fps == 1000.0
    assert math.isclose(c.advance(5000.0 + FRAME_MS), 1.0)
    assert math.isclose(c.inst_fps, 1000.0 / FRAME_MS)


def test_clock_clamps_stalls():
    c = SimulationClock()
    c.advance(0.0)
    assert math.isclose(c.advance(2500.0), MAX_FRAME_MS / FRAME_MS)
    assert math.isclose(c.inst_fps, 1000.0 / 2500.0)
    c.reset()
    assert c.advance(9000.0) == 0.0, "after reset the next frame counts as the first"


def test_quality_tiers_follow_smoothed_fps():
    q = QualityMonitor()
    assert q.tier is Quality.HIGH
    for _ in range(200):
        q.sample(30.0)
    assert q.tier is Quality.LOW
    for _ in range(200):
        q.sample(50.0)
    assert q.tier is Quality.MED
    for _ in range(200):
        q.sample(60.0)
    assert q.tier is Quality.HIGH
    q.fps = 55.0
    assert q.sample(54.0) is Quality.MED  # 54.9 smoothed


# -------------------- State machine --------------------

def test_runs_immediately():
    sim = GameSim(seed=1)
    assert sim.session.running and not sim.session.over
    assert sim.session.level == 1 and sim.session.speed == 3.2 and sim.session.score == 0


def test_score_grows_while_running():
    sim = GameSim(seed=1)
    run_frames(sim, 60)
    assert sim.session.score > 50
    assert sim.session.level == 1
    assert sim.obstacles, "first obstacle spawns on the first running frame"


def test_collision_ends_run_and_saves_high_score():
    store = MemoryHighScoreStore(5)
    sim = GameSim(seed=3, store=store)
    t = run_frames(sim, 100)
    t = crash(sim, t)
    s = sim.session
    assert s.over and not s.running
    assert s.high_score == math.floor(s.score) and s.high_score > 5
    assert store.get() == s.high_score

    # frozen: more frames change nothing
    score = s.score
    run_frames(sim, 30, t)
    assert sim.session.score == score and sim.session.over


def test_high_score_never_decreases():
    store = MemoryHighScoreStore()
    sim = GameSim(seed=4, store=store)
    t = run_frames(sim, 150)
    t = crash(sim, t)
    best = sim.session.high_score
    sim.restart()
    t = run_frames(sim, 20, t)
    t = crash(sim, t)
    assert sim.session.over
    assert math.floor(sim.session.score) < best
    assert sim.session.high_score == best and store.get() == best


def test_restart_resets_everything():
    sim = GameSim(seed=9)
    t = run_frames(sim, 120)
    sim.player.jump(True)
    sim.player.update_physics()
    t = crash(sim, t)
    assert sim.session.over
    high = sim.session.high_score

    sim.restart()
    sim.process_input()
    s = sim.session
    assert (s.score, s.level, s.speed, s.over, s.running) == (0, 1, 3.2, False, True)
    assert s.high_score == high and s.time == 0.0
    assert sim.obstacles == [] and sim.clouds == []
    assert sim.level.obstacle_timer == 0.0 and sim.level.cloud_timer == 0.0
    assert sim.player.y == GROUND_Y and sim.player.grounded
    assert sim.clock.last_timestamp is None

    # the paused interval does not leak into the first frame back
    sim.tick(t + 60_000)
    assert sim.clock.step_scale == 0.0


def test_restart_while_running_is_ignored():
    sim = GameSim(seed=11)
    run_frames(sim, 30)
    score = sim.session.score
    sim.restart()
    sim.process_input()
    assert sim.session.score == score and sim.session.running


def test_commands_apply_on_next_tick_only():
    sim = GameSim(seed=12)
    run_frames(sim, 2)
    sim.jump()
    assert sim.player.grounded, "jump must wait for the next tick"
    sim.tick(3 * FRAME_MS)
    assert not sim.player.grounded
    assert math.isclose(sim.player.vy, -12.8)


def test_jump_ignored_after_game_over():
    sim = GameSim(seed=13)
    t = run_frames(sim, 10)
    crash(sim, t)
    sim.submit(Command.JUMP)
    sim.process_input()
    assert sim.player.grounded and sim.player.vy == 0.0


def test_player_stays_above_ground_with_random_jumps():
    sim = GameSim(seed=21)
    rng = random.Random(21)
    t = 0.0
    for _ in range(2000):
        if rng.random() < 0.05:
            sim.jump()
        sim.tick(t)
        t += FRAME_MS
        assert sim.player.y <= GROUND_Y
        if sim.session.over:
            sim.restart()


def test_hud_notified_on_change_only():
    hud = RecordingHud()
    sim = GameSim(seed=5, store=MemoryHighScoreStore(42), hud=hud)
    assert hud.calls == [(0, 1, 42)]
    sim.tick(0.0)  # dt 0: nothing changes
    assert len(hud.calls) == 1
    run_frames(sim, 30, FRAME_MS)
    assert hud.calls[-1][0] == math.floor(sim.session.score)
    assert all(a != b for a, b in zip(hud.calls, hud.calls[1:]))


def test_snapshot_is_a_copy():
    sim = GameSim(seed=6)
    snap = sim.tick(0.0)
    snap.player.y = -999
    snap.obstacles[0].x = -999
    assert sim.player.y == GROUND_Y
    assert sim.obstacles[0].x != -999


def test_two_instances_do_not_share_state():
    a = GameSim(seed=30)
    b = GameSim(seed=30)
    run_frames(a, 50)
    assert b.session.score == 0 and b.obstacles == []


# -------------------- High score files --------------------

def test_file_store_roundtrip_and_defaults(tmp_path):
    path = tmp_path / "hs" / "best.json"
    store = FileHighScoreStore(path)
    assert store.get() == 0
    store.set(321)
    assert FileHighScoreStore(path).get() == 321
    assert json.loads(path.read_text())[HIGH_SCORE_KEY] == 321


def test_file_store_tolerates_garbage(tmp_path):
    path = tmp_path / "best.json"
    path.write_text("{not json")
    assert FileHighScoreStore(path).get() == 0
    path.write_text(json.dumps({HIGH_SCORE_KEY: "abc"}))
    assert FileHighScoreStore(path).get() == 0
    FileHighScoreStore(path).set(7)
    assert FileHighScoreStore(path).get() == 7


def test_game_over_persists_to_file(tmp_path):
    path = tmp_path / "best.json"
    sim = GameSim(seed=8, store=FileHighScoreStore(path))
    t = run_frames(sim, 80)
    crash(sim, t)
    assert FileHighScoreStore(path).get() == sim.session.high_score > 0
    assert GameSim(store=FileHighScoreStore(path)).session.high_score == sim.session.high_score


def test_file_store_tolerates_undecodable_bytes(tmp_path):
    path = tmp_path / "best.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    store = FileHighScoreStore(path)
    assert store.get() == 0

    # game over still saves over the broken file instead of crashing tick()
    sim = GameSim(seed=8, store=store)
    t = run_frames(sim, 80)
    crash(sim, t)
    assert sim.session.over
    assert FileHighScoreStore(path).get() == sim.session.high_score > 0


def test_file_store_tolerates_non_finite_values(tmp_path, caplog):
    path = tmp_path / "best.json"
    for raw in ("Infinity", "-Infinity", "NaN"):
        path.write_text('{"%s": %s}' % (HIGH_SCORE_KEY, raw))
        caplog.clear()
        with caplog.at_level("WARNING"):
            assert FileHighScoreStore(path).get() == 0
        assert "Ignoring high score" in caplog.text
        assert GameSim(store=FileHighScoreStore(path)).session.high_score == 0


def test_file_store_logs_non_integer_value(tmp_path, caplog):
    path = tmp_path / "best.json"
    path.write_text(json.dumps({HIGH_SCORE_KEY: [1, 2]}))
    with caplog.at_level("WARNING"):
        assert FileHighScoreStore(path).get() == 0
    assert "Ignoring high score" in caplog.text
