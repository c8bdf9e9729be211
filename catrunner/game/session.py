# catrunner/game/session.py
from __future__ import annotations
import logging
import math
import random
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Deque, Optional, Protocol, Tuple

from .config import START_SPEED
from .clock import Quality, QualityMonitor, SimulationClock
from .difficulty import level_for_score, eased_speed, score_gain, bird_probability
from .highscore import MemoryHighScoreStore
from .level import LevelGen, Obstacle, Cloud
from .player import Player

log = logging.getLogger(__name__)


class Command(str, Enum):
    JUMP = "jump"
    RESTART = "restart"


class HighScoreStore(Protocol):
    def get(self) -> int: ...
    def set(self, value: int) -> None: ...


class HudSink(Protocol):
    def update(self, score: int, level: int, high_score: int) -> None: ...


@dataclass
class Session:
    """Run bookkeeping. Invariant: over -> not running."""
    running: bool = True   # auto-start, no idle screen
    over: bool = False
    score: float = 0.0
    high_score: int = 0
    level: int = 1
    speed: float = START_SPEED
    time: float = 0.0      # step units while running, drives animations


@dataclass(frozen=True)
class FrameSnapshot:
    """Read-only copy of everything a renderer needs for one frame."""
    player: Player
    obstacles: Tuple[Obstacle, ...]
    clouds: Tuple[Cloud, ...]
    over: bool
    quality: Quality
    time: float
    score: int
    level: int
    high_score: int


class GameSim:
    """
    One self-contained game instance: session, player, level and clock.

    Input handlers never touch state directly; jump()/restart() queue commands
    that are applied at the start of the next tick(), so each frame has a single
    writer.
    """
    def __init__(self,
                 seed: Optional[int] = None,
                 rng: Optional[random.Random] = None,
                 store: Optional[HighScoreStore] = None,
                 hud: Optional[HudSink] = None):
        self.store = store if store is not None else MemoryHighScoreStore()
        self.session = Session(high_score=int(self.store.get()))
        self.player = Player()
        self.level = LevelGen(seed=seed, rng=rng)
        self.clock = SimulationClock()
        self.quality = QualityMonitor()
        self.hud = hud
        self._commands: Deque[Command] = deque()
        self._hud_last: Optional[Tuple[int, int, int]] = None
        self._notify_hud()

    # -------------------- Input --------------------

    def submit(self, command: Command):
        self._commands.append(Command(command))

    def jump(self):
        self.submit(Command.JUMP)

    def restart(self):
        self.submit(Command.RESTART)

    def process_input(self):
        """Apply every queued command in arrival order."""
        while self._commands:
            cmd = self._commands.popleft()
            if cmd is Command.JUMP:
                self.player.jump(self.session.running)
            elif cmd is Command.RESTART and self.session.over:
                self._restart()

    # -------------------- Frame --------------------

    def tick(self, timestamp_ms: float) -> FrameSnapshot:
        """Run one display frame: input, clock, quality, and the update step if running."""
        self.process_input()
        dt = self.clock.advance(timestamp_ms)
        self.quality.sample(self.clock.inst_fps)
        if self.session.running:
            self.update(dt)
        self._notify_hud()
        return self.snapshot()

    def update(self, dt: float):
        """One simulation step of `dt` step units."""
        s = self.session
        s.time += dt

        s.level = level_for_score(s.score)
        s.speed = eased_speed(s.speed, s.score)
        s.score += score_gain(dt, s.level, s.speed)

        self.player.update_physics()

        self.level.update_spawns(
            dt, s.level, s.speed, bird_probability(s.score, s.level), self.quality.tier
        )
        self.level.move_entities(dt, s.speed)

        hit = self.level.first_collision(self.player.box())
        if hit is not None:
            self._game_over(hit)

    # -------------------- Transitions --------------------

    def _game_over(self, hit: Obstacle):
        s = self.session
        s.running = False
        s.over = True
        s.high_score = max(s.high_score, math.floor(s.score))
        self.store.set(s.high_score)
        log.info("Game over: hit %s at x=%.1f, score=%d level=%d high=%d",
                 hit.kind.value, hit.x, math.floor(s.score), s.level, s.high_score)

    def _restart(self):
        self.level.reset()
        self.player.reset()
        self.clock.reset()
        high = self.session.high_score
        self.session = Session(high_score=high)
        log.debug("Restarted run (high score %d)", high)

    # -------------------- Output --------------------

    @property
    def obstacles(self):
        return self.level.obstacles

    @property
    def clouds(self):
        return self.level.clouds

    def snapshot(self) -> FrameSnapshot:
        s = self.session
        return FrameSnapshot(
            player=replace(self.player),
            obstacles=tuple(replace(o) for o in self.level.obstacles),
            clouds=tuple(replace(c) for c in self.level.clouds),
            over=s.over,
            quality=self.quality.tier,
            time=s.time,
            score=math.floor(s.score),
            level=s.level,
            high_score=s.high_score,
        )

    def _notify_hud(self):
        if self.hud is None:
            return
        s = self.session
        current = (math.floor(s.score), s.level, s.high_score)
        if current != self._hud_last:
            self._hud_last = current
            self.hud.update(*current)
