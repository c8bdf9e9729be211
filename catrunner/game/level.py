# catrunner/game/level.py
from __future__ import annotations
import random
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple
import pygame
from .config import (
    GROUND_Y, OFFSCREEN_X, SPAWN_X, CAP_RETRY_DELAY,
    BIRD_W, BIRD_H, BIRD_MIN_LIFT, BIRD_SPREAD, BIRD_SPREAD_MIN,
    CACTUS_CHANCE, ROCK_CHANCE, CLUSTER_MIN_BLOCK,
    REACT_MS_MAX, REACT_MS_MIN, REACT_MS_PER_LEVEL, REACT_FACTOR,
    JUMP_PREP_PX, JUMP_PREP_PER_LEVEL, JUMP_PREP_MAX_EXTRA, BASE_SAFE_PX,
    WIDTH_CLEARANCE, MIN_SAFE_GAP, MIN_SPAWN_SPEED, FPS,
    CLOUD_SPAWN_X, CLOUD_JITTER, OBSTACLE_CAP, CLOUD_CAP, CLOUD_BASE_INTERVAL,
)
from .clock import Quality
from .difficulty import clamp

Box = Tuple[float, float, float, float]  # left, top, width, height


class ObstacleKind(str, Enum):
    CACTUS = "cactus"
    CLUSTER = "cluster_cactus"   # one member of a 2-3 cactus cluster
    ROCK = "rock"
    BIRD = "bird"


@dataclass
class Obstacle:
    kind: ObstacleKind
    x: float
    y: float          # bottom edge (feet line convention, like the player)
    w: float
    h: float
    spin: float = 0.0  # rock only
    wing: float = 0.0  # bird only: wing phase (radians)

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y - self.h), int(round(self.w)), int(round(self.h)))

    def box(self) -> Box:
        return self.x, self.y - self.h, self.w, self.h


@dataclass
class Cloud:
    """Decorative parallax cloud. Never collides."""
    x: float
    y: float
    w: float
    h: float
    speed: float
    alpha: float


def boxes_overlap(a: Box, b: Box) -> bool:
    """Strict AABB overlap: touching edges do not count."""
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def safe_gap_px(level: int, speed: float, block_w: float) -> float:
    """
    Distance to keep free after a block so a player who jumps on sight always lands
    and has time to prepare the next jump. Never below MIN_SAFE_GAP.
    """
    min_react_ms = clamp(REACT_MS_MAX - level * REACT_MS_PER_LEVEL, REACT_MS_MIN, REACT_MS_MAX)
    jump_prep = JUMP_PREP_PX + min(JUMP_PREP_MAX_EXTRA, level * JUMP_PREP_PER_LEVEL)
    base_safe = BASE_SAFE_PX + jump_prep
    # reaction window -> pixels at the current per-frame scroll rate
    react_px = (min_react_ms / 1000.0) * (speed * FPS) * REACT_FACTOR
    width_clearance = block_w * WIDTH_CLEARANCE
    return max(MIN_SAFE_GAP, base_safe + react_px + width_clearance)


def spawn_interval(level: int, speed: float, block_w: float) -> float:
    """Step units until the next obstacle: (block + safe gap) at no less than MIN_SPAWN_SPEED."""
    total_px = block_w + safe_gap_px(level, speed, block_w)
    return total_px / max(MIN_SPAWN_SPEED, speed)


class LevelGen:
    """
    Endless stream of ground/air obstacles and background clouds scrolling left.
    Owns the spawn timers; all randomness goes through self.rng.
    """
    def __init__(self, seed: int | None = None, rng: Optional[random.Random] = None):
        if rng is None:
            if seed is None:
                seed = random.randrange(0, 2**32 - 1)
            rng = random.Random(seed)
        self.seed = seed
        self.rng = rng
        self.obstacles: List[Obstacle] = []
        self.clouds: List[Cloud] = []
        self.obstacle_timer = 0.0
        self.cloud_timer = 0.0

    def reset(self):
        self.obstacles.clear()
        self.clouds.clear()
        self.obstacle_timer = 0.0
        self.cloud_timer = 0.0

    # -------------------- Spawning --------------------

    def _spawn_bird(self, level: int) -> float:
        spread = BIRD_SPREAD - min(BIRD_SPREAD_MIN, level * 2)
        fly_y = GROUND_Y - (BIRD_MIN_LIFT + math.floor(self.rng.random() * spread))
        self.obstacles.append(Obstacle(ObstacleKind.BIRD, SPAWN_X, fly_y, BIRD_W, BIRD_H))
        return BIRD_W

    def _spawn_cactus(self) -> float:
        h = 30 + math.floor(self.rng.random() * 36)
        w = 18 + self.rng.random() * 12
        self.obstacles.append(Obstacle(ObstacleKind.CACTUS, SPAWN_X, GROUND_Y, w, h))
        return w

    def _spawn_rock(self) -> float:
        size = 14 + self.rng.random() * 10
        spin = self.rng.random() * math.pi
        self.obstacles.append(Obstacle(ObstacleKind.ROCK, SPAWN_X, GROUND_Y, size, size * 0.7, spin=spin))
        return size

    def _spawn_cluster(self) -> float:
        """2-3 small cacti, 8-14 px apart. Returns the whole footprint."""
        count = 2 + math.floor(self.rng.random() * 2)
        x = float(SPAWN_X)
        total_w = 0.0
        for _ in range(count):
            h = 26 + math.floor(self.rng.random() * 22)
            w = 14 + self.rng.random() * 10
            self.obstacles.append(Obstacle(ObstacleKind.CLUSTER, x, GROUND_Y, w, h))
            spacing = 8 + self.rng.random() * 6
            x += w + spacing
            total_w += w + spacing
        return max(CLUSTER_MIN_BLOCK, total_w)

    def spawn_obstacle(self, bird_prob: float, level: int) -> float:
        """Append one obstacle (or cluster) at the right edge; returns its block width."""
        if self.rng.random() < bird_prob:
            return self._spawn_bird(level)
        r = self.rng.random()
        if r < CACTUS_CHANCE:
            return self._spawn_cactus()
        elif r < ROCK_CHANCE:
            return self._spawn_rock()
        return self._spawn_cluster()

    def spawn_cloud(self):
        rng = self.rng
        self.clouds.append(Cloud(
            x=CLOUD_SPAWN_X,
            y=40 + rng.random() * 100,
            w=40 + rng.random() * 50,
            h=20 + rng.random() * 10,
            speed=1 + rng.random() * 0.8,
            alpha=0.35 + rng.random() * 0.25,
        ))

    def update_spawns(self, dt: float, level: int, speed: float, bird_prob: float,
                      tier: Quality) -> Optional[float]:
        """
        Count both timers down by dt and spawn when they expire.
        Returns the block width of a newly spawned obstacle, else None.
        """
        spawned: Optional[float] = None

        self.obstacle_timer -= dt
        if self.obstacle_timer <= 0:
            if len(self.obstacles) >= OBSTACLE_CAP[tier.value]:
                # back-pressure: retry shortly instead of stacking into the cap
                self.obstacle_timer = CAP_RETRY_DELAY
            else:
                spawned = self.spawn_obstacle(bird_prob, level)
                self.obstacle_timer = spawn_interval(level, speed, spawned)

        self.cloud_timer -= dt
        if self.cloud_timer <= 0:
            if len(self.clouds) < CLOUD_CAP[tier.value]:
                self.spawn_cloud()
            self.cloud_timer = CLOUD_BASE_INTERVAL[tier.value] + self.rng.random() * CLOUD_JITTER

        return spawned

    # -------------------- Movement --------------------

    def move_entities(self, dt: float, speed: float):
        """Scroll obstacles by `speed` and clouds by their own speed (per frame), prune off-screen."""
        for o in self.obstacles:
            o.x -= speed
            if o.kind is ObstacleKind.BIRD:
                o.wing += dt * 10
        self.obstacles = [o for o in self.obstacles if o.x + o.w >= OFFSCREEN_X]

        for c in self.clouds:
            c.x -= c.speed
        self.clouds = [c for c in self.clouds if c.x + c.w >= OFFSCREEN_X]

    # -------------------- Collision --------------------

    def first_collision(self, box: Box) -> Optional[Obstacle]:
        for o in self.obstacles:
            if boxes_overlap(box, o.box()):
                return o
        return None
