# catrunner/env/runner_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import random
import numpy as np
import gymnasium as gym
import pygame

from catrunner.game.config import WIDTH, HEIGHT, FPS, FRAME_MS
from catrunner.game.highscore import MemoryHighScoreStore
from catrunner.game.render import Renderer
from catrunner.game.session import GameSim, FrameSnapshot
from catrunner.env.observations import build_observation, OBS_SIZE


class RunnerEnv(gym.Env):
    """
    Cat Runner Gymnasium environment (vector observations).
    - Simulation driven by synthetic 60 Hz timestamps (step scale ~1.0).
    - Agent acts every `frame_skip` frames (default 4) -> 15 decisions/sec.
    - Observation: shape (16,), float32, see observations.build_observation.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 60.0):
        super().__init__()
        if frame_skip < 1:
            raise ValueError("frame_skip must be >= 1")
        assert render_mode is None or render_mode in self.metadata["render_modes"], \
            f"Unknown render_mode {render_mode}"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(FPS * time_limit_seconds / self.frame_skip)

        # Actions: 0 = NOOP, 1 = JUMP
        self.action_space = gym.spaces.Discrete(2)
        low = np.zeros(OBS_SIZE, dtype=np.float32)
        low[1] = -1.0
        high = np.ones(OBS_SIZE, dtype=np.float32)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        # --- Runtime state ---
        self.sim: Optional[GameSim] = None
        self.store = MemoryHighScoreStore()
        self.timestamp_ms: float = 0.0
        self.timestep: int = 0
        self.current_seed: Optional[int] = None
        self.last_snapshot: Optional[FrameSnapshot] = None

        # Rendering
        self.screen = None
        self.clock = None
        self.renderer = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # Seeded -> identical obstacle stream; unseeded -> fresh random layout
        level_seed = int(seed) if seed is not None else random.randrange(0, 2**32 - 1)
        self.sim = GameSim(seed=level_seed, store=self.store)
        self.current_seed = level_seed
        self.timestamp_ms = 0.0
        self.timestep = 0
        self.last_snapshot = self.sim.snapshot()

        obs = self._get_obs()
        info = {"seed": self.current_seed, "score": 0}
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.sim is not None, "Call reset() first."

        jumped = False
        if action == 1:
            jumped = self.sim.player.grounded and self.sim.session.running
            self.sim.jump()

        for _ in range(self.frame_skip):
            self.last_snapshot = self.sim.tick(self.timestamp_ms)
            self.timestamp_ms += FRAME_MS
            if self.sim.session.over:
                break

        terminated = bool(self.sim.session.over)
        reward = -1.0 if terminated else 1.0

        self.timestep += 1
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = self._get_obs()
        s = self.sim.session
        info = {
            "seed": self.current_seed,
            "score": int(s.score),
            "level": int(s.level),
            "speed": float(s.speed),
            "timestep": self.timestep,
            "grounded": bool(self.sim.player.grounded),
            "jumped": bool(jumped),
            "obstacles": len(self.sim.obstacles),
        }

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.sim is not None
        return build_observation(self.sim.player, self.sim.obstacles, self.sim.session.speed)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.last_snapshot is None:
            return None

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Cat Runner — Gym Env")
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.clock = pygame.time.Clock()
            self.renderer = Renderer(self.screen)

        self.renderer.draw(self.last_snapshot)

        if self.render_mode == "human":
            # Pump events so the OS doesn't think we're hung
            pygame.event.pump()
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.renderer = None
