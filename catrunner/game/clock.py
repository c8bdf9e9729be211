# catrunner/game/clock.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import FRAME_MS, MAX_FRAME_MS, FPS, FPS_SMOOTHING, FPS_LOW, FPS_MED


class Quality(str, Enum):
    HIGH = "high"
    MED = "med"
    LOW = "low"


@dataclass
class QualityMonitor:
    """
    Exponentially smoothed frame rate -> quality tier.
    The tier can flip every frame when the smoothed fps sits on a boundary;
    the smoothing is the only damping.
    """
    fps: float = float(FPS)
    tier: Quality = Quality.HIGH

    def sample(self, inst_fps: float) -> Quality:
        self.fps = self.fps * FPS_SMOOTHING + inst_fps * (1.0 - FPS_SMOOTHING)
        if self.fps < FPS_LOW:
            self.tier = Quality.LOW
        elif self.fps < FPS_MED:
            self.tier = Quality.MED
        else:
            self.tier = Quality.HIGH
        return self.tier


@dataclass
class SimulationClock:
    """
    Turns raw frame timestamps (ms) into a dimensionless step:
    1.0 == one ideal 60 Hz frame, stalls clamped to MAX_FRAME_MS.
    """
    elapsed: float = 0.0                   # simulated seconds
    step_scale: float = 0.0
    last_timestamp: Optional[float] = None  # None -> next frame is the first
    inst_fps: float = 0.0

    def advance(self, timestamp_ms: float) -> float:
        if self.last_timestamp is None:
            self.last_timestamp = timestamp_ms
        raw_delta = max(0.0, timestamp_ms - self.last_timestamp)
        self.last_timestamp = timestamp_ms

        self.step_scale = min(MAX_FRAME_MS, raw_delta) / FRAME_MS
        self.inst_fps = 1000.0 / max(1.0, raw_delta)
        self.elapsed += self.step_scale * FRAME_MS / 1000.0
        return self.step_scale

    def reset(self):
        self.elapsed = 0.0
        self.step_scale = 0.0
        self.last_timestamp = None
