# catrunner/game/render.py
"""
Procedural pygame renderer. Reads FrameSnapshot objects only; never touches the
simulation. Everything has a drawn fallback so a missing sprite never matters.
"""
from __future__ import annotations
import logging
import math
from pathlib import Path
from typing import List, Optional, Tuple, Union
import pygame

from .config import (
    WIDTH, HEIGHT, GROUND_Y, PLAYER_SPRITE, PLAYER_SCALE, TAIL_WIGGLE_FRAMES,
    COLOR_SKY, COLOR_INK, COLOR_STRIPE, COLOR_CACTUS, COLOR_CLUSTER,
    COLOR_ROCK, COLOR_BIRD, COLOR_WING, COLOR_FG,
)
from .clock import Quality
from .level import ObstacleKind, Obstacle, Cloud
from .session import FrameSnapshot

log = logging.getLogger(__name__)

# PLAYER_SPRITE x PLAYER_SPRITE cat facing right. O body, L highlight, S shade, C chest, D outline/eyes
CAT_FRAMES = (
    [
        "..D.......D.....",
        ".DOD.....DOD....",
        ".DOOD...DOOD....",
        ".DOOOOOOOOOD....",
        ".DOLODOODOLD....",
        ".DOOOOOOOOOD....",
        ".DOOCCDCCOOD....",
        "..DOCCCCCOD.....",
        "...DOOOOOOOOOD.D",
        "..DOOOOOOOOOOODO",
        "..DOOSOOOOOSOOD.",
        "..DOOSOOOOOSOD..",
        "..DOOOOOOOOOOD..",
        "..DOD.DOD.DOD...",
        "..DOD.DOD.DOD...",
        "..DD..DD..DD....",
    ],
    [
        "..D.......D.....",
        ".DOD.....DOD....",
        ".DOOD...DOOD....",
        ".DOOOOOOOOOD....",
        ".DOLODOODOLD....",
        ".DOOOOOOOOOD..D.",
        ".DOOCCDCCOOD.DO.",
        "..DOCCCCCOD..DO.",
        "...DOOOOOOOOODD.",
        "..DOOOOOOOOOOOD.",
        "..DOOSOOOOOSOOD.",
        "..DOOSOOOOOSOD..",
        "..DOOOOOOOOOOD..",
        "..DOD.DOD.DOD...",
        "..DOD.DOD.DOD...",
        "..DD..DD..DD....",
    ],
)
CAT_PALETTE = {
    "O": (217, 119, 6),
    "L": (245, 158, 11),
    "S": (180, 83, 9),
    "C": (244, 164, 96),
    "D": (43, 31, 20),
}


def load_sprite(path: Union[str, Path]) -> Optional[pygame.Surface]:
    """Optional player sprite; None (procedural cat) if missing or unreadable."""
    path = Path(path)
    if not path.exists():
        return None
    try:
        return pygame.image.load(str(path)).convert_alpha()
    except pygame.error as e:
        log.warning("Sprite %s unusable (%s), using the pixel cat", path, e)
        return None


def _quad_points(p0, p1, p2, n: int = 24) -> List[Tuple[float, float]]:
    pts = []
    for i in range(n + 1):
        t = i / n
        x = (1 - t) ** 2 * p0[0] + 2 * (1 - t) * t * p1[0] + t * t * p2[0]
        y = (1 - t) ** 2 * p0[1] + 2 * (1 - t) * t * p1[1] + t * t * p2[1]
        pts.append((x, y))
    return pts


class Renderer:
    def __init__(self, surface: pygame.Surface, sprite: Optional[pygame.Surface] = None):
        self.surface = surface
        self.sprite = None
        if sprite is not None:
            size = (PLAYER_SPRITE * PLAYER_SCALE, PLAYER_SPRITE * PLAYER_SCALE)
            self.sprite = pygame.transform.scale(sprite, size)
        self.overlay = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
        self._banner_font: Optional[pygame.font.Font] = None
        self._sub_font: Optional[pygame.font.Font] = None

    def draw(self, snap: FrameSnapshot):
        surf = self.surface
        surf.fill(COLOR_SKY)
        self._draw_sky_tint(snap.score)
        if snap.quality is not Quality.LOW:
            self._draw_hills(snap.quality)
        for c in snap.clouds:
            self._draw_cloud(c)
        self._draw_ground(snap)
        for o in snap.obstacles:
            self._draw_obstacle(o, snap.quality)
        self._draw_player(snap)
        if snap.over:
            self._draw_game_over()

    # -------------------- Background --------------------

    def _draw_sky_tint(self, score: int):
        t = (score % 600) / 600
        if t < 0.33:
            return
        alpha = 46 if t < 0.66 else 82
        self.overlay.fill((8, 12, 32, alpha))
        self.surface.blit(self.overlay, (0, 0))

    def _draw_hills(self, quality: Quality):
        self.overlay.fill((0, 0, 0, 0))
        far = (*COLOR_INK, 115 if quality is Quality.HIGH else 128)
        near = (*COLOR_INK, 166 if quality is Quality.HIGH else 153)
        far_pts = _quad_points((0, HEIGHT), (180, 200), (360, HEIGHT)) + \
            _quad_points((360, HEIGHT), (560, 180), (WIDTH, HEIGHT))
        near_pts = _quad_points((0, HEIGHT), (140, 220), (300, HEIGHT)) + \
            _quad_points((300, HEIGHT), (520, 210), (WIDTH, HEIGHT))
        pygame.draw.polygon(self.overlay, far, far_pts)
        pygame.draw.polygon(self.overlay, near, near_pts)
        self.surface.blit(self.overlay, (0, 0))

    def _draw_cloud(self, c: Cloud):
        w, h = int(c.w) + 2, int(c.h * 1.6) + 2
        puff = pygame.Surface((w, h), pygame.SRCALPHA)
        a = int(255 * c.alpha)
        for fx, fy, fr in ((0.25, 0.6, 0.4), (0.45, 0.5, 0.5), (0.65, 0.6, 0.45), (0.5, 0.7, 0.55)):
            pygame.draw.circle(puff, (255, 255, 255, 255), (int(c.w * fx), int(c.h * fy)), max(1, int(c.h * fr)))
        puff.set_alpha(a)
        self.surface.blit(puff, (int(c.x), int(c.y)))

    def _draw_ground(self, snap: FrameSnapshot):
        pygame.draw.line(self.surface, COLOR_INK, (0, GROUND_Y + 1), (WIDTH, GROUND_Y + 1), 2)
        if snap.quality is Quality.LOW:
            return
        seg_w, gap = 20, 14
        period = seg_w + gap
        offset = (snap.time * 12) % period
        y = GROUND_Y + 14
        x = -offset
        while x < WIDTH:
            pygame.draw.line(self.surface, COLOR_STRIPE, (x, y), (x + seg_w, y), 3)
            x += period

    # -------------------- Entities --------------------

    def _draw_obstacle(self, o: Obstacle, quality: Quality):
        surf = self.surface
        r = o.rect
        if o.kind in (ObstacleKind.CACTUS, ObstacleKind.CLUSTER):
            color = COLOR_CACTUS if o.kind is ObstacleKind.CACTUS else COLOR_CLUSTER
            pygame.draw.rect(surf, color, r, border_radius=4)
            pygame.draw.rect(surf, color, (int(o.x + o.w * 0.6), int(o.y - o.h * 0.6), 4, int(o.h * 0.3)))
            pygame.draw.rect(surf, color, (int(o.x + o.w * 0.2), int(o.y - o.h * 0.45), 4, int(o.h * 0.25)))
        elif o.kind is ObstacleKind.BIRD:
            flap = math.sin(o.wing) * (4 if quality is Quality.LOW else 6)
            pygame.draw.rect(surf, COLOR_BIRD, r, border_radius=6)
            pygame.draw.rect(surf, COLOR_WING, (int(o.x + 4), int(o.y - o.h - 6 - flap), 10, 10), border_radius=4)
        elif o.kind is ObstacleKind.ROCK:
            stone = pygame.Surface((r.w, r.h), pygame.SRCALPHA)
            pygame.draw.rect(stone, COLOR_ROCK, stone.get_rect(), border_radius=min(6, r.h // 2))
            pygame.draw.rect(stone, (*COLOR_STRIPE, 64), (3, 2, int(r.w * 0.6), max(1, int(r.h * 0.3))), border_radius=3)
            rotated = pygame.transform.rotate(stone, -math.degrees(o.spin))
            surf.blit(rotated, rotated.get_rect(center=r.center))

    def _draw_player(self, snap: FrameSnapshot):
        p = snap.player
        top = int(p.y - p.h)
        if self.sprite is not None:
            self.surface.blit(self.sprite, (int(p.x), top))
        else:
            rows = CAT_FRAMES[int(snap.time // TAIL_WIGGLE_FRAMES) % 2]
            s = PLAYER_SCALE
            for j, row in enumerate(rows):
                for i, ch in enumerate(row):
                    col = CAT_PALETTE.get(ch)
                    if col is not None:
                        self.surface.fill(col, (int(p.x) + i * s, top + j * s, s, s))

        # shadow fades as the cat rises
        lift = GROUND_Y - p.y
        alpha = int(90 * max(0.25, min(1.0, 1 - lift / 120)))
        shadow = pygame.Surface((40, 12), pygame.SRCALPHA)
        pygame.draw.ellipse(shadow, (*COLOR_INK, alpha), shadow.get_rect())
        self.surface.blit(shadow, (int(p.x + p.w / 2 - 20), GROUND_Y + 4))

    def _draw_game_over(self):
        if self._banner_font is None:
            self._banner_font = pygame.font.SysFont("nunito", 24, bold=True)
            self._sub_font = pygame.font.SysFont("nunito", 16)
        box = pygame.Rect(WIDTH // 2 - 170, HEIGHT // 2 - 50, 340, 100)
        self.overlay.fill((0, 0, 0, 0))
        pygame.draw.rect(self.overlay, (17, 24, 39, 178), box, border_radius=12)
        self.surface.blit(self.overlay, (0, 0))
        msg = self._banner_font.render("Game over", True, COLOR_FG)
        sub = self._sub_font.render("Enter / Click to restart", True, COLOR_FG)
        self.surface.blit(msg, msg.get_rect(center=(WIDTH // 2, HEIGHT // 2 - 14)))
        self.surface.blit(sub, sub.get_rect(center=(WIDTH // 2, HEIGHT // 2 + 18)))


class Hud:
    """Score / level / best text. Re-renders only when the numbers change."""
    def __init__(self, font: pygame.font.Font):
        self.font = font
        self.text: Optional[pygame.Surface] = None

    def update(self, score: int, level: int, high_score: int):
        msg = f"Score: {score}   Level: {level}   Best: {high_score}"
        self.text = self.font.render(msg, True, COLOR_INK)

    def draw(self, surf: pygame.Surface):
        if self.text is not None:
            surf.blit(self.text, (12, 10))
