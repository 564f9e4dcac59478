# gravity_shift/game/render.py
from __future__ import annotations
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pygame

from .config import BAND_ALPHA, BAND_HEIGHT, CAPE_WIDTH, OUTLINE_WIDTH, Palette, RGBA
from .entities import BLOCK, Coin, GameState, Obstacle, Particle, Player, Presentation
from .geometry import Point, spike_triangle

CURVE_STEPS = 6            # samples per quadratic segment of the cape


def _lerp_color(c0: RGBA, c1: RGBA, t: float) -> Tuple[int, int, int]:
    return tuple(int(round(a + (b - a) * t)) for a, b in zip(c0[:3], c1[:3]))


def _quad(p0: Point, ctrl: Point, p1: Point, steps: int = CURVE_STEPS) -> List[Point]:
    out = []
    for i in range(1, steps + 1):
        t = i / steps
        u = 1.0 - t
        out.append((u * u * p0[0] + 2 * u * t * ctrl[0] + t * t * p1[0],
                    u * u * p0[1] + 2 * u * t * ctrl[1] + t * t * p1[1]))
    return out


def smooth_cape(points: Sequence[Point]) -> List[Point]:
    """
    Midpoint-smoothed polyline through the cape: each inner point is a control
    point, the curve passes through midpoints, the last two points close it.
    """
    n = len(points)
    if n < 3:
        return list(points)
    path = [points[0]]
    for i in range(1, n - 2):
        mid = ((points[i][0] + points[i + 1][0]) / 2, (points[i][1] + points[i + 1][1]) / 2)
        path.extend(_quad(path[-1], points[i], mid))
    path.extend(_quad(path[-1], points[n - 2], points[n - 1]))
    return path


def player_polygon(player: Player, rotation: float) -> List[Point]:
    """Square corners rotated about the player center; half a turn extra under inverted gravity."""
    angle = rotation + (math.pi if player.grav_dir < 0 else 0.0)
    cx, cy = player.center
    h = player.size / 2
    ca, sa = math.cos(angle), math.sin(angle)
    return [(cx + dx * ca - dy * sa, cy + dx * sa + dy * ca)
            for dx, dy in ((-h, -h), (h, -h), (h, h), (-h, h))]


def frame_array(surface: pygame.Surface) -> np.ndarray:
    """(H, W, 3) uint8 copy of a surface."""
    arr = pygame.surfarray.array3d(surface)  # (W, H, 3)
    return np.transpose(arr, (1, 0, 2))


class Renderer:
    """Draws a GameState. Reads only, so any snapshot can be drawn any number of times."""
    def __init__(self, palette: Optional[Palette] = None):
        self.palette = palette or Palette()

    def draw(self, surf: pygame.Surface, state: GameState) -> None:
        surf.fill(self.palette.background)
        if not state.valid_field:
            return
        self._draw_bands(surf, state)
        self._draw_cape(surf, state.look)
        self._draw_player(surf, state.player, state.look)
        for ob in state.obstacles:
            self._draw_obstacle(surf, ob, state.height)
        for c in state.coins:
            self._draw_coin(surf, c)
        for p in state.particles:
            self._draw_particle(surf, p)

    # -------------------- Pieces --------------------

    def _draw_bands(self, surf: pygame.Surface, state: GameState):
        w, h = int(state.width), int(state.height)
        band = pygame.Surface((w, BAND_HEIGHT), pygame.SRCALPHA)
        r, g, b = self.palette.secondary[:3]
        band.fill((r, g, b, int(255 * BAND_ALPHA)))
        surf.blit(band, (0, 0))
        surf.blit(band, (0, h - BAND_HEIGHT))

    def _draw_cape(self, surf: pygame.Surface, look: Presentation):
        path = smooth_cape(look.cape)
        if len(path) >= 2:
            pygame.draw.lines(surf, self.palette.primary, False, path, CAPE_WIDTH)

    def _draw_player(self, surf: pygame.Surface, player: Player, look: Presentation):
        poly = player_polygon(player, look.rotation)
        pygame.draw.polygon(surf, self.palette.primary, poly)
        pygame.draw.polygon(surf, self.palette.foreground, poly, OUTLINE_WIDTH)

    def _gradient_rows(self, surf: pygame.Surface, x0: float, y0: float, y1: float, width_at):
        """Fill rows from y0 (destructive) to y1 (dark) with the width given by width_at(t)."""
        top, bottom = self.palette.destructive, self.palette.destructive_dark
        rows = int(abs(y1 - y0))
        if rows <= 0:
            return
        step = 1 if y1 > y0 else -1
        for i in range(rows):
            t = i / max(1, rows - 1)
            left, span = width_at(t)
            y = int(y0) + i * step
            pygame.draw.line(surf, _lerp_color(top, bottom, t), (x0 + left, y), (x0 + left + span, y))

    def _draw_obstacle(self, surf: pygame.Surface, ob: Obstacle, field_height: float):
        if ob.kind == BLOCK:
            self._gradient_rows(surf, ob.x, ob.y, ob.y + ob.height, lambda t: (0.0, ob.width))
            pygame.draw.rect(surf, self.palette.destructive_edge,
                             pygame.Rect(int(ob.x), int(ob.y), int(ob.width), int(ob.height)), OUTLINE_WIDTH)
            return

        tri = spike_triangle(ob.x, ob.width, ob.height, ob.on_ceiling, field_height)
        base_y = tri[0][1]
        apex_y = tri[2][1]

        def span(t):
            # triangle narrows from full base to the apex
            half = ob.width * (1.0 - t) / 2
            return ob.width / 2 - half, 2 * half

        self._gradient_rows(surf, ob.x, base_y, apex_y, span)
        pygame.draw.polygon(surf, self.palette.destructive_edge, tri, OUTLINE_WIDTH)

    def _draw_coin(self, surf: pygame.Surface, c: Coin):
        center = (int(c.x), int(c.y))
        r = int(c.radius)
        pygame.draw.circle(surf, self.palette.accent, center, r)
        ring = pygame.Surface((2 * r + 2, 2 * r + 2), pygame.SRCALPHA)
        pygame.draw.circle(ring, (255, 255, 255, 128), (r + 1, r + 1), r, OUTLINE_WIDTH)
        surf.blit(ring, (center[0] - r - 1, center[1] - r - 1))

    def _draw_particle(self, surf: pygame.Surface, p: Particle):
        r = max(1, int(round(p.radius)))
        a = int(255 * max(0.0, min(1.0, p.alpha)))
        dot = pygame.Surface((2 * r, 2 * r), pygame.SRCALPHA)
        red, green, blue = self.palette.accent[:3]
        pygame.draw.circle(dot, (red, green, blue, a), (r, r), r)
        surf.blit(dot, (int(p.x) - r, int(p.y) - r))
