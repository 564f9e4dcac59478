# gravity_shift/game/config.py
from __future__ import annotations
import logging
from dataclasses import dataclass, fields
from typing import Mapping, Optional, Tuple, Union

import pygame
from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)

# --- Display ---
WIDTH = 800
HEIGHT = 400
FPS = 60

# --- Player ---
PLAYER_SIZE = 30
PLAYER_X = 100             # player's fixed x (world scrolls left)
GRAVITY_PULL = 0.9         # added to vy every tick, sign = gravity direction
FLIP_IMPULSE = 3.0         # vy right after a flip, sign = new gravity
ROTATION_RATE = 0.2        # rad per tick while mid-flip
ROTATION_DAMPING = 0.9     # rotation multiplier per tick once landed
CAPE_LENGTH = 10
CAPE_FOLLOW = 0.5          # fraction of the gap each cape point closes per tick

# --- World ---
INITIAL_SPEED = 6.0
SPEED_INCREMENT = 0.0015
MAX_SPEED: Optional[float] = None   # None = keeps escalating
SCORE_DISTANCE_UNIT = 100  # distance per score point

# --- Obstacles / coins ---
OBSTACLE_SIZE = 40
OBSTACLE_MIN_GAP = 280
OBSTACLE_MAX_GAP = 450
SPIKE_CHANCE = 0.7
COIN_CHANCE = 0.5
COIN_RADIUS = 12
COIN_OFFSET_X = 100        # from the obstacle's right edge
COIN_LANE_INSET = 100      # from the mounting edge
COIN_BONUS = 10

# --- Particles ---
BURST_COUNT = 8
PARTICLE_SPEED = (1.0, 4.0)
PARTICLE_RADIUS = (1.0, 4.0)
PARTICLE_DECAY = (0.01, 0.03)

SEED_DEFAULT = 12345

# --- Rendering ---
BAND_HEIGHT = 5
BAND_ALPHA = 0.3
CAPE_WIDTH = 4
OUTLINE_WIDTH = 2

RGBA = Tuple[int, int, int, int]


def hsl(h: float, s: float, l: float, a: float = 100.0) -> RGBA:
    """CSS-style hsl (degrees, percent, percent) -> RGBA tuple."""
    c = pygame.Color(0, 0, 0)
    c.hsla = (h % 360, s, l, a)
    return tuple(c)


# --- Colors ---
COLOR_BG = (9, 14, 28, 255)
COLOR_PRIMARY = hsl(273, 56, 69)
COLOR_ACCENT = hsl(53, 76, 66)
COLOR_DESTRUCTIVE = hsl(0, 84.2, 60.2)
COLOR_DESTRUCTIVE_DARK = hsl(0, 84.2, 40)
COLOR_DESTRUCTIVE_EDGE = hsl(0, 84.2, 30)
COLOR_FOREGROUND = hsl(0, 0, 98)
COLOR_SECONDARY = hsl(270, 20, 25)

ColorLike = Union[str, Tuple[int, int, int], Tuple[int, int, int, int], pygame.Color]


class GameConfig(BaseModel):
    """Tunable numbers of one session. Defaults mirror the module constants."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    player_size: float = Field(default=PLAYER_SIZE, gt=0)
    player_x: float = PLAYER_X
    gravity_pull: float = Field(default=GRAVITY_PULL, gt=0)
    flip_impulse: float = Field(default=FLIP_IMPULSE, gt=0)
    rotation_rate: float = Field(default=ROTATION_RATE, ge=0)
    rotation_damping: float = Field(default=ROTATION_DAMPING, ge=0.0, le=1.0)
    cape_length: int = Field(default=CAPE_LENGTH, ge=2)
    cape_follow: float = Field(default=CAPE_FOLLOW, ge=0.0, le=1.0)
    initial_speed: float = Field(default=INITIAL_SPEED, gt=0)
    speed_increment: float = Field(default=SPEED_INCREMENT, ge=0)
    max_speed: Optional[float] = MAX_SPEED
    obstacle_size: float = Field(default=OBSTACLE_SIZE, gt=0)
    min_gap: float = Field(default=OBSTACLE_MIN_GAP, ge=0)
    max_gap: float = Field(default=OBSTACLE_MAX_GAP, ge=0)
    spike_chance: float = Field(default=SPIKE_CHANCE, ge=0.0, le=1.0)
    coin_chance: float = Field(default=COIN_CHANCE, ge=0.0, le=1.0)
    coin_radius: float = Field(default=COIN_RADIUS, gt=0)
    coin_offset_x: float = COIN_OFFSET_X
    coin_lane_inset: float = COIN_LANE_INSET
    coin_bonus: int = Field(default=COIN_BONUS, ge=0)
    burst_count: int = Field(default=BURST_COUNT, ge=0)
    score_distance_unit: float = Field(default=SCORE_DISTANCE_UNIT, gt=0)

    @model_validator(mode="after")
    def _check_ranges(self) -> "GameConfig":
        if self.min_gap > self.max_gap:
            raise ValueError(f"gap range must satisfy min <= max, got [{self.min_gap}, {self.max_gap}]")
        if self.max_speed is not None and self.max_speed < self.initial_speed:
            raise ValueError("max_speed must be >= initial_speed")
        return self


@dataclass(frozen=True)
class Palette:
    primary: RGBA = COLOR_PRIMARY
    accent: RGBA = COLOR_ACCENT
    destructive: RGBA = COLOR_DESTRUCTIVE
    destructive_dark: RGBA = COLOR_DESTRUCTIVE_DARK
    destructive_edge: RGBA = COLOR_DESTRUCTIVE_EDGE
    foreground: RGBA = COLOR_FOREGROUND
    secondary: RGBA = COLOR_SECONDARY
    background: RGBA = COLOR_BG


def resolve_palette(overrides: Optional[Mapping[str, ColorLike]] = None) -> Palette:
    """
    Build a Palette from theme overrides (color names, hex strings or RGB(A) tuples).
    Unknown keys and values pygame can't parse keep the default color.
    """
    if not overrides:
        return Palette()
    known = {f.name for f in fields(Palette)}
    resolved = {}
    for key, value in overrides.items():
        if key not in known:
            logger.warning("Unknown palette entry %r ignored", key)
            continue
        try:
            resolved[key] = tuple(pygame.Color(value))
        except (ValueError, TypeError) as e:
            logger.warning("Could not parse color %r for %r, using default (%s)", value, key, e)
    return Palette(**resolved)
