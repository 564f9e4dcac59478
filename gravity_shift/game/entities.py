# gravity_shift/game/entities.py
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .geometry import Point, Rect

SPIKE = "spike"
BLOCK = "block"


@dataclass(frozen=True)
class Player:
    """
    Collision-relevant player state:
    - grav_dir = +1 means gravity pulls down
    - grav_dir = -1 means gravity pulls up
    - switching is True between a flip and the next landing
    """
    x: float
    y: float
    size: float
    vy: float = 0.0
    grav_dir: int = 1
    switching: bool = False

    @property
    def rect(self) -> Rect:
        return self.x, self.y, self.size, self.size

    @property
    def center(self) -> Point:
        return self.x + self.size / 2, self.y + self.size / 2


@dataclass(frozen=True)
class Presentation:
    """Cosmetic player state. Never read by collision."""
    rotation: float = 0.0
    cape: Tuple[Point, ...] = ()


@dataclass(frozen=True)
class Obstacle:
    x: float
    y: float
    width: float
    height: float
    kind: str            # SPIKE or BLOCK
    on_ceiling: bool

    @property
    def rect(self) -> Rect:
        return self.x, self.y, self.width, self.height


@dataclass(frozen=True)
class Coin:
    x: float
    y: float
    radius: float


@dataclass(frozen=True)
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    radius: float
    alpha: float
    decay: float


@dataclass(frozen=True)
class Session:
    """Per-session counters, reset together."""
    speed: float
    distance: float = 0.0
    bonus: int = 0
    coins: int = 0
    over: bool = False
    final_score: Optional[int] = None

    def score(self, distance_unit: float) -> int:
        return int(math.floor(self.distance / distance_unit)) + self.bonus


@dataclass(frozen=True)
class GameState:
    """
    Snapshot of one tick. A tick never mutates a GameState, it builds the next
    one, so a renderer can hold on to any snapshot safely.
    """
    width: float
    height: float
    player: Player
    look: Presentation
    session: Session
    obstacles: Tuple[Obstacle, ...] = ()
    coins: Tuple[Coin, ...] = ()
    particles: Tuple[Particle, ...] = ()
    tick: int = 0
    distance_unit: float = field(default=100.0, repr=False)

    @property
    def score(self) -> int:
        return self.session.score(self.distance_unit)

    @property
    def floor_y(self) -> float:
        return self.height - self.player.size

    @property
    def ceiling_y(self) -> float:
        return 0.0

    @property
    def valid_field(self) -> bool:
        return self.width > 0 and self.height > 0
