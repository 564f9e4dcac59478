# gravity_shift/game/spawner.py
from __future__ import annotations
import logging
import random
from typing import Optional, Tuple

from .config import GameConfig
from .entities import BLOCK, SPIKE, Coin, Obstacle

logger = logging.getLogger(__name__)


class Spawner:
    """
    Keeps an endless stream of obstacles coming from the right edge.
    Spacing is never collision-tested: a new obstacle appears once the last one
    has scrolled past a gap drawn uniformly from [min_gap, max_gap], re-drawn on
    every evaluation. All randomness goes through self.rng so a seed replays the
    same sequence.
    """
    def __init__(self, seed: Optional[int] = None, cfg: Optional[GameConfig] = None,
                 rng: Optional[random.Random] = None):
        self.cfg = cfg or GameConfig()
        if rng is None:
            if seed is None:
                seed = random.randrange(0, 2**32 - 1)
            rng = random.Random(seed)
        self.seed = seed
        self.rng = rng

    def _gap(self) -> float:
        lo, hi = self.cfg.min_gap, self.cfg.max_gap
        return lo + self.rng.random() * (hi - lo)

    def should_spawn(self, obstacles: Tuple[Obstacle, ...], width: float) -> bool:
        if not obstacles:
            return True
        return obstacles[-1].x < width - self._gap()

    def _make_obstacle(self, width: float, height: float) -> Obstacle:
        cfg = self.cfg
        on_ceiling = self.rng.random() > 0.5
        kind = SPIKE if self.rng.random() > 1.0 - cfg.spike_chance else BLOCK
        y = 0.0 if on_ceiling else height - cfg.obstacle_size
        return Obstacle(x=width, y=y, width=cfg.obstacle_size, height=cfg.obstacle_size,
                        kind=kind, on_ceiling=on_ceiling)

    def _maybe_coin(self, obstacle: Obstacle, width: float, height: float) -> Optional[Coin]:
        cfg = self.cfg
        if self.rng.random() <= 1.0 - cfg.coin_chance:
            return None
        # Coin sits on the far side of the lane from the obstacle's face.
        y = cfg.coin_lane_inset if obstacle.on_ceiling else height - cfg.coin_lane_inset
        return Coin(x=width + obstacle.width + cfg.coin_offset_x, y=y, radius=cfg.coin_radius)

    def spawn(self, obstacles: Tuple[Obstacle, ...], coins: Tuple[Coin, ...],
              width: float, height: float) -> Tuple[Tuple[Obstacle, ...], Tuple[Coin, ...]]:
        """Append at most one obstacle (and maybe its coin)."""
        if width <= 0 or height <= 0:
            return obstacles, coins
        if not self.should_spawn(obstacles, width):
            return obstacles, coins

        ob = self._make_obstacle(width, height)
        obstacles = obstacles + (ob,)
        coin = self._maybe_coin(ob, width, height)
        if coin is not None:
            coins = coins + (coin,)
        logger.debug("spawned %s (%s) coin=%s", ob.kind, "ceiling" if ob.on_ceiling else "floor", coin is not None)
        return obstacles, coins


def prune(obstacles: Tuple[Obstacle, ...], coins: Tuple[Coin, ...]) -> Tuple[Tuple[Obstacle, ...], Tuple[Coin, ...]]:
    """Drop anything with no extent left on screen."""
    return (
        tuple(o for o in obstacles if o.x + o.width > 0),
        tuple(c for c in coins if c.x + c.radius > 0),
    )
