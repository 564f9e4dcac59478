# gravity_shift/env/observations.py
from __future__ import annotations
import math
from typing import List

import numpy as np

from gravity_shift.game.entities import SPIKE, GameState

OBSTACLE_SLOTS = 3
SPEED_NORM = 20.0   # speeds at or above this read as 1.0
OBS_SIZE = 4 + 3 * OBSTACLE_SLOTS + 2

OBS_LOW = np.array([0.0, -1.0, -1.0, 0.0] + [0.0, 0.0, 0.0] * OBSTACLE_SLOTS + [0.0, -1.0], dtype=np.float32)
OBS_HIGH = np.array([1.0, 1.0, 1.0, 1.0] + [1.0, 1.0, 1.0] * OBSTACLE_SLOTS + [1.0, 1.0], dtype=np.float32)


def _clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else (hi if x > hi else x)


def max_fall_speed(state: GameState, gravity_pull: float) -> float:
    """Largest |vy| reachable crossing the whole field (falls from rest, v^2 = 2 g d)."""
    span = max(1.0, state.height - state.player.size)
    return max(1.0, math.sqrt(2.0 * gravity_pull * span) + gravity_pull)


def build_observation(state: GameState, gravity_pull: float) -> np.ndarray:
    """
    Returns a fixed (15,) float32 vector:
      [ y_norm, vy_norm, grav_dir, speed_norm,
        dx, ceiling, spike   for the next 3 obstacles ahead of the player,
        coin_dx, coin_dy     for the nearest coin ahead ]
    - y_norm     in [0,1] over [ceiling, floor]
    - vy_norm    in [-1,1]
    - grav_dir   in {-1,+1}
    - dx         in [0,1], distance from the player's left edge over field width;
      empty slots read dx=1, ceiling=0, spike=0
    - coin_dx    in [0,1], coin_dy in [-1,1] relative to the player center;
      no coin reads (1, 0)
    """
    p = state.player
    w = max(1.0, float(state.width))
    h = max(1.0, float(state.height))

    y_norm = _clamp(p.y / max(1.0, state.height - p.size), 0.0, 1.0)
    vy_norm = _clamp(p.vy / max_fall_speed(state, gravity_pull), -1.0, 1.0)
    grav = 1.0 if p.grav_dir > 0 else -1.0
    speed_norm = _clamp(state.session.speed / SPEED_NORM, 0.0, 1.0)

    feats: List[float] = [y_norm, vy_norm, grav, speed_norm]

    ahead = sorted((o for o in state.obstacles if o.x + o.width > p.x), key=lambda o: o.x)
    for i in range(OBSTACLE_SLOTS):
        if i < len(ahead):
            o = ahead[i]
            feats.extend([
                _clamp((o.x - p.x) / w, 0.0, 1.0),
                1.0 if o.on_ceiling else 0.0,
                1.0 if o.kind == SPIKE else 0.0,
            ])
        else:
            feats.extend([1.0, 0.0, 0.0])

    cx, cy = p.center
    coins = sorted((c for c in state.coins if c.x + c.radius > p.x), key=lambda c: c.x)
    if coins:
        c = coins[0]
        feats.extend([_clamp((c.x - cx) / w, 0.0, 1.0), _clamp((c.y - cy) / h, -1.0, 1.0)])
    else:
        feats.extend([1.0, 0.0])

    return np.asarray(feats, dtype=np.float32)
