# gravity_shift/game/particles.py
from __future__ import annotations
import math
import random
from typing import Iterable, Tuple

from .config import BURST_COUNT, PARTICLE_DECAY, PARTICLE_RADIUS, PARTICLE_SPEED
from .entities import Particle
from .geometry import Point


def spawn_burst(origin: Point, rng: random.Random, count: int = BURST_COUNT) -> Tuple[Particle, ...]:
    """Radial burst of fading sparks. Visual only."""
    ox, oy = origin
    out = []
    for _ in range(count):
        angle = rng.random() * math.pi * 2
        speed = PARTICLE_SPEED[0] + rng.random() * (PARTICLE_SPEED[1] - PARTICLE_SPEED[0])
        out.append(Particle(
            x=ox,
            y=oy,
            vx=math.cos(angle) * speed,
            vy=math.sin(angle) * speed,
            radius=PARTICLE_RADIUS[0] + rng.random() * (PARTICLE_RADIUS[1] - PARTICLE_RADIUS[0]),
            alpha=1.0,
            decay=PARTICLE_DECAY[0] + rng.random() * (PARTICLE_DECAY[1] - PARTICLE_DECAY[0]),
        ))
    return tuple(out)


def advance_particles(particles: Iterable[Particle], scroll_speed: float) -> Tuple[Particle, ...]:
    """Own velocity plus world scroll; drop particles once fully faded."""
    out = []
    for p in particles:
        alpha = p.alpha - p.decay
        if alpha <= 0.0:
            continue
        out.append(Particle(x=p.x + p.vx - scroll_speed, y=p.y + p.vy, vx=p.vx, vy=p.vy,
                            radius=p.radius, alpha=alpha, decay=p.decay))
    return tuple(out)
