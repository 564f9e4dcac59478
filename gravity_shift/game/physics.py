# gravity_shift/game/physics.py
from __future__ import annotations
from dataclasses import replace
from typing import Tuple, TypeVar

from .config import GameConfig
from .entities import Player, Presentation, Session

T = TypeVar("T")


def try_flip(player: Player, cfg: GameConfig) -> Tuple[Player, bool]:
    """Flip gravity unless already mid-flip. Returns (player, performed)."""
    if player.switching:
        return player, False
    g = -player.grav_dir
    return replace(player, grav_dir=g, vy=g * cfg.flip_impulse, switching=True), True


def update_physics(player: Player, floor_y: float, ceiling_y: float, cfg: GameConfig) -> Player:
    """Integrate one tick under signed gravity, then clamp to the active bound."""
    vy = player.vy + player.grav_dir * cfg.gravity_pull
    y = player.y + vy
    switching = player.switching

    if player.grav_dir > 0 and y >= floor_y:
        y, vy, switching = floor_y, 0.0, False
    elif player.grav_dir < 0 and y <= ceiling_y:
        y, vy, switching = ceiling_y, 0.0, False

    return replace(player, y=y, vy=vy, switching=switching)


def update_presentation(look: Presentation, player: Player, cfg: GameConfig) -> Presentation:
    """Spin while mid-flip, settle otherwise; every cape point closes part of the gap to the one ahead."""
    if player.switching:
        rotation = look.rotation + cfg.rotation_rate * player.grav_dir
    else:
        rotation = look.rotation * cfg.rotation_damping

    lead = player.center
    cape = []
    for (sx, sy) in look.cape:
        seg = (sx + (lead[0] - sx) * cfg.cape_follow, sy + (lead[1] - sy) * cfg.cape_follow)
        cape.append(seg)
        lead = seg
    return Presentation(rotation=rotation, cape=tuple(cape))


def accelerate(session: Session, cfg: GameConfig) -> Session:
    """Bump scroll speed, then advance distance by the new speed."""
    speed = session.speed + cfg.speed_increment
    if cfg.max_speed is not None and speed > cfg.max_speed:
        speed = cfg.max_speed
    return replace(session, speed=speed, distance=session.distance + speed)


def scroll(items: Tuple[T, ...], speed: float) -> Tuple[T, ...]:
    """Translate obstacles/coins left by the scroll speed."""
    return tuple(replace(it, x=it.x - speed) for it in items)
