# gravity_shift/game/collision.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .entities import BLOCK, Coin, Obstacle, Player
from .geometry import Rect, any_corner_in_triangle, rect_center, rects_overlap, spike_bounds, spike_triangle


@dataclass(frozen=True)
class Resolution:
    hit: Optional[Obstacle]          # first obstacle touched, None if clear
    coins: Tuple[Coin, ...]          # coins still in play
    collected: Tuple[Coin, ...]      # coins picked up this tick

    @property
    def game_over(self) -> bool:
        return self.hit is not None


def hits_obstacle(player_rect: Rect, ob: Obstacle, field_height: float) -> bool:
    """Blocks: plain AABB. Spikes: AABB rejection, then corners vs triangle."""
    if ob.kind == BLOCK:
        return rects_overlap(player_rect, ob.rect)

    bounds = spike_bounds(ob.x, ob.width, ob.height, ob.on_ceiling, field_height)
    if not rects_overlap(player_rect, bounds):
        return False
    tri = spike_triangle(ob.x, ob.width, ob.height, ob.on_ceiling, field_height)
    return any_corner_in_triangle(player_rect, tri)


def first_hit(player_rect: Rect, obstacles: Iterable[Obstacle], field_height: float) -> Optional[Obstacle]:
    for ob in obstacles:
        if hits_obstacle(player_rect, ob, field_height):
            return ob
    return None


def touches_coin(player_rect: Rect, coin: Coin) -> bool:
    """Strict: a coin exactly at half-width + radius stays put."""
    cx, cy = rect_center(player_rect)
    dist = math.hypot(cx - coin.x, cy - coin.y)
    return dist < player_rect[2] / 2 + coin.radius


def split_coins(player_rect: Rect, coins: Iterable[Coin]) -> Tuple[Tuple[Coin, ...], Tuple[Coin, ...]]:
    kept, collected = [], []
    for c in coins:
        (collected if touches_coin(player_rect, c) else kept).append(c)
    return tuple(kept), tuple(collected)


def resolve(player: Player, obstacles: Tuple[Obstacle, ...], coins: Tuple[Coin, ...],
            field_height: float) -> Resolution:
    """
    Obstacles first: a hit ends the tick, so coins are left untouched.
    Otherwise split coins into kept / collected.
    """
    pr = player.rect
    hit = first_hit(pr, obstacles, field_height)
    if hit is not None:
        return Resolution(hit=hit, coins=coins, collected=())
    kept, collected = split_coins(pr, coins)
    return Resolution(hit=None, coins=kept, collected=collected)
