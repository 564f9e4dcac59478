# gravity_shift/game/simulation.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, replace
from typing import Callable, Optional

from .config import GameConfig
from .entities import GameState, Player, Presentation, Session
from .collision import resolve
from .particles import advance_particles, spawn_burst
from .physics import accelerate, scroll, try_flip, update_physics, update_presentation
from .render import Renderer
from .spawner import Spawner, prune

logger = logging.getLogger(__name__)

ScoreCallback = Callable[[int], None]


@dataclass(frozen=True)
class TickResult:
    score: int
    coins_collected: int
    ended: bool
    final_score: Optional[int] = None


def _noop(_value: int) -> None:
    pass


def new_state(width: float, height: float, cfg: GameConfig) -> GameState:
    """Fresh session: player resting on the floor, gravity down, empty world."""
    size = cfg.player_size
    y = height - size
    player = Player(x=float(cfg.player_x), y=y, size=size)
    look = Presentation(rotation=0.0, cape=(player.center,) * cfg.cape_length)
    return GameState(
        width=width,
        height=height,
        player=player,
        look=look,
        session=Session(speed=cfg.initial_speed),
        distance_unit=cfg.score_distance_unit,
    )


class Simulation:
    """
    The per-frame loop. Each advance_tick() runs:
    physics/movement -> spawner -> collision/pickups -> particles
    and swaps in a new GameState. Rendering reads self.state and never writes.

    The host wires input to on_gravity_flip() and resizes to reset(); scores are
    pushed back through on_score / on_coins / on_game_over.
    """
    def __init__(self,
                 width: float,
                 height: float,
                 cfg: Optional[GameConfig] = None,
                 seed: Optional[int] = None,
                 rng: Optional[random.Random] = None,
                 on_score: Optional[ScoreCallback] = None,
                 on_coins: Optional[ScoreCallback] = None,
                 on_game_over: Optional[ScoreCallback] = None):
        self.cfg = cfg or GameConfig()
        self.spawner = Spawner(seed=seed, cfg=self.cfg, rng=rng)
        self.on_score = on_score or _noop
        self.on_coins = on_coins or _noop
        self.on_game_over = on_game_over or _noop
        self.state: GameState
        self._last_score: Optional[int] = None
        self._last_coins: Optional[int] = None
        self.reset(width, height)

    @property
    def rng(self) -> random.Random:
        return self.spawner.rng

    @property
    def seed(self) -> Optional[int]:
        return self.spawner.seed

    @property
    def ended(self) -> bool:
        return self.state.session.over

    # -------------------- Host commands --------------------

    def reset(self, width: float, height: float) -> None:
        """Start over with a new field size. The rng keeps its position."""
        self.state = new_state(width, height, self.cfg)
        logger.debug("reset %sx%s", width, height)
        self._report(force=True)

    def on_gravity_flip(self) -> bool:
        """Returns True if gravity actually flipped."""
        if self.ended:
            return False
        player, flipped = try_flip(self.state.player, self.cfg)
        if flipped:
            self.state = replace(self.state, player=player)
        return flipped

    def advance_tick(self, width: Optional[float] = None, height: Optional[float] = None) -> TickResult:
        s = self.state
        if s.session.over:
            return self._result()
        if width is not None and height is not None and (width, height) != (s.width, s.height):
            s = replace(s, width=width, height=height)
        if not s.valid_field:
            return self._result()

        cfg = self.cfg

        # 1) physics & movement
        session = accelerate(s.session, cfg)
        player = update_physics(s.player, s.floor_y, s.ceiling_y, cfg)
        look = update_presentation(s.look, player, cfg)
        obstacles = scroll(s.obstacles, session.speed)

        # 2) spawn & prune; coins scroll after spawning, a new coin moves on its first tick
        obstacles, coins = self.spawner.spawn(obstacles, s.coins, s.width, s.height)
        coins = scroll(coins, session.speed)
        obstacles, coins = prune(obstacles, coins)

        # 3) collisions & pickups
        res = resolve(player, obstacles, coins, s.height)
        particles = s.particles
        if res.game_over:
            final = session.score(cfg.score_distance_unit)
            session = replace(session, over=True, final_score=final)
            self.state = replace(s, player=player, look=look, session=session,
                                 obstacles=obstacles, coins=coins, tick=s.tick + 1)
            logger.info("game over at tick %d: %s hit, score=%d coins=%d",
                        self.state.tick, res.hit.kind, final, session.coins)
            self._report(force=True)
            self.on_game_over(final)
            return self._result()

        if res.collected:
            n = len(res.collected)
            session = replace(session, bonus=session.bonus + n * cfg.coin_bonus, coins=session.coins + n)
            for c in res.collected:
                particles = particles + spawn_burst((c.x, c.y), self.rng, cfg.burst_count)

        # 4) particles
        particles = advance_particles(particles, session.speed)

        self.state = replace(s, player=player, look=look, session=session, obstacles=obstacles,
                             coins=res.coins, particles=particles, tick=s.tick + 1)
        self._report()
        return self._result()

    def render(self, surface, renderer: Optional[Renderer] = None) -> None:
        (renderer or Renderer()).draw(surface, self.state)

    # -------------------- Helpers --------------------

    def _result(self) -> TickResult:
        s = self.state
        return TickResult(
            score=s.score,
            coins_collected=s.session.coins,
            ended=s.session.over,
            final_score=s.session.final_score,
        )

    def _report(self, force: bool = False) -> None:
        score, coins = self.state.score, self.state.session.coins
        if force or score != self._last_score:
            self.on_score(score)
        if force or coins != self._last_coins:
            self.on_coins(coins)
        self._last_score, self._last_coins = score, coins
