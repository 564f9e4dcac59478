# gravity_shift/game/clock.py
from __future__ import annotations
from typing import Callable, Iterator, Optional, Protocol

import pygame

from .config import FPS
from .render import Renderer
from .simulation import Simulation, TickResult


class TickSource(Protocol):
    """Anything that says when the next frame is due. Iterating yields tick indices."""
    def __iter__(self) -> Iterator[int]: ...


class FixedTickSource:
    """
    Synthetic clock: yields `ticks` frames back to back, no waiting.
    `flips_at` lists tick indices at which a gravity flip is injected before
    that tick runs.
    """
    def __init__(self, ticks: int, flips_at=()):
        self.ticks = int(ticks)
        self.flips_at = frozenset(flips_at)

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.ticks))


class PygameTickSource:
    """Display-rate clock. Runs until stop() is called."""
    def __init__(self, fps: int = FPS):
        self.fps = fps
        self.clock = pygame.time.Clock()
        self.running = True
        self.flips_at = frozenset()

    def stop(self):
        self.running = False

    def __iter__(self) -> Iterator[int]:
        i = 0
        while self.running:
            self.clock.tick(self.fps)
            yield i
            i += 1


def drive(sim: Simulation,
          source: TickSource,
          renderer: Optional[Renderer] = None,
          surface: Optional[pygame.Surface] = None,
          before_tick: Optional[Callable[[int], None]] = None,
          stop_on_end: bool = True) -> TickResult:
    """
    One update-then-draw pass per tick from `source`. Resets, flips and any
    other host work belong in `before_tick`, which runs between ticks.
    """
    flips_at = getattr(source, "flips_at", frozenset())
    result = TickResult(score=sim.state.score, coins_collected=sim.state.session.coins, ended=sim.ended)
    for i in source:
        if before_tick is not None:
            before_tick(i)
        if i in flips_at:
            sim.on_gravity_flip()
        result = sim.advance_tick()
        if renderer is not None and surface is not None:
            renderer.draw(surface, sim.state)
        if result.ended and stop_on_end:
            break
    return result
