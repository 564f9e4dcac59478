# gravity_shift/game/game.py
# command is python -m gravity_shift.game.game
from __future__ import annotations
import argparse
import logging
import random
import sys

import pygame
from pygame import K_ESCAPE, K_RETURN, K_SPACE, K_r

from .config import FPS, HEIGHT, SEED_DEFAULT, WIDTH, resolve_palette
from .clock import PygameTickSource
from .render import Renderer
from .simulation import Simulation

logger = logging.getLogger(__name__)

IDLE, PLAYING, GAME_OVER = "idle", "playing", "game_over"
SHAKE_FRAMES = 30
SHAKE_PX = 6


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Spawn seed. Omit for SEED_DEFAULT, use -1 for random each launch.")
    p.add_argument("--width", type=int, default=WIDTH)
    p.add_argument("--height", type=int, default=HEIGHT)
    p.add_argument("--color", action="append", default=[], metavar="NAME=VALUE",
                   help="Palette override, e.g. --color primary=#9b6ae0 (repeatable)")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()


def _overrides(pairs):
    out = {}
    for pair in pairs:
        if "=" not in pair:
            logger.warning("Ignoring malformed --color %r", pair)
            continue
        k, v = pair.split("=", 1)
        out[k.strip()] = v.strip()
    return out


class Host:
    """
    Window glue around a Simulation: menu/score card, input -> flip,
    window resize -> reset. The high score only lives as long as the process.
    """
    def __init__(self, width: int, height: int, seed, palette_overrides=None):
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.frame = pygame.Surface((width, height))
        self.renderer = Renderer(resolve_palette(palette_overrides))
        self.font = pygame.font.SysFont("jetbrainsmono", 18)
        self.big = pygame.font.SysFont("jetbrainsmono", 42, bold=True)
        self.mode = IDLE
        self.score = 0
        self.coins = 0
        self.final_score = 0
        self.high_score = 0
        self.shake = 0
        self.sim = Simulation(width, height, seed=seed,
                              on_score=self._set_score,
                              on_coins=self._set_coins,
                              on_game_over=self._game_over)

    # -------------------- Simulation callbacks --------------------

    def _set_score(self, score: int):
        self.score = score

    def _set_coins(self, coins: int):
        self.coins = coins

    def _game_over(self, score: int):
        self.final_score = score
        self.mode = GAME_OVER
        if score > self.high_score:
            self.high_score = score
        self.shake = SHAKE_FRAMES

    # -------------------- Input --------------------

    def start(self):
        w, h = self.frame.get_size()
        self.sim.reset(w, h)
        self.mode = PLAYING

    def resize(self, w: int, h: int):
        self.screen = pygame.display.set_mode((w, h), pygame.RESIZABLE)
        self.frame = pygame.Surface((max(1, w), max(1, h)))
        self.sim.reset(w, h)

    def press(self):
        if self.mode == PLAYING:
            self.sim.on_gravity_flip()
        else:
            self.start()

    def handle(self, event) -> bool:
        """Returns False when the app should quit."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == K_ESCAPE:
                return False
            if event.key in (K_SPACE, K_RETURN):
                self.press()
            if event.key == K_r and self.mode == GAME_OVER:
                self.start()
        # SDL mirrors every tap as a mouse click with touch=True; FINGERDOWN handles it
        if (event.type == pygame.MOUSEBUTTONDOWN and event.button == 1
                and not getattr(event, "touch", False)):
            self.press()
        if event.type == pygame.FINGERDOWN:
            self.press()
        if event.type == pygame.VIDEORESIZE:
            self.resize(event.w, event.h)
        return True

    # -------------------- Frame --------------------

    def tick(self):
        if self.mode == PLAYING:
            self.sim.advance_tick()
        self.renderer.draw(self.frame, self.sim.state)
        self._draw_hud()

        dx = dy = 0
        if self.shake > 0:
            self.shake -= 1
            dx, dy = random.randint(-SHAKE_PX, SHAKE_PX), random.randint(-SHAKE_PX, SHAKE_PX)
        self.screen.fill((0, 0, 0))
        self.screen.blit(self.frame, (dx, dy))
        pygame.display.flip()

    def _blit_center(self, text: str, font, y: int, color):
        surf = font.render(text, True, color)
        self.frame.blit(surf, (self.frame.get_width() // 2 - surf.get_width() // 2, y))

    def _draw_hud(self):
        pal = self.renderer.palette
        w, h = self.frame.get_size()
        if self.mode == PLAYING:
            self.frame.blit(self.font.render(f"Score: {self.score}   High: {self.high_score}", True, pal.accent), (12, 10))
            coins = self.font.render(f"Coins: {self.coins}", True, pal.accent)
            self.frame.blit(coins, (w - coins.get_width() - 12, 10))
            return

        panel = pygame.Surface((min(w - 20, 420), 170), pygame.SRCALPHA)
        panel.fill((10, 20, 35, 190))
        self.frame.blit(panel, (w // 2 - panel.get_width() // 2, h // 2 - 85))
        if self.mode == IDLE:
            self._blit_center("Gravity Shift", self.big, h // 2 - 75, pal.primary)
            self._blit_center("Run. Flip. Survive.", self.font, h // 2 - 20, pal.foreground)
            self._blit_center(f"High Score: {self.high_score}", self.font, h // 2 + 5, pal.accent)
            self._blit_center("SPACE / click / tap to start and flip", self.font, h // 2 + 40, pal.foreground)
        else:
            self._blit_center("Game Over", self.big, h // 2 - 75, pal.destructive)
            self._blit_center(f"Score {self.final_score}   Coins {self.coins}   High {self.high_score}",
                              self.font, h // 2 - 10, pal.accent)
            self._blit_center("Play again: SPACE / R / click", self.font, h // 2 + 40, pal.foreground)


def run():
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    # Resolve seed: None -> use SEED_DEFAULT; -1 -> random
    if args.seed is None:
        seed = SEED_DEFAULT
    elif args.seed == -1:
        seed = None
    else:
        seed = args.seed

    pygame.init()
    pygame.display.set_caption("Gravity Shift")
    host = Host(args.width, args.height, seed, _overrides(args.color))
    logger.info("seed=%s field=%dx%d", host.sim.seed, args.width, args.height)

    source = PygameTickSource(FPS)
    for _ in source:
        for event in pygame.event.get():
            if not host.handle(event):
                source.stop()
                break
        if source.running:
            host.tick()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    run()
