# gravity_shift/env/gs_env.py
from __future__ import annotations
from typing import Any, Dict, Optional

import gymnasium as gym
import numpy as np
import pygame

from gravity_shift.game.config import FPS, HEIGHT, WIDTH, GameConfig
from gravity_shift.game.render import Renderer, frame_array
from gravity_shift.game.simulation import Simulation
from gravity_shift.env.observations import OBS_HIGH, OBS_LOW, build_observation


class GSEnv(gym.Env):
    """
    Gravity Shift Gymnasium environment (vector observations).
    - One simulation tick per frame, 60 frames per second of game time.
    - Agent acts every `frame_skip` frames (default 4) -> 15 decisions/sec.
    - Observation: shape (15,), float32 (see observations.build_observation).
    - Reward: +1 per decision survived, +0.5 per coin, -1 on death.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 30.0,
                 width: int = WIDTH,
                 height: int = HEIGHT,
                 cfg: Optional[GameConfig] = None):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"], f"Invalid render_mode {render_mode}"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.width = int(width)
        self.height = int(height)
        self.cfg = cfg or GameConfig()

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(FPS * time_limit_seconds / self.frame_skip)

        # Actions: 0 = NOOP, 1 = FLIP
        self.action_space = gym.spaces.Discrete(2)
        self.observation_space = gym.spaces.Box(low=OBS_LOW, high=OBS_HIGH, dtype=np.float32)

        # --- Runtime state ---
        self.sim: Optional[Simulation] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.renderer = Renderer()
        self.screen = None
        self.canvas = None
        self.clock = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # Spawn seed comes from np_random so reset(seed=s) is reproducible end to end.
        spawn_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.sim = Simulation(self.width, self.height, cfg=self.cfg, seed=spawn_seed)
        self.current_seed = spawn_seed
        self.timestep = 0

        obs = self._get_obs()
        info = self._info()
        if self.render_mode == "human":
            self.render()
        return obs, info

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.sim is not None, "Call reset() before step()"

        if int(action) == 1:
            self.sim.on_gravity_flip()

        coins_before = self.sim.state.session.coins
        for _ in range(self.frame_skip):
            res = self.sim.advance_tick()
            if res.ended:
                break

        gained = self.sim.state.session.coins - coins_before
        terminated = self.sim.ended
        reward = -1.0 if terminated else 1.0 + 0.5 * gained

        self.timestep += 1
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = self._get_obs()
        info = self._info()
        if self.render_mode == "human":
            self.render()
        return obs, float(reward), terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.sim is not None
        return build_observation(self.sim.state, self.cfg.gravity_pull)

    def _info(self) -> Dict[str, Any]:
        assert self.sim is not None
        s = self.sim.state
        return {
            "seed": self.current_seed,
            "timestep": self.timestep,
            "tick": s.tick,
            "score": s.score,
            "coins": s.session.coins,
            "distance": s.session.distance,
            "final_score": s.session.final_score,
        }

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.sim is None:
            return None

        if self.render_mode == "rgb_array":
            if self.canvas is None:
                self.canvas = pygame.Surface((self.width, self.height))
            self.renderer.draw(self.canvas, self.sim.state)
            return frame_array(self.canvas)

        if self.screen is None:
            pygame.init()
            self.screen = pygame.display.set_mode((self.width, self.height))
            pygame.display.set_caption("Gravity Shift — Gym Env")
            self.clock = pygame.time.Clock()

        # Pump minimal event queue so the OS doesn't think we're hung
        pygame.event.pump()
        self.renderer.draw(self.screen, self.sim.state)
        pygame.display.flip()
        if self.clock is not None:
            self.clock.tick(self.metadata["render_fps"])
        return None

    def close(self):
        if self.screen is not None:
            pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
        self.canvas = None
