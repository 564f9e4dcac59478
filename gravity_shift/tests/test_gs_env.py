# gravity_shift/tests/test_gs_env.py
"""
Quick tests for GSEnv (Gymnasium environment).

Usage (from repo root):
  pytest gravity_shift/tests/test_gs_env.py
  python gravity_shift/tests/test_gs_env.py --render
  python gravity_shift/tests/test_gs_env.py --no-api-check --no-determinism
"""

from __future__ import annotations
import argparse
import os
import sys
from typing import List, Tuple

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np
from gymnasium.utils.env_checker import check_env

from gravity_shift.env.gs_env import GSEnv
from gravity_shift.env.observations import OBS_SIZE


def api_check(frame_skip: int = 4) -> None:
    """Verify Gym API contract (spaces, step/reset signatures, types)."""
    env = GSEnv(frame_skip=frame_skip)
    try:
        check_env(env, skip_render_check=True)
    finally:
        env.close()


def smoke_test(steps: int = 300, seed: int = 123, frame_skip: int = 4) -> None:
    """Short random rollout: no crashes, obs in space, reward type, proper terminations."""
    env = GSEnv(frame_skip=frame_skip)
    env.action_space.seed(seed)
    try:
        obs, info = env.reset(seed=seed)
        assert obs.shape == (OBS_SIZE,)
        assert env.observation_space.contains(obs), "Initial observation not in space"

        for t in range(steps):
            a = env.action_space.sample()
            obs, r, term, trunc, info = env.step(a)
            assert isinstance(r, float), "Reward must be a float"
            assert env.observation_space.contains(obs), f"Step {t}: observation out of bounds"
            if term:
                assert r == -1.0 and info["final_score"] == info["score"]
            if term or trunc:
                break
    finally:
        env.close()


def determinism_test(steps: int = 300, seed: int = 123, frame_skip: int = 4) -> None:
    """Same seed + same action sequence => identical obs/reward/terminal flags."""
    def rollout(seed_val: int, action_seq: List[int]) -> List[Tuple[np.ndarray, float, bool, bool]]:
        env = GSEnv(frame_skip=frame_skip)
        traj: List[Tuple[np.ndarray, float, bool, bool]] = []
        try:
            obs, _ = env.reset(seed=seed_val)
            for a in action_seq:
                obs, r, term, trunc, _ = env.step(int(a))
                traj.append((obs.copy(), float(r), bool(term), bool(trunc)))
                if term or trunc:
                    break
        finally:
            env.close()
        return traj

    rng = np.random.RandomState(42)
    action_seq = [int(rng.randint(0, 2)) for _ in range(steps)]

    t1 = rollout(seed, action_seq)
    t2 = rollout(seed, action_seq)

    assert len(t1) == len(t2), "Determinism: trajectory length mismatch"
    for i, ((o1, r1, te1, tr1), (o2, r2, te2, tr2)) in enumerate(zip(t1, t2)):
        assert np.allclose(o1, o2), f"Determinism: obs mismatch at step {i}"
        assert (r1, te1, tr1) == (r2, te2, tr2), f"Determinism: transition mismatch at step {i}"


def render_demo(steps: int = 600, seed: int = 123, frame_skip: int = 4) -> None:
    """Open a window and run a short NOOP demo so you can visually verify behavior."""
    env = GSEnv(render_mode="human", frame_skip=frame_skip)
    try:
        env.reset(seed=seed)
        for _ in range(steps):
            _, _, term, trunc, _ = env.step(0)
            if term or trunc:
                break
    finally:
        env.close()


# -------------------- pytest entry points --------------------

def test_api():
    api_check()


def test_smoke():
    smoke_test()


def test_determinism():
    determinism_test()


def test_rgb_array_frame():
    env = GSEnv(render_mode="rgb_array")
    try:
        env.reset(seed=5)
        env.step(0)
        frame = env.render()
        assert frame.shape == (env.height, env.width, 3) and frame.dtype == np.uint8
    finally:
        env.close()


def test_time_limit_truncates():
    env = GSEnv(frame_skip=4, time_limit_seconds=0.2)   # 3 decisions
    try:
        env.reset(seed=1)
        flags = [env.step(0)[3] for _ in range(3)]
        assert flags == [False, False, True]
    finally:
        env.close()


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--seed", type=int, default=123, help="Episode seed for tests")
    ap.add_argument("--steps", type=int, default=300, help="Max decision steps per test")
    ap.add_argument("--frame-skip", type=int, default=4, help="Sim frames per decision step")
    ap.add_argument("--render", action="store_true", help="Run a short visual demo")
    ap.add_argument("--no-api-check", action="store_true", help="Skip Gym API compliance check")
    ap.add_argument("--no-smoke", action="store_true", help="Skip smoke test")
    ap.add_argument("--no-determinism", action="store_true", help="Skip determinism test")
    args = ap.parse_args()

    try:
        if not args.no_api_check:
            api_check(frame_skip=args.frame_skip)
            print("✓ API check ok")
        if not args.no_smoke:
            smoke_test(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip)
            print("✓ Smoke test ok")
        if not args.no_determinism:
            determinism_test(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip)
            print("✓ Determinism ok")
        if args.render:
            render_demo(steps=min(args.steps, 600), seed=args.seed, frame_skip=args.frame_skip)
            print("✓ Render demo finished")
    except AssertionError as e:
        print(f"✗ Test failed: {e}", file=sys.stderr)
        sys.exit(1)
    else:
        print("🎉 All selected tests passed")


if __name__ == "__main__":
    main()
