# experiments/sanity_rollout.py
"""
Seeded GSEnv rollouts with a coin-flip player and a spike-dodging rule,
one CSV row per episode.

  python -m experiments.sanity_rollout
  python -m experiments.sanity_rollout --policies dodge --seeds 7,8,9
  python -m experiments.sanity_rollout --policies random --steps 300 --out-dir /tmp/gs
"""

from __future__ import annotations
import argparse
import csv
from pathlib import Path
from typing import Callable, Dict, List, NamedTuple

import numpy as np

from gravity_shift.env.gs_env import GSEnv
from gravity_shift.game.config import FPS

Policy = Callable[[np.ndarray], int]

COLUMNS = [
    "policy", "seed", "frame_skip", "decisions", "return", "score", "coins",
    "died", "timed_out", "flip_ratio",
]


class Episode(NamedTuple):
    decisions: int
    ret: float
    score: int
    coins: int
    died: bool
    timed_out: bool
    flip_ratio: float


def coin_flip_player(seed: int) -> Policy:
    rng = np.random.RandomState(seed)
    return lambda _obs: int(rng.randint(0, 2))


def dodge_player(reach: float = 0.12) -> Policy:
    """Flip when the closest obstacle is within `reach` and sits on our lane."""
    def act(obs: np.ndarray) -> int:
        grav, dx, on_ceiling = obs[2], obs[4], obs[5]
        if dx > reach:
            return 0
        resting_on_ceiling = grav < 0
        return int(resting_on_ceiling == (on_ceiling == 1.0))
    return act


POLICIES: Dict[str, Callable[[int], Policy]] = {
    "random": lambda seed: coin_flip_player(10_000 + seed),
    "dodge": lambda _seed: dodge_player(),
}


def play(policy: Policy, seed: int, frame_skip: int, max_decisions: int) -> Episode:
    env = GSEnv(frame_skip=frame_skip)
    total, flips, n = 0.0, 0, 0
    died = timed_out = False
    info: dict = {}
    try:
        obs, info = env.reset(seed=seed)
        while n < max_decisions and not (died or timed_out):
            action = policy(obs)
            obs, reward, died, timed_out, info = env.step(action)
            total += float(reward)
            flips += action
            n += 1
    finally:
        env.close()
    return Episode(n, total, int(info.get("score", 0)), int(info.get("coins", 0)),
                   bool(died), bool(timed_out), flips / max(1, n))


def append_row(path: Path, row: List) -> None:
    fresh = not path.exists()
    with path.open("a", newline="") as f:
        out = csv.writer(f)
        if fresh:
            out.writerow(COLUMNS)
        out.writerow(row)


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", default="both", choices=["random", "dodge", "both"])
    ap.add_argument("--seeds", default="", help="Comma-separated, default 101..120")
    ap.add_argument("--frame-skip", type=int, default=4)
    ap.add_argument("--steps", type=int, default=10_000, help="Decision cap per episode")
    ap.add_argument("--out-dir", default="experiments/runs")
    args = ap.parse_args()

    seeds = [int(s) for s in args.seeds.split(",") if s.strip()] or list(range(101, 121))
    names = list(POLICIES) if args.policies == "both" else [args.policies]
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    csv_path = out_dir / "episodes.csv"

    print(f"{names} x {len(seeds)} seeds, {FPS / max(1, args.frame_skip):.1f} decisions/s -> {csv_path}")
    for name in names:
        for seed in seeds:
            ep = play(POLICIES[name](seed), seed, args.frame_skip, args.steps)
            append_row(csv_path, [name, seed, args.frame_skip, ep.decisions, f"{ep.ret:.1f}",
                                  ep.score, ep.coins, int(ep.died), int(ep.timed_out),
                                  f"{ep.flip_ratio:.3f}"])
            print(f"[{name}] seed={seed} decisions={ep.decisions} score={ep.score} "
                  f"coins={ep.coins} died={ep.died}")
    print("done")


if __name__ == "__main__":
    main()
