# /experiments/sanity_rollout.py
"""
Sanity rollouts for HorseDashEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Writes an episodes CSV for notebook analysis
- Optionally saves per-episode action sequences for later analysis

Usage examples (from repo root):
  python -m experiments.sanity_rollout --policies both --save-traces
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333
  python -m experiments.sanity_rollout --policies random --steps 300 --out-dir /tmp/sanity
"""

from __future__ import annotations
import argparse
import csv
import logging
from pathlib import Path
from typing import List, Tuple

import numpy as np

from horse_dash.env.runner_env import HorseDashEnv

logger = logging.getLogger(__name__)


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int, jump_prob: float = 0.1):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        return int(rng.random_sample() < jump_prob)
    return act

def tiny_heuristic_policy_init(trigger_dx: float = 0.06):
    """
    Jump when standing and the nearest obstacle is within `trigger_dx`
    (fraction of screen width) of the player's front edge.
    """
    def act(obs: np.ndarray) -> int:
        on_ground, dx1, h1 = obs[2], obs[4], obs[5]
        return 1 if (on_ground == 1.0 and h1 > 0.0 and dx1 <= trigger_dx) else 0
    return act


# ------------------------ Rollout core ------------------------

def write_episode_row(csv_path: Path, header: List[str], row: List):
    exists = csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if not exists:
            w.writerow(header)
        w.writerow(row)

def run_one_episode(policy_name: str, seed: int, frame_skip: int, steps_limit: int,
                    save_traces: bool, out_dir: Path) -> Tuple[int, float, int, bool, bool]:
    """Returns: (ep_len, ret_sum, score, terminated, truncated)."""
    env = HorseDashEnv(frame_skip=frame_skip)

    if policy_name == "random":
        policy = random_policy_init(10_000 + seed)
    elif policy_name == "heuristic":
        policy = tiny_heuristic_policy_init()
    else:
        raise ValueError("Unknown policy")

    actions: List[int] = []
    ret_sum = 0.0
    ep_len = 0
    term = trunc = False
    info = {}

    try:
        obs, info = env.reset(seed=seed)
        for _ in range(steps_limit):
            a = policy(obs)
            actions.append(int(a))
            obs, r, term, trunc, info = env.step(a)
            ret_sum += float(r)
            ep_len += 1
            if term or trunc:
                break
    finally:
        env.close()

    if save_traces:
        trace_dir = out_dir / "traces" / policy_name
        trace_dir.mkdir(parents=True, exist_ok=True)
        np.save(trace_dir / f"{seed}_actions.npy", np.asarray(actions, dtype=np.int8))

    return ep_len, ret_sum, int(info.get("score", 0)), bool(term), bool(trunc)


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", type=str, default="both",
                    choices=["random", "heuristic", "both"])
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--frame-skip", type=int, default=4)
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Hard cap on decision steps (env may truncate earlier)")
    ap.add_argument("--out-dir", type=str, default="experiments/runs")
    ap.add_argument("--save-traces", action="store_true")
    ap.add_argument("--log-level", default="INFO",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = ap.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(message)s")

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 121))

    episodes_csv = out_dir / "episodes.csv"
    header = ["policy_name", "seed", "frame_skip", "episode_len_decisions",
              "return_sum", "score", "terminated", "truncated"]
    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    logger.info("Running policies=%s on %d seeds (frame_skip=%d)",
                to_run, len(seeds), args.frame_skip)

    for policy_name in to_run:
        for seed in seeds:
            ep_len, ret_sum, score, terminated, truncated = run_one_episode(
                policy_name, seed, args.frame_skip, args.steps, args.save_traces, out_dir)
            write_episode_row(episodes_csv, header, [
                policy_name, seed, args.frame_skip, ep_len, f"{ret_sum:.1f}",
                score, int(terminated), int(truncated),
            ])
            logger.info("[%s] seed=%d len=%d score=%d ret=%.1f term=%s trunc=%s",
                        policy_name, seed, ep_len, score, ret_sum, terminated, truncated)

    logger.info("Sanity rollouts complete")


if __name__ == "__main__":
    main()
