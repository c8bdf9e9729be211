# /experiments/sanity_rollout.py
"""
Sanity rollouts for RunnerEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Writes an episodes CSV for notebook analysis
- Saves per-episode action sequences (and optionally observations) for exact replay

Usage examples (from repo root):
  # Run both policies over 20 default seeds, frame_skip=4, save traces:
  python -m experiments.sanity_rollout --policies both --save-traces

  # Only heuristic, custom seeds, also save observations for deeper debugging:
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333 --save-traces --save-obs

  # Quick random-only smoke with fewer steps and no files:
  python -m experiments.sanity_rollout --policies random --steps 300 --out-dir /tmp/sanity
"""

from __future__ import annotations
import argparse
import csv
from pathlib import Path
from typing import List, Tuple

import numpy as np

from catrunner.env.observations import OBS_SIZE
from catrunner.env.runner_env import RunnerEnv


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int, jump_prob: float = 0.1):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        return int(rng.random_sample() < jump_prob)
    return act

def tiny_heuristic_policy_init(trigger_dx: float = 0.09):
    """
    Very small rule: when grounded, jump once the nearest obstacle is within
    `trigger_dx` (fraction of screen width), unless it is a bird flying high
    enough to run under.
    """
    def act(obs: np.ndarray) -> int:
        grounded = obs[2] > 0.5
        # Nearest obstacle block lives at indices 4..7: dx, w, top, lift
        dx, _w, _top, lift = obs[4], obs[5], obs[6], obs[7]
        if not grounded:
            return 0
        runs_under = lift > 0.3   # cat is 48 px tall -> 0.3 of the 160 px scale
        return 1 if (dx < trigger_dx and not runs_under) else 0
    return act


# ------------------------ Rollout core ------------------------

def ensure_dir(p: Path):
    p.mkdir(parents=True, exist_ok=True)

def write_episode_row(csv_path: Path, header: List[str], row: List):
    exists = csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if not exists:
            w.writerow(header)
        w.writerow(row)

def run_one_episode(policy_name: str,
                    seed: int,
                    frame_skip: int,
                    steps_limit: int,
                    save_traces: bool,
                    save_obs: bool,
                    out_dir: Path) -> Tuple[int, float, int, int, bool, bool, int]:
    """
    Returns: (ep_len, ret_sum, score, level, terminated, truncated, jumps)
    Also writes traces to disk if requested.
    """
    env = RunnerEnv(frame_skip=frame_skip)

    if policy_name == "random":
        # Make action RNG seed a function of seed for determinism
        action_seed = 10_000 + seed
        policy = random_policy_init(action_seed)
    elif policy_name == "heuristic":
        action_seed = -1
        policy = tiny_heuristic_policy_init()
    else:
        raise ValueError(f"Unknown policy {policy_name!r}")

    actions: List[int] = []
    obs_list: List[np.ndarray] = []

    ret_sum = 0.0
    ep_len = 0
    jumps = 0
    term = trunc = False
    info = {}

    try:
        obs, info = env.reset(seed=seed)
        if save_obs:
            obs_list.append(obs.copy())

        for _ in range(steps_limit):
            a = policy(obs)
            actions.append(int(a))

            obs, r, term, trunc, info = env.step(a)
            ret_sum += float(r)
            ep_len += 1
            jumps += int(bool(info.get("jumped", False)))

            if save_obs:
                obs_list.append(obs.copy())

            if term or trunc:
                break
    finally:
        env.close()

    if save_traces:
        trace_dir = out_dir / "traces" / policy_name
        ensure_dir(trace_dir)
        np.save(trace_dir / f"{seed}_actions.npy", np.asarray(actions, dtype=np.int8))
        if save_obs:
            np.save(trace_dir / f"{seed}_obs.npy", np.asarray(obs_list, dtype=np.float32))

        meta_lines = [
            f"seed={seed}",
            f"frame_skip={frame_skip}",
            f"policy={policy_name}",
            f"action_rng_seed={action_seed}",
            f"steps_limit={steps_limit}",
        ]
        (trace_dir / f"{seed}_meta.txt").write_text("\n".join(meta_lines), encoding="utf-8")

    score = int(info.get("score", 0))
    level = int(info.get("level", 1))
    return ep_len, ret_sum, score, level, bool(term), bool(trunc), jumps


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", type=str, default="both",
                    choices=["random", "heuristic", "both"],
                    help="Which policy to run")
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--frame-skip", type=int, default=4,
                    help="Sim frames per decision step")
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Hard cap on decision steps (env may truncate earlier)")
    ap.add_argument("--out-dir", type=str, default="experiments/runs",
                    help="Directory to store episodes.csv and traces/")
    ap.add_argument("--save-traces", action="store_true",
                    help="Save action sequences (and optional obs) for replay")
    ap.add_argument("--save-obs", action="store_true",
                    help="Also save observations per step (larger files)")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    ensure_dir(out_dir)

    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 121))

    episodes_csv = out_dir / "episodes.csv"
    header = [
        "env_name", "obs_size", "policy_name", "seed",
        "frame_skip", "decision_hz",
        "episode_len_decisions", "return_sum", "score", "level",
        "terminated", "truncated", "jumps",
    ]
    sim_fps = 60
    decision_hz = sim_fps / max(1, args.frame_skip)

    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    print(f"Running policies={to_run} on {len(seeds)} seeds "
          f"(frame_skip={args.frame_skip}, decision_hz≈{decision_hz:.1f})")
    print(f"Writing summaries to {episodes_csv} and traces under {out_dir}/traces/")

    for policy_name in to_run:
        for seed in seeds:
            ep_len, ret_sum, score, level, terminated, truncated, jumps = run_one_episode(
                policy_name=policy_name,
                seed=seed,
                frame_skip=args.frame_skip,
                steps_limit=args.steps,
                save_traces=args.save_traces,
                save_obs=args.save_obs,
                out_dir=out_dir
            )

            row = [
                "RunnerEnv", OBS_SIZE, policy_name, seed,
                args.frame_skip, decision_hz,
                ep_len, f"{ret_sum:.1f}", score, level,
                int(terminated), int(truncated), jumps,
            ]
            write_episode_row(episodes_csv, header, row)

            print(f"[{policy_name}] seed={seed}  len={ep_len}  score={score}  level={level}  "
                  f"ret={ret_sum:.1f}  term={terminated} trunc={truncated}  jumps={jumps}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
