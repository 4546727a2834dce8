from __future__ import annotations

from typing import List, Optional
import argparse
import asyncio
import json
import logging

from .config import EngineConfig, load_config
from .controller import RunController, RunSnapshot, run_until_done
from .errors import ConfigError
from .sample_goals import sample_goal_and_constraints
from .scheduler import ManualScheduler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resonance-engine",
        description="Run the goal decomposition and resonance iteration loop.",
    )
    parser.add_argument("--goal", help="goal text (defaults to the sample goal)")
    parser.add_argument("--constraint", action="append", default=None, dest="constraints",
                        help="constraint text, repeatable")
    parser.add_argument("--seed", type=int, default=None, help="seed for the random source")
    parser.add_argument("--config", default=None, help="TOML file with an [engine] table")
    parser.add_argument("--instant", action="store_true", help="run ticks back to back on a virtual clock")
    parser.add_argument("--json", action="store_true", help="print the final snapshot as JSON")
    parser.add_argument("--log-level", default="WARNING", help="logging level (default: WARNING)")
    return parser


def run(goal: str, constraints: List[str], config: EngineConfig, seed: Optional[int], instant: bool) -> RunSnapshot:
    if instant:
        scheduler = ManualScheduler()
        controller = RunController(scheduler=scheduler, config=config, seed=seed)
        controller.start(goal, constraints)
        scheduler.run_until_idle()
        return controller.snapshot()
    controller = RunController(config=config, seed=seed)
    return asyncio.run(run_until_done(controller, goal, constraints))


def print_report(snap: RunSnapshot) -> None:
    print(f"Goal: {snap.goal}")
    print(f"Outcome: {snap.state.value} after {len(snap.iterations)} iterations "
          f"({snap.progress_to_target:.1f}% of target)")
    print("Iteration history:")
    for it in snap.iterations:
        print(f"  {it.id:02d}. best={it.best_probability:.6f} resonance={it.resonance_score:.2f} "
              f"rate={it.convergence_rate:+.6f}{' complete' if it.is_complete else ''}")
    best = snap.resonance_data.best_combination
    if best is not None:
        print("Best combination:")
        for index in best.subgoal_indices:
            print(f"  [{index}] {snap.subgoals[index].text}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    sample_goal, sample_constraints = sample_goal_and_constraints()
    goal = args.goal if args.goal is not None else sample_goal
    constraints = args.constraints if args.constraints is not None else sample_constraints

    try:
        config = load_config(args.config) if args.config else EngineConfig()
    except ConfigError as exc:
        logging.getLogger(__name__).error("%s", exc)
        return 2

    snap = run(goal, constraints, config, args.seed, args.instant)
    if args.json:
        print(json.dumps(snap.to_dict(), indent=2))
    else:
        print_report(snap)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
