"""Command-line entry point: headless simulation, save migration, seed inspection."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from skill_issue.errors import SaveError
from skill_issue.personality import art_style_for_seed, describe_personality, personality_from_seed
from skill_issue.persistence.migrations import CURRENT_SAVE_VERSION, epoch_millis, upgrade
from skill_issue.sim.engine import simulate
from skill_issue.sim.stats import GROUP_BY, aggregate
from skill_issue.sim.strategies import STRATEGIES, get_strategy
from skill_issue.tuning import derived_parameters

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="skill-issue", description="Skill Issue engine tools")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    sim = sub.add_parser("simulate", help="Play weeks headlessly with an automated strategy")
    sim.add_argument("--seed", type=int, default=42, help="First seed (default: 42)")
    sim.add_argument("--runs", type=int, default=1, help="Consecutive seeds to play (default: 1)")
    sim.add_argument("--strategy", choices=sorted(STRATEGIES), default="human",
                     help="Decision strategy (default: human)")
    sim.add_argument("--group-by", choices=GROUP_BY, action="append", default=[],
                     help="Break batch survival down by this dimension (repeatable)")
    sim.add_argument("--json", action="store_true", help="Print JSON instead of text")

    mig = sub.add_parser("migrate", help="Upgrade a save file to the current version")
    mig.add_argument("path", type=Path, help="Save file (JSON)")
    mig.add_argument("--in-place", action="store_true", help="Rewrite the file instead of printing")

    insp = sub.add_parser("inspect-seed", help="Show what a seed derives")
    insp.add_argument("seed", type=int)
    insp.add_argument("--json", action="store_true", help="Print JSON instead of text")
    return p


def _simulate(args: argparse.Namespace) -> int:
    if args.runs < 1:
        print("--runs must be at least 1", file=sys.stderr)
        return 2
    results = [simulate(seed, get_strategy(args.strategy))
               for seed in range(args.seed, args.seed + args.runs)]

    if args.runs == 1:
        result = results[0]
        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
            return 0
        s = result.stats
        print(f"Seed {result.seed} ({describe_personality(result.personality)}), "
              f"strategy {result.strategy}")
        for day in result.days:
            marker = " [all-nighter]" if day.pulled_all_nighter else ""
            print(f"  {day.day:<9} energy {day.energy_start:.2f} -> {day.energy_end:.2f}  "
                  f"momentum {day.momentum_start:.2f} -> {day.momentum_end:.2f}  "
                  f"{len(day.tasks_succeeded)} done, {len(day.tasks_failed)} failed{marker}")
        print(f"{'Survived' if result.survived else 'Burned out'}: "
              f"{s.succeeded}/{s.attempted} tasks, {s.rescues_accepted} rescues, "
              f"{s.phone_checks} phone checks, {result.roll_count} rolls")
        return 0

    batch = aggregate(results, args.group_by)
    if args.json:
        print(json.dumps(batch.to_dict(), indent=2))
        return 0
    print(f"{batch.runs} runs, strategy {args.strategy}")
    print(f"  survival      {batch.survival_rate:.1%}")
    print(f"  energy end    mean {batch.energy_end.mean:.2f}  "
          f"[{batch.energy_end.low:.2f}, {batch.energy_end.high:.2f}]")
    print(f"  momentum end  mean {batch.momentum_end.mean:.2f}  "
          f"[{batch.momentum_end.low:.2f}, {batch.momentum_end.high:.2f}]")
    print(f"  success rate  {batch.success_rate_avg:.1%} of {batch.attempted_avg:.1f} attempts")
    print(f"  rescues       triggered {batch.rescue_triggered_rate:.1%}, "
          f"accepted {batch.rescue_accepted_rate:.1%}")
    print(f"  all-nighters  {batch.all_nighter_rate:.1%}")
    print(f"  phone checks  {batch.phone_checks_avg:.1f}")
    for dimension, entries in batch.groups.items():
        print(f"  by {dimension}:")
        for key, entry in entries.items():
            print(f"    {key:<28} {entry.survival_rate:.1%} of {entry.runs}")
    return 0


def _migrate(args: argparse.Namespace) -> int:
    try:
        raw = json.loads(args.path.read_text(encoding="utf-8"))
        data = upgrade(raw, epoch_millis)
    except OSError as exc:
        print(f"Could not read {args.path}: {exc}", file=sys.stderr)
        return 1
    except (SaveError, ValueError) as exc:
        print(f"Could not migrate {args.path}: {exc}", file=sys.stderr)
        return 1

    text = json.dumps(data.to_dict(), indent=2)
    if args.in_place:
        args.path.write_text(text + "\n", encoding="utf-8")
        logger.info("Wrote version %d save to %s", CURRENT_SAVE_VERSION, args.path)
    else:
        print(text)
    return 0


def _inspect_seed(args: argparse.Namespace) -> int:
    personality = personality_from_seed(args.seed)
    params = derived_parameters(args.seed)
    if args.json:
        print(json.dumps({
            "seed": args.seed,
            "personality": personality.to_dict(),
            "artStyle": art_style_for_seed(args.seed),
            "parameters": params,
        }, indent=2))
        return 0
    print(f"Seed {args.seed}")
    print(f"  personality  {describe_personality(personality)}")
    print(f"  art style    {art_style_for_seed(args.seed)}")
    width = max(len(name) for name in params)
    for name, value in params.items():
        print(f"  {name:<{width}}  {value:+.4f}")
    return 0


_COMMANDS = {
    "simulate": _simulate,
    "migrate": _migrate,
    "inspect-seed": _inspect_seed,
}


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return _COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
