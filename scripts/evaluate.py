#!/usr/bin/env python3
"""
TTK Evaluation Runner

Evaluates catalog weapons at every listed distance and prints a table
(or JSON) of theoretical TTK, expected TTK, Kill@W and accuracy.

Usage:
    # One weapon, default skill
    python scripts/evaluate.py --weapon M4

    # Several weapons, better player, more trials
    python scripts/evaluate.py --weapon M4 --weapon AK-47 --skill 0.05 --trials 500

    # Single distance, explicit seed, JSON output
    python scripts/evaluate.py --weapon M4 --distance 50 --seed 42 --json
"""

import sys
import os
import json
import math
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ttklab.config import get_settings
from ttklab.services.batch_evaluator import EvaluationConfig, evaluate
from ttklab.services.rng import RNG, rng_for
from ttklab.services.weapon_catalog import CatalogError, WeaponCatalog


def format_seconds(value: float) -> str:
    return "   no kill" if math.isinf(value) else f"{value:9.3f}s"


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Evaluate weapon time-to-kill")
    parser.add_argument("--weapon", "-w", action="append", required=True,
                        help="Weapon name (repeatable)")
    parser.add_argument("--distance", "-d", type=float, default=None,
                        help="Only evaluate this distance (must be listed for the weapon)")
    parser.add_argument("--skill", "-s", type=float, default=0.10,
                        help="Player aim jitter in degrees (0.01 pro .. 0.30 casual)")
    parser.add_argument("--trials", "-t", type=int, default=settings.default_trials)
    parser.add_argument("--kill-window", type=float, default=settings.default_kill_window)
    parser.add_argument("--seed", type=int, default=None,
                        help="Fixed seed; default derives one per weapon/distance/skill")
    parser.add_argument("--catalog", type=Path, default=settings.catalog_path)
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    args = parser.parse_args()

    try:
        catalog = WeaponCatalog.load(args.catalog)
        weapons = catalog.select(args.weapon)
    except (CatalogError, KeyError, FileNotFoundError) as e:
        parser.error(str(e))

    config = EvaluationConfig(
        trials=args.trials,
        kill_window=args.kill_window,
        max_shots=settings.default_max_shots,
        sample_count=settings.default_sample_count,
    )

    output = {}
    for weapon in weapons:
        distances = [args.distance] if args.distance is not None else weapon.distances
        rows = {}
        for distance in distances:
            try:
                profile = weapon.profile_at(distance, hp=settings.hp, target_radius=settings.target_radius)
            except KeyError as e:
                parser.error(str(e.args[0]))
            rng = RNG(args.seed) if args.seed is not None else rng_for(weapon.name, distance, args.skill)
            rows[distance] = evaluate(profile, args.skill, config, rng=rng)
        output[weapon.name] = rows

    if args.json:
        print(json.dumps({
            name: {f"{d:g}": {k: (None if math.isinf(v) else v) for k, v in r.to_dict().items()}
                   for d, r in rows.items()}
            for name, rows in output.items()
        }, indent=2))
        return

    print(f"Skill {args.skill:.2f} deg | {args.trials} trials | window {args.kill_window:g}s")
    print(f"{'WEAPON':<12}{'DIST':>6}{'TTK':>11}{'ETTK':>11}{'KILL@W':>9}{'AUC@W':>8}{'ACC':>8}")
    for name, rows in output.items():
        for distance, r in rows.items():
            print(
                f"{name:<12}{distance:>5g}m{format_seconds(r.ttk):>11}{format_seconds(r.ettk):>11}"
                f"{r.kill_probability:>9.2f}{r.auc:>8.2f}{r.accuracy * 100:>7.1f}%"
            )


if __name__ == "__main__":
    main()
