#!/usr/bin/env python3
"""
Demo season: Schedule → Play every fixture with random scores → Print the table.
Uses the engines directly (no database).
Run from project root: python3 scripts/demo_season.py --teams 5 --seed 7
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from league_manager.models import Participant
from league_manager.rng import SeededRNG
from league_manager.services.results import ResultEntry, record_result
from league_manager.services.scheduling import ScheduleConfig, ScheduleGenerator
from league_manager.services.standings import TieBreak, rank_standings


def _random_result(rng: SeededRNG) -> ResultEntry:
    return ResultEntry(
        home_goals=rng.randint(0, 4),
        away_goals=rng.randint(0, 3),
        home_yellow=rng.randint(0, 3),
        away_yellow=rng.randint(0, 3),
        home_direct_red=rng.choice([0, 0, 0, 0, 1]),
        away_direct_red=rng.choice([0, 0, 0, 0, 1]),
    )


def run(teams: int, seed: int | None, tiebreak: TieBreak) -> None:
    participants = [Participant(id=i, name=f"Team {i + 1}") for i in range(teams)]
    rng = SeededRNG(seed)
    fixtures = ScheduleGenerator(ScheduleConfig(seed=seed), rng=rng).generate(participants)
    names = {p.id: p.name for p in participants}
    print(f"{len(fixtures)} fixtures over {max(f.round for f in fixtures)} rounds (seed={seed})")

    for f in list(fixtures):
        fixtures = record_result(fixtures, f.id, _random_result(rng))
    for f in fixtures:
        print(f"  R{f.round:<3} {names[f.home_id]} {f.home_goals}-{f.away_goals} {names[f.away_id]}")

    print()
    for row in rank_standings(participants, fixtures, tiebreak=tiebreak):
        print(
            f"{row.rank:>3}. {row.name:<10} P{row.played:>3}  W{row.wins:>3} D{row.draws:>3} L{row.losses:>3}  "
            f"GD{row.goal_difference:>4}  Pts{row.points:>4}  Fair play {row.disciplinary_score}"
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Play a random home-and-away season and print the table.")
    parser.add_argument("--teams", type=int, default=6, help="Number of participants")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")
    parser.add_argument("--tiebreak", choices=[t.value for t in TieBreak], default=TieBreak.PAIRWISE.value)
    args = parser.parse_args()
    run(args.teams, args.seed, TieBreak(args.tiebreak))


if __name__ == "__main__":
    main()
