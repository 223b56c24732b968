"""
Command-line host for the league manager.
Run from project root: python -m league_manager.cli --help
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from league_manager.models import Fixture, Participant, StandingsRow
from league_manager.persistence.db import get_connection, init_db, set_db_path
from league_manager.persistence.repositories import LeagueRepository
from league_manager.services.errors import InvalidInput
from league_manager.services.league_service import (
    DEFAULT_LEAGUE_NAME,
    DEFAULT_PARTICIPANTS,
    LeagueNotFoundError,
    LeagueService,
    LeagueStepError,
)
from league_manager.services.scheduling import ScheduleConfig, fixtures_by_round
from league_manager.services.standings import TieBreak

logger = logging.getLogger(__name__)


@contextmanager
def db_conn() -> Generator:
    """Yield a DB connection, ensure close on exit."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


def _emit(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _print_fixtures(fixtures: list[Fixture], participants: list[Participant]) -> None:
    names = {p.id: p.name for p in participants}
    for rnd, matches in fixtures_by_round(fixtures).items():
        print(f"Round {rnd}")
        for f in matches:
            score = f"{f.home_goals} - {f.away_goals}" if f.played else "vs"
            print(f"  [{f.id}] {names.get(f.home_id, '?')} {score} {names.get(f.away_id, '?')}")


def _print_table(rows: list[StandingsRow]) -> None:
    width = max([len(r.name) for r in rows] + [4])
    print(f"{'#':>3}  {'Team':<{width}}  {'P':>3} {'W':>3} {'D':>3} {'L':>3} {'GD':>4} {'GF':>3} {'Pts':>4}  Y/R")
    for r in rows:
        print(
            f"{r.rank:>3}  {r.name:<{width}}  {r.played:>3} {r.wins:>3} {r.draws:>3} {r.losses:>3} "
            f"{r.goal_difference:>4} {r.goals_for:>3} {r.points:>4}  {r.yellow}/{r.second_yellow_red + r.direct_red}"
        )


def cmd_new(args: argparse.Namespace, service: LeagueService) -> None:
    with db_conn() as conn:
        league = service.create_league(conn, name=args.name, num_participants=args.teams)
        participants = service.list_participants(conn, league.id)
    if args.json:
        _emit({"league": league.to_dict(), "participants": [p.to_dict() for p in participants]})
        return
    print(f"Created league {league.name} (id={league.id})")
    for p in participants:
        print(f"  {p.id}: {p.name}")


def cmd_list(args: argparse.Namespace, service: LeagueService) -> None:
    with db_conn() as conn:
        leagues = LeagueRepository().list_all(conn)
    if args.json:
        _emit([lg.to_dict() for lg in leagues])
        return
    for lg in leagues:
        print(f"{lg.id}  {lg.name}  [{lg.step}]  {lg.num_participants} participants")


def cmd_rename(args: argparse.Namespace, service: LeagueService) -> None:
    with db_conn() as conn:
        service.rename_participant(conn, args.league_id, args.participant_id, args.name)
    print(f"Participant {args.participant_id} renamed to {args.name}")


def cmd_start(args: argparse.Namespace, service: LeagueService) -> None:
    config = ScheduleConfig(shuffle=not args.no_shuffle, seed=args.seed)
    with db_conn() as conn:
        fixtures = service.start_league(conn, args.league_id, config)
        participants = service.list_participants(conn, args.league_id)
    if args.json:
        _emit([f.to_dict() for f in fixtures])
        return
    _print_fixtures(fixtures, participants)


def cmd_fixtures(args: argparse.Namespace, service: LeagueService) -> None:
    with db_conn() as conn:
        fixtures = service.list_fixtures(conn, args.league_id)
        participants = service.list_participants(conn, args.league_id)
    if args.round is not None:
        fixtures = [f for f in fixtures if f.round == args.round]
    if args.json:
        _emit([f.to_dict() for f in fixtures])
        return
    _print_fixtures(fixtures, participants)


def cmd_record(args: argparse.Namespace, service: LeagueService) -> None:
    result = {
        "home_goals": args.home_goals,
        "away_goals": args.away_goals,
        "home_yellow": args.home_yellow,
        "away_yellow": args.away_yellow,
        "home_second_yellow_red": args.home_second_yellow_red,
        "away_second_yellow_red": args.away_second_yellow_red,
        "home_direct_red": args.home_direct_red,
        "away_direct_red": args.away_direct_red,
    }
    with db_conn() as conn:
        fixture = service.record_result(conn, args.league_id, args.fixture_id, result)
    if args.json:
        _emit(fixture.to_dict())
        return
    print(f"Recorded {fixture.id}: {fixture.home_goals} - {fixture.away_goals}")


def cmd_table(args: argparse.Namespace, service: LeagueService) -> None:
    with db_conn() as conn:
        rows = service.standings(conn, args.league_id, tiebreak=TieBreak(args.tiebreak))
    if args.json:
        _emit([r.to_dict() for r in rows])
        return
    _print_table(rows)


def cmd_reset(args: argparse.Namespace, service: LeagueService) -> None:
    with db_conn() as conn:
        league = service.reset_league(conn, args.league_id)
    print(f"League {league.id} reset to {league.step}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Home-and-away league manager.")
    parser.add_argument("--db", type=Path, default=None, help="SQLite file (default: $LEAGUE_DB_PATH or ./data/league.db)")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("new", help="Create a league with placeholder names")
    p.add_argument("--name", default=DEFAULT_LEAGUE_NAME)
    p.add_argument("--teams", type=int, default=DEFAULT_PARTICIPANTS, help="Number of participants (>= 2)")
    p.set_defaults(func=cmd_new)

    p = sub.add_parser("list", help="List leagues")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("rename", help="Rename a participant before the league starts")
    p.add_argument("league_id")
    p.add_argument("participant_id", type=int)
    p.add_argument("name")
    p.set_defaults(func=cmd_rename)

    p = sub.add_parser("start", help="Generate the home-and-away schedule")
    p.add_argument("league_id")
    p.add_argument("--seed", type=int, default=None, help="RNG seed for reproducible seeding")
    p.add_argument("--no-shuffle", action="store_true", help="Keep the entered participant order")
    p.set_defaults(func=cmd_start)

    p = sub.add_parser("fixtures", help="Show fixtures")
    p.add_argument("league_id")
    p.add_argument("--round", type=int, default=None)
    p.set_defaults(func=cmd_fixtures)

    p = sub.add_parser("record", help="Record (or overwrite) a result")
    p.add_argument("league_id")
    p.add_argument("fixture_id")
    p.add_argument("home_goals")
    p.add_argument("away_goals")
    for side in ("home", "away"):
        p.add_argument(f"--{side}-yellow", default=0)
        p.add_argument(f"--{side}-second-yellow-red", default=0)
        p.add_argument(f"--{side}-direct-red", default=0)
    p.set_defaults(func=cmd_record)

    p = sub.add_parser("table", help="Show the standings")
    p.add_argument("league_id")
    p.add_argument("--tiebreak", choices=[t.value for t in TieBreak], default=TieBreak.PAIRWISE.value)
    p.set_defaults(func=cmd_table)

    p = sub.add_parser("reset", help="Clear names and fixtures")
    p.add_argument("league_id")
    p.set_defaults(func=cmd_reset)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.db is not None:
        set_db_path(args.db)
    init_db()
    try:
        args.func(args, LeagueService())
    except (InvalidInput, LeagueStepError, LeagueNotFoundError) as e:
        logger.debug(f"{args.command} failed: {e!r}")
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
