"""
League table: aggregation of played fixtures and tie-break ordering.

Ordering criteria, first non-tied criterion wins:
  1. points (desc)
  2. head-to-head between the two participants compared: points, goal difference, goals for (desc)
  3. goal difference (desc)
  4. goals for (desc)
  5. goals against (asc)
  6. disciplinary score (asc): yellow 1, red from second yellow 3, direct red 4
  7. name (asc, case-insensitive)

Criterion 2 is evaluated per pairwise comparison, not as a mini-league among all
tied teams. With a three-way head-to-head cycle (A beat B, B beat C, C beat A)
the comparator is not transitive and the order is whatever the sort's
comparisons produce. TieBreak.MINI_TABLE is the opt-in total-order alternative.
"""
from __future__ import annotations

import logging
from enum import Enum
from functools import cmp_to_key
from typing import Sequence

from league_manager.models import CardCounts, Fixture, HeadToHead, Participant, StandingsRow
from league_manager.services.errors import InvalidInput

logger = logging.getLogger(__name__)

# ---------- Match points ----------
WIN_POINTS = 3
DRAW_POINTS = 1
LOSS_POINTS = 0


class TieBreak(str, Enum):
    """How level-on-points participants are separated by head-to-head results."""
    PAIRWISE = "pairwise"      # Direct fixtures between the two being compared
    MINI_TABLE = "mini_table"  # Mini-league among every participant level on points


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _match_points(goals_for: int, goals_against: int) -> int:
    if goals_for > goals_against:
        return WIN_POINTS
    if goals_for < goals_against:
        return LOSS_POINTS
    return DRAW_POINTS


def _check_count(value: object, label: str, fixture_id: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInput(f"Fixture {fixture_id}: {label} must be a non-negative integer (got {value!r})")


def validate_played_fixture(fixture: Fixture, known_ids: set[int]) -> None:
    """Raise InvalidInput if a played fixture cannot be aggregated."""
    if fixture.home_id not in known_ids or fixture.away_id not in known_ids:
        raise InvalidInput(f"Fixture {fixture.id} references an unknown participant")
    if fixture.home_id == fixture.away_id:
        raise InvalidInput(f"Fixture {fixture.id}: a participant cannot play itself")
    _check_count(fixture.home_goals, "home_goals", fixture.id)
    _check_count(fixture.away_goals, "away_goals", fixture.id)
    for side, cards in (("home", fixture.home_cards), ("away", fixture.away_cards)):
        _check_count(cards.yellow, f"{side} yellow", fixture.id)
        _check_count(cards.second_yellow_red, f"{side} second_yellow_red", fixture.id)
        _check_count(cards.direct_red, f"{side} direct_red", fixture.id)


def _apply_side(row: StandingsRow, goals_for: int, goals_against: int, cards: CardCounts) -> None:
    row.played += 1
    row.goals_for += goals_for
    row.goals_against += goals_against
    row.yellow += cards.yellow
    row.second_yellow_red += cards.second_yellow_red
    row.direct_red += cards.direct_red
    pts = _match_points(goals_for, goals_against)
    row.points += pts
    if pts == WIN_POINTS:
        row.wins += 1
    elif pts == DRAW_POINTS:
        row.draws += 1
    else:
        row.losses += 1


def aggregate(participants: Sequence[Participant], fixtures: Sequence[Fixture]) -> dict[int, StandingsRow]:
    """
    One row per participant, keyed by participant id, in participant order.
    Unplayed fixtures contribute nothing. Raises InvalidInput on malformed played fixtures.
    """
    rows: dict[int, StandingsRow] = {}
    for p in participants:
        if p.id in rows:
            raise InvalidInput(f"Duplicate participant id: {p.id}")
        rows[p.id] = StandingsRow(participant_id=p.id, name=p.name)
    known = set(rows)
    for f in fixtures:
        if not f.played:
            continue
        validate_played_fixture(f, known)
        _apply_side(rows[f.home_id], f.home_goals, f.away_goals, f.home_cards)
        _apply_side(rows[f.away_id], f.away_goals, f.home_goals, f.away_cards)
    return rows


def head_to_head(fixtures: Sequence[Fixture], a_id: int, b_id: int) -> tuple[HeadToHead, HeadToHead]:
    """Records of a and b over the played fixtures between exactly those two (both legs)."""
    a, b = HeadToHead(), HeadToHead()
    for f in fixtures:
        if not f.played:
            continue
        if f.home_id == a_id and f.away_id == b_id:
            a_goals, b_goals = f.home_goals, f.away_goals
        elif f.home_id == b_id and f.away_id == a_id:
            a_goals, b_goals = f.away_goals, f.home_goals
        else:
            continue
        a.goals_for += a_goals
        a.goals_against += b_goals
        b.goals_for += b_goals
        b.goals_against += a_goals
        a.points += _match_points(a_goals, b_goals)
        b.points += _match_points(b_goals, a_goals)
    return a, b


def _name_key(name: str) -> tuple[str, str]:
    # Case-insensitive, raw name decides between e.g. "alpha" and "Alpha"
    return (name.casefold(), name)


def compare_overall(a: StandingsRow, b: StandingsRow) -> int:
    """Criteria 3-7. Negative means a ranks above b."""
    if a.goal_difference != b.goal_difference:
        return b.goal_difference - a.goal_difference
    if a.goals_for != b.goals_for:
        return b.goals_for - a.goals_for
    if a.goals_against != b.goals_against:
        return a.goals_against - b.goals_against
    if a.disciplinary_score != b.disciplinary_score:
        return a.disciplinary_score - b.disciplinary_score
    a_name, b_name = _name_key(a.name), _name_key(b.name)
    if a_name != b_name:
        return -1 if a_name < b_name else 1
    return 0


def compare_rows(a: StandingsRow, b: StandingsRow, fixtures: Sequence[Fixture]) -> int:
    """Full pairwise comparator (criteria 1-7). Negative means a ranks above b."""
    if a.points != b.points:
        return b.points - a.points
    a_h2h, b_h2h = head_to_head(fixtures, a.participant_id, b.participant_id)
    if a_h2h.points != b_h2h.points:
        return b_h2h.points - a_h2h.points
    if a_h2h.goal_difference != b_h2h.goal_difference:
        return b_h2h.goal_difference - a_h2h.goal_difference
    if a_h2h.goals_for != b_h2h.goals_for:
        return b_h2h.goals_for - a_h2h.goals_for
    return compare_overall(a, b)


# ---------- Mini-table tie-break ----------


def _mini_table(group: list[StandingsRow], fixtures: Sequence[Fixture]) -> dict[int, HeadToHead]:
    """Points/goals among the group only, from played fixtures between group members."""
    ids = {r.participant_id for r in group}
    table = {pid: HeadToHead() for pid in ids}
    for f in fixtures:
        if not f.played or f.home_id not in ids or f.away_id not in ids:
            continue
        home, away = table[f.home_id], table[f.away_id]
        home.goals_for += f.home_goals
        home.goals_against += f.away_goals
        away.goals_for += f.away_goals
        away.goals_against += f.home_goals
        home.points += _match_points(f.home_goals, f.away_goals)
        away.points += _match_points(f.away_goals, f.home_goals)
    return table


def _order_level_group(group: list[StandingsRow], fixtures: Sequence[Fixture]) -> list[StandingsRow]:
    """Order participants level on points: mini-table, reapplied to smaller tied subsets, then overall."""
    if len(group) < 2:
        return list(group)
    table = _mini_table(group, fixtures)

    def key(r: StandingsRow) -> tuple[int, int, int]:
        h = table[r.participant_id]
        return (-h.points, -h.goal_difference, -h.goals_for)

    ordered: list[StandingsRow] = []
    by_key: dict[tuple[int, int, int], list[StandingsRow]] = {}
    for r in sorted(group, key=key):
        by_key.setdefault(key(r), []).append(r)
    for subset in by_key.values():
        if 1 < len(subset) < len(group):
            ordered.extend(_order_level_group(subset, fixtures))
        else:
            ordered.extend(sorted(subset, key=cmp_to_key(compare_overall)))
    return ordered


def _sort_mini_table(rows: list[StandingsRow], fixtures: Sequence[Fixture]) -> list[StandingsRow]:
    groups: dict[int, list[StandingsRow]] = {}
    for r in sorted(rows, key=lambda r: -r.points):
        groups.setdefault(r.points, []).append(r)
    ordered: list[StandingsRow] = []
    for group in groups.values():
        ordered.extend(_order_level_group(group, fixtures))
    return ordered


# ---------- StandingsEngine ----------


class StandingsEngine:
    """
    Ranks participants from the current fixtures.
    Pure and idempotent: inputs are never mutated, every rank() call builds fresh rows.
    """

    def __init__(
        self,
        participants: Sequence[Participant],
        fixtures: Sequence[Fixture],
        tiebreak: TieBreak = TieBreak.PAIRWISE,
    ) -> None:
        self._participants = list(participants)
        self._fixtures = list(fixtures)
        self._tiebreak = TieBreak(tiebreak)

    def head_to_head(self, a_id: int, b_id: int) -> tuple[HeadToHead, HeadToHead]:
        return head_to_head(self._fixtures, a_id, b_id)

    def rank(self) -> list[StandingsRow]:
        rows = list(aggregate(self._participants, self._fixtures).values())
        played = [f for f in self._fixtures if f.played]
        if self._tiebreak is TieBreak.MINI_TABLE:
            ordered = _sort_mini_table(rows, played)
        else:
            ordered = sorted(rows, key=cmp_to_key(lambda a, b: _sign(compare_rows(a, b, played))))
        for i, row in enumerate(ordered, start=1):
            row.rank = i
        logger.debug(f"Ranked {len(ordered)} participants from {len(played)} played fixtures ({self._tiebreak.value})")
        return ordered


def rank_standings(
    participants: Sequence[Participant],
    fixtures: Sequence[Fixture],
    tiebreak: TieBreak = TieBreak.PAIRWISE,
) -> list[StandingsRow]:
    """Ordered standings table (rank 1 first)."""
    return StandingsEngine(participants, fixtures, tiebreak=tiebreak).rank()
