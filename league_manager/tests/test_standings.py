"""
Tests for the standings engine: aggregation, head-to-head, tie-break order.
"""
from __future__ import annotations

from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from league_manager.models import CardCounts, Fixture, Participant
from league_manager.rng import SeededRNG
from league_manager.services.errors import InvalidInput
from league_manager.services.results import ResultEntry, record_result
from league_manager.services.scheduling import generate_schedule
from league_manager.services.standings import (
    DRAW_POINTS,
    WIN_POINTS,
    StandingsEngine,
    TieBreak,
    aggregate,
    compare_rows,
    head_to_head,
    rank_standings,
)

A, B, C, D = 0, 1, 2, 3
ABCD = [Participant(A, "A"), Participant(B, "B"), Participant(C, "C"), Participant(D, "D")]


def played(
    fid: str,
    home: int,
    away: int,
    hg: int,
    ag: int,
    home_cards: CardCounts = CardCounts(),
    away_cards: CardCounts = CardCounts(),
) -> Fixture:
    return Fixture(
        id=fid, round=1, home_id=home, away_id=away, played=True,
        home_goals=hg, away_goals=ag, home_cards=home_cards, away_cards=away_cards,
    )


def _names(rows) -> list[str]:
    return [r.name for r in rows]


class TestAggregation:
    def test_constants(self):
        assert WIN_POINTS == 3
        assert DRAW_POINTS == 1

    def test_win_draw_loss(self):
        rows = aggregate(ABCD, [played("f1", A, B, 2, 1), played("f2", C, D, 1, 1)])
        assert (rows[A].wins, rows[A].points, rows[A].goals_for, rows[A].goals_against) == (1, 3, 2, 1)
        assert (rows[B].losses, rows[B].points, rows[B].goal_difference) == (1, 0, -1)
        assert (rows[C].draws, rows[C].points) == (1, 1)
        assert (rows[D].draws, rows[D].points) == (1, 1)
        assert all(r.played == 1 for r in rows.values())

    def test_unplayed_fixtures_ignored(self):
        stale = Fixture(id="f1", round=1, home_id=A, away_id=B, played=False, home_goals=5, away_goals=0)
        rows = aggregate(ABCD, [stale])
        assert all(r.played == 0 and r.points == 0 and r.goals_for == 0 for r in rows.values())

    def test_disciplinary_score(self):
        cards = CardCounts(yellow=2, second_yellow_red=1, direct_red=1)
        rows = aggregate(ABCD, [played("f1", A, B, 0, 0, home_cards=cards)])
        assert rows[A].disciplinary_score == 2 * 1 + 1 * 3 + 1 * 4
        assert rows[B].disciplinary_score == 0

    def test_points_and_goals_conserved(self):
        participants = [Participant(i, f"Team {i}") for i in range(7)]
        fixtures = generate_schedule(participants, seed=11)
        rng = SeededRNG(5)
        # Leave the last few unplayed
        for f in fixtures[:-4]:
            entry = ResultEntry(home_goals=rng.randint(0, 3), away_goals=rng.randint(0, 3))
            fixtures = record_result(fixtures, f.id, entry)
        rows = rank_standings(participants, fixtures)
        done = [f for f in fixtures if f.played]
        draws = sum(1 for f in done if f.home_goals == f.away_goals)
        decisive = len(done) - draws
        assert sum(r.points for r in rows) == 3 * decisive + 2 * draws
        assert sum(r.goals_for for r in rows) == sum(r.goals_against for r in rows)
        assert sum(r.played for r in rows) == 2 * len(done)

    def test_malformed_played_fixture_rejected(self):
        missing = Fixture(id="f1", round=1, home_id=A, away_id=B, played=True)
        with pytest.raises(InvalidInput):
            rank_standings(ABCD, [missing])
        with pytest.raises(InvalidInput):
            rank_standings(ABCD, [played("f1", A, B, -1, 0)])
        with pytest.raises(InvalidInput):
            rank_standings(ABCD, [played("f1", A, B, 1, 0, away_cards=CardCounts(yellow=-2))])

    def test_unknown_participant_rejected(self):
        with pytest.raises(InvalidInput):
            rank_standings(ABCD, [played("f1", A, 99, 1, 0)])


class TestHeadToHead:
    def test_both_legs_only(self):
        fixtures = [
            played("f1", A, B, 2, 0),
            played("f2", B, A, 1, 0),
            played("f3", A, C, 7, 0),
        ]
        a, b = head_to_head(fixtures, A, B)
        assert (a.points, a.goals_for, a.goals_against, a.goal_difference) == (3, 2, 1, 1)
        assert (b.points, b.goals_for, b.goals_against, b.goal_difference) == (3, 1, 2, -1)

    def test_no_meetings(self):
        a, b = StandingsEngine(ABCD, [played("f1", A, C, 1, 0)]).head_to_head(A, B)
        assert (a.points, a.goals_for, b.points, b.goals_for) == (0, 0, 0, 0)


class TestOrdering:
    def test_no_results_alphabetical(self):
        participants = [Participant(0, "Charlie"), Participant(1, "Alpha"), Participant(2, "Bravo")]
        fixtures = generate_schedule(participants, seed=1)
        rows = rank_standings(participants, fixtures)
        assert _names(rows) == ["Alpha", "Bravo", "Charlie"]
        assert [r.rank for r in rows] == [1, 2, 3]
        assert all(r.points == 0 for r in rows)

    def test_points_first(self):
        rows = rank_standings(ABCD, [played("f1", D, A, 1, 0)])
        assert rows[0].name == "D"

    def test_head_to_head_goal_difference_beats_overall_goal_difference(self):
        """A and B split their meetings, level on points; A wins on head-to-head goal difference."""
        fixtures = [
            played("f1", A, B, 2, 0),
            played("f2", B, A, 1, 0),
            played("f3", B, C, 5, 0),
            played("f4", A, D, 1, 0),
        ]
        rows = rank_standings(ABCD, fixtures)
        assert rows[0].points == rows[1].points == 6
        assert rows[1].goal_difference > rows[0].goal_difference
        assert _names(rows)[:2] == ["A", "B"]

    def test_head_to_head_points(self):
        fixtures = [played("f1", A, B, 1, 0), played("f2", B, C, 4, 0)]
        rows = rank_standings(ABCD, fixtures)
        assert _names(rows)[:2] == ["A", "B"]

    def test_level_head_to_head_falls_through_to_overall(self):
        """Two draws leave head-to-head level; overall goal difference decides, not the name."""
        fixtures = [
            played("f1", A, B, 2, 2),
            played("f2", B, A, 0, 0),
            played("f3", B, C, 3, 0),
            played("f4", A, D, 1, 0),
        ]
        a, b = head_to_head(fixtures, A, B)
        assert (a.points, a.goal_difference, a.goals_for) == (b.points, b.goal_difference, b.goals_for)
        rows = rank_standings(ABCD, fixtures)
        assert rows[0].points == rows[1].points == 5
        assert _names(rows)[:2] == ["B", "A"]

    def test_goal_difference_then_goals_for(self):
        fixtures = [played("f1", A, C, 2, 0), played("f2", B, D, 4, 2)]
        rows = rank_standings(ABCD, fixtures)
        # Equal points and goal difference (+2), B scored more
        assert _names(rows)[:2] == ["B", "A"]
        fixtures = [played("f1", A, C, 3, 0), played("f2", B, D, 4, 2)]
        rows = rank_standings(ABCD, fixtures)
        assert _names(rows)[:2] == ["A", "B"]

    def test_fair_play_breaks_tie(self):
        """Two yellows (2) rank above one direct red (4) when all else is level."""
        zulu, alpha = Participant(0, "Zulu"), Participant(1, "Alpha")
        fixtures = [
            played("f1", zulu.id, alpha.id, 1, 1, home_cards=CardCounts(yellow=2)),
            played("f2", alpha.id, zulu.id, 0, 0, home_cards=CardCounts(direct_red=1)),
        ]
        rows = rank_standings([alpha, zulu], fixtures)
        assert _names(rows) == ["Zulu", "Alpha"]
        assert (rows[0].disciplinary_score, rows[1].disciplinary_score) == (2, 4)

    def test_name_is_final_fallback(self):
        rows = rank_standings([Participant(0, "b"), Participant(1, "a")], [played("f1", 0, 1, 1, 1)])
        assert _names(rows) == ["a", "b"]

    def test_name_order_ignores_case(self):
        participants = [Participant(0, "charlie"), Participant(1, "Bravo"), Participant(2, "alpha")]
        assert _names(rank_standings(participants, [])) == ["alpha", "Bravo", "charlie"]
        mini = rank_standings(participants, [], tiebreak=TieBreak.MINI_TABLE)
        assert _names(mini) == ["alpha", "Bravo", "charlie"]

    def test_names_differing_only_in_case_are_ordered_deterministically(self):
        for participants in (
            [Participant(0, "alpha"), Participant(1, "Alpha")],
            [Participant(1, "Alpha"), Participant(0, "alpha")],
        ):
            assert _names(rank_standings(participants, [])) == ["Alpha", "alpha"]

    def test_rank_is_idempotent(self):
        fixtures = [
            played("f1", A, B, 2, 0),
            played("f2", B, A, 1, 0),
            played("f3", C, D, 0, 0),
        ]
        engine = StandingsEngine(ABCD, fixtures)
        first = [r.to_dict() for r in engine.rank()]
        second = [r.to_dict() for r in engine.rank()]
        assert first == second

    def test_identical_rows_keep_input_order(self):
        same = [Participant(5, "Same"), Participant(2, "Same")]
        rows = rank_standings(same, [])
        assert [r.participant_id for r in rows] == [5, 2]

    def test_inputs_not_mutated(self):
        fixtures = [played("f1", A, B, 2, 0)]
        snapshot = list(fixtures)
        participants = list(ABCD)
        rank_standings(participants, fixtures)
        assert fixtures == snapshot
        assert participants == ABCD

    def test_pairwise_comparator_is_not_transitive_on_cycles(self):
        """A beat B, B beat C, C beat A: every pairwise comparison prefers the winner."""
        fixtures = [played("f1", A, B, 1, 0), played("f2", B, C, 1, 0), played("f3", C, A, 1, 0)]
        rows = aggregate(ABCD[:3], fixtures)
        assert compare_rows(rows[A], rows[B], fixtures) < 0
        assert compare_rows(rows[B], rows[C], fixtures) < 0
        assert compare_rows(rows[C], rows[A], fixtures) < 0
        ranked = rank_standings(ABCD[:3], fixtures)
        assert sorted(_names(ranked)) == ["A", "B", "C"]
        assert [r.rank for r in ranked] == [1, 2, 3]


class TestMiniTable:
    def test_cycle_resolved_by_mini_table(self):
        fixtures = [played("f1", A, B, 3, 0), played("f2", B, C, 2, 0), played("f3", C, A, 1, 0)]
        rows = rank_standings(ABCD[:3], fixtures, tiebreak=TieBreak.MINI_TABLE)
        # Mini-table: A +2, B -1 (2 scored), C -1 (1 scored)
        assert _names(rows) == ["A", "B", "C"]

    def test_agrees_with_pairwise_for_two_level_teams(self):
        fixtures = [
            played("f1", A, B, 2, 0),
            played("f2", B, A, 1, 0),
            played("f3", B, C, 5, 0),
            played("f4", A, D, 1, 0),
        ]
        pairwise = rank_standings(ABCD, fixtures)
        mini = rank_standings(ABCD, fixtures, tiebreak="mini_table")
        assert _names(pairwise) == _names(mini)

    def test_mini_table_reapplied_to_smaller_subset(self):
        """
        A, B, C level on points. A tops the three-way mini-table; B and C are level
        there and are then separated by their own meeting, not by overall goal difference.
        """
        fixtures = [
            played("f1", A, B, 3, 0),
            played("f2", C, A, 2, 1),
            played("f3", B, C, 2, 0),
            played("f4", A, D, 1, 0),
            played("f5", B, D, 1, 0),
            played("f6", C, D, 5, 0),
        ]
        rows = rank_standings(ABCD, fixtures, tiebreak=TieBreak.MINI_TABLE)
        assert [r.points for r in rows[:3]] == [6, 6, 6]
        assert _names(rows)[:3] == ["A", "B", "C"]
        # C has the better overall goal difference
        by_name = {r.name: r for r in rows}
        assert by_name["C"].goal_difference > by_name["B"].goal_difference
