"""
Repository interfaces for league data.
No business logic, only read/write operations.
"""
from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Sequence

from league_manager.models import CardCounts, Fixture, League, LeagueStep, Participant

_FIXTURE_COLS = (
    "id, round, home_id, away_id, played, home_goals, away_goals, "
    "home_yellow, away_yellow, home_second_yellow_red, away_second_yellow_red, "
    "home_direct_red, away_direct_red"
)


def _row_to_fixture(r: sqlite3.Row) -> Fixture:
    return Fixture(
        id=r["id"],
        round=r["round"],
        home_id=r["home_id"],
        away_id=r["away_id"],
        played=bool(r["played"]),
        home_goals=r["home_goals"],
        away_goals=r["away_goals"],
        home_cards=CardCounts(r["home_yellow"], r["home_second_yellow_red"], r["home_direct_red"]),
        away_cards=CardCounts(r["away_yellow"], r["away_second_yellow_red"], r["away_direct_red"]),
    )


# ---------- LeagueRepository ----------


class LeagueRepository:
    """CRUD for leagues. No business logic."""

    def create(
        self,
        conn: sqlite3.Connection,
        name: str,
        num_participants: int,
        step: str = LeagueStep.SETUP,
        id: str | None = None,
    ) -> League:
        lid = id or str(uuid.uuid4())
        now = datetime.now(timezone.utc).isoformat()
        step_value = LeagueStep(step).value
        conn.execute(
            "INSERT INTO leagues (id, name, step, num_participants, created_at) VALUES (?, ?, ?, ?, ?)",
            (lid, name, step_value, num_participants, now),
        )
        conn.commit()
        return League(id=lid, name=name, step=step_value, num_participants=num_participants, created_at=now)

    def get(self, conn: sqlite3.Connection, league_id: str) -> League | None:
        row = conn.execute(
            "SELECT id, name, step, num_participants, created_at FROM leagues WHERE id = ?",
            (league_id,),
        ).fetchone()
        if row is None:
            return None
        return League(
            id=row["id"],
            name=row["name"],
            step=row["step"],
            num_participants=row["num_participants"],
            created_at=row["created_at"],
        )

    def list_all(self, conn: sqlite3.Connection) -> list[League]:
        rows = conn.execute(
            "SELECT id, name, step, num_participants, created_at FROM leagues ORDER BY created_at DESC"
        ).fetchall()
        return [
            League(
                id=r["id"], name=r["name"], step=r["step"],
                num_participants=r["num_participants"], created_at=r["created_at"],
            )
            for r in rows
        ]

    def update_step(self, conn: sqlite3.Connection, league_id: str, step: str) -> None:
        conn.execute("UPDATE leagues SET step = ? WHERE id = ?", (LeagueStep(step).value, league_id))
        conn.commit()

    def update_num_participants(self, conn: sqlite3.Connection, league_id: str, num_participants: int) -> None:
        conn.execute("UPDATE leagues SET num_participants = ? WHERE id = ?", (num_participants, league_id))
        conn.commit()


# ---------- ParticipantRepository ----------


class ParticipantRepository:
    """CRUD for participants. Ids are positions within the league."""

    def replace_all(self, conn: sqlite3.Connection, league_id: str, names: Sequence[str]) -> list[Participant]:
        """Delete the league's participants and insert names as ids 0..n-1, in one transaction."""
        with conn:
            conn.execute("DELETE FROM participants WHERE league_id = ?", (league_id,))
            conn.executemany(
                "INSERT INTO participants (league_id, participant_id, name) VALUES (?, ?, ?)",
                [(league_id, i, name) for i, name in enumerate(names)],
            )
        return [Participant(id=i, name=name) for i, name in enumerate(names)]

    def list_by_league(self, conn: sqlite3.Connection, league_id: str) -> list[Participant]:
        rows = conn.execute(
            "SELECT participant_id, name FROM participants WHERE league_id = ? ORDER BY participant_id",
            (league_id,),
        ).fetchall()
        return [Participant(id=r["participant_id"], name=r["name"]) for r in rows]

    def update_name(self, conn: sqlite3.Connection, league_id: str, participant_id: int, name: str) -> bool:
        """Return False when no such participant exists."""
        cur = conn.execute(
            "UPDATE participants SET name = ? WHERE league_id = ? AND participant_id = ?",
            (name, league_id, participant_id),
        )
        conn.commit()
        return cur.rowcount > 0

    def delete_by_league(self, conn: sqlite3.Connection, league_id: str) -> None:
        conn.execute("DELETE FROM participants WHERE league_id = ?", (league_id,))
        conn.commit()


# ---------- FixtureRepository ----------


class FixtureRepository:
    """CRUD for fixtures. Stored in schedule order (seq)."""

    def create_many(self, conn: sqlite3.Connection, league_id: str, fixtures: Sequence[Fixture]) -> None:
        with conn:
            conn.execute("DELETE FROM fixtures WHERE league_id = ?", (league_id,))
            conn.executemany(
                f"INSERT INTO fixtures (league_id, seq, {_FIXTURE_COLS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    (
                        league_id, seq, f.id, f.round, f.home_id, f.away_id, int(f.played),
                        f.home_goals, f.away_goals,
                        f.home_cards.yellow, f.away_cards.yellow,
                        f.home_cards.second_yellow_red, f.away_cards.second_yellow_red,
                        f.home_cards.direct_red, f.away_cards.direct_red,
                    )
                    for seq, f in enumerate(fixtures)
                ],
            )

    def get(self, conn: sqlite3.Connection, league_id: str, fixture_id: str) -> Fixture | None:
        row = conn.execute(
            f"SELECT {_FIXTURE_COLS} FROM fixtures WHERE league_id = ? AND id = ?",
            (league_id, fixture_id),
        ).fetchone()
        if row is None:
            return None
        return _row_to_fixture(row)

    def list_by_league(self, conn: sqlite3.Connection, league_id: str) -> list[Fixture]:
        rows = conn.execute(
            f"SELECT {_FIXTURE_COLS} FROM fixtures WHERE league_id = ? ORDER BY seq",
            (league_id,),
        ).fetchall()
        return [_row_to_fixture(r) for r in rows]

    def update_result(self, conn: sqlite3.Connection, league_id: str, fixture: Fixture) -> None:
        """Overwrite the stored result of fixture.id with the fixture's current values."""
        conn.execute(
            "UPDATE fixtures SET played = ?, home_goals = ?, away_goals = ?, "
            "home_yellow = ?, away_yellow = ?, home_second_yellow_red = ?, away_second_yellow_red = ?, "
            "home_direct_red = ?, away_direct_red = ? WHERE league_id = ? AND id = ?",
            (
                int(fixture.played), fixture.home_goals, fixture.away_goals,
                fixture.home_cards.yellow, fixture.away_cards.yellow,
                fixture.home_cards.second_yellow_red, fixture.away_cards.second_yellow_red,
                fixture.home_cards.direct_red, fixture.away_cards.direct_red,
                league_id, fixture.id,
            ),
        )
        conn.commit()

    def delete_by_league(self, conn: sqlite3.Connection, league_id: str) -> None:
        conn.execute("DELETE FROM fixtures WHERE league_id = ?", (league_id,))
        conn.commit()
