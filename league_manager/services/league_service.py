"""
League-centric service: setup wizard state machine, scheduling, result entry, table.
The scheduling and standings engines stay pure; this layer loads snapshots from
the repositories, calls the engines, and writes back.
"""
from __future__ import annotations

import logging
import sqlite3
from typing import Any

from league_manager.models import Fixture, League, LeagueStep, Participant, StandingsRow
from league_manager.persistence.repositories import (
    FixtureRepository,
    LeagueRepository,
    ParticipantRepository,
)
from league_manager.services.errors import InvalidInput
from league_manager.services.results import ResultEntry, apply_result, parse_result
from league_manager.services.scheduling import MIN_PARTICIPANTS, ScheduleConfig, ScheduleGenerator
from league_manager.services.standings import StandingsEngine, TieBreak

logger = logging.getLogger(__name__)

DEFAULT_PARTICIPANTS = 6
DEFAULT_LEAGUE_NAME = "League"

# ---------- Exceptions ----------


class LeagueNotFoundError(ValueError):
    """No league with the given id."""


class LeagueStepError(ValueError):
    """Operation not allowed in the league's current step (e.g. recording results before start)."""


# ---------- Valid transitions ----------

_VALID_TRANSITIONS: dict[str, set[str]] = {
    LeagueStep.SETUP: {LeagueStep.NAMING},
    LeagueStep.NAMING: {LeagueStep.SETUP, LeagueStep.ACTIVE},  # back, or start
    LeagueStep.ACTIVE: {LeagueStep.SETUP},  # reset
}


def default_name(index: int) -> str:
    """Placeholder name for the participant at 0-based index."""
    return f"Team {index + 1}"


def _validate_count(num_participants: Any) -> int:
    try:
        n = int(num_participants)
    except (TypeError, ValueError):
        raise InvalidInput(f"Participant count must be an integer (got {num_participants!r})") from None
    if n < MIN_PARTICIPANTS:
        raise InvalidInput(f"Need at least {MIN_PARTICIPANTS} participants (got {n})")
    return n


# ---------- LeagueService ----------


class LeagueService:
    """
    Domain logic for the league wizard: setup → naming → active.
    Persistence is delegated to repositories.
    """

    def __init__(self) -> None:
        self._league_repo = LeagueRepository()
        self._participant_repo = ParticipantRepository()
        self._fixture_repo = FixtureRepository()

    def get_league(self, conn: sqlite3.Connection, league_id: str) -> League:
        league = self._league_repo.get(conn, league_id)
        if league is None:
            raise LeagueNotFoundError(f"League not found: {league_id}")
        return league

    def transition_step(self, conn: sqlite3.Connection, league_id: str, new_step: str) -> None:
        """Move the league to new_step if the wizard allows it."""
        league = self.get_league(conn, league_id)
        current = LeagueStep(league.step)
        target = LeagueStep(new_step)
        allowed = _VALID_TRANSITIONS.get(current, set())
        if target not in allowed:
            raise LeagueStepError(
                f"Invalid transition: {current.value} -> {target.value}. "
                f"Allowed from {current.value}: {sorted(s.value for s in allowed)}"
            )
        self._league_repo.update_step(conn, league_id, new_step)

    def assert_step(self, conn: sqlite3.Connection, league_id: str, step: str) -> League:
        """Raise LeagueStepError unless the league is in step."""
        league = self.get_league(conn, league_id)
        if league.step != step:
            raise LeagueStepError(f"League must be in step '{LeagueStep(step).value}' (current: {league.step})")
        return league

    # ---------- Setup & naming ----------

    def create_league(
        self,
        conn: sqlite3.Connection,
        name: str = DEFAULT_LEAGUE_NAME,
        num_participants: int = DEFAULT_PARTICIPANTS,
    ) -> League:
        """Create a league and move straight to naming with placeholder names."""
        n = _validate_count(num_participants)
        league = self._league_repo.create(conn, name, n)
        return self.begin_naming(conn, league.id)

    def resize(self, conn: sqlite3.Connection, league_id: str, num_participants: int) -> League:
        """Change the participant count (setup step only)."""
        self.assert_step(conn, league_id, LeagueStep.SETUP)
        n = _validate_count(num_participants)
        self._league_repo.update_num_participants(conn, league_id, n)
        return self.get_league(conn, league_id)

    def begin_naming(self, conn: sqlite3.Connection, league_id: str) -> League:
        """setup -> naming: one placeholder participant per slot."""
        league = self.assert_step(conn, league_id, LeagueStep.SETUP)
        names = [default_name(i) for i in range(league.num_participants)]
        self._participant_repo.replace_all(conn, league_id, names)
        self.transition_step(conn, league_id, LeagueStep.NAMING)
        return self.get_league(conn, league_id)

    def rename_participant(self, conn: sqlite3.Connection, league_id: str, participant_id: int, name: str) -> None:
        """Names can only change before the schedule exists."""
        self.assert_step(conn, league_id, LeagueStep.NAMING)
        if not self._participant_repo.update_name(conn, league_id, participant_id, name):
            raise InvalidInput(f"Participant not found: {participant_id}")

    def back_to_setup(self, conn: sqlite3.Connection, league_id: str) -> League:
        """naming -> setup. Names are discarded."""
        self.assert_step(conn, league_id, LeagueStep.NAMING)
        self._participant_repo.delete_by_league(conn, league_id)
        self.transition_step(conn, league_id, LeagueStep.SETUP)
        return self.get_league(conn, league_id)

    def list_participants(self, conn: sqlite3.Connection, league_id: str) -> list[Participant]:
        self.get_league(conn, league_id)
        return self._participant_repo.list_by_league(conn, league_id)

    # ---------- Start league & scheduling ----------

    def start_league(
        self,
        conn: sqlite3.Connection,
        league_id: str,
        config: ScheduleConfig | None = None,
    ) -> list[Fixture]:
        """
        naming -> active. Blank names fall back to placeholders, then the full
        double round-robin is generated and stored.
        """
        self.assert_step(conn, league_id, LeagueStep.NAMING)
        stored = self._participant_repo.list_by_league(conn, league_id)
        names = [p.name.strip() or default_name(p.id) for p in stored]
        participants = self._participant_repo.replace_all(conn, league_id, names)
        fixtures = ScheduleGenerator(config).generate(participants)
        self._fixture_repo.create_many(conn, league_id, fixtures)
        self.transition_step(conn, league_id, LeagueStep.ACTIVE)
        logger.info(f"League {league_id} started: {len(participants)} participants, {len(fixtures)} fixtures")
        return fixtures

    def list_fixtures(self, conn: sqlite3.Connection, league_id: str) -> list[Fixture]:
        self.get_league(conn, league_id)
        return self._fixture_repo.list_by_league(conn, league_id)

    # ---------- Results & table ----------

    def record_result(
        self,
        conn: sqlite3.Connection,
        league_id: str,
        fixture_id: str,
        result: ResultEntry | dict[str, Any],
    ) -> Fixture:
        """Validate and store a result. Re-recording overwrites the previous one."""
        self.assert_step(conn, league_id, LeagueStep.ACTIVE)
        entry = result if isinstance(result, ResultEntry) else parse_result(result)
        fixture = self._fixture_repo.get(conn, league_id, fixture_id)
        if fixture is None:
            raise InvalidInput(f"Fixture not found: {fixture_id}")
        updated = apply_result(fixture, entry)
        self._fixture_repo.update_result(conn, league_id, updated)
        logger.info(
            f"League {league_id}: fixture {fixture_id} recorded {entry.home_goals}-{entry.away_goals}"
            + (" (overwrote previous result)" if fixture.played else "")
        )
        return updated

    def standings(
        self,
        conn: sqlite3.Connection,
        league_id: str,
        tiebreak: TieBreak = TieBreak.PAIRWISE,
    ) -> list[StandingsRow]:
        """Current table, recomputed from stored participants and fixtures."""
        self.get_league(conn, league_id)
        participants = self._participant_repo.list_by_league(conn, league_id)
        fixtures = self._fixture_repo.list_by_league(conn, league_id)
        return StandingsEngine(participants, fixtures, tiebreak=tiebreak).rank()

    def reset_league(self, conn: sqlite3.Connection, league_id: str) -> League:
        """Clear names and fixtures; back to setup with the default participant count."""
        league = self.get_league(conn, league_id)
        self._fixture_repo.delete_by_league(conn, league_id)
        self._participant_repo.delete_by_league(conn, league_id)
        self._league_repo.update_num_participants(conn, league_id, DEFAULT_PARTICIPANTS)
        if league.step != LeagueStep.SETUP:
            self.transition_step(conn, league_id, LeagueStep.SETUP)
        logger.info(f"League {league_id} reset")
        return self.get_league(conn, league_id)
