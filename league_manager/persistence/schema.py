"""
SQLite schema for league entities.
Each table created with IF NOT EXISTS so init_db can run on every start.
"""
from __future__ import annotations

# Stored in PRAGMA user_version; bump when a table changes shape
SCHEMA_VERSION = 1


def leagues_schema() -> str:
    """One row per league. step: setup | naming | active."""
    return """
    CREATE TABLE IF NOT EXISTS leagues (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        step TEXT NOT NULL DEFAULT 'setup',
        num_participants INTEGER NOT NULL,
        created_at TEXT NOT NULL
    );
    """


def participants_schema() -> str:
    """Participant ids are 0-based positions within the league, assigned at creation."""
    return """
    CREATE TABLE IF NOT EXISTS participants (
        league_id TEXT NOT NULL,
        participant_id INTEGER NOT NULL,
        name TEXT NOT NULL,
        PRIMARY KEY (league_id, participant_id),
        FOREIGN KEY (league_id) REFERENCES leagues(id)
    );
    """


def fixtures_schema() -> str:
    """Fixture per league, ordered by seq (leg 1 then leg 2). Goals NULL until played."""
    return """
    CREATE TABLE IF NOT EXISTS fixtures (
        league_id TEXT NOT NULL,
        id TEXT NOT NULL,
        seq INTEGER NOT NULL,
        round INTEGER NOT NULL,
        home_id INTEGER NOT NULL,
        away_id INTEGER NOT NULL,
        played INTEGER NOT NULL DEFAULT 0,
        home_goals INTEGER,
        away_goals INTEGER,
        home_yellow INTEGER NOT NULL DEFAULT 0,
        away_yellow INTEGER NOT NULL DEFAULT 0,
        home_second_yellow_red INTEGER NOT NULL DEFAULT 0,
        away_second_yellow_red INTEGER NOT NULL DEFAULT 0,
        home_direct_red INTEGER NOT NULL DEFAULT 0,
        away_direct_red INTEGER NOT NULL DEFAULT 0,
        PRIMARY KEY (league_id, id),
        FOREIGN KEY (league_id) REFERENCES leagues(id)
    );
    CREATE INDEX IF NOT EXISTS ix_fixtures_league_seq ON fixtures(league_id, seq);
    """


def all_schema_sql() -> str:
    """Combine all schema DDL for a single execution. Order: leagues, participants, fixtures."""
    return "\n".join([
        leagues_schema(),
        participants_schema(),
        fixtures_schema(),
    ])
