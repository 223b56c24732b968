"""
SQLite location, connections and schema setup for league data.
"""
from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path

from .schema import SCHEMA_VERSION, all_schema_sql

logger = logging.getLogger(__name__)

# Overrides the default location when set
DB_PATH_ENV = "LEAGUE_DB_PATH"

_db_path: Path | None = None


def _default_db_path() -> Path:
    env_path = os.environ.get(DB_PATH_ENV, "").strip()
    if env_path:
        return Path(env_path)
    return Path.cwd() / "data" / "league.db"


def _resolve(db_path: str | Path | None) -> Path:
    path = Path(db_path) if db_path else get_db_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def set_db_path(path: str | Path) -> None:
    """Point every later connection at path (CLI --db, tests)."""
    global _db_path
    _db_path = Path(path)


def get_db_path() -> Path:
    """Explicit path if set, else $LEAGUE_DB_PATH, else data/league.db under the working directory."""
    return _db_path if _db_path is not None else _default_db_path()


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """New connection with name-addressable rows and foreign keys enforced. Caller closes it."""
    conn = sqlite3.connect(str(_resolve(db_path)))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str | Path | None = None) -> None:
    """Create missing tables and stamp the schema version. Safe to call on every start."""
    path = _resolve(db_path)
    conn = sqlite3.connect(str(path))
    try:
        found = conn.execute("PRAGMA user_version").fetchone()[0]
        if found > SCHEMA_VERSION:
            raise RuntimeError(f"{path} has schema version {found}; this build knows up to {SCHEMA_VERSION}")
        conn.executescript(all_schema_sql())
        conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        conn.commit()
    finally:
        conn.close()
    logger.debug(f"Database ready at {path} (schema v{SCHEMA_VERSION})")
