"""
Persistence layer for league data.
Read/write interfaces only; ranking lives in the services.
"""
from .db import get_connection, init_db, set_db_path, get_db_path
from .repositories import (
    LeagueRepository,
    ParticipantRepository,
    FixtureRepository,
)

__all__ = [
    "get_connection",
    "init_db",
    "set_db_path",
    "get_db_path",
    "LeagueRepository",
    "ParticipantRepository",
    "FixtureRepository",
]
