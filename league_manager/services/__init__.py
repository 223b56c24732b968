"""
Service layer: scheduling and standings engines, result entry, league wizard.
The engines are pure; league_service orchestrates persistence.
"""
from .errors import InvalidInput
from .scheduling import ScheduleConfig, ScheduleGenerator, generate_schedule
from .standings import StandingsEngine, TieBreak, rank_standings
from .results import ResultEntry, parse_result, record_result
from .league_service import (
    LeagueService,
    LeagueStepError,
    LeagueNotFoundError,
)

__all__ = [
    "InvalidInput",
    "ScheduleConfig",
    "ScheduleGenerator",
    "generate_schedule",
    "StandingsEngine",
    "TieBreak",
    "rank_standings",
    "ResultEntry",
    "parse_result",
    "record_result",
    "LeagueService",
    "LeagueStepError",
    "LeagueNotFoundError",
]
