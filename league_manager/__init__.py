"""
Home-and-away league manager: double round-robin fixtures and a tie-broken table.
"""
from .models import CardCounts, Fixture, HeadToHead, League, LeagueStep, Participant, StandingsRow

__all__ = [
    "CardCounts",
    "Fixture",
    "HeadToHead",
    "League",
    "LeagueStep",
    "Participant",
    "StandingsRow",
]
