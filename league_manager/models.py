"""
Data models for the league manager.
Domain objects only. No persistence or ranking logic.

A league is a double round-robin: every participant meets every other
participant twice, once at home and once away.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------- Disciplinary weights ----------
YELLOW_CARD_POINTS = 1
SECOND_YELLOW_RED_POINTS = 3
DIRECT_RED_POINTS = 4


# ---------- League wizard step (state machine) ----------
class LeagueStep(str, Enum):
    """League setup flow: setup → naming → active."""
    SETUP = "setup"      # Choosing how many participants
    NAMING = "naming"    # Editing participant names
    ACTIVE = "active"    # Fixtures generated, results being recorded


# ---------- League ----------
@dataclass
class League:
    """Container the host keeps per league: wizard step and participant count."""
    id: str
    name: str
    step: str  # LeagueStep value
    num_participants: int
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "step": self.step,
            "num_participants": self.num_participants,
            "created_at": self.created_at,
        }


# ---------- Participant ----------
@dataclass(frozen=True)
class Participant:
    """One team in the league. id is stable and unique; names may repeat."""
    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


# ---------- Cards ----------
@dataclass(frozen=True)
class CardCounts:
    """Cautions and dismissals for one side of a fixture."""
    yellow: int = 0
    second_yellow_red: int = 0  # red shown for a second yellow
    direct_red: int = 0

    @property
    def points(self) -> int:
        return (
            self.yellow * YELLOW_CARD_POINTS
            + self.second_yellow_red * SECOND_YELLOW_RED_POINTS
            + self.direct_red * DIRECT_RED_POINTS
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "yellow": self.yellow,
            "second_yellow_red": self.second_yellow_red,
            "direct_red": self.direct_red,
        }


# ---------- Fixture ----------
@dataclass(frozen=True)
class Fixture:
    """
    A scheduled match. Created unplayed by the scheduler; recording a result
    replaces it with a played copy (dataclasses.replace), never appends.
    Goals are None until played.
    """
    id: str
    round: int  # 1-based
    home_id: int
    away_id: int
    played: bool = False
    home_goals: int | None = None
    away_goals: int | None = None
    home_cards: CardCounts = field(default_factory=CardCounts)
    away_cards: CardCounts = field(default_factory=CardCounts)

    def involves(self, participant_id: int) -> bool:
        return participant_id in (self.home_id, self.away_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "round": self.round,
            "home_id": self.home_id,
            "away_id": self.away_id,
            "played": self.played,
            "home_goals": self.home_goals,
            "away_goals": self.away_goals,
            "home_cards": self.home_cards.to_dict(),
            "away_cards": self.away_cards.to_dict(),
        }


# ---------- Head-to-head ----------
@dataclass
class HeadToHead:
    """One side's record restricted to the direct fixtures against a single opponent."""
    points: int = 0
    goals_for: int = 0
    goals_against: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against


# ---------- Standings row ----------
@dataclass
class StandingsRow:
    """
    Per-participant aggregate. Derived fresh on every ranking request;
    never persisted. rank is 1-based and set after ordering.
    """
    participant_id: int
    name: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0
    yellow: int = 0
    second_yellow_red: int = 0
    direct_red: int = 0
    rank: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    @property
    def disciplinary_score(self) -> int:
        return CardCounts(self.yellow, self.second_yellow_red, self.direct_red).points

    def to_dict(self) -> dict[str, Any]:
        return {
            "rank": self.rank,
            "participant_id": self.participant_id,
            "name": self.name,
            "played": self.played,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "goal_difference": self.goal_difference,
            "points": self.points,
            "yellow": self.yellow,
            "reds": self.second_yellow_red + self.direct_red,
            "disciplinary_score": self.disciplinary_score,
        }
