"""
Result entry: validate a submitted score sheet and write it into a fixture.
Re-recording a fixture overwrites the previous result.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from league_manager.models import CardCounts, Fixture
from league_manager.services.errors import InvalidInput

logger = logging.getLogger(__name__)


class ResultEntry(BaseModel):
    """Score sheet for one fixture. Numeric strings are accepted (form input); booleans and unknown keys are not."""
    model_config = ConfigDict(extra="forbid")

    home_goals: int = Field(..., ge=0)
    away_goals: int = Field(..., ge=0)
    home_yellow: int = Field(0, ge=0)
    away_yellow: int = Field(0, ge=0)
    home_second_yellow_red: int = Field(0, ge=0, description="Reds shown for a second yellow")
    away_second_yellow_red: int = Field(0, ge=0, description="Reds shown for a second yellow")
    home_direct_red: int = Field(0, ge=0)
    away_direct_red: int = Field(0, ge=0)

    @field_validator("*", mode="before")
    @classmethod
    def reject_bool(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("must be a count, not a boolean")
        return v

    @classmethod
    def from_fixture(cls, fixture: Fixture) -> "ResultEntry":
        """Pre-fill from a fixture; unplayed goals start at 0."""
        return cls(
            home_goals=fixture.home_goals or 0,
            away_goals=fixture.away_goals or 0,
            home_yellow=fixture.home_cards.yellow,
            away_yellow=fixture.away_cards.yellow,
            home_second_yellow_red=fixture.home_cards.second_yellow_red,
            away_second_yellow_red=fixture.away_cards.second_yellow_red,
            home_direct_red=fixture.home_cards.direct_red,
            away_direct_red=fixture.away_cards.direct_red,
        )

    @property
    def home_cards(self) -> CardCounts:
        return CardCounts(self.home_yellow, self.home_second_yellow_red, self.home_direct_red)

    @property
    def away_cards(self) -> CardCounts:
        return CardCounts(self.away_yellow, self.away_second_yellow_red, self.away_direct_red)


def parse_result(data: dict[str, Any]) -> ResultEntry:
    """Validate raw input; any malformed or negative field raises InvalidInput."""
    try:
        return ResultEntry.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidInput(f"Invalid result: {problems}") from e


def apply_result(fixture: Fixture, entry: ResultEntry) -> Fixture:
    """Played copy of fixture carrying the entry's goals and cards."""
    return replace(
        fixture,
        played=True,
        home_goals=entry.home_goals,
        away_goals=entry.away_goals,
        home_cards=entry.home_cards,
        away_cards=entry.away_cards,
    )


def record_result(fixtures: Sequence[Fixture], fixture_id: str, entry: ResultEntry) -> list[Fixture]:
    """
    New fixture list with fixture_id replaced by its played version.
    The input list is not modified. Unknown fixture_id raises InvalidInput.
    """
    updated: list[Fixture] = []
    found = False
    for f in fixtures:
        if f.id == fixture_id:
            updated.append(apply_result(f, entry))
            found = True
        else:
            updated.append(f)
    if not found:
        raise InvalidInput(f"Fixture not found: {fixture_id}")
    logger.debug(f"Recorded {entry.home_goals}-{entry.away_goals} for fixture {fixture_id}")
    return updated
