"""
Double round-robin fixture generation.

Leg 1 uses the circle method so every participant meets every other participant
exactly once; it has N-1 rounds (N even) or N rounds (N odd). Leg 2 mirrors leg 1
with home and away swapped and starts in the round after leg 1 ends.

BYE handling: when the number of participants is odd, a virtual BYE slot is added.
Whoever is paired with BYE sits the round out; no fixture is produced for that pair.

Initial seeding shuffles the participants with an injectable SeededRNG. Pass
ScheduleConfig(shuffle=False) or a fixed seed for reproducible schedules.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, TypeVar

from league_manager.models import Fixture, Participant
from league_manager.rng import SeededRNG
from league_manager.services.errors import InvalidInput

logger = logging.getLogger(__name__)


class _Bye:
    """Sentinel slot for odd participant counts; never equal to a real slot."""

    def __repr__(self) -> str:
        return "BYE"


BYE = _Bye()

MIN_PARTICIPANTS = 2

T = TypeVar("T")


@dataclass
class ScheduleConfig:
    """Configuration for one schedule generation."""
    shuffle: bool = True  # False keeps the caller's order (deterministic)
    seed: int | None = None  # RNG seed when shuffling


def rounds_per_leg(count: int) -> int:
    """Number of rounds in one leg for `count` real participants."""
    if count < MIN_PARTICIPANTS:
        return 0
    return count - 1 if count % 2 == 0 else count


def round_robin_rounds(slots: Sequence[T]) -> list[list[tuple[T, T]]]:
    """
    Single round-robin by the circle method: list of rounds, each a list of
    (home, away) pairs. Pairs involving BYE are dropped.
    Deterministic: same slot order => same rounds.
    """
    order: list = list(slots)
    if len(order) % 2 == 1:
        order.append(BYE)
    n = len(order)
    rounds: list[list[tuple[T, T]]] = []
    for _ in range(n - 1):
        # Pair order[0] with order[n-1], order[1] with order[n-2], ...
        pairs: list[tuple[T, T]] = []
        for i in range(n // 2):
            home, away = order[i], order[n - 1 - i]
            if home is BYE or away is BYE:
                continue
            pairs.append((home, away))
        rounds.append(pairs)
        # Rotate: keep slot 0, last slot moves to position 1, the rest shift right
        order = [order[0], order[n - 1]] + order[1 : n - 1]
    return rounds


class ScheduleGenerator:
    """
    Builds the full home-and-away fixture list for a league.
    Pure: the participant list is never mutated and every call returns fresh fixtures.
    """

    def __init__(self, config: ScheduleConfig | None = None, rng: SeededRNG | None = None) -> None:
        self._config = config or ScheduleConfig()
        self._rng = rng or SeededRNG(self._config.seed)

    @property
    def config(self) -> ScheduleConfig:
        return self._config

    def seed_order(self, participants: Sequence[Participant]) -> list[Participant]:
        """Initial slot order: a shuffled copy, or the given order when shuffling is off."""
        if self._config.shuffle:
            return self._rng.shuffled(participants)
        return list(participants)

    def generate(self, participants: Sequence[Participant]) -> list[Fixture]:
        """
        Return leg 1 followed by leg 2, in round order, each fixture unplayed
        and with a unique id. Raises InvalidInput for fewer than two participants
        or repeated participant ids.
        """
        if len(participants) < MIN_PARTICIPANTS:
            raise InvalidInput(
                f"Need at least {MIN_PARTICIPANTS} participants to build a schedule (got {len(participants)})"
            )
        ids = [p.id for p in participants]
        if len(set(ids)) != len(ids):
            raise InvalidInput("Participant ids must be unique")

        rounds = round_robin_rounds(self.seed_order(participants))
        first_leg: list[Fixture] = []
        for r, pairs in enumerate(rounds):
            for m, (home, away) in enumerate(pairs):
                first_leg.append(
                    Fixture(id=f"{r}-{m}-first", round=r + 1, home_id=home.id, away_id=away.id)
                )

        leg_length = len(rounds)
        # Fresh unplayed fixtures, not copies of any recorded leg-1 result
        second_leg = [
            Fixture(
                id=f.id.replace("-first", "-second"),
                round=f.round + leg_length,
                home_id=f.away_id,
                away_id=f.home_id,
            )
            for f in first_leg
        ]
        logger.debug(
            f"Generated {len(first_leg) + len(second_leg)} fixtures over {2 * leg_length} rounds "
            f"for {len(participants)} participants"
        )
        return first_leg + second_leg


def generate_schedule(
    participants: Sequence[Participant],
    seed: int | None = None,
    shuffle: bool = True,
) -> list[Fixture]:
    """Convenience wrapper: ScheduleGenerator(ScheduleConfig(shuffle, seed)).generate(...)."""
    return ScheduleGenerator(ScheduleConfig(shuffle=shuffle, seed=seed)).generate(participants)


def fixtures_by_round(fixtures: Sequence[Fixture]) -> dict[int, list[Fixture]]:
    """Group fixtures by round number, rounds ascending, schedule order within a round."""
    grouped: dict[int, list[Fixture]] = {}
    for f in sorted(fixtures, key=lambda f: f.round):
        grouped.setdefault(f.round, []).append(f)
    return grouped
