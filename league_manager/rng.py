"""
Injectable randomness for schedule seeding and demo seasons.
A fixed seed gives the same participant order, hence the same fixture list.
"""
from __future__ import annotations

import random
from typing import MutableSequence, Sequence, TypeVar

T = TypeVar("T")


class SeededRNG:
    """random.Random behind a small surface; subclass it to script the draw in tests."""

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def shuffle(self, items: MutableSequence) -> None:
        """In-place shuffle."""
        self._random.shuffle(items)

    def shuffled(self, items: Sequence[T]) -> list[T]:
        """Shuffled copy; items is left as is."""
        copy = list(items)
        self.shuffle(copy)
        return copy

    def randint(self, low: int, high: int) -> int:
        return self._random.randint(low, high)

    def choice(self, items: Sequence[T]) -> T:
        return self._random.choice(items)
