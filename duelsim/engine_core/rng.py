"""
Seeded RNG - Deterministic pseudo-random source.

All chance in a game (shuffles, random targets, attack decisions) flows
through SeededRandom so that identical seeds and identical call sequences
give identical results on every platform.

The generator is a small linear-congruential step over an integer state
derived from a string seed.
"""

from __future__ import annotations
import math
from typing import Sequence, TypeVar

T = TypeVar("T")

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


def hash_seed(seed: str) -> int:
    """Hash a string seed into a non-negative 32-bit integer."""
    value = 0
    for ch in seed:
        value = ((value << 5) - value) + ord(ch)
        # Wrap to signed 32-bit
        value = (value + 2**31) % 2**32 - 2**31
    return abs(value)


class SeededRandom:
    """
    Linear-congruential generator seeded from a string.

    Usage:
        rng = SeededRandom("game-42")
        rng.next()          # float in [0, 1)
        rng.next_int(0, 5)  # int in [0, 5)
        rng.choice(items)   # one element or None
        rng.shuffle(items)  # new shuffled list
    """

    def __init__(self, seed: str | int):
        self.seed_text = str(seed)
        self._state = hash_seed(self.seed_text)

    @property
    def state(self) -> int:
        return self._state

    def next(self) -> float:
        """Advance the generator and return a float in [0, 1)."""
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS

    def next_int(self, minimum: int, maximum: int) -> int:
        """Return an int in [minimum, maximum)."""
        return math.floor(self.next() * (maximum - minimum)) + minimum

    def choice(self, items: Sequence[T]) -> T | None:
        """Pick one element uniformly, or None for an empty sequence."""
        if not items:
            return None
        return items[self.next_int(0, len(items))]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a shuffled copy (Fisher-Yates from the tail)."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.next_int(0, i + 1)
            result[i], result[j] = result[j], result[i]
        return result
