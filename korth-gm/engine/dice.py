from __future__ import annotations

import random
from typing import Any, Optional, Sequence, Tuple


class Dice:
    """
    Uniform integer source for every roll the engine makes.

    Defaults to the `random` module itself so tests can force rolls with
    `patch("random.randint", side_effect=[...])`. Pass a seeded
    `random.Random(seed)` for reproducible runs.
    """

    def __init__(self, rng: Optional[Any] = None):
        self.rng = rng if rng is not None else random

    @classmethod
    def seeded(cls, seed: Optional[int]) -> "Dice":
        if seed is None:
            return cls()
        return cls(random.Random(seed))

    def between(self, low: int, high: int) -> int:
        """Closed range [low, high]."""
        low, high = int(low), int(high)
        if high < low:
            low, high = high, low
        return int(self.rng.randint(low, high))

    def d20(self) -> int:
        return self.between(1, 20)

    def chance(self, probability: float) -> bool:
        return self.rng.random() < float(probability)

    def pick(self, options: Sequence[Any]) -> Any:
        return self.rng.choice(list(options))


def damage_range(value: Any) -> Tuple[int, int]:
    """
    Normalize a content damage range into (min, max).
    Accepts [min, max], {"min": .., "max": ..} or the string form "10-18".
    """
    if isinstance(value, dict):
        return int(value["min"]), int(value["max"])
    if isinstance(value, str):
        low, high = value.split("-", 1)
        return int(low.strip()), int(high.strip())
    low, high = value
    return int(low), int(high)
