"""Seedable random source shared by the field and all creatures."""

from typing import List, Optional, Sequence, TypeVar
import numpy as np

T = TypeVar('T')


class Randomizer:
    """
    Thin wrapper around numpy's Generator.

    A single instance is created per engine and passed to everything that
    draws random numbers, so a run is reproducible from its seed.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def random(self) -> float:
        """Uniform sample in [0, 1)."""
        return float(self.rng.random())

    def integers(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        return int(self.rng.integers(n))

    def shuffled(self, items: Sequence[T]) -> List[T]:
        """Return a new list holding items in random order."""
        order = self.rng.permutation(len(items))
        return [items[i] for i in order]

    def reset(self) -> None:
        """Restart the sequence from the original seed."""
        self.rng = np.random.default_rng(self.seed)
