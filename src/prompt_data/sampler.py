"""
Sampling without replacement over dataset positions.

Both helpers clamp k into [0, len(pool)] and pick positions, not values, so a
value that occurs twice in the pool can still be returned twice.
"""

import random
from typing import List, Sequence, TypeVar

from .models import PersonEntry

T = TypeVar("T")


def _sample_positions(pool: Sequence[T], k: int, rng: random.Random) -> List[T]:
    n = len(pool)
    k = max(0, min(k, n))
    indices = list(range(n))
    rng.shuffle(indices)
    return [pool[i] for i in indices[:k]]


def sample_names(pool: Sequence[str], k: int, rng: random.Random) -> List[str]:
    """Draw k names uniformly without replacement."""
    return _sample_positions(pool, k, rng)


def sample_entries(pool: Sequence[PersonEntry], k: int, rng: random.Random) -> List[PersonEntry]:
    """Draw k entries uniformly without replacement."""
    return _sample_positions(pool, k, rng)
