"""
Pool utilities for session builders.

These helpers provide shared, minimal ranking primitives for building
keyword pools without enforcing a single selection policy.
"""

from __future__ import annotations
from typing import Callable, Optional, Sequence, TypeVar
import math


T = TypeVar("T")

_BAND_EPSILON = 1e-9  # 0.7 / 0.1 lands in band 7, not 6


def truncate(items: list[T], limit: Optional[int]) -> list[T]:
    """Keep the first `limit` items (all of them when limit is None)."""
    if limit is None:
        return items
    return items[:max(0, limit)]


def rank_by_score(
    items: Sequence[T],
    score: Callable[[T], float],
    limit: Optional[int] = None
) -> list[T]:
    """
    Sort items by score, highest first, and truncate.

    The sort is stable: equal scores keep their input order.
    """
    ranked = sorted(items, key=score, reverse=True)
    return truncate(ranked, limit)


def score_band(score: float, band: float) -> int:
    """Index of the fixed-width band a score falls in (0.0-0.1 -> 0, ...)."""
    return int(math.floor(score / band + _BAND_EPSILON))


def rank_with_tie_band(
    items: Sequence[T],
    score: Callable[[T], float],
    tie_break: Callable[[T], float],
    band: float,
    limit: Optional[int] = None
) -> list[T]:
    """
    Sort items by score band (highest first); inside a band, order by
    tie_break ascending, then by exact score descending.

    Bands are fixed-width buckets, so the ordering is transitive and
    does not depend on input order.
    """
    if band <= 0:
        ranked = sorted(items, key=lambda item: (-score(item), tie_break(item)))
        return truncate(ranked, limit)

    ranked = sorted(
        items,
        key=lambda item: (-score_band(score(item), band), tie_break(item), -score(item)),
    )
    return truncate(ranked, limit)
