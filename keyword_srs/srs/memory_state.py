"""
Memory State - Keyword and Card State Values

Defines the immutable state records the engine transforms, plus the
derived quantities read from them.

Key concepts:
- Mastery (M): EMA-smoothed [0, 1] estimate of how well a keyword is known
- Stability (S): How slowly a keyword is forgotten (in days)
- Retention (R): Predicted recall probability at time t, R = exp(-Δt/S)

Every update returns a new value (dataclasses.replace); nothing here
mutates state in place.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import math

from keyword_srs.constants import (
    Color,
    SM2_DEFAULT_EASE,
    S_INITIAL,
    S_MAX,
    S_MIN,
)


SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class KeywordState:
    """
    Mastery state for a single keyword.

    The keyword string is the collection key and is always normalized
    (lowercased, trimmed).
    """
    keyword: str

    # Long-term memory parameters
    mastery: float = 0.0             # M, range 0-1
    stability_days: float = S_INITIAL  # S, in days
    due_at: Optional[datetime] = None  # None = due immediately

    # Review tracking
    lapses: int = 0                  # Grades below the lapse threshold
    exposures: int = 0               # Total events seen
    card_coverage: int = 0           # Practice items available
    last_review_at: Optional[datetime] = None

    # Displayed tier; the counter only has meaning relative to this color
    color: Color = Color.RED
    color_stability_counter: int = 0


@dataclass(frozen=True)
class SM2Card:
    """
    SM-2 scheduling state for a single flashcard.

    Owned by the caller's card store; unrelated to keyword state.
    """
    ease: float = SM2_DEFAULT_EASE
    interval: int = 0
    repetitions: int = 0
    last_review: Optional[datetime] = None
    next_review: Optional[datetime] = None


# ---- Value helpers ----

def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp01(value: float) -> float:
    return clamp(value, 0.0, 1.0)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up."""
    return int(math.floor(value + 0.5))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(timestamp: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC so comparisons never mix kinds."""
    if timestamp is None:
        return None
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def days_between(start: datetime, end: datetime) -> float:
    """Fractional days from start to end (negative if end is earlier)."""
    delta = ensure_utc(end) - ensure_utc(start)
    return delta.total_seconds() / SECONDS_PER_DAY


def normalize_keyword(keyword: str) -> str:
    """Canonical collection key for a keyword."""
    return keyword.strip().lower()


# ---- State construction ----

def create_keyword_state(keyword: str, now: Optional[datetime] = None) -> KeywordState:
    """
    Initialize state for a keyword seen for the first time.

    New keywords start unmastered, red, with minimum stability and are
    due immediately.

    Args:
        keyword: Raw keyword (normalized here)
        now: Creation time (defaults to now)

    Returns:
        New KeywordState
    """
    if now is None:
        now = utc_now()

    return KeywordState(
        keyword=normalize_keyword(keyword),
        mastery=0.0,
        stability_days=clamp(S_INITIAL, S_MIN, S_MAX),
        due_at=ensure_utc(now),
        lapses=0,
        exposures=0,
        card_coverage=0,
        last_review_at=None,
        color=Color.RED,
        color_stability_counter=0,
    )


# ---- Derived quantities ----

def is_keyword_due(state: KeywordState, now: Optional[datetime] = None) -> bool:
    """
    Check if a keyword is due for review.

    A keyword without a due date is always due.
    """
    if state.due_at is None:
        return True
    if now is None:
        now = utc_now()
    return ensure_utc(state.due_at) <= ensure_utc(now)


def calculate_keyword_retention(state: KeywordState, now: Optional[datetime] = None) -> float:
    """
    Calculate predicted retention using exponential decay.

    Formula: R = exp(-Δt / S)

    Where:
    - Δt = days since the last review
    - S = stability (in days)

    A keyword that was never reviewed has retention 0.

    Args:
        state: Keyword state
        now: Evaluation time (defaults to now)

    Returns:
        Retention between 0 and 1
    """
    if state.last_review_at is None or state.stability_days <= 0:
        return 0.0
    if now is None:
        now = utc_now()

    days_since = days_between(state.last_review_at, now)
    return clamp01(math.exp(-days_since / state.stability_days))
