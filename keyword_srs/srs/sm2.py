"""
SM-2 Card Scheduler

Per-flashcard ease/interval/repetition scheduling (SuperMemo SM-2),
independent of keyword mastery.

Quality ratings (1-5, used directly as the SM-2 scale):
    5 - perfect response, no hesitation
    4 - correct after brief hesitation
    3 - correct with serious difficulty
    2 - incorrect, but the answer felt familiar
    1 - incorrect, wrong answer remembered

The algorithm tracks:
    - ease factor (EF): how "easy" the card is (min 1.3)
    - interval: days until next review
    - repetitions: successful review streak
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence, Tuple, TypeVar
import math

import pandas as pd

from keyword_srs.constants import (
    CARD_MASTERY_REPETITIONS,
    CARD_STABILITY_FACTOR,
    SM2_DEFAULT_EASE,
    SM2_FIRST_INTERVAL,
    SM2_MAX_QUALITY,
    SM2_MIN_EASE,
    SM2_MIN_QUALITY,
    SM2_PASS_QUALITY,
    SM2_SECOND_INTERVAL,
    URGENCY_CRITICAL_BELOW,
    URGENCY_INFO_BELOW,
    URGENCY_WARNING_BELOW,
)
from keyword_srs.srs.exceptions import InvalidRatingError
from keyword_srs.srs.memory_state import (
    SM2Card,
    clamp,
    days_between,
    ensure_utc,
    round_half_up,
    utc_now,
)


REVIEW_DAYS = (0, 1, 3, 7, 14, 28)  # Simulated review schedule for curve charts
REVIEW_STABILITY_BOOST = 1.5


@dataclass(frozen=True)
class SM2ReviewResult:
    """Scheduling outcome of one review."""
    ease: float
    interval: int
    repetitions: int
    next_review: datetime


@dataclass(frozen=True)
class CardDueCount:
    due: int
    total: int
    urgent_count: int


def create_new_card() -> SM2Card:
    """Create a new SM-2 card with default values."""
    return SM2Card(ease=SM2_DEFAULT_EASE, interval=0, repetitions=0)


def update_ease(ease: float, quality: int) -> float:
    """
    SM-2 ease factor update.

    Formula:
        EF' = max(1.3, EF + (0.1 - (5-q) * (0.08 + (5-q) * 0.02)))

    Rounded to 2 decimals.
    """
    miss = SM2_MAX_QUALITY - quality
    delta = 0.1 - miss * (0.08 + miss * 0.02)
    new_ease = max(SM2_MIN_EASE, ease + delta)
    return max(SM2_MIN_EASE, round_half_up(new_ease * 100) / 100)


def sm2_review(
    card: SM2Card,
    quality: int,
    now: Optional[datetime] = None
) -> Tuple[SM2Card, SM2ReviewResult]:
    """
    Apply one SM-2 review.

    Failure (q < 3) resets the streak and schedules tomorrow. Success
    schedules 1 day, then 6 days, then round(interval * EF) using the
    ease from before this review. The ease is updated on every review.

    Args:
        card: Current card state
        quality: Rating 1-5
        now: Review timestamp (defaults to now)

    Returns:
        Tuple of (updated_card, review_result)

    Raises:
        InvalidRatingError: If quality is outside 1-5
    """
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidRatingError(f"SM-2 quality must be an integer 1-5, got {quality!r}")
    if not SM2_MIN_QUALITY <= quality <= SM2_MAX_QUALITY:
        raise InvalidRatingError(f"SM-2 quality must be 1-5, got {quality}")

    if now is None:
        now = utc_now()
    now = ensure_utc(now)

    interval = card.interval
    repetitions = card.repetitions

    if quality < SM2_PASS_QUALITY:
        repetitions = 0
        interval = SM2_FIRST_INTERVAL
    else:
        if repetitions == 0:
            interval = SM2_FIRST_INTERVAL
        elif repetitions == 1:
            interval = SM2_SECOND_INTERVAL
        else:
            interval = round_half_up(interval * card.ease)
        repetitions += 1

    ease = update_ease(card.ease, quality)
    next_review = now + timedelta(days=interval)

    updated = replace(
        card,
        ease=ease,
        interval=interval,
        repetitions=repetitions,
        last_review=now,
        next_review=next_review,
    )
    result = SM2ReviewResult(
        ease=ease,
        interval=interval,
        repetitions=repetitions,
        next_review=next_review,
    )
    return updated, result


def is_card_due(card: SM2Card, now: Optional[datetime] = None) -> bool:
    """A card is due when it has no next review or it has passed."""
    if card.next_review is None:
        return True
    if now is None:
        now = utc_now()
    return ensure_utc(card.next_review) <= ensure_utc(now)


def card_stability(interval: int, ease: float) -> float:
    """Stability proxy for a card: S = interval * ease * 0.6."""
    return interval * ease * CARD_STABILITY_FACTOR


def calculate_retention(
    last_review: datetime,
    interval: int,
    ease: float,
    now: Optional[datetime] = None
) -> int:
    """
    Retention percentage for a card using R = exp(-t/S).

    Args:
        last_review: Timestamp of the last review
        interval: Current interval (days)
        ease: Current ease factor
        now: Evaluation time (defaults to now)

    Returns:
        Retention percent, 0-100 (0 for cards without stability)
    """
    if now is None:
        now = utc_now()

    days_since = max(0.0, days_between(last_review, now))
    stability = card_stability(interval, ease)
    if stability <= 0:
        return 0

    retention = math.exp(-days_since / stability) * 100
    return int(clamp(round_half_up(retention), 0, 100))


def calculate_cards_mastery(cards: Sequence[SM2Card]) -> int:
    """
    Overall mastery percentage for a set of cards.

    Each card scores 0.4 * ease_score + 0.6 * repetition_score where
    ease_score maps [1.3, 2.5] onto [0, 1] and 5 repetitions count as
    fully learned.
    """
    if not cards:
        return 0

    ease_span = SM2_DEFAULT_EASE - SM2_MIN_EASE
    total = 0.0
    for card in cards:
        ease_score = min(1.0, (card.ease - SM2_MIN_EASE) / ease_span)
        rep_score = min(1.0, card.repetitions / CARD_MASTERY_REPETITIONS)
        total += ease_score * 0.4 + rep_score * 0.6

    return round_half_up(total / len(cards) * 100)


T = TypeVar("T")


def sort_by_urgency(
    items: Iterable[T],
    now: Optional[datetime] = None,
    card_of=lambda item: item[0],
    retention_of=lambda item: item[1]
) -> list[T]:
    """
    Sort card items by review urgency (most urgent first).

    Priority: overdue first, then lower retention, then lower ease.
    Items without a retention value sort as 100%.

    Args:
        items: Items carrying a card and an optional retention percent
        now: Evaluation time (defaults to now)
        card_of: Callable(item) -> SM2Card (default: item[0])
        retention_of: Callable(item) -> retention or None (default: item[1])

    Returns:
        New sorted list
    """
    if now is None:
        now = utc_now()
    now = ensure_utc(now)

    def urgency_key(item):
        card = card_of(item)
        overdue = card.next_review is None or ensure_utc(card.next_review) < now
        retention = retention_of(item)
        if retention is None:
            retention = 100
        return (0 if overdue else 1, retention, card.ease)

    return sorted(items, key=urgency_key)


def get_urgency_level(retention: float) -> str:
    """Map a retention percent to critical / warning / info / none."""
    if retention < URGENCY_CRITICAL_BELOW:
        return "critical"
    if retention < URGENCY_WARNING_BELOW:
        return "warning"
    if retention < URGENCY_INFO_BELOW:
        return "info"
    return "none"


def get_due_card_count(
    cards: Sequence[SM2Card],
    now: Optional[datetime] = None
) -> CardDueCount:
    """
    Count due cards; urgent ones are overdue by more than a day.
    """
    if now is None:
        now = utc_now()

    due = 0
    urgent = 0
    for card in cards:
        if not is_card_due(card, now):
            continue
        due += 1
        if card.next_review is not None and days_between(card.next_review, now) > 1:
            urgent += 1

    return CardDueCount(due=due, total=len(cards), urgent_count=urgent)


def get_forgetting_curve_points(
    ease: float = SM2_DEFAULT_EASE,
    interval: int = 7,
    days: int = 30,
    with_reviews: bool = True
) -> pd.DataFrame:
    """
    Forgetting curve data points for charting.

    retention_decay is pure decay from day 0. retention_actual restarts
    the curve at each simulated review day with 1.5x stability.

    Returns:
        DataFrame with columns day, retention_actual, retention_decay
        (percent, rounded)
    """
    stability = card_stability(interval, ease)
    if stability <= 0:
        return pd.DataFrame(columns=["day", "retention_actual", "retention_decay"])

    rows = []
    for day in range(days + 1):
        decay = math.exp(-day / stability) * 100

        actual = decay
        if with_reviews:
            last_review_day = max(rd for rd in REVIEW_DAYS if rd <= day)
            boosted = stability * REVIEW_STABILITY_BOOST
            actual = math.exp(-(day - last_review_day) / boosted) * 100

        rows.append({
            "day": day,
            "retention_actual": int(clamp(round_half_up(actual), 0, 100)),
            "retention_decay": int(clamp(round_half_up(decay), 0, 100)),
        })

    return pd.DataFrame(rows, columns=["day", "retention_actual", "retention_decay"])
