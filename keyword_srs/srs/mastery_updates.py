"""
Keyword Mastery Updates

Implements mastery, stability and due-date updates after a learning event.

Key principles:
- Mastery moves toward the new grade as an exponential moving average
- The EMA weight grows with accumulated evidence (first events count less)
- Corroborating success grows stability; a lapse decays it sharply
- The next due date is placed where retention falls to the target
"""

from __future__ import annotations
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional, Union
import logging
import math

from keyword_srs.config import MasteryConfig
from keyword_srs.constants import (
    DEFAULT_EVENT_TYPE,
    EventType,
    LAPSE_GRADE,
    NEUTRAL_GRADE,
    STABILITY_DECAY,
    STABILITY_GAIN,
)
from keyword_srs.srs.memory_state import (
    KeywordState,
    clamp,
    clamp01,
    ensure_utc,
    round_half_up,
    utc_now,
)

logger = logging.getLogger(__name__)

DEFAULT_MASTERY_CONFIG = MasteryConfig()


def learning_rate(
    exposures: int,
    event_type: Union[EventType, str],
    config: MasteryConfig = DEFAULT_MASTERY_CONFIG
) -> float:
    """
    Evidence-scaled learning rate for the mastery EMA.

    Formula:
        lr = base_lr * min(1, exposures / min_events) * event_weight

    Args:
        exposures: Exposure count including the current event
        event_type: Kind of learning event
        config: Mastery tuning

    Returns:
        Learning rate in [0, base_lr]
    """
    min_events = max(1, config.min_events_for_full_impact)
    evidence_scale = min(1.0, exposures / min_events)
    return config.base_learning_rate * evidence_scale * config.event_weight(event_type)


def update_mastery(mastery: float, grade: float, lr: float) -> float:
    """
    EMA toward the new grade.

    Formula:
        M_new = clip((1 - lr) * M + lr * grade, 0, 1)
    """
    return clamp01((1.0 - lr) * mastery + lr * grade)


def update_stability(
    stability: float,
    grade: float,
    config: MasteryConfig = DEFAULT_MASTERY_CONFIG
) -> float:
    """
    Update stability from a grade.

    Formula:
        grade >= 0.4:  S_new = S * (1 + 0.6 * (grade - 0.6))
        grade <  0.4:  S_new = max(S_min, S * 0.7)

    Grades between 0.4 and 0.6 shrink stability slightly. The result is
    always clipped to [S_min, S_max].

    Args:
        stability: Current stability (days)
        grade: Event grade (0-1)
        config: Mastery tuning

    Returns:
        New stability value
    """
    if grade >= LAPSE_GRADE:
        delta = grade - NEUTRAL_GRADE
        new_stability = stability * (1.0 + STABILITY_GAIN * delta)
    else:
        new_stability = max(config.min_stability, stability * STABILITY_DECAY)

    return clamp(new_stability, config.min_stability, config.max_stability)


def review_interval_days(
    stability: float,
    target_retention: float
) -> float:
    """
    Days until retention R = exp(-t/S) decays to the target.

    Formula:
        t = -S * ln(R_target)
    """
    return -stability * math.log(target_retention)


def schedule_due_at(
    stability: float,
    now: datetime,
    config: MasteryConfig = DEFAULT_MASTERY_CONFIG
) -> datetime:
    """Next due date, rounded to whole days from now."""
    interval_days = review_interval_days(stability, config.target_retention)
    return ensure_utc(now) + timedelta(days=round_half_up(interval_days))


def update_keyword_after_event(
    state: KeywordState,
    grade: float,
    event_type: Union[EventType, str] = DEFAULT_EVENT_TYPE,
    now: Optional[datetime] = None,
    config: Optional[MasteryConfig] = None
) -> KeywordState:
    """
    Update keyword state after a learning event (quiz, flashcard, reading).

    This does NOT re-evaluate the color; callers run
    apply_color_hysteresis afterwards so pre/post classification can be
    inspected separately.

    Args:
        state: Current keyword state
        grade: Performance grade 0-1 (from grade_from_performance)
        event_type: Kind of learning event
        now: Event timestamp (defaults to now)
        config: Mastery tuning

    Returns:
        New KeywordState
    """
    if now is None:
        now = utc_now()
    if config is None:
        config = DEFAULT_MASTERY_CONFIG

    now = ensure_utc(now)
    grade = clamp01(grade)
    exposures = state.exposures + 1

    lr = learning_rate(exposures, event_type, config)
    new_mastery = update_mastery(state.mastery, grade, lr)
    new_stability = update_stability(state.stability_days, grade, config)
    new_lapses = state.lapses + 1 if grade < LAPSE_GRADE else state.lapses

    logger.debug(
        "keyword=%s grade=%.2f lr=%.3f mastery %.3f->%.3f stability %.2f->%.2f",
        state.keyword, grade, lr, state.mastery, new_mastery,
        state.stability_days, new_stability
    )

    return replace(
        state,
        mastery=new_mastery,
        stability_days=new_stability,
        due_at=schedule_due_at(new_stability, now, config),
        lapses=new_lapses,
        exposures=exposures,
        last_review_at=now,
    )
