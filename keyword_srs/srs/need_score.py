"""
Need Score

Composite urgency score for a keyword. Higher = more urgent to practice.

Combines 4 factors:
- overdue: how far past its due date (within a grace window)
- need_mastery: low mastery needs work
- need_fragility: many lapses relative to exposures
- need_coverage: few practice cards available
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from keyword_srs.config import NeedScoreConfig
from keyword_srs.constants import GRACE_DAYS, TARGET_CARDS
from keyword_srs.srs.memory_state import (
    KeywordState,
    clamp01,
    days_between,
    utc_now,
)

DEFAULT_NEED_CONFIG = NeedScoreConfig()


@dataclass(frozen=True)
class NeedComponents:
    """The four need factors, each in [0, 1]."""
    overdue: float
    mastery: float
    fragility: float
    coverage: float


def need_components(
    state: KeywordState,
    now: Optional[datetime] = None,
    config: Optional[NeedScoreConfig] = None
) -> NeedComponents:
    """
    Compute the individual need factors for a keyword.

    A keyword that was never reviewed (or has no due date) counts as
    fully overdue.
    """
    if now is None:
        now = utc_now()
    if config is None:
        config = DEFAULT_NEED_CONFIG

    grace_days = config.grace_days if config.grace_days > 0 else GRACE_DAYS
    target_cards = config.target_cards if config.target_cards > 0 else TARGET_CARDS

    if state.due_at is None or state.last_review_at is None:
        overdue = 1.0
    else:
        overdue = clamp01(days_between(state.due_at, now) / grace_days)

    return NeedComponents(
        overdue=overdue,
        mastery=clamp01(1.0 - state.mastery),
        fragility=clamp01(state.lapses / (state.exposures + 1)),
        coverage=clamp01((target_cards - state.card_coverage) / target_cards),
    )


def calculate_need_score(
    state: KeywordState,
    now: Optional[datetime] = None,
    config: Optional[NeedScoreConfig] = None
) -> float:
    """
    Calculate the need score for a keyword.

    Formula:
        score = clip(0.45 * overdue + 0.30 * need_mastery
                     + 0.15 * need_fragility + 0.10 * need_coverage, 0, 1)

    Args:
        state: Keyword state
        now: Evaluation time (defaults to now)
        config: Weights, grace window and card target

    Returns:
        Need score between 0 and 1
    """
    if config is None:
        config = DEFAULT_NEED_CONFIG

    parts = need_components(state, now, config)
    score = (
        config.overdue_weight * parts.overdue
        + config.mastery_weight * parts.mastery
        + config.fragility_weight * parts.fragility
        + config.coverage_weight * parts.coverage
    )
    return clamp01(score)
