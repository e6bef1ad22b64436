"""
Coverage analysis for keyword practice material.

Finds keywords that lack enough practice cards and estimates how many
new cards should be requested from a content-generation service. The
generation itself happens elsewhere; this module only produces the
signal and records the coverage credited once cards exist.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, Mapping, Optional

from keyword_srs.config import CoverageConfig, NeedScoreConfig
from keyword_srs.constants import (
    COVERAGE_TIE_BAND,
    CRITICAL_URGENCY,
    HIGH_GENERATION_SHARE,
    HIGH_URGENCY,
    MAX_RECOMMENDED_GENERATION,
)
from keyword_srs.session_builders.pool_utils import rank_with_tie_band
from keyword_srs.srs.memory_state import KeywordState, ensure_utc, normalize_keyword, utc_now
from keyword_srs.srs.need_score import calculate_need_score
from keyword_srs.srs.scheduler import KeywordCollection, update_keywords_after_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoverageCandidate:
    keyword: str
    coverage: int
    need_score: float


@dataclass(frozen=True)
class FlashcardNeedsEstimate:
    """
    Card gap bucketed by urgency (1 - mastery).

    critical: urgency > 0.7
    high: 0.4 < urgency <= 0.7
    medium: everything else
    """
    total_gap: int
    critical: int
    high: int
    medium: int
    recommended_generation: int


@dataclass(frozen=True)
class CoverageCredit:
    keywords_processed: int
    cards_credited: int
    gap_reduction: int


def get_keywords_needing_cards(
    collection: Mapping[str, KeywordState],
    now: Optional[datetime] = None,
    target_coverage: Optional[int] = None,
    max_keywords: Optional[int] = None,
    config: Optional[CoverageConfig] = None,
    need_config: Optional[NeedScoreConfig] = None
) -> list[CoverageCandidate]:
    """
    Keywords with fewer than target_coverage cards, most needed first.

    Sorted by need score descending in 0.1-wide bands (0.8-0.9, 0.7-0.8,
    ...). Inside a band, lower coverage comes first.

    Args:
        collection: Keyword collection
        now: Evaluation time (defaults to now)
        target_coverage: Minimum desired card coverage (default 3)
        max_keywords: Maximum to return (default 5)
        config: Coverage defaults used when the arguments are omitted
        need_config: Need score tuning

    Returns:
        List of CoverageCandidate
    """
    if now is None:
        now = utc_now()
    now = ensure_utc(now)
    if config is None:
        config = CoverageConfig()
    if target_coverage is None:
        target_coverage = config.target_coverage
    if max_keywords is None:
        max_keywords = config.max_keywords

    candidates = [
        CoverageCandidate(
            keyword=keyword,
            coverage=state.card_coverage,
            need_score=calculate_need_score(state, now, need_config),
        )
        for keyword, state in collection.items()
        if state.card_coverage < target_coverage
    ]

    return rank_with_tie_band(
        candidates,
        score=lambda c: c.need_score,
        tie_break=lambda c: c.coverage,
        band=COVERAGE_TIE_BAND,
        limit=max_keywords,
    )


def estimate_flashcard_needs(
    collection: Mapping[str, KeywordState],
    target_coverage: Optional[int] = None
) -> FlashcardNeedsEstimate:
    """
    Estimate how many flashcards should be generated.

    For each under-covered keyword the gap (target - coverage) is added
    to the bucket of its urgency. Recommended generation covers every
    critical card plus half of the high ones, capped at 20.
    """
    if target_coverage is None:
        target_coverage = CoverageConfig().target_coverage

    critical = 0
    high = 0
    medium = 0

    for state in collection.values():
        if state.card_coverage >= target_coverage:
            continue
        gap = target_coverage - state.card_coverage
        urgency = 1.0 - state.mastery
        if urgency > CRITICAL_URGENCY:
            critical += gap
        elif urgency > HIGH_URGENCY:
            high += gap
        else:
            medium += gap

    recommended = min(
        critical + math.ceil(high * HIGH_GENERATION_SHARE),
        MAX_RECOMMENDED_GENERATION,
    )

    return FlashcardNeedsEstimate(
        total_gap=critical + high + medium,
        critical=critical,
        high=high,
        medium=medium,
        recommended_generation=recommended,
    )


def apply_generated_coverage(
    collection: Mapping[str, KeywordState],
    generated_primary_keywords: Iterable[Iterable[str]],
    target_coverage: Optional[int] = None
) -> tuple[KeywordCollection, CoverageCredit]:
    """
    Credit newly generated cards to the keywords they cover.

    Each generated card contributes one coverage point to each of its
    primary keywords that already exists in the collection; unknown
    keywords are ignored.

    Args:
        collection: Keyword collection before the new cards
        generated_primary_keywords: Primary keyword tags, one iterable per card
        target_coverage: Coverage target used to measure the gap reduction

    Returns:
        Tuple of (updated_collection, credit_summary)
    """
    updated: KeywordCollection = dict(collection)
    processed = set()
    cards = 0

    for card_keywords in generated_primary_keywords:
        cards += 1
        for kw in card_keywords:
            key = normalize_keyword(kw)
            state = updated.get(key)
            if state is None:
                logger.debug("Generated card references unknown keyword=%s", key)
                continue
            updated[key] = replace(state, card_coverage=state.card_coverage + 1)
            processed.add(key)

    before = estimate_flashcard_needs(collection, target_coverage).total_gap
    after = estimate_flashcard_needs(updated, target_coverage).total_gap

    return updated, CoverageCredit(
        keywords_processed=len(processed),
        cards_credited=cards,
        gap_reduction=before - after,
    )


__all__ = [
    "CoverageCandidate",
    "CoverageCredit",
    "FlashcardNeedsEstimate",
    "apply_generated_coverage",
    "estimate_flashcard_needs",
    "get_keywords_needing_cards",
    "update_keywords_after_event",
]
