"""
Scheduler - Keyword Event Processing

Pure keyword-level update logic (no storage).

Main workflow:
1. Grade the learning event (caller or update_keywords_after_event)
2. Look up (or lazily create) each tagged keyword
3. Apply the mastery update
4. Re-evaluate color hysteresis
5. Return a new collection

The caller owns the keyword collection (dict keyword -> KeywordState).
Nothing here mutates the mapping it is given.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, Mapping, Optional, Sequence, Union
import logging

from keyword_srs.config import SRSConfig
from keyword_srs.constants import (
    DEFAULT_EVENT_TYPE,
    DEFAULT_EXPECTED_TIME_MS,
    DISTRACTOR_GRADE,
    PRIMARY_GRADE_FACTOR,
    SECONDARY_GRADE_FACTOR,
    EventType,
)
from keyword_srs.srs.color import apply_color_hysteresis
from keyword_srs.srs.grading import grade_from_performance
from keyword_srs.srs.mastery_updates import update_keyword_after_event
from keyword_srs.srs.memory_state import (
    KeywordState,
    create_keyword_state,
    ensure_utc,
    normalize_keyword,
    utc_now,
)

logger = logging.getLogger(__name__)

KeywordCollection = Dict[str, KeywordState]


@dataclass(frozen=True)
class QuestionKeywords:
    """
    Keywords tagged on a quiz question or flashcard.

    primary: the main concepts being tested
    secondary: related concepts (reduced impact)
    distractors: answer option id -> keyword of the misconception it shows
    """
    primary: Sequence[str] = ()
    secondary: Sequence[str] = ()
    distractors: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LearningEventResult:
    """Outcome of answering a quiz question or flashcard."""
    correct: bool
    response_time_ms: float
    used_hint: bool = False
    confidence: Optional[float] = None
    selected_distractor: Optional[str] = None  # Option id chosen when incorrect
    expected_time_ms: float = DEFAULT_EXPECTED_TIME_MS


def get_or_create_keyword(
    collection: Mapping[str, KeywordState],
    keyword: str,
    now: Optional[datetime] = None
) -> KeywordState:
    """
    Look up a keyword by its normalized key, or build a fresh state.

    The collection is not modified.
    """
    key = normalize_keyword(keyword)
    state = collection.get(key)
    if state is None:
        state = create_keyword_state(key, now)
    return state


def process_keyword_event(
    state: KeywordState,
    grade: float,
    event_type: Union[EventType, str] = DEFAULT_EVENT_TYPE,
    now: Optional[datetime] = None,
    config: Optional[SRSConfig] = None
) -> KeywordState:
    """
    Apply one graded event to a keyword and re-evaluate its color.

    Args:
        state: Current keyword state
        grade: Event grade (0-1)
        event_type: Kind of learning event
        now: Event timestamp (defaults to now)
        config: Engine config

    Returns:
        New KeywordState
    """
    if config is None:
        config = SRSConfig()

    updated = update_keyword_after_event(state, grade, event_type, now, config.mastery)
    return apply_color_hysteresis(updated, config.color)


def update_keywords_after_event(
    collection: Mapping[str, KeywordState],
    keywords: QuestionKeywords,
    result: LearningEventResult,
    event_type: Union[EventType, str] = DEFAULT_EVENT_TYPE,
    now: Optional[datetime] = None,
    config: Optional[SRSConfig] = None
) -> KeywordCollection:
    """
    Update every keyword tagged on a learning event.

    Impact distribution:
    - Primary keywords receive the full grade
    - Secondary keywords receive 0.6 x grade
    - If the answer was wrong and the chosen option maps to a keyword,
      that keyword gets an independent update with grade 0.2 (the
      misconception was reinforced)

    Each individual update is followed by color hysteresis. A keyword
    tagged more than once is updated once per tag, in the order above.

    Args:
        collection: Current keyword collection
        keywords: Primary / secondary / distractor tags for the item
        result: Performance on the item
        event_type: Kind of learning event
        now: Event timestamp (defaults to now)
        config: Engine config

    Returns:
        New keyword collection
    """
    if now is None:
        now = utc_now()
    now = ensure_utc(now)
    if config is None:
        config = SRSConfig()

    updated: KeywordCollection = dict(collection)

    base_grade = grade_from_performance(
        result.correct,
        result.response_time_ms,
        result.expected_time_ms,
        result.used_hint,
        result.confidence,
    )

    def _apply(keyword: str, grade: float) -> None:
        key = normalize_keyword(keyword)
        if not key:
            return
        state = get_or_create_keyword(updated, key, now)
        updated[key] = process_keyword_event(state, grade, event_type, now, config)

    for kw in keywords.primary:
        _apply(kw, base_grade * PRIMARY_GRADE_FACTOR)

    for kw in keywords.secondary:
        _apply(kw, base_grade * SECONDARY_GRADE_FACTOR)

    if not result.correct and result.selected_distractor is not None:
        distractor_kw = keywords.distractors.get(result.selected_distractor)
        if distractor_kw:
            logger.debug("Reinforced misconception on keyword=%s", distractor_kw)
            _apply(distractor_kw, DISTRACTOR_GRADE)

    return updated


def increment_card_coverage(
    collection: Mapping[str, KeywordState],
    keyword: str,
    count: int = 1,
    now: Optional[datetime] = None
) -> KeywordCollection:
    """
    Record new practice cards created for a keyword.

    Unknown keywords are created. Coverage never drops below 0.
    """
    updated: KeywordCollection = dict(collection)
    key = normalize_keyword(keyword)
    state = get_or_create_keyword(updated, key, now)
    updated[key] = replace(state, card_coverage=max(0, state.card_coverage + count))
    return updated
