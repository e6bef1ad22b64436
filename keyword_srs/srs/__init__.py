"""
Keyword SRS - Spaced Repetition and Mastery Tracking

Main API for the keyword mastery engine.

This package implements pure value-transforming functions for:
- Event grading (correctness, latency, hints, confidence -> grade)
- Keyword mastery updates (EMA mastery, stability, due dates)
- Color hysteresis (stable red/yellow/green classification)
- Need scoring (overdue, mastery, fragility, coverage)
- SM-2 flashcard scheduling (independent of keywords)

Quick start:
    from keyword_srs import srs

    # Apply a learning event to every tagged keyword
    collection = srs.update_keywords_after_event(
        collection,
        srs.QuestionKeywords(primary=["mitosis"], secondary=["cell cycle"]),
        srs.LearningEventResult(correct=True, response_time_ms=4200),
        srs.EventType.QUIZ,
        now,
    )

    # Schedule a flashcard
    card, result = srs.sm2_review(card, quality=4, now=now)
"""

# State values
from keyword_srs.srs.memory_state import (
    KeywordState,
    SM2Card,
    calculate_keyword_retention,
    create_keyword_state,
    is_keyword_due,
    normalize_keyword,
)

# Keyword algorithm
from keyword_srs.srs.grading import grade_from_performance
from keyword_srs.srs.mastery_updates import update_keyword_after_event
from keyword_srs.srs.color import apply_color_hysteresis, get_keyword_color
from keyword_srs.srs.need_score import NeedComponents, calculate_need_score, need_components

# Event dispatch over a collection
from keyword_srs.srs.scheduler import (
    KeywordCollection,
    LearningEventResult,
    QuestionKeywords,
    get_or_create_keyword,
    increment_card_coverage,
    process_keyword_event,
    update_keywords_after_event,
)

# SM-2 cards
from keyword_srs.srs.sm2 import (
    CardDueCount,
    SM2ReviewResult,
    calculate_cards_mastery,
    calculate_retention,
    create_new_card,
    get_due_card_count,
    get_forgetting_curve_points,
    get_urgency_level,
    is_card_due,
    sm2_review,
    sort_by_urgency,
)

# Serialization
from keyword_srs.srs.persistence import (
    deserialize_keyword_collection,
    keyword_state_from_record,
    keyword_state_to_record,
    serialize_keyword_collection,
)

# Errors and enums
from keyword_srs.srs.exceptions import (
    InvalidRatingError,
    KeywordCollectionError,
    KeywordSRSError,
)
from keyword_srs.constants import Color, EventType


__all__ = [
    # State
    "KeywordState",
    "SM2Card",
    "KeywordCollection",
    "create_keyword_state",
    "normalize_keyword",
    "is_keyword_due",
    "calculate_keyword_retention",

    # Keyword algorithm
    "grade_from_performance",
    "update_keyword_after_event",
    "get_keyword_color",
    "apply_color_hysteresis",
    "calculate_need_score",
    "need_components",
    "NeedComponents",

    # Event dispatch
    "QuestionKeywords",
    "LearningEventResult",
    "get_or_create_keyword",
    "process_keyword_event",
    "update_keywords_after_event",
    "increment_card_coverage",

    # SM-2
    "SM2ReviewResult",
    "CardDueCount",
    "create_new_card",
    "sm2_review",
    "is_card_due",
    "calculate_retention",
    "calculate_cards_mastery",
    "sort_by_urgency",
    "get_urgency_level",
    "get_due_card_count",
    "get_forgetting_curve_points",

    # Serialization
    "serialize_keyword_collection",
    "deserialize_keyword_collection",
    "keyword_state_to_record",
    "keyword_state_from_record",

    # Errors and enums
    "KeywordSRSError",
    "InvalidRatingError",
    "KeywordCollectionError",
    "Color",
    "EventType",
]
