"""
Event Grading

Converts a raw performance observation into a normalized grade in [0, 1].
"""

from __future__ import annotations
from typing import Optional

from keyword_srs.constants import (
    CLOSE_ATTEMPT_CONFIDENCE,
    CLOSE_ATTEMPT_GRADE,
    CONFIDENCE_BLEND,
    DEFAULT_EXPECTED_TIME_MS,
    HINT_PENALTY,
    SLOW_PENALTY,
    SLOW_RATIO,
    VERY_SLOW_PENALTY,
    VERY_SLOW_RATIO,
)
from keyword_srs.srs.memory_state import clamp01


def grade_from_performance(
    correct: bool,
    response_time_ms: float,
    expected_time_ms: float = DEFAULT_EXPECTED_TIME_MS,
    used_hint: bool = False,
    confidence: Optional[float] = None
) -> float:
    """
    Convert performance metrics to a grade (0 to 1).

    Incorrect answers:
        0.3 for a close attempt (confidence > 0.7), else 0.0

    Correct answers start at 1.0 and are penalized for:
        - slow response (-0.2 beyond 2x expected, -0.1 beyond 1.5x)
        - hint usage (-0.2)
    then blended with self-reported confidence (70/30) when given.

    Args:
        correct: Was the answer correct?
        response_time_ms: How long the answer took
        expected_time_ms: Reasonable time for this item
        used_hint: Did the learner need a hint?
        confidence: Optional self-reported confidence (0-1)

    Returns:
        Grade between 0 and 1
    """
    if not correct:
        if confidence is not None and confidence > CLOSE_ATTEMPT_CONFIDENCE:
            return CLOSE_ATTEMPT_GRADE
        return 0.0

    if expected_time_ms is None or expected_time_ms <= 0:
        expected_time_ms = DEFAULT_EXPECTED_TIME_MS

    grade = 1.0

    time_ratio = response_time_ms / expected_time_ms
    if time_ratio > VERY_SLOW_RATIO:
        grade -= VERY_SLOW_PENALTY
    elif time_ratio > SLOW_RATIO:
        grade -= SLOW_PENALTY

    if used_hint:
        grade -= HINT_PENALTY

    if confidence is not None:
        grade = grade * (1.0 - CONFIDENCE_BLEND) + confidence * CONFIDENCE_BLEND

    return clamp01(grade)
