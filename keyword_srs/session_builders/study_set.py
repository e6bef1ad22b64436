"""
Study set selection.

Ranks keywords by need score to build the keyword list for the next
study session, and lists keywords that are due for review.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional

from keyword_srs.config import NeedScoreConfig, SelectionConfig
from keyword_srs.session_builders.pool_utils import rank_by_score
from keyword_srs.srs.memory_state import (
    KeywordState,
    calculate_keyword_retention,
    ensure_utc,
    is_keyword_due,
    utc_now,
)
from keyword_srs.srs.need_score import calculate_need_score


@dataclass(frozen=True)
class StudyCandidate:
    keyword: str
    need_score: float
    state: KeywordState


@dataclass(frozen=True)
class DueKeyword:
    keyword: str
    state: KeywordState
    retention: float


def select_keywords_for_study(
    collection: Mapping[str, KeywordState],
    now: Optional[datetime] = None,
    max_keywords: Optional[int] = None,
    min_need_score: Optional[float] = None,
    config: Optional[SelectionConfig] = None,
    need_config: Optional[NeedScoreConfig] = None
) -> list[StudyCandidate]:
    """
    Select keywords for a study session based on need scores.

    Keywords scoring below min_need_score are dropped; the rest are
    sorted by need (highest first, ties keep collection order) and
    truncated to max_keywords.

    Args:
        collection: Keyword collection
        now: Evaluation time (defaults to now)
        max_keywords: Maximum number to select (default 10)
        min_need_score: Minimum need score to consider (default 0.3)
        config: Selection defaults used when the arguments are omitted
        need_config: Need score tuning

    Returns:
        Sorted list of StudyCandidate
    """
    if now is None:
        now = utc_now()
    now = ensure_utc(now)
    if config is None:
        config = SelectionConfig()
    if max_keywords is None:
        max_keywords = config.max_keywords
    if min_need_score is None:
        min_need_score = config.min_need_score

    candidates = []
    for keyword, state in collection.items():
        need_score = calculate_need_score(state, now, need_config)
        if need_score >= min_need_score:
            candidates.append(StudyCandidate(keyword=keyword, need_score=need_score, state=state))

    return rank_by_score(candidates, lambda c: c.need_score, max_keywords)


def get_due_keywords(
    collection: Mapping[str, KeywordState],
    now: Optional[datetime] = None,
    max_count: Optional[int] = None
) -> list[DueKeyword]:
    """
    Keywords due for review, lowest predicted retention first.

    Used for flashcard deck building.
    """
    if now is None:
        now = utc_now()
    now = ensure_utc(now)

    due = [
        DueKeyword(
            keyword=keyword,
            state=state,
            retention=calculate_keyword_retention(state, now),
        )
        for keyword, state in collection.items()
        if is_keyword_due(state, now)
    ]
    due.sort(key=lambda d: d.retention)

    if max_count:
        return due[:max_count]
    return due
