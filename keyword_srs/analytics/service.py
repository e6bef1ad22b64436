"""
Service layer to assemble keyword collection summaries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional

from keyword_srs.analytics.metrics import (
    build_keyword_frame,
    compute_color_distribution,
    compute_mastery_by_color,
)
from keyword_srs.analytics.types import CollectionDashboardData, KeywordStats
from keyword_srs.constants import TARGET_COVERAGE, Color
from keyword_srs.srs.memory_state import KeywordState, ensure_utc, is_keyword_due, utc_now


def get_keyword_stats(
    collection: Mapping[str, KeywordState],
    now: Optional[datetime] = None,
    target_coverage: int = TARGET_COVERAGE
) -> KeywordStats:
    """
    Summary statistics: totals per color, average mastery, due count and
    keywords below the coverage target.
    """
    if now is None:
        now = utc_now()
    now = ensure_utc(now)

    by_color = {color.value: 0 for color in Color}
    total_mastery = 0.0
    due_count = 0
    needing_coverage = 0

    for state in collection.values():
        by_color[Color(state.color).value] += 1
        total_mastery += state.mastery
        if is_keyword_due(state, now):
            due_count += 1
        if state.card_coverage < target_coverage:
            needing_coverage += 1

    total = len(collection)
    return KeywordStats(
        total=total,
        by_color=by_color,
        average_mastery=total_mastery / total if total > 0 else 0.0,
        due_count=due_count,
        needing_coverage=needing_coverage,
    )


def build_collection_dashboard(
    collection: Mapping[str, KeywordState],
    now: Optional[datetime] = None
) -> CollectionDashboardData:
    """
    Build all KPI values and frames needed by a keyword mastery dashboard.
    """
    if now is None:
        now = utc_now()
    now = ensure_utc(now)

    keywords_df = build_keyword_frame(collection, now)

    return CollectionDashboardData(
        stats=get_keyword_stats(collection, now),
        keywords=keywords_df,
        color_distribution=compute_color_distribution(keywords_df),
        mastery_by_color=compute_mastery_by_color(keywords_df),
    )
