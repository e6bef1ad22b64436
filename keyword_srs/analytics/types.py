"""
Types for keyword analytics.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class KeywordStats:
    """
    Summary statistics for a keyword collection.
    """
    total: int
    by_color: dict[str, int]
    average_mastery: float
    due_count: int
    needing_coverage: int


@dataclass(frozen=True)
class CollectionDashboardData:
    """
    Precomputed metrics and frames for a keyword collection dashboard.
    """
    stats: KeywordStats
    keywords: pd.DataFrame
    color_distribution: pd.Series
    mastery_by_color: pd.Series
