"""
Metric computations for keyword analytics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Mapping

import pandas as pd

from keyword_srs.analytics.constants import COLOR_ORDER, KEYWORD_FRAME_COLUMNS
from keyword_srs.constants import Color
from keyword_srs.srs.memory_state import (
    KeywordState,
    calculate_keyword_retention,
    is_keyword_due,
)
from keyword_srs.srs.need_score import calculate_need_score


def build_keyword_frame(
    collection: Mapping[str, KeywordState],
    now: datetime
) -> pd.DataFrame:
    """
    One row per keyword with its state and derived scores.
    """
    if not collection:
        return pd.DataFrame(columns=KEYWORD_FRAME_COLUMNS)

    rows = [
        {
            "keyword": keyword,
            "mastery": state.mastery,
            "stability_days": state.stability_days,
            "color": Color(state.color).value,
            "lapses": state.lapses,
            "exposures": state.exposures,
            "card_coverage": state.card_coverage,
            "is_due": is_keyword_due(state, now),
            "retention": calculate_keyword_retention(state, now),
            "need_score": calculate_need_score(state, now),
        }
        for keyword, state in collection.items()
    ]
    return pd.DataFrame(rows, columns=KEYWORD_FRAME_COLUMNS)


def compute_color_distribution(keywords_df: pd.DataFrame) -> pd.Series:
    """
    Keyword count per color, always in red/yellow/green order.
    """
    if keywords_df.empty:
        return pd.Series(0, index=COLOR_ORDER, dtype="int64")
    counts = keywords_df["color"].value_counts()
    return counts.reindex(COLOR_ORDER, fill_value=0).astype("int64")


def compute_mastery_by_color(keywords_df: pd.DataFrame) -> pd.Series:
    """
    Mean mastery per color (0.0 for colors without keywords).
    """
    if keywords_df.empty:
        return pd.Series(0.0, index=COLOR_ORDER, dtype="float64")
    means = keywords_df.groupby("color")["mastery"].mean()
    return means.reindex(COLOR_ORDER, fill_value=0.0).astype("float64")
