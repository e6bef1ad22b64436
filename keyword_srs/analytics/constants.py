"""
Constants for keyword analytics frames.
"""

from __future__ import annotations

from typing import Final

from keyword_srs.constants import Color


COLOR_ORDER: Final[list[str]] = [Color.RED.value, Color.YELLOW.value, Color.GREEN.value]

KEYWORD_FRAME_COLUMNS: Final[list[str]] = [
    "keyword",
    "mastery",
    "stability_days",
    "color",
    "lapses",
    "exposures",
    "card_coverage",
    "is_due",
    "retention",
    "need_score",
]
