"""
Pydantic models for the serialized keyword collection.

These models define the wire/storage shape of keyword state and
normalize incoming records (clamped numbers, normalized keys) before
they are turned back into engine values.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from keyword_srs.constants import Color, S_INITIAL, S_MAX, S_MIN


class KeywordStateRecord(BaseModel):
    """
    Serialized state of a single keyword.

    Timestamps are ISO-8601 strings on the wire; due_at and
    last_review_at may be null.
    """
    model_config = ConfigDict(use_enum_values=True)

    keyword: str = Field(..., description="Normalized keyword (lowercased, trimmed)")
    mastery: float = Field(default=0.0, description="EMA mastery estimate, 0-1")
    stability_days: float = Field(default=S_INITIAL, description="Stability in days")
    due_at: Optional[datetime] = None
    lapses: int = 0
    exposures: int = 0
    card_coverage: int = Field(default=0, description="Practice items available")
    last_review_at: Optional[datetime] = None
    color: Color = Color.RED
    color_stability_counter: int = 0

    @field_validator("keyword")
    @classmethod
    def _normalize_keyword(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("mastery")
    @classmethod
    def _clamp_mastery(cls, value: float) -> float:
        return max(0.0, min(1.0, value))

    @field_validator("stability_days")
    @classmethod
    def _clamp_stability(cls, value: float) -> float:
        return max(S_MIN, min(S_MAX, value))

    @field_validator("lapses", "exposures", "card_coverage", "color_stability_counter")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        return max(0, value)


class KeywordCollectionRecord(RootModel[Dict[str, KeywordStateRecord]]):
    """Serialized keyword collection: keyword -> record."""
    pass
