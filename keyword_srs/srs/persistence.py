"""
Persistence Layer - Keyword Collection Serialization

Converts keyword collections to and from a JSON blob. Where the blob is
stored (local cache, backend, file) is the caller's business.

Blob shape:
    {"<keyword>": {"keyword": ..., "mastery": ..., "stability_days": ...,
                   "due_at": ISO-8601, "lapses": ..., "exposures": ...,
                   "card_coverage": ..., "last_review_at": ISO-8601|null,
                   "color": "red"|"yellow"|"green",
                   "color_stability_counter": ...}}
"""

from __future__ import annotations
from typing import Mapping, Optional, Union
import logging

from keyword_srs.schemas import KeywordCollectionRecord, KeywordStateRecord
from keyword_srs.constants import Color
from keyword_srs.srs.exceptions import KeywordCollectionError
from keyword_srs.srs.memory_state import KeywordState, ensure_utc, normalize_keyword
from keyword_srs.srs.scheduler import KeywordCollection

logger = logging.getLogger(__name__)


def keyword_state_to_record(state: KeywordState) -> KeywordStateRecord:
    return KeywordStateRecord(
        keyword=state.keyword,
        mastery=state.mastery,
        stability_days=state.stability_days,
        due_at=state.due_at,
        lapses=state.lapses,
        exposures=state.exposures,
        card_coverage=state.card_coverage,
        last_review_at=state.last_review_at,
        color=Color(state.color),
        color_stability_counter=state.color_stability_counter,
    )


def keyword_state_from_record(
    record: KeywordStateRecord,
    key: Optional[str] = None
) -> KeywordState:
    """
    Build an engine value from a validated record.

    Args:
        record: Validated record
        key: Collection key; overrides record.keyword when given
    """
    keyword = normalize_keyword(key) if key is not None else record.keyword
    return KeywordState(
        keyword=keyword,
        mastery=record.mastery,
        stability_days=record.stability_days,
        due_at=ensure_utc(record.due_at),
        lapses=record.lapses,
        exposures=record.exposures,
        card_coverage=record.card_coverage,
        last_review_at=ensure_utc(record.last_review_at),
        color=Color(record.color),
        color_stability_counter=record.color_stability_counter,
    )


def serialize_keyword_collection(collection: Mapping[str, KeywordState]) -> str:
    """Export a keyword collection as a JSON string."""
    records = {
        key: keyword_state_to_record(state)
        for key, state in collection.items()
    }
    return KeywordCollectionRecord(records).model_dump_json()


def deserialize_keyword_collection(
    data: Union[str, bytes],
    strict: bool = False
) -> KeywordCollection:
    """
    Import a keyword collection from a JSON string.

    By default a malformed blob yields an empty collection and a
    warning is logged. With strict=True the failure is raised instead.

    Args:
        data: JSON produced by serialize_keyword_collection
        strict: Raise KeywordCollectionError instead of returning {}

    Returns:
        Keyword collection keyed by normalized keyword

    Raises:
        KeywordCollectionError: If strict and the blob is malformed
    """
    try:
        parsed = KeywordCollectionRecord.model_validate_json(data)
    except (ValueError, TypeError) as e:
        if strict:
            raise KeywordCollectionError(f"Malformed keyword collection: {e}") from e
        logger.warning("Discarding malformed keyword collection: %s", e)
        return {}

    collection: KeywordCollection = {}
    for key, record in parsed.root.items():
        state = keyword_state_from_record(record, key)
        collection[state.keyword] = state
    return collection
