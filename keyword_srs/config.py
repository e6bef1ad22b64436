"""
Engine configuration.

Each component takes an optional frozen config; omitted configs (and
omitted fields) fall back to the defaults in keyword_srs.constants.

Values can be overridden from the environment (or a .env file) with
KEYWORD_SRS_* variables via load_config_from_env().
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from dotenv import load_dotenv

from keyword_srs.constants import (
    BASE_LEARNING_RATE,
    COVERAGE_MAX_KEYWORDS,
    COVERAGE_WEIGHT,
    DEFAULT_EVENT_TYPE,
    EVENT_WEIGHTS,
    FRAGILITY_WEIGHT,
    GRACE_DAYS,
    GREEN_DOWN,
    GREEN_UP,
    MASTERY_WEIGHT,
    MIN_EVENTS_FOR_FULL_IMPACT,
    OVERDUE_WEIGHT,
    R_TARGET,
    S_MAX,
    S_MIN,
    STABILITY_REQUIRED,
    STUDY_MAX_KEYWORDS,
    STUDY_MIN_NEED_SCORE,
    TARGET_CARDS,
    TARGET_COVERAGE,
    YELLOW_DOWN,
    YELLOW_UP,
    EventType,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "KEYWORD_SRS_"


def coerce_event_type(event_type: Union[EventType, str, None]) -> EventType:
    """
    Map an event type (enum or raw string) onto EventType.

    Unknown or missing values fall back to the default (flashcard).
    """
    if isinstance(event_type, EventType):
        return event_type
    if isinstance(event_type, str):
        try:
            return EventType(event_type.strip().lower())
        except ValueError:
            pass
    logger.debug("Unknown event type %r, using %s", event_type, DEFAULT_EVENT_TYPE.value)
    return DEFAULT_EVENT_TYPE


@dataclass(frozen=True)
class MasteryConfig:
    """Tuning for keyword mastery / stability updates."""
    base_learning_rate: float = BASE_LEARNING_RATE
    min_events_for_full_impact: int = MIN_EVENTS_FOR_FULL_IMPACT
    # (event_type, weight) pairs; a mapping passed in is frozen to pairs
    event_weights: Tuple[Tuple[Union[EventType, str], float], ...] = field(
        default_factory=lambda: tuple(EVENT_WEIGHTS.items())
    )
    min_stability: float = S_MIN
    max_stability: float = S_MAX
    target_retention: float = R_TARGET

    def __post_init__(self):
        if isinstance(self.event_weights, Mapping):
            object.__setattr__(self, "event_weights", tuple(self.event_weights.items()))

    def event_weight(self, event_type: Union[EventType, str, None]) -> float:
        event_type = coerce_event_type(event_type)
        weights = dict(self.event_weights)
        weight = weights.get(event_type)
        if weight is None:
            weight = weights.get(event_type.value)
        if weight is None:
            weight = EVENT_WEIGHTS[event_type]
        return weight


@dataclass(frozen=True)
class ColorConfig:
    """Hysteresis thresholds for the red/yellow/green classification."""
    green_up: float = GREEN_UP
    green_down: float = GREEN_DOWN
    yellow_up: float = YELLOW_UP
    yellow_down: float = YELLOW_DOWN
    stability_required: int = STABILITY_REQUIRED


@dataclass(frozen=True)
class NeedScoreConfig:
    grace_days: float = GRACE_DAYS
    target_cards: int = TARGET_CARDS
    overdue_weight: float = OVERDUE_WEIGHT
    mastery_weight: float = MASTERY_WEIGHT
    fragility_weight: float = FRAGILITY_WEIGHT
    coverage_weight: float = COVERAGE_WEIGHT


@dataclass(frozen=True)
class SelectionConfig:
    max_keywords: int = STUDY_MAX_KEYWORDS
    min_need_score: float = STUDY_MIN_NEED_SCORE


@dataclass(frozen=True)
class CoverageConfig:
    target_coverage: int = TARGET_COVERAGE
    max_keywords: int = COVERAGE_MAX_KEYWORDS


@dataclass(frozen=True)
class SRSConfig:
    """All component configs bundled together."""
    mastery: MasteryConfig = field(default_factory=MasteryConfig)
    color: ColorConfig = field(default_factory=ColorConfig)
    need: NeedScoreConfig = field(default_factory=NeedScoreConfig)
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    coverage: CoverageConfig = field(default_factory=CoverageConfig)


# ---- Environment overrides ----

def _env_number(name: str, default, cast=float):
    """
    Read KEYWORD_SRS_<name> from the environment.

    Missing values return the default; unparsable values log a warning
    and return the default.
    """
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s%s=%r, using %r", ENV_PREFIX, name, raw, default)
        return default


def get_log_level(default: str = "INFO") -> str:
    """Log level requested through KEYWORD_SRS_LOG_LEVEL."""
    return os.getenv(ENV_PREFIX + "LOG_LEVEL", default).upper()


def load_config_from_env(dotenv_path: Optional[str] = None) -> SRSConfig:
    """
    Build an SRSConfig from KEYWORD_SRS_* environment variables.

    A .env file is loaded first (existing environment variables win).

    Args:
        dotenv_path: Explicit .env path (default: search upwards from cwd)

    Returns:
        SRSConfig with overrides applied
    """
    load_dotenv(dotenv_path)

    mastery = MasteryConfig(
        base_learning_rate=_env_number("BASE_LEARNING_RATE", BASE_LEARNING_RATE),
        min_events_for_full_impact=_env_number(
            "MIN_EVENTS_FOR_FULL_IMPACT", MIN_EVENTS_FOR_FULL_IMPACT, int
        ),
        min_stability=_env_number("MIN_STABILITY", S_MIN),
        max_stability=_env_number("MAX_STABILITY", S_MAX),
        target_retention=_env_number("TARGET_RETENTION", R_TARGET),
    )
    if mastery.min_stability > mastery.max_stability:
        logger.warning(
            "MIN_STABILITY %.2f exceeds MAX_STABILITY %.2f, using defaults",
            mastery.min_stability, mastery.max_stability
        )
        mastery = MasteryConfig(
            base_learning_rate=mastery.base_learning_rate,
            min_events_for_full_impact=mastery.min_events_for_full_impact,
            target_retention=mastery.target_retention,
        )
    if not 0.0 < mastery.target_retention < 1.0:
        logger.warning("TARGET_RETENTION must be in (0, 1), using %.2f", R_TARGET)
        mastery = MasteryConfig(
            base_learning_rate=mastery.base_learning_rate,
            min_events_for_full_impact=mastery.min_events_for_full_impact,
            min_stability=mastery.min_stability,
            max_stability=mastery.max_stability,
        )

    need = NeedScoreConfig(
        grace_days=_env_number("GRACE_DAYS", GRACE_DAYS),
        target_cards=_env_number("TARGET_CARDS", TARGET_CARDS, int),
    )
    selection = SelectionConfig(
        max_keywords=_env_number("STUDY_MAX_KEYWORDS", STUDY_MAX_KEYWORDS, int),
        min_need_score=_env_number("STUDY_MIN_NEED_SCORE", STUDY_MIN_NEED_SCORE),
    )
    coverage = CoverageConfig(
        target_coverage=_env_number("TARGET_COVERAGE", TARGET_COVERAGE, int),
        max_keywords=_env_number("COVERAGE_MAX_KEYWORDS", COVERAGE_MAX_KEYWORDS, int),
    )

    return SRSConfig(mastery=mastery, need=need, selection=selection, coverage=coverage)
