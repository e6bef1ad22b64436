"""
Keyword SRS Constants and Parameters

All configurable parameters for the keyword mastery engine in one place.
The dataclass configs in keyword_srs.config default to these values.
"""

from enum import Enum


# ---- Enums ----

class Color(str, Enum):
    """Displayed mastery tier for a keyword."""
    RED = "red"        # Needs urgent review
    YELLOW = "yellow"  # Partial knowledge
    GREEN = "green"    # Consolidated


class EventType(str, Enum):
    """Kind of learning event that produced a grade."""
    QUIZ = "quiz"
    FLASHCARD = "flashcard"
    READING = "reading"


DEFAULT_EVENT_TYPE = EventType.FLASHCARD


# ---- SM-2 Card Scheduling ----

SM2_DEFAULT_EASE = 2.5
SM2_MIN_EASE = 1.3
SM2_PASS_QUALITY = 3       # Quality below this resets the card
SM2_MIN_QUALITY = 1
SM2_MAX_QUALITY = 5
SM2_FIRST_INTERVAL = 1     # Days after first success (or any failure)
SM2_SECOND_INTERVAL = 6    # Days after second consecutive success

# Stability proxy for card retention curves: S = interval * ease * factor
CARD_STABILITY_FACTOR = 0.6
CARD_MASTERY_REPETITIONS = 5  # Repetitions counted as "mastered"


# ---- Event Grading ----

DEFAULT_EXPECTED_TIME_MS = 10000
SLOW_RATIO = 1.5          # Response slower than 1.5x expected
VERY_SLOW_RATIO = 2.0     # Response slower than 2x expected
SLOW_PENALTY = 0.1
VERY_SLOW_PENALTY = 0.2
HINT_PENALTY = 0.2
CONFIDENCE_BLEND = 0.3    # Weight of self-reported confidence
CLOSE_ATTEMPT_CONFIDENCE = 0.7
CLOSE_ATTEMPT_GRADE = 0.3


# ---- Keyword Mastery ----

BASE_LEARNING_RATE = 0.2
MIN_EVENTS_FOR_FULL_IMPACT = 3

EVENT_WEIGHTS = {
    EventType.QUIZ: 1.0,
    EventType.FLASHCARD: 0.8,
    EventType.READING: 0.3,
}

S_MIN = 0.5         # Minimum stability (days)
S_MAX = 180.0       # Maximum stability (days)
S_INITIAL = 0.5     # Stability of a brand new keyword

NEUTRAL_GRADE = 0.6       # Grades above this grow stability
LAPSE_GRADE = 0.4         # Grades below this count as a lapse
STABILITY_GAIN = 0.6      # S_new = S * (1 + gain * (grade - neutral))
STABILITY_DECAY = 0.7     # S_new = S * decay on a lapse

R_TARGET = 0.85     # Retention target used to place the next due date


# ---- Color Hysteresis ----

GREEN_UP = 0.80
GREEN_DOWN = 0.70
YELLOW_UP = 0.50
YELLOW_DOWN = 0.40
STABILITY_REQUIRED = 2    # Consecutive observations before a color change


# ---- Need Score ----

GRACE_DAYS = 1.0
TARGET_CARDS = 5
OVERDUE_WEIGHT = 0.45
MASTERY_WEIGHT = 0.30
FRAGILITY_WEIGHT = 0.15
COVERAGE_WEIGHT = 0.10


# ---- Multi-keyword events ----

PRIMARY_GRADE_FACTOR = 1.0
SECONDARY_GRADE_FACTOR = 0.6
DISTRACTOR_GRADE = 0.2    # Fixed low grade for a reinforced misconception


# ---- Study Set Selection ----

STUDY_MAX_KEYWORDS = 10
STUDY_MIN_NEED_SCORE = 0.3


# ---- Coverage ----

TARGET_COVERAGE = 3
COVERAGE_MAX_KEYWORDS = 5
COVERAGE_TIE_BAND = 0.1   # Need scores closer than this sort by coverage
CRITICAL_URGENCY = 0.7
HIGH_URGENCY = 0.4
HIGH_GENERATION_SHARE = 0.5
MAX_RECOMMENDED_GENERATION = 20


# ---- Card urgency levels (retention percent) ----

URGENCY_CRITICAL_BELOW = 40
URGENCY_WARNING_BELOW = 60
URGENCY_INFO_BELOW = 80
