"""
Color Hysteresis

Turns keyword mastery into a stable red/yellow/green label.

Thresholds for moving up are stricter than for moving down, and any
change needs `stability_required` consecutive qualifying observations.
The counter is stored next to the color and only has meaning relative
to it; it resets to 0 on every color change.

Transitions:
    red    -> yellow  mastery >= yellow_up
    yellow -> green   mastery >= green_up
    yellow -> red     mastery <  yellow_down
    green  -> yellow  mastery <  green_down

In yellow, mastery in [yellow_down, green_up) resets the counter, so
borderline grades never accumulate toward promotion.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Optional, Tuple
import logging

from keyword_srs.config import ColorConfig
from keyword_srs.constants import Color
from keyword_srs.srs.memory_state import KeywordState

logger = logging.getLogger(__name__)

DEFAULT_COLOR_CONFIG = ColorConfig()


def _step(counter: int, target: Color, current: Color, required: int) -> Tuple[Color, int]:
    """Count one qualifying observation; switch to target at the threshold."""
    counter += 1
    if counter >= required:
        return target, 0
    return current, counter


def get_keyword_color(
    state: KeywordState,
    config: Optional[ColorConfig] = None
) -> Tuple[Color, int]:
    """
    Evaluate the hysteresis state machine for one observation.

    Args:
        state: Keyword state (mastery, color and counter are read)
        config: Thresholds

    Returns:
        (new_color, new_counter)
    """
    if config is None:
        config = DEFAULT_COLOR_CONFIG

    mastery = state.mastery
    color = Color(state.color)
    counter = state.color_stability_counter
    required = config.stability_required

    if color == Color.RED:
        if mastery >= config.yellow_up:
            return _step(counter, Color.YELLOW, color, required)
        return color, 0

    if color == Color.YELLOW:
        if mastery >= config.green_up:
            return _step(counter, Color.GREEN, color, required)
        if mastery < config.yellow_down:
            return _step(counter, Color.RED, color, required)
        return color, 0

    # Green
    if mastery < config.green_down:
        return _step(counter, Color.YELLOW, color, required)
    return color, 0


def apply_color_hysteresis(
    state: KeywordState,
    config: Optional[ColorConfig] = None
) -> KeywordState:
    """Return state with color and counter re-evaluated."""
    color, counter = get_keyword_color(state, config)
    if color != state.color:
        logger.info(
            "keyword=%s color %s -> %s (mastery %.3f)",
            state.keyword, Color(state.color).value, color.value, state.mastery
        )
    return replace(state, color=color, color_stability_counter=counter)
