"""
Tests for the SM-2 card scheduler.

Covers:
1. Interval / repetition transitions
2. Ease factor updates and the 1.3 floor
3. Card due checks, retention and mastery helpers
4. Urgency ordering and due counts
"""

from datetime import datetime, timedelta, timezone
import random

import pytest

from keyword_srs import srs
from keyword_srs.srs import SM2Card


NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


# ---- Transitions ----

def test_new_card_defaults():
    card = srs.create_new_card()
    assert card.ease == 2.5
    assert card.interval == 0
    assert card.repetitions == 0
    assert card.next_review is None


def test_first_success_schedules_one_day():
    card, result = srs.sm2_review(srs.create_new_card(), 4, NOW)

    assert result.repetitions == 1
    assert result.interval == 1
    assert result.ease == pytest.approx(2.5)
    assert result.next_review == NOW + timedelta(days=1)
    assert card.last_review == NOW
    assert card.next_review == result.next_review


def test_second_success_takes_six_day_branch():
    # ease 2.5, interval 6, repetitions 1, perfect recall
    card = SM2Card(ease=2.5, interval=6, repetitions=1)
    updated, result = srs.sm2_review(card, 5, NOW)

    assert result.repetitions == 2
    assert result.ease == pytest.approx(2.60)
    assert result.interval == 6
    assert updated.next_review == NOW + timedelta(days=6)


def test_later_success_multiplies_by_previous_ease():
    card = SM2Card(ease=2.5, interval=6, repetitions=2)
    _, result = srs.sm2_review(card, 5, NOW)

    assert result.interval == 15
    assert result.repetitions == 3
    assert result.ease == pytest.approx(2.6)


def test_half_intervals_round_up():
    card = SM2Card(ease=2.5, interval=5, repetitions=3)
    _, result = srs.sm2_review(card, 4, NOW)
    assert result.interval == 13


@pytest.mark.parametrize("quality", [1, 2])
def test_failure_resets_streak(quality):
    card = SM2Card(ease=2.5, interval=16, repetitions=4)
    updated, result = srs.sm2_review(card, quality, NOW)

    assert result.repetitions == 0
    assert result.interval == 1
    assert updated.next_review == NOW + timedelta(days=1)


@pytest.mark.parametrize("quality,expected_ease", [
    (1, 1.96),
    (2, 2.18),
    (3, 2.36),
    (4, 2.5),
    (5, 2.6),
])
def test_ease_update_by_quality(quality, expected_ease):
    _, result = srs.sm2_review(SM2Card(ease=2.5, interval=6, repetitions=2), quality, NOW)
    assert result.ease == pytest.approx(expected_ease)


def test_ease_never_below_floor():
    card = srs.create_new_card()
    for _ in range(15):
        card, result = srs.sm2_review(card, 1, NOW)
        assert result.ease >= 1.3

    assert card.ease == pytest.approx(1.3)


def test_random_quality_sequences_keep_ease_floor():
    rng = random.Random(7)

    # Short sequences keep the longest possible streak inside datetime range
    for _ in range(50):
        card = srs.create_new_card()
        for _ in range(12):
            quality = rng.randint(1, 5)
            previous = card
            card, result = srs.sm2_review(card, quality, NOW)

            assert result.ease >= 1.3
            assert result.interval >= 1
            if quality < 3:
                assert (result.repetitions, result.interval) == (0, 1)
            else:
                assert result.repetitions == previous.repetitions + 1


@pytest.mark.parametrize("quality", [0, 6, 3.5, True])
def test_invalid_quality_rejected(quality):
    with pytest.raises(srs.InvalidRatingError):
        srs.sm2_review(srs.create_new_card(), quality, NOW)


def test_review_does_not_mutate_input():
    card = SM2Card(ease=2.5, interval=6, repetitions=2)
    srs.sm2_review(card, 5, NOW)
    assert card == SM2Card(ease=2.5, interval=6, repetitions=2)


# ---- Due checks, retention, mastery ----

def test_card_due():
    assert srs.is_card_due(srs.create_new_card(), NOW)
    assert srs.is_card_due(SM2Card(next_review=NOW), NOW)
    assert not srs.is_card_due(SM2Card(next_review=NOW + timedelta(hours=1)), NOW)


def test_card_retention_curve():
    last = NOW - timedelta(days=7)
    # S = 7 * 2.5 * 0.6 = 10.5, R = exp(-7 / 10.5) ~= 0.513
    assert srs.calculate_retention(last, 7, 2.5, NOW) == 51
    assert srs.calculate_retention(NOW, 7, 2.5, NOW) == 100
    assert srs.calculate_retention(last, 0, 2.5, NOW) == 0
    # Future review dates count as zero elapsed days
    assert srs.calculate_retention(NOW + timedelta(days=2), 7, 2.5, NOW) == 100


def test_cards_mastery():
    assert srs.calculate_cards_mastery([]) == 0
    assert srs.calculate_cards_mastery([SM2Card(ease=2.5, repetitions=5)]) == 100
    assert srs.calculate_cards_mastery([SM2Card(ease=1.3, repetitions=0)]) == 0
    assert srs.calculate_cards_mastery([
        SM2Card(ease=2.5, repetitions=5),
        SM2Card(ease=1.3, repetitions=0),
    ]) == 50


@pytest.mark.parametrize("retention,level", [
    (0, "critical"),
    (39, "critical"),
    (40, "warning"),
    (59, "warning"),
    (60, "info"),
    (79, "info"),
    (80, "none"),
    (100, "none"),
])
def test_urgency_level(retention, level):
    assert srs.get_urgency_level(retention) == level


def test_due_card_count():
    cards = [
        SM2Card(),                                         # never scheduled
        SM2Card(next_review=NOW - timedelta(days=3)),      # overdue > 1 day
        SM2Card(next_review=NOW - timedelta(hours=12)),    # due today
        SM2Card(next_review=NOW + timedelta(days=2)),      # not due
    ]
    counts = srs.get_due_card_count(cards, NOW)

    assert counts.due == 3
    assert counts.total == 4
    assert counts.urgent_count == 1


def test_sort_by_urgency():
    future = SM2Card(ease=2.5, next_review=NOW + timedelta(days=3))
    overdue = SM2Card(ease=2.5, next_review=NOW - timedelta(days=1))
    unscheduled = SM2Card(ease=2.0)
    overdue_hard = SM2Card(ease=1.5, next_review=NOW - timedelta(days=1))

    items = [
        (future, 40),
        (unscheduled, None),
        (overdue, 80),
        (overdue_hard, 80),
    ]
    ordered = srs.sort_by_urgency(items, NOW)

    assert [card for card, _ in ordered] == [overdue_hard, overdue, unscheduled, future]


def test_forgetting_curve_points():
    points = srs.get_forgetting_curve_points(ease=2.5, interval=7, days=30)

    assert list(points.columns) == ["day", "retention_actual", "retention_decay"]
    assert len(points) == 31
    assert points.iloc[0]["retention_decay"] == 100
    assert points.iloc[0]["retention_actual"] == 100
    assert points["retention_decay"].is_monotonic_decreasing
    # Review days restart the boosted curve
    assert points.iloc[7]["retention_actual"] == 100
    assert points.iloc[7]["retention_actual"] > points.iloc[7]["retention_decay"]


def test_forgetting_curve_without_reviews_matches_decay():
    points = srs.get_forgetting_curve_points(ease=2.5, interval=7, days=10, with_reviews=False)
    assert (points["retention_actual"] == points["retention_decay"]).all()
