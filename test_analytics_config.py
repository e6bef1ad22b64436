"""
Tests for collection analytics, environment config and logging setup.
"""

from datetime import datetime, timedelta, timezone
import json
import logging
import os
import sys

import pytest

from keyword_srs.analytics import build_collection_dashboard, build_keyword_frame, get_keyword_stats
from keyword_srs.analytics.constants import KEYWORD_FRAME_COLUMNS
from keyword_srs.config import MasteryConfig, SRSConfig, load_config_from_env
from keyword_srs.constants import Color
from keyword_srs.logging_config import DATE_FORMAT, LOGGER_NAME, JsonLineFormatter, setup_logging
from keyword_srs.srs import KeywordState, deserialize_keyword_collection


NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

ENV_KEYS = [
    "KEYWORD_SRS_BASE_LEARNING_RATE",
    "KEYWORD_SRS_MIN_EVENTS_FOR_FULL_IMPACT",
    "KEYWORD_SRS_MIN_STABILITY",
    "KEYWORD_SRS_MAX_STABILITY",
    "KEYWORD_SRS_TARGET_RETENTION",
    "KEYWORD_SRS_GRACE_DAYS",
    "KEYWORD_SRS_TARGET_CARDS",
    "KEYWORD_SRS_STUDY_MAX_KEYWORDS",
    "KEYWORD_SRS_STUDY_MIN_NEED_SCORE",
    "KEYWORD_SRS_TARGET_COVERAGE",
    "KEYWORD_SRS_COVERAGE_MAX_KEYWORDS",
    "KEYWORD_SRS_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield monkeypatch
    # load_dotenv writes straight to os.environ
    for key in ENV_KEYS:
        os.environ.pop(key, None)


@pytest.fixture
def collection():
    return {
        "mitosis": KeywordState(
            keyword="mitosis", mastery=0.9, color=Color.GREEN, card_coverage=4,
            due_at=NOW + timedelta(days=3), last_review_at=NOW - timedelta(days=1),
            stability_days=10.0, exposures=12,
        ),
        "meiosis": KeywordState(
            keyword="meiosis", mastery=0.6, color=Color.YELLOW, card_coverage=1,
            due_at=NOW - timedelta(days=1), last_review_at=NOW - timedelta(days=4),
            stability_days=3.0, exposures=6, lapses=1,
        ),
        "osmosis": KeywordState(keyword="osmosis"),
    }


# ---- Analytics ----

def test_keyword_stats(collection):
    stats = get_keyword_stats(collection, NOW)

    assert stats.total == 3
    assert stats.by_color == {"red": 1, "yellow": 1, "green": 1}
    assert stats.average_mastery == pytest.approx(0.5)
    assert stats.due_count == 2
    assert stats.needing_coverage == 2


def test_keyword_stats_empty():
    stats = get_keyword_stats({}, NOW)
    assert stats.total == 0
    assert stats.average_mastery == 0.0
    assert stats.by_color == {"red": 0, "yellow": 0, "green": 0}


def test_keyword_frame(collection):
    frame = build_keyword_frame(collection, NOW)

    assert list(frame.columns) == KEYWORD_FRAME_COLUMNS
    assert len(frame) == 3
    row = frame.set_index("keyword").loc["osmosis"]
    assert row["retention"] == 0.0
    assert row["need_score"] == pytest.approx(0.85)
    assert bool(row["is_due"])


def test_dashboard(collection):
    dashboard = build_collection_dashboard(collection, NOW)

    assert dashboard.stats.total == 3
    assert list(dashboard.color_distribution.index) == ["red", "yellow", "green"]
    assert dashboard.color_distribution.tolist() == [1, 1, 1]
    assert dashboard.mastery_by_color["green"] == pytest.approx(0.9)
    assert dashboard.mastery_by_color["red"] == pytest.approx(0.0)


def test_dashboard_empty():
    dashboard = build_collection_dashboard({}, NOW)

    assert dashboard.keywords.empty
    assert dashboard.color_distribution.tolist() == [0, 0, 0]
    assert dashboard.mastery_by_color.tolist() == [0.0, 0.0, 0.0]


# ---- Config ----

def test_defaults_without_environment(clean_env, tmp_path):
    config = load_config_from_env(tmp_path / "missing.env")
    assert config == SRSConfig()


def test_env_file_overrides(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "KEYWORD_SRS_BASE_LEARNING_RATE=0.3\n"
        "KEYWORD_SRS_TARGET_CARDS=8\n"
        "KEYWORD_SRS_STUDY_MAX_KEYWORDS=4\n"
    )
    config = load_config_from_env(env_file)

    assert config.mastery.base_learning_rate == pytest.approx(0.3)
    assert config.need.target_cards == 8
    assert config.selection.max_keywords == 4
    assert config.coverage.target_coverage == 3


def test_environment_wins_over_env_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("KEYWORD_SRS_GRACE_DAYS=5\n")
    clean_env.setenv("KEYWORD_SRS_GRACE_DAYS", "2")

    config = load_config_from_env(env_file)
    assert config.need.grace_days == pytest.approx(2.0)


def test_invalid_values_fall_back(clean_env, tmp_path, caplog):
    clean_env.setenv("KEYWORD_SRS_TARGET_COVERAGE", "lots")
    clean_env.setenv("KEYWORD_SRS_TARGET_RETENTION", "1.5")

    with caplog.at_level(logging.WARNING, logger="keyword_srs"):
        config = load_config_from_env(tmp_path / "missing.env")

    assert config.coverage.target_coverage == 3
    assert config.mastery.target_retention == pytest.approx(0.85)
    assert "KEYWORD_SRS_TARGET_COVERAGE" in caplog.text


def test_inverted_stability_bounds_fall_back(clean_env, tmp_path):
    clean_env.setenv("KEYWORD_SRS_MIN_STABILITY", "50")
    clean_env.setenv("KEYWORD_SRS_MAX_STABILITY", "10")

    config = load_config_from_env(tmp_path / "missing.env")
    assert config.mastery.min_stability == pytest.approx(0.5)
    assert config.mastery.max_stability == pytest.approx(180.0)


# ---- Logging ----

@pytest.fixture
def restore_engine_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_setup_logging(restore_engine_logger):
    logger = setup_logging("debug")

    assert logger.name == "keyword_srs"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1

    setup_logging("WARNING")
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_setup_logging_reads_environment(clean_env, restore_engine_logger):
    clean_env.setenv("KEYWORD_SRS_LOG_LEVEL", "error")
    logger = setup_logging()
    assert logger.level == logging.ERROR


def test_unknown_level_defaults_to_info(restore_engine_logger):
    assert setup_logging("chatty").level == logging.INFO


def test_json_logging_emits_valid_json_lines(restore_engine_logger, capsys):
    setup_logging("WARNING", json_format=True)

    # The validation error text is multi-line and quoted
    assert deserialize_keyword_collection('{"k": {"keyword": "k", "color": "purple"}}') == {}

    lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
    assert lines
    for line in lines:
        entry = json.loads(line)
        assert set(entry) >= {"time", "level", "logger", "message"}
    assert entry["level"] == "WARNING"
    assert entry["logger"] == "keyword_srs.srs.persistence"
    assert "purple" in entry["message"]


def test_json_formatter_escapes_message_and_exception():
    formatter = JsonLineFormatter(datefmt=DATE_FORMAT)
    try:
        raise ValueError('bad "value"\nsecond line')
    except ValueError:
        record = logging.getLogger("keyword_srs.test").makeRecord(
            "keyword_srs.test", logging.ERROR, __file__, 1,
            'quote " and\nnewline %s', ("arg",), sys.exc_info(),
        )

    line = formatter.format(record)
    assert "\n" not in line
    entry = json.loads(line)
    assert entry["message"] == 'quote " and\nnewline arg'
    assert 'bad "value"' in entry["exc_info"]


# ---- Config values ----

def test_configs_are_hashable():
    assert hash(SRSConfig()) == hash(SRSConfig())
    assert {MasteryConfig(), MasteryConfig()} == {MasteryConfig()}


def test_mapping_event_weights_are_frozen():
    config = MasteryConfig(event_weights={"quiz": 0.5})

    assert config.event_weights == (("quiz", 0.5),)
    assert config.event_weight("quiz") == 0.5
    hash(config)
