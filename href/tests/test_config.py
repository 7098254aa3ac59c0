"""
Tests for environment configuration and logging setup.
"""

import json
import logging

import pytest

from href.config import PlayerOptions
from href.core.options import DEFAULT_DELETE_UNITS, ReconstructorOptions
from href.core.units import DeleteUnit
from href.logging_config import TraceIDFilter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_defaults(monkeypatch):
    for key in ("HREF_SPEED", "HREF_TICK_MS", "HREF_SHOW_SELECTION"):
        monkeypatch.delenv(key, raising=False)
    options = PlayerOptions.from_env()
    assert options == PlayerOptions()
    assert options.speed == 1.0
    assert options.tick_interval_ms == 16.0
    assert options.show_selection is True


def test_from_env(monkeypatch):
    monkeypatch.setenv("HREF_SPEED", "2.5")
    monkeypatch.setenv("HREF_TICK_MS", "40")
    monkeypatch.setenv("HREF_SHOW_SELECTION", "0")
    options = PlayerOptions.from_env()
    assert options.speed == 2.5
    assert options.tick_interval_ms == 40
    assert options.show_selection is False


@pytest.mark.parametrize("value", ["fast", "-1", "0", "nan", "inf"])
def test_invalid_env_values_fall_back(monkeypatch, value):
    monkeypatch.setenv("HREF_SPEED", value)
    assert PlayerOptions.from_env().speed == 1.0


def test_overrides_win(monkeypatch):
    monkeypatch.setenv("HREF_SPEED", "3")
    assert PlayerOptions.from_env(speed=0.5).speed == 0.5
    # None means "not given"
    assert PlayerOptions.from_env(speed=None).speed == 3


def test_reconstructor_options():
    options = ReconstructorOptions()
    assert options.delete_unit_for("deleteWordBackward") == DeleteUnit.WORD
    assert options.delete_unit_for("deleteContentForward") == DeleteUnit.CODE_POINT
    assert options.delete_unit_for("deleteEntireSoftLine") == DeleteUnit.CODE_POINT
    assert "input" in options.mutating_types and "beforeinput" in options.mutating_types

    custom = ReconstructorOptions(default_delete_unit=DeleteUnit.CLUSTER)
    assert custom.delete_unit_for("deleteSomething") == DeleteUnit.CLUSTER
    # Defaults are copied per instance
    assert custom.delete_units is not DEFAULT_DELETE_UNITS


def test_get_logger_carries_trace_id():
    logger = get_logger("href.test", trace_id="sess-9")
    assert logger.extra == {"trace_id": "sess-9"}
    assert get_logger("href.test").extra == {"trace_id": "N/A"}


def test_trace_id_filter_fills_missing():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    assert TraceIDFilter().filter(record)
    assert record.trace_id == "N/A"


def test_setup_logging_json(capsys, restore_root_logger):
    setup_logging(level="info", log_format="json")
    get_logger("href.test", trace_id="sess-1").info("Loaded document")

    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["message"] == "Loaded document"
    assert record["level"] == "INFO"
    assert record["logger"] == "href.test"
    assert record["trace_id"] == "sess-1"


def test_setup_logging_from_env(monkeypatch, capsys, restore_root_logger):
    monkeypatch.setenv("HREF_LOG_LEVEL", "ERROR")
    monkeypatch.setenv("HREF_LOG_FORMAT", "text")
    setup_logging()
    assert restore_root_logger.level == logging.ERROR

    logging.getLogger("href.test").warning("hidden")
    logging.getLogger("href.test").error("shown")
    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown" in err
    assert "(session=N/A)" in err
