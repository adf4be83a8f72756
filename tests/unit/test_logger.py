"""
Unit tests for logging configuration.
"""

import logging

import pytest

from tac.utils.logger import (
    LOG_LEVEL_ENV,
    TACLogger,
    get_logger,
    parse_level,
    parse_level_spec,
    setup_logging,
)


@pytest.fixture(autouse=True)
def fresh_logging(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    TACLogger.reset()
    yield
    TACLogger.reset()


class TestLevelParsing:
    """Tests for level names and spec strings."""

    @pytest.mark.parametrize("value, expected", [
        ("debug", logging.DEBUG),
        ("WARNING", logging.WARNING),
        (" error ", logging.ERROR),
        ("15", 15),
        (logging.INFO, logging.INFO),
    ])
    def test_parse_level(self, value, expected):
        assert parse_level(value) == expected

    @pytest.mark.parametrize("value", ["loud", "", True, None])
    def test_parse_level_rejects(self, value):
        with pytest.raises(ValueError):
            parse_level(value)

    def test_spec_with_subsystems(self):
        base, subsystems = parse_level_spec("ERROR, auction=debug ,events=INFO")
        assert base == logging.ERROR
        assert subsystems == {"auction": logging.DEBUG, "events": logging.INFO}

    def test_empty_spec_keeps_default(self):
        assert parse_level_spec("", default=logging.WARNING) == (logging.WARNING, {})

    def test_spec_missing_subsystem_name(self):
        with pytest.raises(ValueError, match="subsystem"):
            parse_level_spec("=DEBUG")


class TestSetup:
    """Tests for TACLogger setup and reset."""

    def test_subsystem_levels(self):
        setup_logging(level=logging.WARNING, subsystem_levels={"auction": logging.DEBUG})

        assert get_logger("auction").isEnabledFor(logging.DEBUG)
        assert not get_logger("events").isEnabledFor(logging.INFO)
        assert get_logger("events").isEnabledFor(logging.WARNING)

    def test_reset_clears_subsystem_levels(self):
        setup_logging(level=logging.WARNING, subsystem_levels={"auction": logging.DEBUG})
        TACLogger.reset()

        assert logging.getLogger("tac").handlers == []
        assert logging.getLogger("tac.auction").level == logging.NOTSET

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR,scenario=INFO")
        setup_logging()

        assert logging.getLogger("tac").level == logging.ERROR
        assert get_logger("scenario").isEnabledFor(logging.INFO)
        assert not get_logger("auction").isEnabledFor(logging.WARNING)

    def test_setup_runs_once(self):
        setup_logging(level=logging.ERROR)
        setup_logging(level=logging.DEBUG)

        assert logging.getLogger("tac").level == logging.ERROR
        assert len(logging.getLogger("tac").handlers) == 1

    def test_log_file(self, tmp_path):
        setup_logging(level=logging.INFO, log_dir=str(tmp_path), log_to_file=True)
        get_logger("auction").info("Auction created by owner")

        for handler in logging.getLogger("tac").handlers:
            handler.flush()

        text = (tmp_path / "tac.log").read_text()
        assert "[tac.auction] INFO" in text
        assert "Auction created by owner" in text
