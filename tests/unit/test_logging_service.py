"""Tests for server logging setup."""

import logging
from unittest.mock import patch

import pytest

from utility_billing.services.logging import (
    NOISY_LOGGERS,
    resolve_log_level,
    setup_server_logging,
)


@pytest.fixture(autouse=True)
def restore_logging():
    """Put root handlers and library logger levels back after each test."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    saved_noisy = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)
    for name, level in saved_noisy.items():
        logging.getLogger(name).setLevel(level)


class TestResolveLogLevel:
    def test_explicit_name_is_case_insensitive(self):
        assert resolve_log_level("warning") == logging.WARNING

    def test_falls_back_to_environment(self):
        with patch.dict("os.environ", {"LOG_LEVEL": "debug"}):
            assert resolve_log_level() == logging.DEBUG

    def test_unknown_name_resolves_to_info(self):
        assert resolve_log_level("LOUD") == logging.INFO


class TestSetupServerLogging:
    def test_creates_missing_log_directory(self, tmp_path):
        log_file = tmp_path / "logs" / "server.log"

        setup_server_logging(str(log_file))

        assert log_file.parent.is_dir()

    def test_explicit_level_wins_over_environment(self, tmp_path, restore_logging):
        with patch.dict("os.environ", {"LOG_LEVEL": "INFO"}):
            setup_server_logging(str(tmp_path / "server.log"), "WARNING")

        assert restore_logging.level == logging.WARNING
        assert all(h.level == logging.WARNING for h in restore_logging.handlers)

    def test_repeated_setup_replaces_handlers(self, tmp_path, restore_logging):
        stray = logging.StreamHandler()
        restore_logging.addHandler(stray)

        setup_server_logging(str(tmp_path / "server.log"))
        setup_server_logging(str(tmp_path / "server.log"))

        assert len(restore_logging.handlers) == 2
        assert stray not in restore_logging.handlers

    def test_bill_events_reach_the_log_file(self, tmp_path):
        log_file = tmp_path / "server.log"
        setup_server_logging(str(log_file), "INFO")

        logging.getLogger("utility_billing.services.bill_service").warning(
            "Bill 7 marked overdue"
        )

        contents = log_file.read_text()
        line = "utility_billing.services.bill_service - WARNING - Bill 7 marked overdue"
        assert line in contents
        assert contents.startswith("[")

    def test_library_loggers_quiet_at_info(self, tmp_path):
        setup_server_logging(str(tmp_path / "server.log"), "INFO")

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_library_loggers_follow_debug(self, tmp_path):
        setup_server_logging(str(tmp_path / "server.log"), "DEBUG")

        assert logging.getLogger("sqlalchemy.engine").level == logging.DEBUG
