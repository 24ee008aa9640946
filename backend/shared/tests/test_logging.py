import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from hazari.logic.exceptions import ValidationErrorKind
from hazari.logic.ledger import GameStatus
from shared.logging import _serialize_enums, setup_logging


@pytest.fixture(autouse=True)
def _reset_root_logger(monkeypatch):
    """Start from default env and drop handlers added by setup_logging."""
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


@pytest.fixture
def file_logging_enabled():
    """Disable the pytest guard so a real log file is created."""
    with patch("shared.logging._is_test", return_value=False):
        yield


class TestSetupLogging:
    def test_configures_stdout_handler(self):
        assert setup_logging() is None

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_skips_log_file_under_pytest(self, tmp_path):
        assert setup_logging(log_dir=tmp_path / "hazari") is None
        assert not (tmp_path / "hazari").exists()

    def test_repeated_calls_do_not_stack_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_explicit_level(self):
        setup_logging(level=logging.WARNING)
        assert logging.getLogger().level == logging.WARNING

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        setup_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_invalid_level_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "loud")
        with pytest.raises(ValueError, match="Invalid LOG_LEVEL"):
            setup_logging()

    def test_invalid_format_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")
        with pytest.raises(ValueError, match="Invalid LOG_FORMAT"):
            setup_logging()


@pytest.mark.usefixtures("file_logging_enabled")
class TestLogFile:
    def test_file_named_after_start_time(self, tmp_path):
        fixed_time = datetime(2025, 3, 15, 10, 30, 45, tzinfo=UTC)
        with patch("shared.logging.datetime") as mock_dt:
            mock_dt.now.return_value = fixed_time
            log_path = setup_logging(log_dir=tmp_path / "hazari")

        assert log_path == tmp_path / "hazari" / "2025-03-15_10-30-45.log"
        assert isinstance(logging.getLogger().handlers[1], logging.FileHandler)

    def test_accepts_string_path(self, tmp_path):
        log_path = setup_logging(log_dir=str(tmp_path / "logs"))
        assert log_path is not None
        assert log_path.parent == Path(tmp_path / "logs")

    def test_json_lines_carry_context(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        log_path = setup_logging(log_dir=tmp_path / "hazari")

        structlog.contextvars.bind_contextvars(game_id="g1")
        structlog.get_logger("test.json").info("round recorded", round=3, status=GameStatus.COMPLETED)

        assert log_path is not None
        parsed = json.loads(log_path.read_text().strip().splitlines()[0])
        assert parsed["event"] == "round recorded"
        assert parsed["game_id"] == "g1"
        assert parsed["round"] == 3
        assert parsed["status"] == "completed"

    def test_console_output_is_readable(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "console")
        log_path = setup_logging(log_dir=tmp_path / "hazari")

        structlog.get_logger("test.console").info("game created")

        assert log_path is not None
        assert "game created" in log_path.read_text()


class TestSerializeEnums:
    def test_replaces_enum_with_value(self):
        event_dict = {"status": GameStatus.ACTIVE, "kind": ValidationErrorKind.BLANK_FIELD}
        assert _serialize_enums(None, "", event_dict) == {"status": "active", "kind": "blank_field"}

    def test_leaves_other_values_unchanged(self):
        event_dict = {"round": 4, "game_id": "g1"}
        assert _serialize_enums(None, "", event_dict) == {"round": 4, "game_id": "g1"}
