import json
import logging
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from shared.logging import _serialize_enums, rotate_log_file, setup_logging


@pytest.fixture(autouse=True)
def _cleanup_root_logger():
    """Close and remove all handlers from the root logger after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


@pytest.fixture(autouse=True)
def _allow_file_logging():
    """Disable the _is_test guard so logging tests can create real file handlers."""
    with patch("shared.logging._is_test", return_value=False):
        yield


class TestSetupLogging:
    def test_configures_stdout_handler(self):
        setup_logging()
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert len(root.handlers) == 1

        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

    def test_configures_file_handler_in_log_dir(self, tmp_path):
        log_dir = tmp_path / "simulation"
        setup_logging(log_dir=log_dir)
        root = logging.getLogger()

        assert len(root.handlers) == 2
        file_handler = root.handlers[1]
        assert isinstance(file_handler, logging.FileHandler)
        assert Path(file_handler.baseFilename).parent == log_dir

    def test_log_file_has_datetime_in_name(self, tmp_path):
        fixed_time = datetime(2025, 3, 15, 10, 30, 45, tzinfo=UTC)
        with patch("shared.logging.datetime") as mock_dt:
            mock_dt.now.return_value = fixed_time
            log_path = setup_logging(log_dir=tmp_path / "simulation")

        assert log_path is not None
        assert log_path.name == "2025-03-15_10-30-45.log"

    def test_returns_none_without_log_dir(self):
        assert setup_logging() is None

    def test_creates_nested_log_directory_and_writes(self, tmp_path):
        log_dir = tmp_path / "nested" / "dir"
        log_path = setup_logging(log_dir=log_dir)

        structlog.get_logger("test.nested").info("round dealt", round_number=1)

        assert log_dir.exists()
        assert log_path is not None
        assert "round dealt" in log_path.read_text()

    def test_skips_file_under_pytest(self, tmp_path):
        with patch("shared.logging._is_test", return_value=True):
            result = setup_logging(log_dir=tmp_path / "simulation")

        assert result is None
        assert not (tmp_path / "simulation").exists()

    def test_clears_existing_handlers_on_repeated_calls(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_custom_log_level(self):
        setup_logging(level=logging.WARNING)

        assert logging.getLogger().level == logging.WARNING

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        setup_logging()

        assert logging.getLogger().level == logging.DEBUG

    def test_invalid_log_level_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "bogus")
        with pytest.raises(ValueError, match="Invalid LOG_LEVEL"):
            setup_logging()

    def test_json_mode_produces_valid_json(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        log_path = setup_logging(log_dir=tmp_path / "simulation")

        structlog.contextvars.bind_contextvars(game_id="test-game")
        structlog.get_logger("test.json").info("round ended", outcome="stopped")
        structlog.contextvars.clear_contextvars()

        assert log_path is not None
        parsed = json.loads(log_path.read_text().strip().splitlines()[0])
        assert parsed["event"] == "round ended"
        assert parsed["game_id"] == "test-game"
        assert parsed["outcome"] == "stopped"

    def test_invalid_log_format_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")
        with pytest.raises(ValueError, match="Invalid LOG_FORMAT"):
            setup_logging()


class TestSerializeEnums:
    class _Phase(Enum):
        SELECT_HAND = "select_hand"
        ROUND_END = "round_end"

    def test_replaces_enum_with_value(self):
        result = _serialize_enums(None, "", {"phase": self._Phase.SELECT_HAND, "msg": "hello"})
        assert result == {"phase": "select_hand", "msg": "hello"}

    def test_replaces_enum_inside_dict_value(self):
        result = _serialize_enums(None, "", {"data": {"phase": self._Phase.ROUND_END, "count": 3}})
        assert result["data"] == {"phase": "round_end", "count": 3}

    def test_replaces_enum_inside_sequence_value(self):
        result = _serialize_enums(None, "", {"phases": (self._Phase.SELECT_HAND, self._Phase.ROUND_END)})
        assert result["phases"] == ["select_hand", "round_end"]

    def test_leaves_non_enum_values_unchanged(self):
        result = _serialize_enums(None, "", {"count": 42, "name": "test"})
        assert result == {"count": 42, "name": "test"}


class TestRotateLogFile:
    def test_replaces_file_handler(self, tmp_path):
        log_dir = tmp_path / "simulation"
        setup_logging(log_dir=log_dir)

        new_path = rotate_log_file(log_dir, name="koikoi-002")

        assert new_path is not None
        assert new_path.name == "koikoi-002.log"
        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert Path(file_handlers[0].baseFilename) == new_path

    def test_preserves_stdout_handler(self, tmp_path):
        log_dir = tmp_path / "simulation"
        setup_logging(log_dir=log_dir)

        rotate_log_file(log_dir, name="next")

        stream_handlers = [
            h
            for h in logging.getLogger().handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        ]
        assert len(stream_handlers) == 1

    def test_writes_to_new_file(self, tmp_path):
        log_dir = tmp_path / "simulation"
        setup_logging(log_dir=log_dir)

        new_path = rotate_log_file(log_dir, name="after")
        structlog.get_logger("test.rotate").info("after rotation")

        assert new_path is not None
        assert "after rotation" in new_path.read_text()

    def test_returns_none_under_pytest(self, tmp_path):
        with patch("shared.logging._is_test", return_value=True):
            assert rotate_log_file(tmp_path, name="ignored") is None
