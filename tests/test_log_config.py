"""Tests for bridge logging setup and formatters."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from lcu_bridge.config import BridgeConfig, get_system_log_path
from lcu_bridge.constants import APP_NAME
from lcu_bridge.daemon import configure_logging, log_event
from lcu_bridge.daemon import log_config
from lcu_bridge.models import SystemEvent
from lcu_bridge.utils.logging import ConsoleFormatter, ISO8601Formatter


def _record(msg: object, level: int = logging.WARNING) -> logging.LogRecord:
    return logging.LogRecord(APP_NAME, level, __file__, 1, msg, None, None)


@pytest.fixture
def fresh_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[logging.Logger]:
    """Let configure_logging() run again and restore handlers afterwards."""
    root = logging.getLogger(APP_NAME)
    saved = list(root.handlers)
    monkeypatch.setattr(log_config, "_file_handler_configured", False)
    yield root
    for handler in root.handlers:
        if handler not in saved:
            handler.close()
    root.handlers[:] = saved


class TestISO8601Formatter:
    def test_dict_message_becomes_jsonl(self) -> None:
        line = ISO8601Formatter().format(_record({"event": "lcu_connection_lost", "message": "Lost"}))

        data = json.loads(line)
        assert list(data)[:2] == ["time", "level"]
        assert data["time"].endswith("Z")
        assert data["level"] == "WARNING"
        assert data["event"] == "lcu_connection_lost"

    def test_plain_message(self) -> None:
        data = json.loads(ISO8601Formatter().format(_record("hello")))

        assert data["message"] == "hello"

    def test_unserializable_values_use_str(self) -> None:
        data = json.loads(ISO8601Formatter().format(_record({"path": Path("/tmp/x")})))

        assert data["path"] == str(Path("/tmp/x"))


class TestConsoleFormatter:
    def test_prefers_message(self) -> None:
        out = ConsoleFormatter().format(_record({"event": "e", "message": "Connected"}, logging.INFO))

        assert out == "INFO: Connected"

    def test_falls_back_to_event(self) -> None:
        assert ConsoleFormatter().format(_record({"event": "bridge_stopped"})) == "WARNING: bridge_stopped"


class TestConfigureLogging:
    def test_file_gets_warnings_only(self, fresh_logging: logging.Logger, tmp_path: Path) -> None:
        config = BridgeConfig(log_dir=str(tmp_path))

        configure_logging(config)
        log_event(logging.INFO, SystemEvent(event="lcu_connected", message="Connected"))
        log_event(
            logging.WARNING,
            SystemEvent(event="lcu_connection_lost", message="Lost", state="disconnected"),
        )
        for handler in fresh_logging.handlers:
            handler.flush()

        lines = get_system_log_path(config).read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        entry = json.loads(lines[0])
        assert entry["event"] == "lcu_connection_lost"
        assert entry["state"] == "disconnected"
        # None fields are left out
        assert "error_type" not in entry

    def test_runs_once(self, fresh_logging: logging.Logger, tmp_path: Path) -> None:
        configure_logging(BridgeConfig(log_dir=str(tmp_path)))
        handler_count = len(fresh_logging.handlers)

        configure_logging(BridgeConfig(log_dir=str(tmp_path / "other")))

        assert len(fresh_logging.handlers) == handler_count
        assert not (tmp_path / "other").exists()
