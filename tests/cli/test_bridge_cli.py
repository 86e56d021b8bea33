"""Unit tests for the lcu-bridge CLI.

Tests CLI behavior using Click's CliRunner; calls to a running bridge
are patched at the command module.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from lcu_bridge import __version__
from lcu_bridge.cli import cli
from lcu_bridge.cli.api_client import BridgeAPIError, BridgeNotRunningError
from lcu_bridge.config import BridgeConfig, save_config
from lcu_bridge.exceptions import ConfigurationError


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


class TestGroup:
    """Tests for the top-level group."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert result.output.strip() == f"lcu-bridge {__version__}"

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["-h"])

        assert result.exit_code == 0
        for command in ("start", "status", "request", "config"):
            assert command in result.output


class TestStatusCommand:
    """Tests for status command."""

    def test_connected(self, runner: CliRunner) -> None:
        with patch("lcu_bridge.cli.commands.status.api_request") as mock_api:
            mock_api.side_effect = [
                {"connected": True, "status": "Connected to League client"},
                {"running": True, "pid": 4242, "connected": True, "subscribers": 2},
            ]

            result = runner.invoke(cli, ["status", "--port", "8799"])

        assert result.exit_code == 0
        assert "Connected to League client" in result.output
        assert "4242" in result.output
        mock_api.assert_any_call("GET", "/api/connection", port=8799)

    def test_json_output(self, runner: CliRunner) -> None:
        with patch("lcu_bridge.cli.commands.status.api_request") as mock_api:
            mock_api.side_effect = [
                {"connected": False, "status": "Waiting for League client..."},
                BridgeAPIError("gone", 500),
            ]

            result = runner.invoke(cli, ["status", "--json", "--port", "8799"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["connected"] is False
        assert data["status"] == "Waiting for League client..."
        assert data["bridge"]["pid"] is None

    def test_bridge_not_running(self, runner: CliRunner) -> None:
        with patch("lcu_bridge.cli.commands.status.api_request") as mock_api:
            mock_api.side_effect = BridgeNotRunningError(8799)

            result = runner.invoke(cli, ["status", "--port", "8799"])

        assert result.exit_code == 1
        assert "not running" in result.output


class TestRequestCommand:
    """Tests for request command."""

    def test_forwards_and_prints_reply(self, runner: CliRunner) -> None:
        with patch("lcu_bridge.cli.commands.request.api_request") as mock_api:
            mock_api.return_value = {"queueId": 420}

            result = runner.invoke(
                cli, ["request", "POST", "/lol-lobby/v2/lobby", "--body", '{"queueId": 420}', "--port", "8799"]
            )

        assert result.exit_code == 0
        assert json.loads(result.output) == {"queueId": 420}
        mock_api.assert_called_once_with(
            "POST",
            "/api/lcu/request",
            port=8799,
            json_data={"method": "POST", "path": "/lol-lobby/v2/lobby", "body": {"queueId": 420}},
        )

    def test_invalid_body(self, runner: CliRunner) -> None:
        with patch("lcu_bridge.cli.commands.request.api_request") as mock_api:
            result = runner.invoke(cli, ["request", "PUT", "/x", "--body", "{nope", "--port", "8799"])

        assert result.exit_code == 2
        assert "--body" in result.output
        mock_api.assert_not_called()

    def test_api_error_shown(self, runner: CliRunner) -> None:
        with patch("lcu_bridge.cli.commands.request.api_request") as mock_api:
            mock_api.side_effect = BridgeAPIError("Not connected to League client", 503, "LCU_NOT_CONNECTED")

            result = runner.invoke(cli, ["request", "GET", "/x", "--port", "8799"])

        assert result.exit_code == 1
        assert "Not connected to League client" in result.output


class TestStartCommand:
    """Tests for start command."""

    def test_runs_bridge_with_overrides(self, runner: CliRunner) -> None:
        with (
            patch("lcu_bridge.cli.commands.start.load_config", return_value=BridgeConfig()),
            patch("lcu_bridge.cli.commands.start.run_bridge", new_callable=AsyncMock) as mock_run,
        ):
            result = runner.invoke(cli, ["start", "--port", "9001", "--poll-interval", "2"])

        assert result.exit_code == 0
        assert "http://127.0.0.1:9001" in result.output
        mock_run.assert_awaited_once_with(port=9001, poll_interval=2.0)

    def test_start_failure_exits_1(self, runner: CliRunner) -> None:
        with (
            patch("lcu_bridge.cli.commands.start.load_config", return_value=BridgeConfig()),
            patch(
                "lcu_bridge.cli.commands.start.run_bridge",
                new_callable=AsyncMock,
                side_effect=ConfigurationError("Invalid JSON in config.json"),
            ),
        ):
            result = runner.invoke(cli, ["start"])

        assert result.exit_code == 1
        assert "Failed to start" in result.output

    def test_poll_interval_range_checked(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["start", "--poll-interval", "0"])

        assert result.exit_code == 2


class TestConfigCommand:
    """Tests for config show/path."""

    def test_path(self, runner: CliRunner, tmp_path: Path) -> None:
        with patch("lcu_bridge.cli.commands.config.get_config_path", return_value=tmp_path / "config.json"):
            result = runner.invoke(cli, ["config", "path"])

        assert result.exit_code == 0
        assert result.output.strip() == str(tmp_path / "config.json")

    def test_show_json(self, runner: CliRunner, tmp_path: Path) -> None:
        config_file = tmp_path / "config.json"
        save_config(BridgeConfig(ui_port=9100, log_dir=str(tmp_path)), config_file)

        with patch("lcu_bridge.cli.commands.config.get_config_path", return_value=config_file):
            result = runner.invoke(cli, ["config", "show", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ui_port"] == 9100
        assert data["_computed"]["config_file"] == str(config_file)

    def test_show_defaults_note(self, runner: CliRunner, tmp_path: Path) -> None:
        with patch("lcu_bridge.cli.commands.config.get_config_path", return_value=tmp_path / "missing.json"):
            result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "ui_port: 8799" in result.output
        assert "showing defaults" in result.output
