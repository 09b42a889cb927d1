"""Tests for the ``steer stats`` and ``steer dashboard`` commands."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture
from typer.testing import CliRunner

from steer_dashboard.cli.commands.stats import STAT_LABELS
from steer_dashboard.cli.main import app


class TestStatsCommand:
    """Tests for ``stats``."""

    @pytest.mark.unit
    def test_table_labels(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(app, ["stats"])

        assert result.exit_code == 0
        assert "Steer Dashboard" in result.stdout
        for label in ("Total Releases", "Total Jobs", "Failed Jobs", "Success Rate (%)"):
            assert label in result.stdout
        assert "Installed: 1, Failed: 1" in result.stdout

    @pytest.mark.unit
    def test_json(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(app, ["stats", "-o", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert set(data) == set(STAT_LABELS)
        assert data["releases"] == 2
        assert data["jobs"] == 2
        assert data["succeeded_jobs"] == 1
        assert data["failed_jobs"] == 1
        assert data["success_rate"] == 50
        assert data["job_phases"] == {"Succeeded": 1, "Failed": 1}

    @pytest.mark.unit
    def test_no_completed_jobs(self, cli_runner: CliRunner, backend: Any) -> None:
        backend.jobs.clear()

        result = cli_runner.invoke(app, ["stats", "-o", "json"])

        assert json.loads(result.stdout)["success_rate"] == 0

    @pytest.mark.unit
    def test_backend_error(self, cli_runner: CliRunner, backend: Any) -> None:
        backend.error = (502, "bad gateway")

        result = cli_runner.invoke(app, ["stats"])

        assert result.exit_code == 1
        assert "bad gateway" in result.stdout


class TestDashboardCommand:
    """Tests for ``dashboard``."""

    @pytest.fixture
    def steer_app(self, mocker: MockerFixture) -> MagicMock:
        mocker.patch("steer_dashboard.cli.commands.dashboard.create_client")
        return mocker.patch("steer_dashboard.tui.apps.steer.SteerApp")

    @pytest.mark.unit
    def test_launches_app(self, cli_runner: CliRunner, steer_app: MagicMock) -> None:
        result = cli_runner.invoke(app, ["dashboard"])

        assert result.exit_code == 0
        steer_app.assert_called_once()
        assert steer_app.call_args.kwargs["refresh_interval"] == 5
        steer_app.return_value.run.assert_called_once()

    @pytest.mark.unit
    def test_interval_option(self, cli_runner: CliRunner, steer_app: MagicMock) -> None:
        result = cli_runner.invoke(app, ["dashboard", "--interval", "2.5"])

        assert result.exit_code == 0
        assert steer_app.call_args.kwargs["refresh_interval"] == 2.5

    @pytest.mark.unit
    def test_interval_from_environment(
        self, cli_runner: CliRunner, steer_app: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("STEER_REFRESH_INTERVAL", "30")

        result = cli_runner.invoke(app, ["dashboard"])

        assert result.exit_code == 0
        assert steer_app.call_args.kwargs["refresh_interval"] == 30

    @pytest.mark.unit
    def test_interval_too_small(self, cli_runner: CliRunner, steer_app: MagicMock) -> None:
        result = cli_runner.invoke(app, ["dashboard", "--interval", "0.1"])

        assert result.exit_code != 0
        steer_app.assert_not_called()
