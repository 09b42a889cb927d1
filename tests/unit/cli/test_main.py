"""Tests for main CLI module."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from pytest_mock import MockerFixture
from typer.testing import CliRunner

from steer_dashboard.cli.main import app
from steer_dashboard.integrations.steer import SteerClient, SteerConfig

Handler = Callable[[httpx.Request], httpx.Response]


class TestCLIMain:
    """Test main CLI entry point."""

    @pytest.mark.unit
    def test_help_option(self, cli_runner: CliRunner) -> None:
        """Test --help option displays help text."""
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Helm releases" in result.stdout
        for command in ("releases", "jobs", "stats", "dashboard"):
            assert command in result.stdout

    @pytest.mark.unit
    def test_version_option(self, cli_runner: CliRunner) -> None:
        """Test --version option displays version."""
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "steer version 0.1.0" in result.stdout

    @pytest.mark.unit
    def test_verbose_flag(self, cli_runner: CliRunner) -> None:
        """Test --verbose flag is accepted."""
        result = cli_runner.invoke(app, ["--verbose", "--help"])
        assert result.exit_code == 0

    @pytest.mark.unit
    def test_no_args_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, [])
        assert "Usage" in result.output


class TestGlobalOptions:
    """Tests for options handled by the root callback."""

    @pytest.mark.unit
    def test_base_url_override(
        self,
        cli_runner: CliRunner,
        mocker: MockerFixture,
        make_client: Callable[[Handler], SteerClient],
    ) -> None:
        seen: list[SteerConfig] = []

        def _create(config: SteerConfig) -> SteerClient:
            seen.append(config)
            return make_client(lambda request: httpx.Response(200, json=[]))

        mocker.patch("steer_dashboard.cli.commands.base.create_client", side_effect=_create)

        result = cli_runner.invoke(
            app, ["--base-url", "https://steer.example.com", "releases", "list"]
        )

        assert result.exit_code == 0
        assert seen[0].connection.base_url == "https://steer.example.com"
        assert seen[0].connection.api_url == "https://steer.example.com/api/v1"

    @pytest.mark.unit
    def test_invalid_base_url(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--base-url", "steer.local", "releases", "list"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    @pytest.mark.unit
    def test_missing_config_file(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        result = cli_runner.invoke(
            app, ["--config", str(temp_dir / "nope.yaml"), "releases", "list"]
        )

        assert result.exit_code == 1
        assert "Config file not found" in result.output
