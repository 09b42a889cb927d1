"""Tests for the ``steer releases`` commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from steer_dashboard.cli.main import app


class TestListReleases:
    """Tests for ``releases list``."""

    @pytest.mark.unit
    def test_table(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(app, ["releases", "list"])

        assert result.exit_code == 0
        assert "Helm Releases" in result.stdout
        assert "web" in result.stdout
        assert "staging" in result.stdout
        assert "Total: 2" in result.stdout

    @pytest.mark.unit
    def test_json(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(app, ["releases", "list", "-o", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total"] == 2
        assert [item["metadata"]["name"] for item in data["items"]] == ["web", "api"]

    @pytest.mark.unit
    def test_namespace_filter(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(app, ["releases", "list", "-n", "staging", "-o", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [item["metadata"]["name"] for item in data["items"]] == ["api"]

    @pytest.mark.unit
    def test_api_error(self, cli_runner: CliRunner, backend: Any) -> None:
        backend.error = (500, {"error": "backend down"})

        result = cli_runner.invoke(app, ["releases", "list"])

        assert result.exit_code == 1
        assert "backend down" in result.stdout
        assert "HTTP Status: 500" in result.stdout
        assert "Endpoint: /helmreleases" in result.stdout

    @pytest.mark.unit
    def test_api_error_with_brackets(self, cli_runner: CliRunner, backend: Any) -> None:
        backend.error = (500, {"error": "quota exceeded [/limits/cpu]"})

        result = cli_runner.invoke(app, ["releases", "list"])

        assert result.exit_code == 1
        assert "quota exceeded [/limits/cpu]" in result.stdout

    @pytest.mark.unit
    def test_api_error_not_retried(self, cli_runner: CliRunner, backend: Any) -> None:
        backend.error = (503, "unavailable")

        cli_runner.invoke(app, ["releases", "list"])

        assert len(backend.requests) == 1

    @pytest.mark.unit
    def test_connection_error_retried(
        self, cli_runner: CliRunner, backend: Any, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("STEER_RETRIES", "1")
        backend.unreachable = True

        result = cli_runner.invoke(app, ["releases", "list"])

        assert result.exit_code == 1
        assert "Cannot connect" in result.stdout
        assert len(backend.requests) == 1


class TestGetRelease:
    """Tests for ``releases get``."""

    @pytest.mark.unit
    def test_table(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(app, ["releases", "get", "api", "-n", "staging"])

        assert result.exit_code == 0
        assert "staging/api" in result.stdout
        assert "Failed" in result.stdout
        assert backend.requests[0].url.path == "/api/v1/helmreleases/staging/api"

    @pytest.mark.unit
    def test_yaml(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(app, ["releases", "get", "web", "-o", "yaml"])

        assert result.exit_code == 0
        assert "kind: HelmRelease" in result.stdout
        assert "name: nginx" in result.stdout

    @pytest.mark.unit
    def test_not_found(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(app, ["releases", "get", "missing"])

        assert result.exit_code == 1
        assert "missing not found" in result.stdout
        assert "HTTP Status: 404" in result.stdout


class TestDeleteRelease:
    """Tests for ``releases delete``."""

    @pytest.mark.unit
    def test_with_yes(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(app, ["releases", "delete", "web", "--yes"])

        assert result.exit_code == 0
        assert "Deleted release 'default/web'" in result.stdout
        assert [r.url.path for r in backend.sent("DELETE")] == ["/api/v1/helmreleases/default/web"]
        assert len(backend.releases) == 1

    @pytest.mark.unit
    def test_confirm_prompt(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(app, ["releases", "delete", "web"], input="y\n")

        assert result.exit_code == 0
        assert "Delete release 'default/web'?" in result.stdout
        assert len(backend.sent("DELETE")) == 1

    @pytest.mark.unit
    def test_abort(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(app, ["releases", "delete", "web"], input="n\n")

        assert result.exit_code == 1
        assert backend.requests == []


class TestCreateRelease:
    """Tests for ``releases create``."""

    @pytest.mark.unit
    def test_from_options(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(
            app,
            [
                "releases", "create", "cache",
                "--chart", "redis",
                "--version", "18.0.0",
                "--repository", "https://charts.bitnami.com/bitnami",
                "-t", "data",
                "--max-retries", "2",
            ],
        )

        assert result.exit_code == 0
        assert "Created release 'default/cache'" in result.stdout
        body = json.loads(backend.sent("POST")[0].content)
        assert body["kind"] == "HelmRelease"
        assert body["metadata"] == {"name": "cache", "namespace": "default"}
        assert body["spec"]["chart"]["name"] == "redis"
        assert body["spec"]["deployment"]["namespace"] == "data"

    @pytest.mark.unit
    def test_values_file(self, cli_runner: CliRunner, backend: Any, temp_dir: Path) -> None:
        values = temp_dir / "values.yaml"
        values.write_text("replicaCount: 3\nimage:\n  tag: '1.25'\n")

        result = cli_runner.invoke(
            app,
            ["releases", "create", "web2", "--chart", "nginx", "-t", "apps", "-f", str(values), "-o", "json"],
        )

        assert result.exit_code == 0
        body = json.loads(backend.sent("POST")[0].content)
        assert body["spec"]["values"] == {"replicaCount": 3, "image": {"tag": "1.25"}}
        assert json.loads(result.stdout)["metadata"]["name"] == "web2"

    @pytest.mark.unit
    def test_missing_chart(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(app, ["releases", "create", "web", "-t", "apps"])

        assert result.exit_code == 1
        assert "Invalid chart_name: Chart name is required" in result.stdout
        assert backend.requests == []

    @pytest.mark.unit
    def test_repository_and_git_conflict(self, cli_runner: CliRunner, backend: Any) -> None:
        result = cli_runner.invoke(
            app,
            [
                "releases", "create", "web",
                "--chart", "nginx",
                "-t", "apps",
                "--repository", "https://charts.example.com",
                "--git-url", "https://git.example.com/charts.git",
            ],
        )

        assert result.exit_code == 1
        assert "Invalid git_url" in result.stdout

    @pytest.mark.unit
    def test_backend_rejects(self, cli_runner: CliRunner, backend: Any) -> None:
        backend.error = (409, {"message": "already exists"})

        result = cli_runner.invoke(
            app, ["releases", "create", "web", "--chart", "nginx", "-t", "apps"]
        )

        assert result.exit_code == 1
        assert "already exists" in result.stdout
        assert "HTTP Status: 409" in result.stdout
