"""Shared pytest fixtures for steer_dashboard tests."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest
import typer
from typer.testing import CliRunner

from steer_dashboard.cli.main import app
from steer_dashboard.integrations.steer import SteerClient, SteerConnectionConfig
from steer_dashboard.integrations.steer.models import Release, TestJob

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables for each test."""
    # Clear any STEER_ prefixed environment variables
    for key in list(os.environ.keys()):
        if key.startswith("STEER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def isolated_paths(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep log files and the default config file out of the real home."""
    monkeypatch.setattr("steer_dashboard.logging.config.LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(
        "steer_dashboard.integrations.steer.config.CONFIG_FILE",
        tmp_path / "config.yaml",
    )


@pytest.fixture
def capture_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Fixture to capture log output."""
    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


# ============================================================================
# Resource documents
# ============================================================================


def release_document(
    name: str = "web",
    namespace: str = "default",
    phase: str = "Installed",
    **spec: Any,
) -> dict[str, Any]:
    """A HelmRelease document as the backend returns it."""
    return {
        "apiVersion": "steer.io/v1alpha1",
        "kind": "HelmRelease",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {
            "chart": {"name": "nginx", "version": "1.2.3", "repository": "https://charts.example.com"},
            "deployment": {"namespace": "apps", "timeout": "5m"},
            **spec,
        },
        "status": {"phase": phase, "deployedAt": "2024-05-01T10:00:00Z"},
    }


def job_document(
    name: str = "smoke",
    namespace: str = "default",
    phase: str = "Succeeded",
    release: tuple[str, str] = ("default", "web"),
    **status: Any,
) -> dict[str, Any]:
    """A HelmTestJob document as the backend returns it."""
    return {
        "apiVersion": "steer.io/v1alpha1",
        "kind": "HelmTestJob",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {
            "helmReleaseRef": {"namespace": release[0], "name": release[1]},
            "schedule": {"type": "once", "delay": ""},
            "test": {"timeout": "10m", "logs": True},
        },
        "status": {"phase": phase, **status},
    }


@pytest.fixture
def make_release() -> Callable[..., Release]:
    """Factory for parsed releases."""

    def _make(name: str = "web", namespace: str = "default", phase: str = "Installed") -> Release:
        return Release.from_document(release_document(name, namespace, phase))

    return _make


@pytest.fixture
def make_job() -> Callable[..., TestJob]:
    """Factory for parsed test jobs."""

    def _make(
        name: str = "smoke",
        namespace: str = "default",
        phase: str = "Succeeded",
        release: tuple[str, str] = ("default", "web"),
    ) -> TestJob:
        return TestJob.from_document(job_document(name, namespace, phase, release))

    return _make


# ============================================================================
# Gateway
# ============================================================================


@pytest.fixture
def connection_config() -> SteerConnectionConfig:
    """Create a test connection config."""
    return SteerConnectionConfig(base_url="http://steer.test", timeout=5)


@pytest.fixture
def make_client(connection_config: SteerConnectionConfig) -> Callable[[Handler], SteerClient]:
    """Factory for clients whose requests are answered by a handler function."""

    def _make(handler: Handler) -> SteerClient:
        return SteerClient(connection_config, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def release_doc() -> Callable[..., dict[str, Any]]:
    """Factory for raw HelmRelease documents."""
    return release_document


@pytest.fixture
def job_doc() -> Callable[..., dict[str, Any]]:
    """Factory for raw HelmTestJob documents."""
    return job_document
