"""HelmRelease resource model."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Literal

from pydantic import Field

from steer_dashboard.integrations.steer.models.base import (
    CleanupSpec,
    ResourceKind,
    SteerModel,
    SteerResource,
    parse_timestamp,
)

ReleasePhase = Literal["Pending", "Installing", "Installed", "Failed"]

ChartSource = Literal["repository", "git"]


class GitSource(SteerModel):
    """Chart fetched from a git repository."""

    url: str = Field(description="Repository URL")
    ref: str | None = Field(default=None, description="Tag or commit")
    path: str | None = Field(default=None, description="Chart directory inside the repository")
    branch: str | None = Field(default=None, description="Branch to check out")


class ChartSpec(SteerModel):
    """Chart reference of a release."""

    name: str = Field(default="", description="Chart name")
    version: str | None = Field(default=None, description="Chart version, latest when unset")
    repository: str | None = Field(default=None, description="Chart registry URL")
    git: GitSource | None = Field(default=None, description="Git chart source")

    @property
    def source(self) -> ChartSource | None:
        """Which source the chart comes from, if any is set."""
        if self.git is not None:
            return "git"
        if self.repository:
            return "repository"
        return None

    @property
    def label(self) -> str:
        """Display label ``name (version)``."""
        return f"{self.name} ({self.version or 'latest'})"


class DeploymentSpec(SteerModel):
    """Where and how the chart is installed."""

    namespace: str = Field(default="", description="Target namespace")
    timeout: str | None = Field(default=None, description="Install timeout duration")
    max_retries: int | None = Field(default=None, description="Install attempts before failing")
    wait_after_deployment: str | None = Field(
        default=None, description="Wait duration after a successful install"
    )
    auto_uninstall_after: str | None = Field(
        default=None, description="Uninstall automatically after this duration"
    )


class ReleaseSpec(SteerModel):
    """Desired state of a release."""

    chart: ChartSpec = Field(default_factory=ChartSpec)
    values: dict[str, Any] | None = Field(
        default=None,
        description="Chart value overrides, forwarded to the backend verbatim",
    )
    deployment: DeploymentSpec = Field(default_factory=DeploymentSpec)
    cleanup: CleanupSpec | None = None


class ReleaseStatus(SteerModel):
    """Backend-reported state of a release. Never mutated locally."""

    phase: str = Field(default="", description="Lifecycle phase")
    message: str | None = Field(default=None, description="Human-readable status message")
    deployed_at: str | None = Field(default=None, description="Install completion timestamp")

    @property
    def deployed_at_time(self) -> datetime | None:
        """Parsed ``deployed_at``, None when unset."""
        return parse_timestamp(self.deployed_at)


class Release(SteerResource):
    """A HelmRelease document."""

    resource_kind: ClassVar[ResourceKind] = ResourceKind.RELEASE

    kind: str = "HelmRelease"
    spec: ReleaseSpec = Field(default_factory=ReleaseSpec)
    status: ReleaseStatus = Field(default_factory=ReleaseStatus)
