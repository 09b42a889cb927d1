"""Stats command: print the dashboard counters once."""

from __future__ import annotations

import asyncio
from dataclasses import asdict

import structlog
import typer

from steer_dashboard.cli.commands.base import OutputOption, console, run_command, with_retries
from steer_dashboard.cli.output import OutputFormat, get_formatter
from steer_dashboard.core.stats import DashboardStats, compute_stats
from steer_dashboard.integrations.steer import SteerClient, SteerConfig

logger = structlog.get_logger()

STAT_LABELS = {
    "releases": "Total Releases",
    "jobs": "Total Jobs",
    "succeeded_jobs": "Succeeded Jobs",
    "failed_jobs": "Failed Jobs",
    "success_rate": "Success Rate (%)",
    "release_phases": "Release Phases",
    "job_phases": "Test Job Phases",
}


def stats(
    ctx: typer.Context,
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """Fetch releases and test jobs once and print the dashboard counters."""

    async def _collect(client: SteerClient, config: SteerConfig) -> DashboardStats:
        releases, jobs = await asyncio.gather(
            with_retries(config.dashboard.retries, client.releases.list),
            with_retries(config.dashboard.retries, client.test_jobs.list),
        )
        return compute_stats(releases, jobs)

    result = run_command(ctx, _collect)
    logger.info("Stats collected", releases=result.releases, jobs=result.jobs)

    data = asdict(result)
    if output is OutputFormat.TABLE:
        data = {STAT_LABELS[key]: value for key, value in data.items()}
    get_formatter(output, console).format_dict(data, title="Steer Dashboard")
