"""CLI commands for HelmTestJob resources."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Annotated, TypeVar

import structlog
import typer
from rich.markup import escape

from steer_dashboard.cli.commands.base import (
    NamespaceFilterOption,
    NamespaceOption,
    OutputOption,
    YesOption,
    confirm_delete,
    console,
    handle_validation_error,
    run_command,
    with_retries,
)
from steer_dashboard.cli.output import OutputFormat, Table, get_formatter
from steer_dashboard.core.display import (
    TEST_JOB_COLUMNS,
    format_timestamp,
    job_fields,
    job_row,
    or_dash,
    phase_markup,
)
from steer_dashboard.core.exceptions import FormValidationError
from steer_dashboard.core.forms import (
    DEFAULT_NAMESPACE,
    DEFAULT_SCHEDULE_TYPE,
    DEFAULT_TEST_TIMEOUT,
    build_test_job,
)
from steer_dashboard.core.phases import classify_result
from steer_dashboard.integrations.steer import SteerAPIError, SteerClient, SteerConfig
from steer_dashboard.integrations.steer.models import Release, TestJob

app = typer.Typer(help="Manage HelmTestJob resources.", no_args_is_help=True)
logger = structlog.get_logger()

NameArgument = Annotated[str, typer.Argument(help="Test job name")]

T = TypeVar("T")


def _print_results(job: TestJob) -> None:
    if job.status.test_results:
        table = Table(title="Test Results")
        for header in ("Name", "Phase", "Started", "Completed", "Message"):
            table.add_column(header)
        for result in job.status.test_results:
            table.add_row(
                escape(result.name),
                phase_markup(result.phase, classify_result(result.phase)),
                format_timestamp(result.started_at_time),
                format_timestamp(result.completed_at_time),
                or_dash(result.message),
            )
        console.print(table)
    if job.status.hook_results:
        table = Table(title="Hook Results")
        for header in ("Name", "Phase", "Message"):
            table.add_column(header)
        for hook in job.status.hook_results:
            table.add_row(
                escape(hook.name),
                phase_markup(hook.phase, classify_result(hook.phase)),
                or_dash(hook.message),
            )
        console.print(table)


async def _with_releases(
    client: SteerClient, config: SteerConfig, fetch: Callable[[], Awaitable[T]]
) -> tuple[T, Sequence[Release]]:
    """Run ``fetch`` alongside the release listing used to resolve targets.

    A failed release listing only costs the lookup: targets render as not
    found and the command still succeeds.
    """
    result, releases = await asyncio.gather(
        with_retries(config.dashboard.retries, fetch),
        with_retries(config.dashboard.retries, client.releases.list),
        return_exceptions=True,
    )
    if isinstance(result, BaseException):
        raise result
    if isinstance(releases, SteerAPIError):
        logger.warning("Release lookup failed", error=str(releases))
        return result, ()
    if isinstance(releases, BaseException):
        raise releases
    return result, releases


@app.command("list")
def list_jobs(
    ctx: typer.Context,
    namespace: NamespaceFilterOption = None,
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """List test jobs with their target releases resolved."""

    async def _list(
        client: SteerClient, config: SteerConfig
    ) -> tuple[Sequence[TestJob], Sequence[Release]]:
        return await _with_releases(client, config, client.test_jobs.list)

    jobs, releases = run_command(ctx, _list)
    if namespace:
        jobs = [j for j in jobs if j.namespace == namespace]
    get_formatter(output, console).format_list(
        jobs,
        TEST_JOB_COLUMNS,
        [job_row(j, releases) for j in jobs],
        title="Helm Test Jobs",
    )


@app.command("get")
def get_job(
    ctx: typer.Context,
    name: NameArgument,
    namespace: NamespaceOption = DEFAULT_NAMESPACE,
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """Show one test job, including test and hook results."""

    async def _get(client: SteerClient, config: SteerConfig) -> tuple[TestJob, Sequence[Release]]:
        return await _with_releases(
            client, config, lambda: client.test_jobs.get(namespace, name)
        )

    job, releases = run_command(ctx, _get)
    get_formatter(output, console).format_resource(
        job,
        job_fields(job, releases),
        title=f"Test Job {job.key}",
    )
    if output is OutputFormat.TABLE:
        _print_results(job)


@app.command("delete")
def delete_job(
    ctx: typer.Context,
    name: NameArgument,
    namespace: NamespaceOption = DEFAULT_NAMESPACE,
    yes: YesOption = False,
) -> None:
    """Delete a test job."""
    key = f"{namespace}/{name}"
    confirm_delete("test job", key, yes)

    async def _delete(client: SteerClient, config: SteerConfig) -> None:
        await client.test_jobs.delete(namespace, name)

    run_command(ctx, _delete)
    logger.info("Test job deleted", job=key)
    console.print(f"[green]Deleted test job '{escape(key)}'[/green]")


@app.command("create")
def create_job(
    ctx: typer.Context,
    name: NameArgument,
    namespace: NamespaceOption = DEFAULT_NAMESPACE,
    release: Annotated[
        str | None,
        typer.Option("--release", "-r", help="Target release as namespace/name"),
    ] = None,
    schedule: Annotated[
        str, typer.Option("--schedule", "-s", help="Schedule type: once or cron")
    ] = DEFAULT_SCHEDULE_TYPE,
    delay: Annotated[str | None, typer.Option("--delay", help="Delay for 'once', e.g. 5m")] = None,
    cron: Annotated[str | None, typer.Option("--cron", help="Cron expression for 'cron'")] = None,
    timezone: Annotated[str | None, typer.Option("--timezone", help="Timezone for 'cron'")] = None,
    test_timeout: Annotated[
        str, typer.Option("--test-timeout", help="Timeout for the helm test run")
    ] = DEFAULT_TEST_TIMEOUT,
    logs: Annotated[bool, typer.Option("--logs/--no-logs", help="Capture test pod logs")] = True,
    test_filter: Annotated[
        str | None, typer.Option("--filter", help="Only run tests matching this name")
    ] = None,
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """Create a test job."""
    values = {
        "name": name,
        "namespace": namespace,
        "release": release,
        "schedule_type": schedule,
        "delay": delay,
        "cron": cron,
        "timezone": timezone,
        "test_timeout": test_timeout,
        "logs": logs,
        "filter": test_filter,
    }
    try:
        job = build_test_job(values)
    except FormValidationError as e:
        handle_validation_error(e)

    async def _create(client: SteerClient, config: SteerConfig) -> TestJob:
        return await client.test_jobs.create(job)

    created = run_command(ctx, _create)
    logger.info("Test job created", job=created.key)
    if output is OutputFormat.TABLE:
        console.print(f"[green]Created test job '{escape(created.key)}'[/green]")
    else:
        get_formatter(output, console).format_resource(created, job_fields(created, ()))
