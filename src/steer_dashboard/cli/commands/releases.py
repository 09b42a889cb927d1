"""CLI commands for HelmRelease resources."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

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
from steer_dashboard.cli.output import OutputFormat, get_formatter
from steer_dashboard.core.display import RELEASE_COLUMNS, release_fields, release_row
from steer_dashboard.core.exceptions import FormValidationError
from steer_dashboard.core.forms import DEFAULT_NAMESPACE, build_release
from steer_dashboard.integrations.steer import SteerClient, SteerConfig
from steer_dashboard.integrations.steer.models import Release

app = typer.Typer(help="Manage HelmRelease resources.", no_args_is_help=True)
logger = structlog.get_logger()

NameArgument = Annotated[str, typer.Argument(help="Release name")]


@app.command("list")
def list_releases(
    ctx: typer.Context,
    namespace: NamespaceFilterOption = None,
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """List releases in backend order."""

    async def _list(client: SteerClient, config: SteerConfig) -> Sequence[Release]:
        return await with_retries(config.dashboard.retries, client.releases.list)

    releases = run_command(ctx, _list)
    if namespace:
        releases = [r for r in releases if r.namespace == namespace]
    get_formatter(output, console).format_list(
        releases,
        RELEASE_COLUMNS,
        [release_row(r) for r in releases],
        title="Helm Releases",
    )


@app.command("get")
def get_release(
    ctx: typer.Context,
    name: NameArgument,
    namespace: NamespaceOption = DEFAULT_NAMESPACE,
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """Show one release."""

    async def _get(client: SteerClient, config: SteerConfig) -> Release:
        return await with_retries(
            config.dashboard.retries,
            lambda: client.releases.get(namespace, name),
        )

    release = run_command(ctx, _get)
    get_formatter(output, console).format_resource(
        release,
        release_fields(release),
        title=f"Release {release.key}",
    )


@app.command("delete")
def delete_release(
    ctx: typer.Context,
    name: NameArgument,
    namespace: NamespaceOption = DEFAULT_NAMESPACE,
    yes: YesOption = False,
) -> None:
    """Delete a release."""
    key = f"{namespace}/{name}"
    confirm_delete("release", key, yes)

    async def _delete(client: SteerClient, config: SteerConfig) -> None:
        await client.releases.delete(namespace, name)

    run_command(ctx, _delete)
    logger.info("Release deleted", release=key)
    console.print(f"[green]Deleted release '{escape(key)}'[/green]")


@app.command("create")
def create_release(
    ctx: typer.Context,
    name: NameArgument,
    namespace: NamespaceOption = DEFAULT_NAMESPACE,
    chart: Annotated[str | None, typer.Option("--chart", help="Chart name")] = None,
    target_namespace: Annotated[
        str | None,
        typer.Option("--target-namespace", "-t", help="Namespace to install into"),
    ] = None,
    version: Annotated[str | None, typer.Option("--version", help="Chart version")] = None,
    repository: Annotated[str | None, typer.Option("--repository", help="Chart repository URL")] = None,
    git_url: Annotated[str | None, typer.Option("--git-url", help="Git repository URL")] = None,
    git_ref: Annotated[str | None, typer.Option("--git-ref", help="Git ref")] = None,
    git_path: Annotated[str | None, typer.Option("--git-path", help="Chart path in the repository")] = None,
    git_branch: Annotated[str | None, typer.Option("--git-branch", help="Git branch")] = None,
    timeout: Annotated[str | None, typer.Option("--timeout", help="Install timeout, e.g. 5m")] = None,
    max_retries: Annotated[int | None, typer.Option("--max-retries", help="Install attempts")] = None,
    values_file: Annotated[
        Path | None,
        typer.Option(
            "--values",
            "-f",
            exists=True,
            dir_okay=False,
            readable=True,
            help="YAML file with chart value overrides",
        ),
    ] = None,
    delete_namespace: Annotated[
        bool, typer.Option("--delete-namespace", help="Delete the target namespace on cleanup")
    ] = False,
    delete_images: Annotated[
        bool, typer.Option("--delete-images", help="Delete pulled images on cleanup")
    ] = False,
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """Create a release."""
    values = {
        "name": name,
        "namespace": namespace,
        "chart_name": chart,
        "target_namespace": target_namespace,
        "version": version,
        "repository": repository,
        "git_url": git_url,
        "git_ref": git_ref,
        "git_path": git_path,
        "git_branch": git_branch,
        "timeout": timeout,
        "max_retries": max_retries,
        "values": values_file.read_text() if values_file else None,
        "delete_namespace": delete_namespace,
        "delete_images": delete_images,
    }
    try:
        release = build_release(values)
    except FormValidationError as e:
        handle_validation_error(e)

    async def _create(client: SteerClient, config: SteerConfig) -> Release:
        return await client.releases.create(release)

    created = run_command(ctx, _create)
    logger.info("Release created", release=created.key)
    if output is OutputFormat.TABLE:
        console.print(f"[green]Created release '{escape(created.key)}'[/green]")
    else:
        get_formatter(output, console).format_resource(created, release_fields(created))
