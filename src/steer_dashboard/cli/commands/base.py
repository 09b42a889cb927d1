"""Shared plumbing for Steer CLI commands.

Common Typer options, configuration and client setup, caller-side retries
and user-friendly error output.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn, TypeVar

import structlog
import typer
from rich.console import Console
from rich.markup import escape
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from steer_dashboard.cli.output import OutputFormat
from steer_dashboard.core.exceptions import FormValidationError
from steer_dashboard.integrations.steer import (
    SteerAPIError,
    SteerClient,
    SteerConfig,
    SteerConnectionConfig,
    SteerConnectionError,
    SteerDecodeError,
    load_config,
)

# Shared console instance
console = Console()
logger = structlog.get_logger()

T = TypeVar("T")


@dataclass
class CLIState:
    """Global options captured by the root callback."""

    config_path: Path | None = None
    base_url: str | None = None
    verbose: bool = False
    debug: bool = False


# =============================================================================
# Common Typer Option Annotations
# =============================================================================

OutputOption = Annotated[
    OutputFormat,
    typer.Option(
        "--output",
        "-o",
        help="Output format: table, json, or yaml",
        case_sensitive=False,
    ),
]

NamespaceFilterOption = Annotated[
    str | None,
    typer.Option(
        "--namespace",
        "-n",
        help="Only show resources in this namespace",
    ),
]

NamespaceOption = Annotated[
    str,
    typer.Option(
        "--namespace",
        "-n",
        help="Namespace of the resource",
    ),
]

YesOption = Annotated[
    bool,
    typer.Option(
        "--yes",
        "-y",
        help="Skip confirmation prompts",
    ),
]


# =============================================================================
# Configuration and client
# =============================================================================


def get_state(ctx: typer.Context) -> CLIState:
    obj = ctx.find_root().obj
    return obj if isinstance(obj, CLIState) else CLIState()


def load_settings(ctx: typer.Context) -> SteerConfig:
    """Load configuration, applying the global ``--base-url`` override.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    state = get_state(ctx)
    try:
        config = load_config(state.config_path)
        if state.base_url:
            connection = SteerConnectionConfig.model_validate(
                {**config.connection.model_dump(), "base_url": state.base_url}
            )
            config = config.model_copy(update={"connection": connection})
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] Config file not found: {escape(str(e))}")
        raise typer.Exit(1) from e
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {escape(str(e))}")
        raise typer.Exit(1) from e
    return config


def create_client(config: SteerConfig) -> SteerClient:
    """Create the API client for a command."""
    return SteerClient(config.connection)


async def with_retries(attempts: int, call: Callable[[], Awaitable[T]]) -> T:
    """Run a gateway call, retrying only when the backend is unreachable."""
    async for attempt in AsyncRetrying(
        retry=retry_if_exception_type(SteerConnectionError),
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    ):
        with attempt:
            return await call()
    raise AssertionError("unreachable")  # pragma: no cover


def run_command(
    ctx: typer.Context,
    operation: Callable[[SteerClient, SteerConfig], Awaitable[T]],
) -> T:
    """Run an async operation with a client bound to the command's lifetime.

    Gateway and form errors are printed and turned into exit code 1.
    """
    config = load_settings(ctx)

    async def _run() -> T:
        async with create_client(config) as client:
            return await operation(client, config)

    try:
        return asyncio.run(_run())
    except SteerAPIError as e:
        handle_steer_error(e)
    except FormValidationError as e:
        handle_validation_error(e)


# =============================================================================
# Error Handling
# =============================================================================


def handle_steer_error(error: SteerAPIError) -> NoReturn:
    """Print a gateway error and exit.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    logger.debug("Command failed", error=str(error))
    if isinstance(error, SteerConnectionError):
        console.print("[red]Error:[/red] Cannot connect to the Steer API")
        console.print(f"  {escape(error.message)}")
        if error.original_error:
            console.print(f"  Cause: {escape(str(error.original_error))}")
        console.print(
            "\n[dim]Hint: Check that the backend is running and STEER_BASE_URL is correct.[/dim]"
        )
    elif isinstance(error, SteerDecodeError):
        console.print("[red]Error:[/red] Unexpected response from the Steer API")
        console.print(f"  {escape(error.message)}")
    else:
        console.print(f"[red]Error:[/red] {escape(error.message)}")
        if error.status_code:
            console.print(f"  HTTP Status: {error.status_code}")
    if error.endpoint:
        console.print(f"  Endpoint: {escape(error.endpoint)}")
    raise typer.Exit(1)


def handle_validation_error(error: FormValidationError) -> NoReturn:
    """Print a form validation error and exit.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    console.print(f"[red]Error:[/red] Invalid {error.field}: {escape(error.message)}")
    raise typer.Exit(1)


def confirm_delete(noun: str, key: str, yes: bool) -> None:
    """Ask before deleting unless ``--yes`` was given.

    Raises:
        typer.Abort: If the user declines.
    """
    if not yes:
        typer.confirm(f"Delete {noun} '{key}'?", abort=True)
