"""Main CLI entry point using Typer."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from steer_dashboard import __version__
from steer_dashboard.cli.commands import dashboard, jobs, releases, stats
from steer_dashboard.cli.commands.base import CLIState
from steer_dashboard.logging.config import configure_logging

app = typer.Typer(
    name="steer",
    help="Steer dashboard for Helm releases and Helm test jobs.",
    add_completion=True,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"steer version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        help="Steer backend URL (overrides config and STEER_BASE_URL).",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a YAML config file.",
    ),
) -> None:
    """Steer - observe and manage Helm releases and their test jobs."""
    configure_logging(verbose=verbose, debug=debug)
    ctx.obj = CLIState(config_path=config, base_url=base_url, verbose=verbose, debug=debug)


# Register subcommands
app.add_typer(releases.app, name="releases")
app.add_typer(jobs.app, name="jobs")
app.command()(stats.stats)
app.command()(dashboard.dashboard)


if __name__ == "__main__":
    app()
