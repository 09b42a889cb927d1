"""Dashboard command: launch the interactive TUI."""

from __future__ import annotations

from typing import Annotated

import structlog
import typer

from steer_dashboard.cli.commands.base import create_client, get_state, load_settings
from steer_dashboard.logging.config import configure_logging

logger = structlog.get_logger()


def dashboard(
    ctx: typer.Context,
    interval: Annotated[
        float | None,
        typer.Option(
            "--interval",
            "-i",
            min=0.5,
            help="Seconds between refreshes (default from config, 5s).",
        ),
    ] = None,
) -> None:
    """Open the interactive dashboard."""
    from steer_dashboard.tui.apps.steer import SteerApp

    state = get_state(ctx)
    config = load_settings(ctx)
    refresh_interval = interval or config.dashboard.refresh_interval

    # The TUI owns the terminal; keep logging to the file only
    configure_logging(verbose=state.verbose, debug=state.debug, console=False)
    logger.info(
        "Launching dashboard",
        base_url=config.connection.api_url,
        interval=refresh_interval,
    )

    SteerApp(create_client(config), refresh_interval=refresh_interval).run()
