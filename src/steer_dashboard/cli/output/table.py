"""Rich table with the defaults every CLI listing uses."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from rich import box
from rich.table import Table as RichTable

if TYPE_CHECKING:
    from rich.console import ConsoleRenderable, RichCast

OverflowMethod = Literal["fold", "crop", "ellipsis", "ignore"]


class Table(RichTable):
    """Rich Table that wraps long cells instead of truncating them.

    Usage:
        from steer_dashboard.cli.output import Table

        table = Table(title="Helm Releases")
        table.add_column("Name", style="cyan")
        table.add_column("Chart", no_wrap=True)
        table.add_row("my-app", "nginx (1.2.3)")
    """

    def __init__(self, *headers: Any, **kwargs: Any) -> None:
        kwargs.setdefault("box", box.SIMPLE_HEAVY)
        kwargs.setdefault("show_header", True)
        super().__init__(*headers, **kwargs)

    def add_column(
        self,
        header: ConsoleRenderable | RichCast | str = "",
        footer: ConsoleRenderable | RichCast | str = "",
        *,
        overflow: OverflowMethod = "fold",
        **kwargs: Any,
    ) -> None:
        """Add a column with overflow="fold" by default."""
        super().add_column(header, footer, overflow=overflow, **kwargs)
