"""Output formatters for CLI commands.

Table output shows display rows built by the command; JSON and YAML
output show the resource documents exactly as the backend exchanges them.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import StrEnum
from typing import Any

import yaml
from rich.console import Console
from rich.markup import escape

from steer_dashboard.cli.output.table import Table
from steer_dashboard.integrations.steer.models import SteerResource


class OutputFormat(StrEnum):
    """Supported output formats for CLI commands."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


def _document(item: Any) -> Any:
    if isinstance(item, SteerResource):
        return item.to_document()
    return item


class Formatter(ABC):
    """Base class for output formatters."""

    def __init__(self, console: Console) -> None:
        self.console = console

    @abstractmethod
    def format_list(
        self,
        resources: Sequence[SteerResource],
        columns: Sequence[str],
        rows: Sequence[Sequence[str]],
        title: str = "",
    ) -> None:
        """Display a list of resources."""

    @abstractmethod
    def format_resource(
        self,
        resource: SteerResource,
        fields: Sequence[tuple[str, str]],
        title: str = "",
    ) -> None:
        """Display one resource."""

    @abstractmethod
    def format_dict(self, data: dict[str, Any], title: str = "") -> None:
        """Display a flat mapping."""

    def _raw(self, text: str) -> None:
        # Machine-readable output must not be wrapped or marked up
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)


class TableFormatter(Formatter):
    """Rich table output."""

    def format_list(
        self,
        resources: Sequence[SteerResource],
        columns: Sequence[str],
        rows: Sequence[Sequence[str]],
        title: str = "",
    ) -> None:
        table = Table(title=title)
        for header in columns:
            table.add_column(header, style="cyan" if header in ("Name", "Namespace") else None)
        for row in rows:
            table.add_row(*row)
        self.console.print(table)
        self.console.print(f"[dim]Total: {len(resources)}[/dim]")

    def format_resource(
        self,
        resource: SteerResource,
        fields: Sequence[tuple[str, str]],
        title: str = "",
    ) -> None:
        table = Table(title=title or resource.key)
        table.add_column("Field", style="cyan", no_wrap=True)
        table.add_column("Value")
        for name, value in fields:
            table.add_row(name, value)
        self.console.print(table)

    def format_dict(self, data: dict[str, Any], title: str = "") -> None:
        table = Table(title=title)
        table.add_column("Metric", style="cyan", no_wrap=True)
        table.add_column("Value")
        for key, value in data.items():
            if isinstance(value, dict):
                value = ", ".join(f"{k}: {v}" for k, v in value.items()) or "-"
            table.add_row(key, escape(str(value)))
        self.console.print(table)


class JsonFormatter(Formatter):
    """JSON output."""

    def format_list(
        self,
        resources: Sequence[SteerResource],
        columns: Sequence[str],
        rows: Sequence[Sequence[str]],
        title: str = "",
    ) -> None:
        data = [_document(r) for r in resources]
        self._raw(json.dumps({"items": data, "total": len(data)}, indent=2, default=str))

    def format_resource(
        self,
        resource: SteerResource,
        fields: Sequence[tuple[str, str]],
        title: str = "",
    ) -> None:
        self._raw(json.dumps(_document(resource), indent=2, default=str))

    def format_dict(self, data: dict[str, Any], title: str = "") -> None:
        self._raw(json.dumps(data, indent=2, default=str))


class YamlFormatter(Formatter):
    """YAML output."""

    def format_list(
        self,
        resources: Sequence[SteerResource],
        columns: Sequence[str],
        rows: Sequence[Sequence[str]],
        title: str = "",
    ) -> None:
        data = [_document(r) for r in resources]
        self._raw(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))

    def format_resource(
        self,
        resource: SteerResource,
        fields: Sequence[tuple[str, str]],
        title: str = "",
    ) -> None:
        self._raw(yaml.safe_dump(_document(resource), default_flow_style=False, sort_keys=False))

    def format_dict(self, data: dict[str, Any], title: str = "") -> None:
        self._raw(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))


def get_formatter(format_type: OutputFormat, console: Console | None = None) -> Formatter:
    """Return the formatter for an output format."""
    formatters: dict[OutputFormat, type[Formatter]] = {
        OutputFormat.TABLE: TableFormatter,
        OutputFormat.JSON: JsonFormatter,
        OutputFormat.YAML: YamlFormatter,
    }
    return formatters.get(format_type, TableFormatter)(console or Console())
