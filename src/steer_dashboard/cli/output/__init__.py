"""CLI output utilities.

Usage:
    from steer_dashboard.cli.output import OutputFormat, Table, get_formatter
"""

from steer_dashboard.cli.output.formatters import (
    Formatter,
    OutputFormat,
    get_formatter,
)
from steer_dashboard.cli.output.table import Table

__all__ = ["Formatter", "OutputFormat", "Table", "get_formatter"]
