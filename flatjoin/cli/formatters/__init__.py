"""
Output formatters for CLI

Available formatters:
- TextFormatter: Rows as produced, one per line
- TableFormatter: Rich tables
- JSONFormatter: Machine-readable JSON
- CSVFormatter: Unix-friendly CSV
"""

from flatjoin.cli.formatters.base import BaseFormatter
from flatjoin.cli.formatters.csv import CSVFormatter
from flatjoin.cli.formatters.json import JSONFormatter
from flatjoin.cli.formatters.table import TableFormatter
from flatjoin.cli.formatters.text import TextFormatter

__all__ = ["BaseFormatter", "TextFormatter", "TableFormatter", "JSONFormatter", "CSVFormatter"]


def get_formatter(format_name: str) -> BaseFormatter:
    """
    Get formatter by name

    Args:
        format_name: Name of formatter (text, table, json, csv)

    Returns:
        Formatter instance

    Raises:
        ValueError: If formatter not found
    """
    formatters = {
        "text": TextFormatter,
        "table": TableFormatter,
        "json": JSONFormatter,
        "csv": CSVFormatter,
    }

    if format_name not in formatters:
        available = ", ".join(formatters.keys())
        raise ValueError(f"Unknown format: {format_name}. Available formats: {available}")

    return formatters[format_name]()
