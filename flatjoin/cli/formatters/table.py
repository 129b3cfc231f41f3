"""
Rich table formatter for terminal output
"""

from typing import List

from rich import box
from rich.console import Console
from rich.table import Table

from flatjoin.cli.formatters.base import BaseFormatter
from flatjoin.core.config import DEFAULT_DELIMITER


class TableFormatter(BaseFormatter):
    """Format results as a Rich table with positional column headers"""

    def format(self, rows: List[str], **kwargs) -> str:
        """
        Format results as a Rich table

        Args:
            rows: Result lines
            **kwargs: Options like 'delimiter', 'no_color', 'show_footer'

        Returns:
            Formatted table string
        """
        if not rows:
            return "No results found."

        records = self.split_rows(rows, kwargs.get("delimiter", DEFAULT_DELIMITER))
        width = max(len(r) for r in records)

        console = Console(force_terminal=not kwargs.get("no_color", False))

        # Narrow terminal or many columns: aggressive truncation
        if console.width < 80 or width > 8:
            table = Table(show_header=True, header_style="bold magenta", box=box.SIMPLE)
            max_col_width = kwargs.get("max_width", 15)
            for i in range(width):
                table.add_column(
                    str(i), style="cyan", overflow="ellipsis", max_width=max_col_width, no_wrap=True
                )
        else:
            table = Table(show_header=True, header_style="bold magenta")
            for i in range(width):
                table.add_column(str(i), style="cyan", overflow="ellipsis", max_width=30)

        for record in records:
            # Pad short rows
            table.add_row(*(record + [""] * (width - len(record))))

        with console.capture() as capture:
            console.print(table)

        output = capture.get()

        if kwargs.get("show_footer", True):
            count = len(rows)
            with console.capture() as capture:
                console.print(f"\n[dim]{count} row{'s' if count != 1 else ''}[/dim]")
            output += capture.get()

        return output
