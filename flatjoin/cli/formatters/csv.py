"""
CSV formatter for Unix-friendly output
"""

import csv
import io
from typing import List

from flatjoin.cli.formatters.base import BaseFormatter
from flatjoin.core.config import DEFAULT_DELIMITER


class CSVFormatter(BaseFormatter):
    """Format results as CSV (one record per row, no header)"""

    def format(self, rows: List[str], **kwargs) -> str:
        """
        Format results as CSV

        Args:
            rows: Result lines
            **kwargs: Options like 'delimiter' (input), 'quote_all'

        Returns:
            CSV string
        """
        if not rows:
            return ""

        output = io.StringIO()
        writer = csv.writer(
            output,
            quoting=csv.QUOTE_MINIMAL if not kwargs.get("quote_all") else csv.QUOTE_ALL,
            lineterminator="\n",
        )
        writer.writerows(self.split_rows(rows, kwargs.get("delimiter", DEFAULT_DELIMITER)))

        return output.getvalue()
