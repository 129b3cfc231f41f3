"""
JSON formatter for machine-readable output
"""

import json
from typing import List

from flatjoin.cli.formatters.base import BaseFormatter
from flatjoin.core.config import DEFAULT_DELIMITER


class JSONFormatter(BaseFormatter):
    """Format results as a JSON array of column arrays"""

    def format(self, rows: List[str], **kwargs) -> str:
        """
        Format results as JSON

        Args:
            rows: Result lines
            **kwargs: Options like 'delimiter', 'compact', 'indent'

        Returns:
            JSON string
        """
        records = self.split_rows(rows, kwargs.get("delimiter", DEFAULT_DELIMITER))

        if kwargs.get("compact", False):
            return json.dumps(records, separators=(",", ":"), ensure_ascii=False)
        else:
            indent = kwargs.get("indent", 2)
            return json.dumps(records, indent=indent, ensure_ascii=False)
