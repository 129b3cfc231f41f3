"""
Plain text formatter: rows exactly as produced
"""

from typing import List

from flatjoin.cli.formatters.base import BaseFormatter


class TextFormatter(BaseFormatter):
    """Format results as one line per row"""

    def format(self, rows: List[str], **kwargs) -> str:
        return "\n".join(rows)
