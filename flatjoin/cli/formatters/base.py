"""
Base formatter interface for CLI output

All formatters must implement the format() method.
"""

from typing import List

from flatjoin.core.config import DEFAULT_DELIMITER


class BaseFormatter:
    """Base class for all output formatters"""

    def format(self, rows: List[str], **kwargs) -> str:
        """
        Format result rows for output

        Args:
            rows: Joined or sorted lines
            **kwargs: Additional formatter-specific options

        Returns:
            Formatted string ready for output
        """
        raise NotImplementedError("Formatters must implement format() method")

    def get_name(self) -> str:
        """Get formatter name"""
        return self.__class__.__name__.replace("Formatter", "").lower()

    @staticmethod
    def split_rows(rows: List[str], delimiter: str = DEFAULT_DELIMITER) -> List[List[str]]:
        """Split rows into columns, dropping trailing empty columns"""
        records = []
        for row in rows:
            columns = row.split(delimiter)
            while len(columns) > 1 and columns[-1] == "":
                columns.pop()
            records.append(columns)
        return records
