"""
Sort operator and Sorter

Orders the lines of a relation by the string value of one key column.

Note: sorting materializes the whole (filtered) relation in memory.
"""

import logging
from typing import Iterator, List, Optional, Union

from flatjoin.core.config import DEFAULT_DELIMITER, DEFAULT_ENCODING, DEFAULT_SORT_KEY
from flatjoin.core.errors import ParseError
from flatjoin.core.row_filter import RowFilter
from flatjoin.core.types import Operator
from flatjoin.operators.base import LineOperator
from flatjoin.operators.filter import Filter
from flatjoin.operators.scan import Scan
from flatjoin.readers.text_reader import DelimitedTextReader, write_temp_lines

logger = logging.getLogger(__name__)


def key_of(line: str, key_column: int, delimiter: str) -> str:
    """
    Extract the key column of a line

    The line is split into at most ``key_column + 2`` parts; later columns
    are never materialized.

    Raises:
        ParseError: If the line has no such column
    """
    parts = line.split(delimiter, key_column + 1)
    if key_column >= len(parts):
        raise ParseError(
            f"Line has {len(parts)} column(s), key column is {key_column}: {line!r}",
            line=line,
        )
    return parts[key_column]


class SortOperator(LineOperator):
    """
    Sort operator

    Materializes all input lines and yields them ordered by the key column
    (plain string comparison). The sort is stable: lines with equal keys keep
    their input order.
    """

    def __init__(
        self,
        child: LineOperator,
        key_column: int = DEFAULT_SORT_KEY,
        delimiter: str = DEFAULT_DELIMITER,
    ):
        super().__init__(child)
        self.key_column = key_column
        self.delimiter = delimiter

    def __iter__(self) -> Iterator[str]:
        yield from self.sorted_lines()

    def sorted_lines(self) -> List[str]:
        lines = list(self.child)
        lines.sort(key=self._sort_key)
        return lines

    def _sort_key(self, line: str) -> str:
        return key_of(line, self.key_column, self.delimiter)

    def __repr__(self) -> str:
        return f"Sort(column={self.key_column}, delimiter={self.delimiter!r})"


class Sorter:
    """
    Sorts one relation file, optionally dropping rows first

    Example:
        >>> path = (
        ...     Sorter("orders.txt", key_column=1)
        ...     .add_predicate(0, Operator.EQ, 100)
        ...     .add_predicate(1, Operator.GTE, 2000)
        ...     .sort_to_file()
        ... )

    Rows that do not satisfy every predicate are left out of the result.
    A Sorter is callable, which runs ``sort_to_file()``; this lets it be
    submitted to an executor as-is.
    """

    def __init__(
        self,
        path: str,
        key_column: int = DEFAULT_SORT_KEY,
        delimiter: str = DEFAULT_DELIMITER,
        row_filter: Optional[RowFilter] = None,
        encoding: str = DEFAULT_ENCODING,
    ):
        """
        Initialize sorter

        Args:
            path: File to sort
            key_column: 0-based column to sort by
            delimiter: Column delimiter
            row_filter: Predicates applied before sorting
            encoding: File encoding
        """
        if key_column < 0:
            raise ValueError(f"key_column must be non-negative, got {key_column}")
        self.path = str(path)
        self.key_column = key_column
        self.delimiter = delimiter
        self.encoding = encoding
        if row_filter is None:
            row_filter = RowFilter(delimiter)
        elif row_filter.delimiter != delimiter:
            row_filter = row_filter.with_delimiter(delimiter)
        self.row_filter = row_filter

    def add_predicate(
        self, column: int, operator: Union[Operator, str], value
    ) -> "Sorter":
        """
        Add a pre-sort predicate

        Args:
            column: 0-based column to test
            operator: Operator (or its name/symbol)
            value: int or str comparison value

        Returns:
            This sorter, for chaining
        """
        self.row_filter = self.row_filter.add_predicate(column, operator, value)
        return self

    def plan(self) -> SortOperator:
        """
        Build the operator tree

        Raises:
            FileNotFoundError: If the file does not exist
        """
        source: LineOperator = Scan(DelimitedTextReader(self.path, encoding=self.encoding))
        if self.row_filter:
            source = Filter(source, self.row_filter)
        return SortOperator(source, self.key_column, self.delimiter)

    def sort(self) -> List[str]:
        """
        Read, filter and sort the file

        Returns:
            Admitted lines ordered by key column

        Raises:
            OSError: If the file cannot be read
            ParseError: If a line cannot be evaluated
        """
        logger.debug("Sorting %s on column %d (%r)", self.path, self.key_column, self.row_filter)
        lines = self.plan().sorted_lines()
        logger.info("Sorted %s: %d line(s)", self.path, len(lines))
        return lines

    def sort_to_file(self, directory: Optional[str] = None) -> str:
        """
        Sort and write the result into a new temporary file

        The caller is responsible for deleting the returned file.

        Args:
            directory: Directory for the temporary file (default: system temp dir)

        Returns:
            Path of the sorted file
        """
        return write_temp_lines(self.sort(), directory=directory, encoding=self.encoding)

    def __call__(self) -> str:
        return self.sort_to_file()

    def explain(self, indent: int = 0) -> List[str]:
        """Generate execution plan explanation without opening the file"""
        pad = " " * indent
        lines = [pad + f"Sort(column={self.key_column}, delimiter={self.delimiter!r})"]
        if self.row_filter:
            lines.append(pad + "  " + f"Filter({self.row_filter!r})")
            indent += 2
        lines.append(" " * (indent + 2) + f"Scan({self.path!r})")
        return lines

    def __repr__(self) -> str:
        return f"Sorter({self.path!r}, key_column={self.key_column})"
