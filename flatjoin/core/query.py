"""
Main API - user-facing interface for flatjoin

Provides the library functions (sort, join, search) and a fluent front-end
that runs the whole sort -> join -> search pipeline.

Example:
    >>> from flatjoin import manipulate
    >>> with manipulate("left.txt", "right.txt") as m:
    ...     m.left_sort_filter(6, "EQ", "Tokyo").left_sort_filter(1, ">=", "1250053")
    ...     m.right_sort_filter(6, "EQ", "Tokyo")
    ...     m.sort()
    ...     joined = m.join()
    ...     found = m.search_filter(1, "EQ", "1250053").search()
"""

import logging
import os
from dataclasses import replace
from typing import Iterable, Iterator, List, Optional, Sequence, Union

from flatjoin.core.config import (
    DEFAULT_DELIMITER,
    DEFAULT_ENCODING,
    DEFAULT_JOIN_KEY,
    DEFAULT_SORT_KEY,
    RelationSpec,
)
from flatjoin.core.executor import sort_pair
from flatjoin.core.row_filter import RowFilter
from flatjoin.core.types import Operator
from flatjoin.operators.join import merge_join
from flatjoin.operators.sort import Sorter

logger = logging.getLogger(__name__)


def build_filter(
    column: int,
    operator: Union[Operator, str],
    value: Union[int, str],
    delimiter: str = DEFAULT_DELIMITER,
) -> RowFilter:
    """
    Start a filter with one predicate

    Chain more predicates with ``.add_predicate(...)``.
    """
    return RowFilter(delimiter).add_predicate(column, operator, value)


def sort(
    relation_path: str,
    key_column: int = DEFAULT_SORT_KEY,
    delimiter: str = DEFAULT_DELIMITER,
    filters: Optional[RowFilter] = None,
    directory: Optional[str] = None,
    encoding: str = DEFAULT_ENCODING,
) -> str:
    """
    Sort a relation file into a new temporary file

    Returns:
        Path of the sorted file; the caller deletes it
    """
    sorter = Sorter(
        relation_path,
        key_column=key_column,
        delimiter=delimiter,
        row_filter=filters,
        encoding=encoding,
    )
    return sorter.sort_to_file(directory)


def join(
    left_path: str,
    right_path: str,
    left_key_column: int = DEFAULT_JOIN_KEY,
    right_key_column: int = DEFAULT_JOIN_KEY,
    left_output_columns: Optional[Sequence[int]] = None,
    right_output_columns: Optional[Sequence[int]] = None,
    delimiter: str = DEFAULT_DELIMITER,
    left_omit_columns: Optional[Sequence[int]] = None,
    right_omit_columns: Optional[Sequence[int]] = None,
    encoding: str = DEFAULT_ENCODING,
) -> List[str]:
    """
    Merge join two relations already sorted by their key columns

    Args:
        left_path: Sorted left relation
        right_path: Sorted right relation
        left_key_column: Left join key column
        right_key_column: Right join key column
        left_output_columns: Left columns to emit (default: all except omitted)
        right_output_columns: Right columns to emit (default: all except omitted)
        delimiter: Column delimiter
        left_omit_columns: Left columns omitted by default (default: none)
        right_omit_columns: Right columns omitted by default (default: 0 and 1)
        encoding: File encoding

    Returns:
        Joined rows
    """
    left = RelationSpec.left(
        left_path,
        key_column=left_key_column,
        output_columns=left_output_columns,
        omit_columns=left_omit_columns,
        delimiter=delimiter,
        encoding=encoding,
    )
    right = RelationSpec.right(
        right_path,
        key_column=right_key_column,
        output_columns=right_output_columns,
        omit_columns=right_omit_columns,
        delimiter=delimiter,
        encoding=encoding,
    )
    return merge_join(left, right)


def search(joined_rows: Iterable[str], filters: Optional[RowFilter]) -> List[str]:
    """Keep the joined rows matching every predicate of ``filters``"""
    if filters is None:
        return list(joined_rows)
    return [row for row in joined_rows if filters.matches(row)]


class JoinResult:
    """
    Joined (or searched) rows

    Behaves like a read-only list of strings and can be exported to a
    pandas DataFrame.
    """

    def __init__(self, rows: List[str], delimiter: str = DEFAULT_DELIMITER):
        self.rows = rows
        self.delimiter = delimiter

    def __iter__(self) -> Iterator[str]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index):
        return self.rows[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, JoinResult):
            return self.rows == other.rows
        if isinstance(other, list):
            return self.rows == other
        return NotImplemented

    def to_list(self) -> List[str]:
        return list(self.rows)

    def split(self) -> List[List[str]]:
        """Rows split into columns"""
        return [row.split(self.delimiter) for row in self.rows]

    def to_dataframe(self):
        """
        Convert rows to a pandas DataFrame

        Columns are named by position ("0", "1", ...). Shorter rows are
        padded with missing values.
        """
        try:
            import pandas as pd
        except ImportError:
            raise ImportError(
                "Pandas is required for to_dataframe(). Install with: pip install flatjoin[pandas]"
            )

        records = self.split()
        width = max((len(r) for r in records), default=0)
        return pd.DataFrame(records, columns=[str(i) for i in range(width)])

    def __repr__(self) -> str:
        return f"JoinResult({len(self.rows)} rows)"


class FlatFileManipulator:
    """
    Sort, join and search front-end for a pair of relation files

    Typical flow:
    1. Add pre-sort filters (left_sort_filter / right_sort_filter) to keep
       the join result small
    2. sort(): both files in parallel into temporary files
    3. join(): merge join of the sorted files
    4. Add search filters and search() the joined rows

    Temporary files created by sort() are deleted by close() (or on leaving
    a ``with`` block).
    """

    def __init__(
        self,
        left_path: str,
        right_path: str,
        delimiter: str = DEFAULT_DELIMITER,
        left_key: int = DEFAULT_JOIN_KEY,
        right_key: int = DEFAULT_JOIN_KEY,
        left_columns: Optional[Sequence[int]] = None,
        right_columns: Optional[Sequence[int]] = None,
        left_omit: Optional[Sequence[int]] = None,
        right_omit: Optional[Sequence[int]] = None,
        encoding: str = DEFAULT_ENCODING,
        temp_dir: Optional[str] = None,
    ):
        """
        Initialize the front-end

        Args:
            left_path: Left relation file
            right_path: Right relation file
            delimiter: Column delimiter for both files
            left_key: Left sort/join key column
            right_key: Right sort/join key column
            left_columns: Left output columns (default: all except left_omit)
            right_columns: Right output columns (default: all except right_omit)
            left_omit: Left columns omitted by default (default: none)
            right_omit: Right columns omitted by default (default: 0 and 1)
            encoding: File encoding
            temp_dir: Directory for sorted temporary files
        """
        self.left_path = str(left_path)
        self.right_path = str(right_path)
        self.delimiter = delimiter
        self.encoding = encoding
        self.temp_dir = temp_dir

        self.left_spec = RelationSpec.left(
            self.left_path,
            key_column=left_key,
            output_columns=left_columns,
            omit_columns=left_omit,
            delimiter=delimiter,
            encoding=encoding,
        )
        self.right_spec = RelationSpec.right(
            self.right_path,
            key_column=right_key,
            output_columns=right_columns,
            omit_columns=right_omit,
            delimiter=delimiter,
            encoding=encoding,
        )

        self.left_sorter = Sorter(self.left_path, left_key, delimiter, encoding=encoding)
        self.right_sorter = Sorter(self.right_path, right_key, delimiter, encoding=encoding)
        self.search_row_filter = RowFilter(delimiter)

        self.left_sorted: Optional[str] = None
        self.right_sorted: Optional[str] = None
        self.joined: Optional[JoinResult] = None
        self._temp_files: List[str] = []

    def left_sort_filter(
        self, column: int, operator: Union[Operator, str], value
    ) -> "FlatFileManipulator":
        """Add a predicate applied to the left file before sorting"""
        self.left_sorter.add_predicate(column, operator, value)
        return self

    def right_sort_filter(
        self, column: int, operator: Union[Operator, str], value
    ) -> "FlatFileManipulator":
        """Add a predicate applied to the right file before sorting"""
        self.right_sorter.add_predicate(column, operator, value)
        return self

    def search_filter(
        self, column: int, operator: Union[Operator, str], value
    ) -> "FlatFileManipulator":
        """Add a predicate applied to the joined rows by search()"""
        self.search_row_filter = self.search_row_filter.add_predicate(column, operator, value)
        return self

    def sort(self, left: bool = True, right: bool = True) -> "FlatFileManipulator":
        """
        Sort the relations

        Both sides are sorted in parallel. A side passed as False is taken
        to be sorted already and is joined as-is; its sort filters are not
        applied.

        Raises:
            ConcurrentTaskError: If a parallel sort fails
        """
        self._remove_temp_files()
        self.left_sorted = self.right_sorted = None
        self.joined = None

        if left and right:
            self.left_sorted, self.right_sorted = sort_pair(
                self.left_sorter, self.right_sorter, self.temp_dir
            )
            self._temp_files.extend([self.left_sorted, self.right_sorted])
            return self

        if left:
            self.left_sorted = self.left_sorter.sort_to_file(self.temp_dir)
            self._temp_files.append(self.left_sorted)
        else:
            self.left_sorted = self.left_path

        if right:
            self.right_sorted = self.right_sorter.sort_to_file(self.temp_dir)
            self._temp_files.append(self.right_sorted)
        else:
            self.right_sorted = self.right_path

        return self

    def join(self) -> JoinResult:
        """
        Merge join the sorted relations

        Raises:
            RuntimeError: If sort() has not been called
        """
        if self.left_sorted is None or self.right_sorted is None:
            raise RuntimeError("sort() must be called before join()")

        rows = merge_join(
            self._with_path(self.left_spec, self.left_sorted),
            self._with_path(self.right_spec, self.right_sorted),
        )
        self.joined = JoinResult(rows, self.delimiter)
        return self.joined

    def search(self) -> JoinResult:
        """
        Filter the joined rows with the search filter

        Raises:
            RuntimeError: If join() has not been called
        """
        if self.joined is None:
            raise RuntimeError("join() must be called before search()")
        rows = search(self.joined, self.search_row_filter)
        logger.info("Search kept %d of %d joined row(s)", len(rows), len(self.joined))
        return JoinResult(rows, self.delimiter)

    def explain(self) -> str:
        """Describe the sort/join/search plan"""
        lines = [f"Search({self.search_row_filter!r})"]
        lines.append(
            f"  MergeJoin(left.{self.left_spec.key_column} = right.{self.right_spec.key_column})"
        )
        lines.append("    Left:")
        lines.extend(self.left_sorter.explain(6))
        lines.append("    Right:")
        lines.extend(self.right_sorter.explain(6))
        return "\n".join(lines)

    def close(self) -> None:
        """Delete the temporary files created by sort()"""
        self._remove_temp_files()

    def _remove_temp_files(self) -> None:
        while self._temp_files:
            path = self._temp_files.pop()
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass

    @staticmethod
    def _with_path(spec: RelationSpec, path: str) -> RelationSpec:
        return replace(spec, path=path)

    def __enter__(self) -> "FlatFileManipulator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"FlatFileManipulator({self.left_path!r}, {self.right_path!r})"


def manipulate(left_path: str, right_path: str, **options) -> FlatFileManipulator:
    """
    Create a front-end for a pair of relation files

    Args:
        left_path: Left relation file
        right_path: Right relation file
        **options: Keyword arguments of FlatFileManipulator

    Example:
        >>> m = manipulate("left.txt", "right.txt", left_key=0, right_key=0)
    """
    return FlatFileManipulator(left_path, right_path, **options)
