"""
flatjoin - sort-merge join for delimited flat-text files

This package joins two line-oriented, delimited text files on one key
column: both files are filtered and sorted in parallel, then merged in a
single forward pass. Joined rows can be searched with the same predicates.
"""

__version__ = "0.1.0"

# Main API
from flatjoin.core.errors import ConcurrentTaskError, FlatJoinError, ParseError
from flatjoin.core.query import (
    FlatFileManipulator,
    JoinResult,
    build_filter,
    join,
    manipulate,
    search,
    sort,
)
from flatjoin.core.row_filter import RowFilter
from flatjoin.core.types import NE, Operator

__all__ = [
    "__version__",
    "build_filter",
    "sort",
    "join",
    "search",
    "manipulate",
    "FlatFileManipulator",
    "JoinResult",
    "RowFilter",
    "Operator",
    "NE",
    "FlatJoinError",
    "ParseError",
    "ConcurrentTaskError",
]
