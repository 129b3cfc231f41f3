"""
Default settings and per-relation configuration

Every default here can be overridden per call, either through the library
functions or through the CLI options.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Sequence, Tuple

# Column delimiter: a single literal string, no quoting or escaping
DEFAULT_DELIMITER = " "

# 0-based key columns used for sorting and joining
DEFAULT_SORT_KEY = 1
DEFAULT_JOIN_KEY = 1

# Columns left out of the joined output when no explicit column list is given
DEFAULT_OMIT_LEFT: Tuple[int, ...] = ()
DEFAULT_OMIT_RIGHT: Tuple[int, ...] = (0, 1)

# Temporary files produced by Sorter.sort_to_file()
SORTED_FILE_PREFIX = "sort"
SORTED_FILE_SUFFIX = ".tmp"

DEFAULT_ENCODING = "utf-8"

LEFT = "left"
RIGHT = "right"


def _as_columns(columns: Optional[Sequence[int]], name: str) -> Optional[Tuple[int, ...]]:
    if columns is None:
        return None
    columns = tuple(int(c) for c in columns)
    for column in columns:
        if column < 0:
            raise ValueError(f"{name} must be non-negative, got {column}")
    return columns


@dataclass(frozen=True)
class RelationSpec:
    """
    How one side of a join is read and formatted

    Attributes:
        path: Path to a file already sorted by ``key_column``
        key_column: 0-based join key column
        role: ``"left"`` or ``"right"``
        output_columns: Explicit columns to emit, or None for "all columns
            except ``omit_columns``"
        omit_columns: Columns dropped when ``output_columns`` is None
        delimiter: Column delimiter
        encoding: File encoding
    """

    path: str
    key_column: int = DEFAULT_JOIN_KEY
    role: str = LEFT
    output_columns: Optional[Tuple[int, ...]] = None
    omit_columns: FrozenSet[int] = field(default=frozenset(DEFAULT_OMIT_LEFT))
    delimiter: str = DEFAULT_DELIMITER
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self):
        if self.role not in (LEFT, RIGHT):
            raise ValueError(f"role must be '{LEFT}' or '{RIGHT}', got {self.role!r}")
        if self.key_column < 0:
            raise ValueError(f"key_column must be non-negative, got {self.key_column}")
        if not self.delimiter:
            raise ValueError("delimiter must not be empty")
        object.__setattr__(self, "path", str(self.path))
        object.__setattr__(
            self, "output_columns", _as_columns(self.output_columns, "output column")
        )
        object.__setattr__(
            self, "omit_columns", frozenset(_as_columns(self.omit_columns, "omitted column"))
        )

    @property
    def is_left(self) -> bool:
        return self.role == LEFT

    @classmethod
    def left(
        cls,
        path: str,
        key_column: int = DEFAULT_JOIN_KEY,
        output_columns: Optional[Sequence[int]] = None,
        omit_columns: Optional[Sequence[int]] = None,
        delimiter: str = DEFAULT_DELIMITER,
        encoding: str = DEFAULT_ENCODING,
    ) -> "RelationSpec":
        """Left side: keeps its trailing delimiter, omits nothing by default"""
        return cls(
            path=path,
            key_column=key_column,
            role=LEFT,
            output_columns=output_columns,
            omit_columns=DEFAULT_OMIT_LEFT if omit_columns is None else omit_columns,
            delimiter=delimiter,
            encoding=encoding,
        )

    @classmethod
    def right(
        cls,
        path: str,
        key_column: int = DEFAULT_JOIN_KEY,
        output_columns: Optional[Sequence[int]] = None,
        omit_columns: Optional[Sequence[int]] = None,
        delimiter: str = DEFAULT_DELIMITER,
        encoding: str = DEFAULT_ENCODING,
    ) -> "RelationSpec":
        """Right side: trailing delimiter stripped, omits columns 0 and 1 by default"""
        return cls(
            path=path,
            key_column=key_column,
            role=RIGHT,
            output_columns=output_columns,
            omit_columns=DEFAULT_OMIT_RIGHT if omit_columns is None else omit_columns,
            delimiter=delimiter,
            encoding=encoding,
        )
