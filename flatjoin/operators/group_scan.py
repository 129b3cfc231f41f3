"""
Grouped relation scanner

Reads a relation sorted by its key column one key group at a time. A key
group is the maximal run of consecutive lines sharing the same key value.

Example: with key column 1 and the file

    001 aaa 823470
    002 aaa 021749
    003 bbb 120934
    004 ccc 029375
    005 ccc 184565

three calls to advance() return the groups "aaa" (2 rows), "bbb" (1 row)
and "ccc" (2 rows); the fourth call returns False.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import IO, Iterator, List, Optional, Tuple

from flatjoin.core.config import RelationSpec
from flatjoin.core.errors import ParseError
from flatjoin.operators.sort import key_of
from flatjoin.readers.text_reader import DelimitedTextReader, strip_terminator

logger = logging.getLogger(__name__)


class ScanState(Enum):
    """Scanner states"""

    READY = "READY"  # no group buffered
    GROUP_AVAILABLE = "GROUP_AVAILABLE"  # current group buffered
    EXHAUSTED = "EXHAUSTED"  # source consumed, no further groups

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Row:
    """One line of a relation: its key and its formatted output"""

    line: str
    key: str


@dataclass(frozen=True)
class KeyGroup:
    """Consecutive rows sharing one key value"""

    key: str
    rows: Tuple[Row, ...]

    def lines(self) -> List[str]:
        return [row.line for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)


def split_columns(line: str, delimiter: str) -> List[str]:
    """Split a whole line, dropping trailing empty columns"""
    columns = line.split(delimiter)
    while len(columns) > 1 and columns[-1] == "":
        columns.pop()
    return columns


class GroupedRelationScanner:
    """
    Key-group iterator over a sorted relation

    State machine:

        READY --advance()--> GROUP_AVAILABLE --advance()--> GROUP_AVAILABLE
          |                        |
          +------advance()---------+---> EXHAUSTED (advance() keeps returning False)

    A line read past the end of a group is kept as look-ahead and starts
    the next group. The file is closed once the scanner is exhausted, or by
    close(), which is safe to call at any time.
    """

    def __init__(self, spec: RelationSpec):
        """
        Open the relation

        Args:
            spec: Relation path, key column, role and output format

        Raises:
            FileNotFoundError: If the file does not exist
        """
        self.spec = spec
        self._handle: Optional[IO[str]] = DelimitedTextReader(
            spec.path, encoding=spec.encoding
        ).open()
        self.state = ScanState.READY
        self._group: Optional[KeyGroup] = None
        self._lookahead: Optional[str] = None
        self._drained = False

    @property
    def group(self) -> Optional[KeyGroup]:
        """Current key group (None unless state is GROUP_AVAILABLE)"""
        return self._group

    @property
    def key(self) -> Optional[str]:
        return self._group.key if self._group is not None else None

    @property
    def exhausted(self) -> bool:
        return self.state is ScanState.EXHAUSTED

    def advance(self) -> bool:
        """
        Load the next key group

        Returns:
            True if a non-empty group is now available, False once the
            relation has been fully consumed

        Raises:
            ParseError: If a line lacks the key column or an output column
            OSError: If the file cannot be read
        """
        self._group = None

        if self.state is ScanState.EXHAUSTED:
            return False
        if self._drained:
            self._finish()
            return False

        self.state = ScanState.READY
        key: Optional[str] = None
        rows: List[Row] = []

        while True:
            line = self._next_line()
            if line is None:
                self._drained = True
                break

            # Same bounded split as the sorter, so every sortable line has a key
            line_key = key_of(line, self.spec.key_column, self.spec.delimiter)

            if key is not None and line_key != key:
                self._lookahead = line
                break

            columns = split_columns(line, self.spec.delimiter)
            rows.append(Row(self.format(columns, line), line_key))
            key = line_key

        if not rows:
            self._finish()
            return False

        self._group = KeyGroup(key, tuple(rows))
        self.state = ScanState.GROUP_AVAILABLE
        return True

    def __iter__(self) -> Iterator[KeyGroup]:
        """Iterate over the remaining key groups"""
        while self.advance():
            yield self._group

    def format(self, columns: List[str], line: str = "") -> str:
        """
        Build the output text of one row

        With explicit output columns, each listed column is emitted followed
        by the delimiter. Otherwise every column not in the omitted set is
        emitted the same way. Right-side rows drop the final delimiter so
        that left + right does not contain a doubled separator.
        """
        delimiter = self.spec.delimiter

        if self.spec.output_columns is not None:
            try:
                selected = [columns[c] for c in self.spec.output_columns]
            except IndexError:
                raise ParseError(
                    f"Line has {len(columns)} column(s), output format needs "
                    f"{list(self.spec.output_columns)}: {line!r}",
                    line=line,
                ) from None
        else:
            omitted = self.spec.omit_columns
            selected = [column for i, column in enumerate(columns) if i not in omitted]

        text = "".join(column + delimiter for column in selected)

        if not self.spec.is_left and text.endswith(delimiter):
            text = text[: -len(delimiter)]

        return text

    def close(self) -> None:
        """Release the file handle (idempotent)"""
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def _finish(self) -> None:
        self.state = ScanState.EXHAUSTED
        self._group = None
        self._lookahead = None
        self.close()

    def _next_line(self) -> Optional[str]:
        if self._lookahead is not None:
            line, self._lookahead = self._lookahead, None
            return line
        if self._handle is None:
            return None
        raw = self._handle.readline()
        if raw == "":
            return None
        return strip_terminator(raw)

    def __enter__(self) -> "GroupedRelationScanner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"GroupedScan({self.spec.role}, {self.spec.path!r}, "
            f"key={self.spec.key_column}, state={self.state})"
        )
