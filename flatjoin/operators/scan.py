"""
Scan operator - leaf of every sort plan

Yields the lines of one relation file through its reader.
"""

from collections.abc import Iterator

from flatjoin.operators.base import LineOperator
from flatjoin.readers.base import BaseReader


class Scan(LineOperator):
    """Wraps a BaseReader; has no child"""

    def __init__(self, reader: BaseReader):
        super().__init__(child=None)
        self.reader = reader

    def __iter__(self) -> Iterator[str]:
        yield from self.reader.read_lazy()

    def __repr__(self) -> str:
        return f"Scan({self.reader!r})"
