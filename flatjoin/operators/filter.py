"""
Filter operator - keeps lines matching a RowFilter

Lines that cannot be evaluated raise ParseError instead of being dropped.
"""

from collections.abc import Iterator

from flatjoin.core.row_filter import RowFilter
from flatjoin.operators.base import LineOperator


class Filter(LineOperator):
    """
    Filter operator - evaluates a RowFilter

    Pulls lines from child and only yields those that satisfy
    all predicates (AND logic).
    """

    def __init__(self, child: LineOperator, row_filter: RowFilter):
        """
        Initialize filter operator

        Args:
            child: Child operator to pull lines from
            row_filter: Predicates to apply
        """
        super().__init__(child)
        self.row_filter = row_filter

    def __iter__(self) -> Iterator[str]:
        matches = self.row_filter.matches
        for line in self.child:
            if matches(line):
                yield line

    def __repr__(self) -> str:
        return f"Filter({self.row_filter!r})"
