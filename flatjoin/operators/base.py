"""
Base class for pull-based line operators

Each operator is an iterable of lines; iterating the root of a plan pulls
lines through the tree one at a time (only Sort buffers its input).
"""

from collections.abc import Iterator
from typing import List, Optional


class LineOperator:
    """
    Node of a sort plan

    Plans are small chains:
    - Scan is the leaf and reads a relation file
    - Filter drops lines failing a RowFilter
    - SortOperator buffers and orders what reaches it
    """

    def __init__(self, child: Optional["LineOperator"] = None):
        self.child = child

    def __iter__(self) -> Iterator[str]:
        raise NotImplementedError(f"{self.__class__.__name__} must implement __iter__()")

    def explain(self, indent: int = 0) -> List[str]:
        """Plan lines, children indented below their parent"""
        lines = [" " * indent + repr(self)]
        if self.child is not None:
            lines.extend(self.child.explain(indent + 2))
        return lines

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
