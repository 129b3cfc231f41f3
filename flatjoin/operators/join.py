"""
Merge Join Operator

Implements sort-merge inner equi-join of two relations sorted by their
key columns.

Merge Join Algorithm:
1. Prime: load the first key group of each side
2. Compare the two current keys
   - equal: output every left row x right row pair, advance both sides
   - left smaller: advance left
   - right smaller: advance right
3. Stop as soon as either side is exhausted
"""

import logging
from contextlib import ExitStack
from typing import Iterator, List

from flatjoin.core.config import RelationSpec
from flatjoin.operators.base import LineOperator
from flatjoin.operators.group_scan import GroupedRelationScanner, KeyGroup

logger = logging.getLogger(__name__)


class MergeJoinOperator(LineOperator):
    """
    Merge Join operator for equi-joins on one key column

    Output rows are ``left_row + right_row`` strings, grouped by key in
    ascending order, left-major and right-minor within a key. Keys present
    on only one side produce nothing (inner join only).

    Both scanners are closed when iteration ends, whether it completes,
    fails or is abandoned.
    """

    def __init__(self, left: GroupedRelationScanner, right: GroupedRelationScanner):
        """
        Initialize Merge Join operator

        Args:
            left: Scanner over the left relation
            right: Scanner over the right relation
        """
        super().__init__(None)
        self.left = left
        self.right = right

    def __iter__(self) -> Iterator[str]:
        left, right = self.left, self.right
        try:
            left_has_next = left.advance()
            right_has_next = right.advance()

            while left_has_next and right_has_next:
                left_key = left.group.key
                right_key = right.group.key

                if left_key == right_key:
                    yield from self._cross(left.group, right.group)
                    left_has_next = left.advance()
                    right_has_next = right.advance()
                elif left_key < right_key:
                    left_has_next = left.advance()
                else:
                    right_has_next = right.advance()
        finally:
            left.close()
            right.close()

    @staticmethod
    def _cross(left_group: KeyGroup, right_group: KeyGroup) -> Iterator[str]:
        right_lines = right_group.lines()
        for left_row in left_group.rows:
            for right_line in right_lines:
                yield left_row.line + right_line

    def explain(self, indent: int = 0) -> List[str]:
        """Generate execution plan explanation"""
        lines = [
            " " * indent
            + f"MergeJoin(left.{self.left.spec.key_column} = right.{self.right.spec.key_column})"
        ]
        lines.append(" " * (indent + 2) + "Left:")
        lines.append(" " * (indent + 4) + repr(self.left))
        lines.append(" " * (indent + 2) + "Right:")
        lines.append(" " * (indent + 4) + repr(self.right))
        return lines

    def __repr__(self) -> str:
        return f"MergeJoin({self.left!r}, {self.right!r})"


def merge_join(left: RelationSpec, right: RelationSpec) -> List[str]:
    """
    Join two sorted relations

    Args:
        left: Left relation (role "left")
        right: Right relation (role "right")

    Returns:
        Joined rows

    Raises:
        OSError: If either file cannot be read
        ParseError: If a line lacks its key column or an output column
    """
    with ExitStack() as stack:
        left_scanner = stack.enter_context(GroupedRelationScanner(left))
        right_scanner = stack.enter_context(GroupedRelationScanner(right))
        logger.debug("Merge joining %s and %s", left.path, right.path)
        rows = list(MergeJoinOperator(left_scanner, right_scanner))

    logger.info("Joined %s and %s: %d row(s)", left.path, right.path, len(rows))
    return rows
