"""
Row filter - a conjunction of predicates evaluated against raw lines

Used before sorting (to prune input rows) and after joining (to search the
joined rows).
"""

from typing import Tuple, Union

from flatjoin.core.config import DEFAULT_DELIMITER
from flatjoin.core.errors import ParseError
from flatjoin.core.types import Operator, Predicate


class RowFilter:
    """
    Ordered list of predicates (AND logic)

    A RowFilter is immutable: ``add_predicate`` returns a new filter, so
    filters can be chained and shared freely:

        row_filter = (
            RowFilter()
            .add_predicate(0, Operator.EQ, 100)
            .add_predicate(1, Operator.GTE, "2000")
        )

    Lines are only split as far as the highest predicate column requires.
    """

    def __init__(
        self,
        delimiter: str = DEFAULT_DELIMITER,
        predicates: Tuple[Predicate, ...] = (),
    ):
        """
        Initialize row filter

        Args:
            delimiter: Column delimiter
            predicates: Predicates, evaluated in order
        """
        if not delimiter:
            raise ValueError("delimiter must not be empty")
        self.delimiter = delimiter
        self.predicates = tuple(predicates)
        self.max_column = max((p.column for p in self.predicates), default=0)

    def add_predicate(
        self, column: int, operator: Union[Operator, str], value
    ) -> "RowFilter":
        """
        Return a new filter with one more predicate

        Args:
            column: 0-based column to test
            operator: Operator (or its name/symbol)
            value: int or str comparison value

        Returns:
            New RowFilter
        """
        return self.with_predicate(Predicate.create(column, operator, value))

    def with_predicate(self, predicate: Predicate) -> "RowFilter":
        return RowFilter(self.delimiter, self.predicates + (predicate,))

    def with_delimiter(self, delimiter: str) -> "RowFilter":
        return RowFilter(delimiter, self.predicates)

    @property
    def split_width(self) -> int:
        """Maximum number of parts a line is split into"""
        return self.max_column + 2

    def matches(self, line: str) -> bool:
        """
        Check if line matches all predicates

        Args:
            line: Raw line without its line terminator

        Returns:
            True if every predicate matches (always True with no predicates)

        Raises:
            ParseError: If the line is too short or a value is not an integer
        """
        if not self.predicates:
            return True

        columns = line.split(self.delimiter, self.split_width - 1)

        for predicate in self.predicates:
            if predicate.column >= len(columns):
                raise ParseError(
                    f"Line has {len(columns)} column(s), predicate needs column "
                    f"{predicate.column}: {line!r}",
                    line=line,
                )
            try:
                if not predicate.matches(columns[predicate.column]):
                    return False
            except ParseError as e:
                raise ParseError(f"{e} in line {line!r}", line=line) from e
        return True

    def __call__(self, line: str) -> bool:
        return self.matches(line)

    def __len__(self) -> int:
        return len(self.predicates)

    def __bool__(self) -> bool:
        return bool(self.predicates)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RowFilter):
            return NotImplemented
        return self.delimiter == other.delimiter and self.predicates == other.predicates

    def __hash__(self) -> int:
        return hash((self.delimiter, self.predicates))

    def __repr__(self) -> str:
        if not self.predicates:
            return "RowFilter(*)"
        return "RowFilter(" + " AND ".join(repr(p) for p in self.predicates) + ")"
