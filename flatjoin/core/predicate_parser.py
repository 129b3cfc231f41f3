"""
Predicate Parser - Parse "COL OP VALUE" text into predicates

Used by the CLI to turn options like ``--where "1 >= 2000"`` into
Predicate objects.
"""

import re
from typing import Iterable, Optional, Union

from flatjoin.core.config import DEFAULT_DELIMITER
from flatjoin.core.errors import PredicateSyntaxError
from flatjoin.core.row_filter import RowFilter
from flatjoin.core.types import Operator, Predicate

# Symbols first so that ">=" is not read as ">" followed by "=VALUE"
_SYMBOL_PATTERN = re.compile(r"^\s*([0-9]+)\s*(>=|<=|<>|!=|==|=|>|<)\s*(.*?)\s*$", re.DOTALL)
# Operator names need whitespace around them: "1 GTE 2000"
_NAME_PATTERN = re.compile(r"^\s*([0-9]+)\s+([A-Za-z]+)\s+(.*?)\s*$", re.DOTALL)
_INTEGER_PATTERN = re.compile(r"^[+-]?[0-9]+$")


def parse_value(token: str) -> Union[int, str]:
    """
    Parse a value token into int or str

    Examples:
        '123' -> 123 (int)
        '-7' -> -7 (int)
        "'123'" -> '123' (string, quotes removed)
        'Tokyo' -> 'Tokyo' (string)
    """
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"'):
        return token[1:-1]
    if _INTEGER_PATTERN.match(token):
        return int(token)
    return token


def parse_predicate(text: str) -> Predicate:
    """
    Parse a single predicate

    Syntax:
        COL OP VALUE     e.g. "1 >= 2000", "6 = 'Tokyo'", "1 GTE 2000"
        COL:OP:VALUE     e.g. "1:GTE:2000", "0:ne:x"

    Args:
        text: Predicate text

    Returns:
        Predicate

    Raises:
        PredicateSyntaxError: If the text does not follow either syntax
    """
    column: Optional[str] = None
    operator: Optional[str] = None
    value: Optional[str] = None

    match = _SYMBOL_PATTERN.match(text) or _NAME_PATTERN.match(text)
    if match:
        column, operator, value = match.groups()
    elif text.count(":") >= 2:
        column, operator, value = text.split(":", 2)
        column = column.strip()

    if column is None or not re.fullmatch(r"[0-9]+", column):
        raise PredicateSyntaxError(
            f"Invalid predicate: {text!r}. Expected 'COL OP VALUE' or 'COL:OP:VALUE'"
        )
    if value == "":
        raise PredicateSyntaxError(f"Missing value in predicate: {text!r}")

    try:
        op = Operator.parse(operator)
    except ValueError as e:
        raise PredicateSyntaxError(f"{e} in predicate {text!r}") from e

    return Predicate.create(int(column), op, parse_value(value))


def parse_filter(texts: Iterable[str], delimiter: str = DEFAULT_DELIMITER) -> RowFilter:
    """Build a RowFilter from several predicate strings (AND logic)"""
    row_filter = RowFilter(delimiter)
    for text in texts:
        row_filter = row_filter.with_predicate(parse_predicate(text))
    return row_filter
