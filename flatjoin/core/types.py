"""Predicate types for flatjoin.

This module provides the comparison operators, the typed comparison values
and the predicate evaluation used to filter rows before sorting and after
joining.
"""

import re
from dataclasses import dataclass
from enum import IntFlag
from typing import Union

from flatjoin.core.errors import ParseError


class Operator(IntFlag):
    """
    Comparison operators

    Each operator is one bit, so operator sets combine with ``|``:

        Operator.GT | Operator.LT   # not equal
    """

    EQ = 1
    GTE = 2
    GT = 4
    LTE = 8
    LT = 16

    @classmethod
    def parse(cls, text: str) -> "Operator":
        """
        Look up an operator by name or symbol

        Examples:
            "GTE" -> Operator.GTE
            ">=" -> Operator.GTE
            "!=" -> Operator.GT | Operator.LT
        """
        token = text.strip()
        if token in _SYMBOLS:
            return _SYMBOLS[token]
        name = token.upper()
        if name in _NAMES:
            return _NAMES[name]
        raise ValueError(f"Unknown operator: {text!r}")

    @property
    def symbol(self) -> str:
        for symbol, op in _SYMBOLS.items():
            if op == self:
                return symbol
        return str(self)


NE = Operator.GT | Operator.LT

_NAMES = {
    "EQ": Operator.EQ,
    "GTE": Operator.GTE,
    "GT": Operator.GT,
    "LTE": Operator.LTE,
    "LT": Operator.LT,
    "NE": NE,
}

_SYMBOLS = {
    "=": Operator.EQ,
    ">=": Operator.GTE,
    ">": Operator.GT,
    "<=": Operator.LTE,
    "<": Operator.LT,
    "!=": NE,
    "==": Operator.EQ,
    "<>": NE,
}

# Operators satisfied by each comparison outcome (target vs. value)
OUTCOME_BITS = {
    0: Operator.EQ | Operator.LTE | Operator.GTE,
    -1: Operator.LT | Operator.LTE,
    1: Operator.GT | Operator.GTE,
}

# Optional sign and ASCII digits only: no whitespace, underscores or other scripts
_DECIMAL = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class IntValue:
    """Integer comparison value: the column is parsed as an integer"""

    value: int

    def compare(self, target: str) -> int:
        if not _DECIMAL.fullmatch(target):
            raise ParseError(
                f"Column value {target!r} is not an integer (compared against {self.value})",
                line=target,
            )
        number = int(target)
        return (number > self.value) - (number < self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TextValue:
    """String comparison value: compared code point by code point"""

    value: str

    def compare(self, target: str) -> int:
        return (target > self.value) - (target < self.value)

    def __str__(self) -> str:
        return repr(self.value)


Value = Union[IntValue, TextValue]


def to_value(value: Union[int, str, IntValue, TextValue]) -> Value:
    """
    Tag a plain comparison value with its type

    Args:
        value: int, str, or an already tagged value

    Returns:
        IntValue for ints, TextValue for strings

    Raises:
        TypeError: For any other type (bool included)
    """
    if isinstance(value, (IntValue, TextValue)):
        return value
    if isinstance(value, bool):
        raise TypeError("Predicate values must be int or str, got bool")
    if isinstance(value, int):
        return IntValue(value)
    if isinstance(value, str):
        return TextValue(value)
    raise TypeError(f"Predicate values must be int or str, got {type(value).__name__}")


@dataclass(frozen=True)
class Predicate:
    """A single condition: column operator value"""

    column: int
    operator: Operator
    value: Value

    @classmethod
    def create(cls, column: int, operator: Union[Operator, str], value) -> "Predicate":
        if column < 0:
            raise ValueError(f"Predicate column must be non-negative, got {column}")
        if isinstance(operator, str):
            operator = Operator.parse(operator)
        return cls(column=column, operator=Operator(operator), value=to_value(value))

    def compare(self, target: str) -> int:
        """Three-way comparison of a column value against this predicate's value"""
        return self.value.compare(target)

    def matches(self, target: str) -> bool:
        return bool(OUTCOME_BITS[self.compare(target)] & self.operator)

    def __repr__(self) -> str:
        return f"{self.column} {self.operator.symbol} {self.value}"
