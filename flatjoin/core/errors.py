"""
Exception types raised by flatjoin

I/O failures are not wrapped: missing or unreadable files surface as the
built-in OSError family (FileNotFoundError, PermissionError, ...).
"""

from typing import Optional


class FlatJoinError(Exception):
    """Base class for flatjoin errors"""

    pass


class ParseError(FlatJoinError, ValueError):
    """
    Raised when a line cannot be evaluated

    Covers a non-integer column compared against an integer predicate and
    a line with fewer columns than a predicate, sort key or output format
    requires. Malformed lines are never skipped silently.
    """

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line


class PredicateSyntaxError(FlatJoinError, ValueError):
    """Raised when a textual predicate like '1 >= 2000' cannot be parsed"""

    pass


class ConcurrentTaskError(FlatJoinError):
    """
    Raised when one of the two parallel sort tasks fails

    The original exception is available as ``__cause__``. The result of the
    other task, if any, has already been discarded.
    """

    def __init__(self, message: str, side: str):
        super().__init__(message)
        self.side = side
