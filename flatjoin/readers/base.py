"""
Base reader interface for line-oriented sources

Readers yield raw lines (without line terminators). Splitting lines into
columns is left to the operators, which only split as far as they need.
"""

from typing import Iterator


class BaseReader:
    """
    Base class for all line readers

    Readers are responsible for:
    1. Opening a source and releasing it when iteration ends
    2. Yielding one line at a time (lazy evaluation)
    """

    def read_lazy(self) -> Iterator[str]:
        """
        Yield lines without their terminators

        Yields:
            One line of the source
        """
        raise NotImplementedError("Subclasses must implement read_lazy()")

    def __iter__(self):
        """Allow readers to be used directly in for loops"""
        return self.read_lazy()
