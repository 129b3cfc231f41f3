"""
Delimited text reader and writer

Plain text, one row per line. Columns are separated by a single literal
delimiter; there is no quoting or escaping, so a delimiter inside a value
shifts the remaining columns.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional

from flatjoin.core.config import DEFAULT_ENCODING, SORTED_FILE_PREFIX, SORTED_FILE_SUFFIX
from flatjoin.readers.base import BaseReader

logger = logging.getLogger(__name__)


def strip_terminator(line: str) -> str:
    """Remove a single trailing line terminator"""
    if line.endswith("\n"):
        return line[:-1]
    return line


class DelimitedTextReader(BaseReader):
    """
    Lazy line reader for delimited text files

    Features:
    - Lazy iteration (one line in memory at a time)
    - Universal newlines: "\\n", "\\r\\n" and "\\r" all end a line
    - File handle closed when iteration ends, including on errors
    """

    def __init__(self, path: str, encoding: str = DEFAULT_ENCODING):
        """
        Initialize reader

        Args:
            path: Path to the text file
            encoding: File encoding (default: utf-8)

        Raises:
            FileNotFoundError: If the file does not exist
        """
        self.path = Path(path)
        self.encoding = encoding

        if not self.path.exists():
            raise FileNotFoundError(f"Relation file not found: {path}")

    def open(self) -> IO[str]:
        """Open the file for reading"""
        return open(self.path, encoding=self.encoding)

    def read_lazy(self) -> Iterator[str]:
        """Yield lines without their terminators"""
        with self.open() as f:
            for line in f:
                yield strip_terminator(line)

    def __repr__(self) -> str:
        return f"DelimitedTextReader({str(self.path)!r})"


def write_lines(
    path: str, lines: Iterable[str], encoding: str = DEFAULT_ENCODING
) -> int:
    """
    Write one line per item

    Args:
        path: Destination file (truncated)
        lines: Lines without terminators
        encoding: File encoding

    Returns:
        Number of lines written
    """
    count = 0
    with open(path, "w", encoding=encoding, newline="\n") as f:
        for line in lines:
            f.write(line)
            f.write("\n")
            count += 1
    return count


def write_temp_lines(
    lines: Iterable[str],
    directory: Optional[str] = None,
    encoding: str = DEFAULT_ENCODING,
) -> str:
    """
    Write lines into a fresh temporary file

    The caller owns the returned file and is responsible for deleting it.

    Args:
        lines: Lines without terminators
        directory: Directory for the file (default: system temp dir)
        encoding: File encoding

    Returns:
        Path of the new file
    """
    fd, path = tempfile.mkstemp(
        prefix=SORTED_FILE_PREFIX, suffix=SORTED_FILE_SUFFIX, dir=directory
    )
    os.close(fd)
    try:
        count = write_lines(path, lines, encoding=encoding)
    except BaseException:
        os.unlink(path)
        raise
    logger.debug("Wrote %d line(s) to %s", count, path)
    return path
