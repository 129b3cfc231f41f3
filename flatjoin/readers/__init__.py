"""
Readers for line-oriented relation files

- BaseReader: lazy line source interface
- DelimitedTextReader: one row per line, read without line terminators
"""

from flatjoin.readers.base import BaseReader
from flatjoin.readers.text_reader import DelimitedTextReader

__all__ = ["BaseReader", "DelimitedTextReader"]
