"""
Pull-based line operators

Sort plans are Scan -> Filter -> Sort trees; the merge join pulls key
groups from two GroupedRelationScanners.
"""

from flatjoin.operators.base import LineOperator
from flatjoin.operators.filter import Filter
from flatjoin.operators.group_scan import GroupedRelationScanner, KeyGroup, Row, ScanState
from flatjoin.operators.join import MergeJoinOperator, merge_join
from flatjoin.operators.scan import Scan
from flatjoin.operators.sort import SortOperator, Sorter

__all__ = [
    "LineOperator",
    "Scan",
    "Filter",
    "SortOperator",
    "Sorter",
    "GroupedRelationScanner",
    "KeyGroup",
    "Row",
    "ScanState",
    "MergeJoinOperator",
    "merge_join",
]
