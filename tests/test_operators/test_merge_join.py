"""
Tests for the merge join operator
"""

import itertools
import random

import pytest

from flatjoin import join
from flatjoin.core.config import RelationSpec
from flatjoin.core.errors import ParseError
from flatjoin.operators.group_scan import GroupedRelationScanner
from flatjoin.operators.join import MergeJoinOperator, merge_join


class TestMergeJoin:
    def test_scenario(self, write_relation, left_lines, right_lines):
        """2x1 rows for key 001 and 1x2 rows for key 002"""
        left = write_relation("left.txt", left_lines)
        right = write_relation("right.txt", right_lines)

        rows = join(left, right, left_key_column=0, right_key_column=0)

        assert len(rows) == 4
        # Right rows have columns 0 and 1 omitted: nothing is left of them
        assert rows == ["001 a x ", "001 a y ", "002 b z ", "002 b z "]

    def test_scenario_with_right_columns(self, write_relation, left_lines, right_lines):
        left = write_relation("left.txt", left_lines)
        right = write_relation("right.txt", right_lines)

        rows = join(left, right, 0, 0, right_output_columns=[1])

        assert rows == ["001 a x p", "001 a y p", "002 b z q", "002 b z r"]

    def test_left_major_right_minor_order(self, write_relation):
        left = write_relation("left.txt", ["k L1", "k L2"])
        right = write_relation("right.txt", ["k R1", "k R2", "k R3"])

        rows = join(left, right, 0, 0, right_output_columns=[1])

        assert rows == [
            "k L1 R1",
            "k L1 R2",
            "k L1 R3",
            "k L2 R1",
            "k L2 R2",
            "k L2 R3",
        ]

    def test_unmatched_keys_dropped(self, write_relation):
        left = write_relation("left.txt", ["a 1", "c 3", "e 5"])
        right = write_relation("right.txt", ["b x 2", "c x 3", "d x 4", "e x 5", "f x 6"])

        rows = join(left, right, 0, 0)

        assert rows == ["c 3 3", "e 5 5"]

    def test_no_common_keys(self, write_relation):
        left = write_relation("left.txt", ["a 1", "b 2"])
        right = write_relation("right.txt", ["c x", "d y"])

        assert join(left, right, 0, 0) == []

    def test_empty_side(self, write_relation):
        left = write_relation("left.txt", ["a 1"])
        right = write_relation("right.txt", [])

        assert join(left, right, 0, 0) == []
        assert join(right, left, 0, 0) == []

    def test_different_key_columns(self, write_relation):
        left = write_relation("left.txt", ["1 Alice", "2 Bob"])
        right = write_relation("right.txt", ["101 1 100", "102 1 200", "103 2 150"])

        rows = join(left, right, left_key_column=0, right_key_column=1)

        assert rows == ["1 Alice 100", "1 Alice 200", "2 Bob 150"]

    def test_default_key_column_is_one(self, write_relation):
        left = write_relation("left.txt", ["x a", "y b"])
        right = write_relation("right.txt", ["p a 1", "q b 2"])

        assert join(left, right) == ["x a 1", "y b 2"]

    def test_custom_delimiter(self, write_relation):
        left = write_relation("left.csv", ["1,Alice", "2,Bob"])
        right = write_relation("right.csv", ["1,x,NYC", "2,y,LA"])

        rows = join(left, right, 0, 0, delimiter=",")

        assert rows == ["1,Alice,NYC", "2,Bob,LA"]

    def test_malformed_line_raises(self, write_relation):
        left = write_relation("left.txt", ["a 1", "b"])
        right = write_relation("right.txt", ["a x 1"])

        with pytest.raises(ParseError):
            join(left, right, 1, 1)

    def test_missing_file(self, write_relation, tmp_path):
        left = write_relation("left.txt", ["a 1"])

        with pytest.raises(FileNotFoundError):
            join(left, str(tmp_path / "missing.txt"), 0, 0)


class TestJoinCompleteness:
    """Row counts match |group_L(k)| x |group_R(k)| for every shared key"""

    def test_random_relations(self, write_relation):
        rng = random.Random(42)
        left_keys = sorted(rng.choice("abcdefgh") for _ in range(40))
        right_keys = sorted(rng.choice("defghijk") for _ in range(30))

        left = write_relation("left.txt", [f"{k} L{i}" for i, k in enumerate(left_keys)])
        right = write_relation("right.txt", [f"{k} R{i}" for i, k in enumerate(right_keys)])

        rows = join(left, right, 0, 0, right_output_columns=[0, 1])

        counts = {k: 0 for k in set(left_keys) | set(right_keys)}
        for row in rows:
            left_key, _, right_key, _ = row.split(" ")
            assert left_key == right_key
            counts[left_key] += 1

        for key, count in counts.items():
            assert count == left_keys.count(key) * right_keys.count(key)

        # Keys visited in ascending order
        keys = [row.split(" ")[0] for row in rows]
        assert keys == sorted(keys)

        # Each (left row, right row) pair exactly once
        assert len(set(rows)) == len(rows)


class TestMergeJoinOperator:
    def test_scanners_closed_after_join(self, write_relation):
        left = write_relation("left.txt", ["a 1", "b 2", "z 9"])
        right = write_relation("right.txt", ["a x 1"])

        left_scanner = GroupedRelationScanner(RelationSpec.left(left, key_column=0))
        right_scanner = GroupedRelationScanner(RelationSpec.right(right, key_column=0))

        rows = list(MergeJoinOperator(left_scanner, right_scanner))

        assert rows == ["a 1 1"]
        # Left stopped with groups still unread but is closed anyway
        assert not left_scanner.exhausted
        assert left_scanner._handle is None
        assert right_scanner._handle is None

    def test_scanners_closed_on_error(self, write_relation):
        left = write_relation("left.txt", ["a 1", "a"])
        right = write_relation("right.txt", ["a x 1"])

        left_scanner = GroupedRelationScanner(RelationSpec.left(left, key_column=1))
        right_scanner = GroupedRelationScanner(RelationSpec.right(right, key_column=0))

        with pytest.raises(ParseError):
            list(MergeJoinOperator(left_scanner, right_scanner))

        assert left_scanner._handle is None
        assert right_scanner._handle is None

    def test_scanners_closed_when_abandoned(self, write_relation):
        left = write_relation("left.txt", ["a 1", "a 2"])
        right = write_relation("right.txt", ["a x 1"])

        left_scanner = GroupedRelationScanner(RelationSpec.left(left, key_column=0))
        right_scanner = GroupedRelationScanner(RelationSpec.right(right, key_column=0))

        iterator = iter(MergeJoinOperator(left_scanner, right_scanner))
        assert next(iterator) == "a 1 1"
        iterator.close()

        assert left_scanner._handle is None
        assert right_scanner._handle is None

    def test_lazy_rows(self, write_relation):
        left = write_relation("left.txt", [f"{i:03d} L" for i in range(100)])
        right = write_relation("right.txt", [f"{i:03d} R x" for i in range(100)])

        operator = MergeJoinOperator(
            GroupedRelationScanner(RelationSpec.left(left, key_column=0)),
            GroupedRelationScanner(RelationSpec.right(right, key_column=0)),
        )
        first = list(itertools.islice(operator, 3))

        assert first == ["000 L x", "001 L x", "002 L x"]

    def test_explain(self, write_relation):
        left = write_relation("left.txt", ["a 1"])
        right = write_relation("right.txt", ["a x 1"])

        with GroupedRelationScanner(RelationSpec.left(left, key_column=0)) as l_scan, \
                GroupedRelationScanner(RelationSpec.right(right, key_column=2)) as r_scan:
            lines = MergeJoinOperator(l_scan, r_scan).explain()

        assert lines[0] == "MergeJoin(left.0 = right.2)"
        assert lines[1] == "  Left:"
        assert lines[2].startswith("    GroupedScan(left")


class TestMergeJoinFunction:
    def test_merge_join_with_specs(self, write_relation):
        left = write_relation("left.txt", ["k1 a", "k2 b"])
        right = write_relation("right.txt", ["k2 v"])

        rows = merge_join(
            RelationSpec.left(left, key_column=0, output_columns=[1]),
            RelationSpec.right(right, key_column=0, omit_columns=[0]),
        )

        assert rows == ["b v"]
