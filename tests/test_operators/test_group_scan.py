"""
Tests for GroupedRelationScanner
"""

import pytest

from flatjoin.core.config import RelationSpec
from flatjoin.core.errors import ParseError
from flatjoin.operators.group_scan import GroupedRelationScanner, ScanState, split_columns


@pytest.fixture
def sorted_relation(write_relation):
    """Relation sorted on column 1"""
    return write_relation(
        "sorted.txt",
        [
            "001 aaa 823470",
            "002 aaa 021749",
            "003 bbb 120934",
            "004 ccc 029375",
            "005 ccc 184565",
            "006 ccc 947917",
        ],
    )


class TestAdvance:
    def test_groups_in_order(self, sorted_relation):
        with GroupedRelationScanner(RelationSpec.left(sorted_relation, key_column=1)) as scanner:
            groups = []
            while scanner.advance():
                groups.append((scanner.key, len(scanner.group)))

        assert groups == [("aaa", 2), ("bbb", 1), ("ccc", 3)]

    def test_state_transitions(self, sorted_relation):
        scanner = GroupedRelationScanner(RelationSpec.left(sorted_relation, key_column=1))
        assert scanner.state is ScanState.READY
        assert scanner.group is None

        assert scanner.advance()
        assert scanner.state is ScanState.GROUP_AVAILABLE
        assert scanner.advance()
        assert scanner.advance()
        assert scanner.state is ScanState.GROUP_AVAILABLE
        assert scanner.key == "ccc"

        assert not scanner.advance()
        assert scanner.state is ScanState.EXHAUSTED
        assert scanner.exhausted
        assert scanner.group is None

    def test_advance_after_exhausted_is_idempotent(self, sorted_relation):
        scanner = GroupedRelationScanner(RelationSpec.left(sorted_relation, key_column=1))
        while scanner.advance():
            pass

        for _ in range(5):
            assert scanner.advance() is False
        assert scanner.state is ScanState.EXHAUSTED

    def test_empty_relation(self, write_relation):
        scanner = GroupedRelationScanner(RelationSpec.left(write_relation("empty.txt", []), key_column=0))

        assert not scanner.advance()
        assert scanner.state is ScanState.EXHAUSTED
        assert not scanner.advance()

    def test_groups_reproduce_input(self, sorted_relation):
        """Concatenating all groups gives every line exactly once, in order"""
        with open(sorted_relation) as f:
            expected = f.read().splitlines()

        spec = RelationSpec.left(sorted_relation, key_column=1)
        with GroupedRelationScanner(spec) as scanner:
            lines = [row.line.rstrip(" ") for group in scanner for row in group]

        assert lines == expected

    def test_lookahead_starts_next_group(self, write_relation):
        """A single-row group after a multi-row group is not lost"""
        path = write_relation("rel.txt", ["a 1", "a 2", "b 3", "c 4", "c 5"])

        with GroupedRelationScanner(RelationSpec.left(path, key_column=0)) as scanner:
            groups = [group.lines() for group in scanner]

        assert groups == [["a 1 ", "a 2 "], ["b 3 "], ["c 4 ", "c 5 "]]

    def test_missing_key_column(self, write_relation):
        path = write_relation("rel.txt", ["a 1", "b 1", "c"])

        with GroupedRelationScanner(RelationSpec.left(path, key_column=1)) as scanner:
            # The malformed line is read while looking for the end of group "1"
            with pytest.raises(ParseError) as excinfo:
                scanner.advance()
            assert excinfo.value.line == "c"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            GroupedRelationScanner(RelationSpec.left(str(tmp_path / "nope.txt")))


class TestClose:
    def test_close_is_idempotent(self, sorted_relation):
        scanner = GroupedRelationScanner(RelationSpec.left(sorted_relation, key_column=1))
        scanner.advance()
        scanner.close()
        scanner.close()

    def test_handle_closed_at_eof(self, sorted_relation):
        scanner = GroupedRelationScanner(RelationSpec.left(sorted_relation, key_column=1))
        while scanner.advance():
            pass
        assert scanner._handle is None

    def test_context_manager_closes_midway(self, sorted_relation):
        with GroupedRelationScanner(RelationSpec.left(sorted_relation, key_column=1)) as scanner:
            scanner.advance()
        assert scanner._handle is None


class TestFormat:
    def test_right_default_omits_first_two_columns(self, write_relation):
        path = write_relation("right.txt", ["1 a b c"])

        with GroupedRelationScanner(RelationSpec.right(path, key_column=0)) as scanner:
            scanner.advance()
            assert scanner.group.lines() == ["b c"]

    def test_left_default_keeps_all_columns_and_trailing_delimiter(self, write_relation):
        path = write_relation("left.txt", ["1 a b c"])

        with GroupedRelationScanner(RelationSpec.left(path, key_column=0)) as scanner:
            scanner.advance()
            assert scanner.group.lines() == ["1 a b c "]

    def test_explicit_output_columns(self, write_relation):
        path = write_relation("rel.txt", ["001 aaa bbb ccc"])

        with GroupedRelationScanner(
            RelationSpec.left(path, key_column=1, output_columns=[0, 2, 3])
        ) as scanner:
            scanner.advance()
            assert scanner.group.lines() == ["001 bbb ccc "]

        with GroupedRelationScanner(
            RelationSpec.right(path, key_column=1, output_columns=[3, 0])
        ) as scanner:
            scanner.advance()
            assert scanner.group.lines() == ["ccc 001"]

    def test_configurable_omitted_columns(self, write_relation):
        path = write_relation("rel.txt", ["k v1 v2 v3"])

        with GroupedRelationScanner(RelationSpec.right(path, key_column=0, omit_columns=[0])) as scanner:
            scanner.advance()
            assert scanner.group.lines() == ["v1 v2 v3"]

        with GroupedRelationScanner(RelationSpec.left(path, key_column=0, omit_columns=[0, 2])) as scanner:
            scanner.advance()
            assert scanner.group.lines() == ["v1 v3 "]

    def test_right_with_everything_omitted_is_empty(self, write_relation):
        path = write_relation("rel.txt", ["001 p"])

        with GroupedRelationScanner(RelationSpec.right(path, key_column=0)) as scanner:
            scanner.advance()
            assert scanner.group.lines() == [""]

    def test_output_column_out_of_range(self, write_relation):
        path = write_relation("rel.txt", ["a b"])

        with GroupedRelationScanner(RelationSpec.left(path, key_column=0, output_columns=[5])) as scanner:
            with pytest.raises(ParseError, match="output format"):
                scanner.advance()

    def test_multichar_delimiter(self, write_relation):
        path = write_relation("rel.txt", ["k::x::y"])

        with GroupedRelationScanner(RelationSpec.right(path, key_column=0, omit_columns=[0], delimiter="::")) as scanner:
            scanner.advance()
            assert scanner.group.lines() == ["x::y"]

    def test_trailing_empty_key_column(self, write_relation):
        path = write_relation("rel.txt", ["k ", "j ", "m v"])

        with GroupedRelationScanner(RelationSpec.left(path, key_column=1)) as scanner:
            groups = [(group.key, group.lines()) for group in scanner]

        assert groups == [("", ["k ", "j "]), ("v", ["m v "])]

    def test_row_keeps_key(self, write_relation):
        path = write_relation("rel.txt", ["1 a b c"])

        with GroupedRelationScanner(RelationSpec.right(path, key_column=1)) as scanner:
            scanner.advance()
            row = scanner.group.rows[0]
            assert row.key == "a"
            assert row.line == "b c"


class TestSplitColumns:
    def test_trailing_empty_columns_dropped(self):
        assert split_columns("a b  ", " ") == ["a", "b"]

    def test_inner_empty_columns_kept(self):
        assert split_columns("a  b", " ") == ["a", "", "b"]

    def test_empty_line(self):
        assert split_columns("", " ") == [""]
