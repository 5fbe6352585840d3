"""
Unit tests for insertion strategies.
"""

import math

import pytest

from page_assembler.assembler.insertion import InsertionMode, clamp_target, merge_nodes


class TestMergeNodes:
    """Tests for merge_nodes() over plain items."""

    def test_append_when_called_then_incoming_after_existing(self):
        assert merge_nodes(["a", "b"], ["x"], InsertionMode.APPEND) == ["a", "b", "x"]

    def test_prepend_when_called_then_incoming_before_existing(self):
        assert merge_nodes(["a", "b"], ["x"], InsertionMode.PREPEND) == ["x", "a", "b"]

    def test_interleave_when_existing_longer_then_remainder_appended(self):
        result = merge_nodes(["a", "b", "c"], ["x", "y"], InsertionMode.INTERLEAVE)
        assert result == ["a", "x", "b", "y", "c"]

    def test_interleave_when_incoming_longer_then_remainder_appended(self):
        result = merge_nodes(["a"], ["x", "y", "z"], InsertionMode.INTERLEAVE)
        assert result == ["a", "x", "y", "z"]

    def test_after_index_when_in_range_then_spliced_as_block(self):
        result = merge_nodes(["a", "b", "c"], ["x", "y"], InsertionMode.AFTER_INDEX, 2)
        assert result == ["a", "b", "x", "y", "c"]

    def test_after_index_when_target_too_large_then_appended(self):
        result = merge_nodes(["a", "b"], ["x"], InsertionMode.AFTER_INDEX, 10)
        assert result == ["a", "b", "x"]

    def test_after_index_when_target_negative_then_prepended(self):
        result = merge_nodes(["a", "b"], ["x"], InsertionMode.AFTER_INDEX, -4)
        assert result == ["x", "a", "b"]

    def test_append_and_prepend_when_store_empty_then_agree(self):
        incoming = ["x", "y", "z"]
        assert merge_nodes([], incoming, InsertionMode.APPEND) == merge_nodes(
            [], incoming, InsertionMode.PREPEND
        )

    def test_merge_when_called_then_inputs_unchanged(self):
        existing, incoming = ["a"], ["x"]
        merge_nodes(existing, incoming, InsertionMode.INTERLEAVE)
        assert existing == ["a"]
        assert incoming == ["x"]


class TestClampTarget:
    """Tests for clamp_target()."""

    @pytest.mark.parametrize(
        "target, expected",
        [
            (2, 2),
            (0, 0),
            (5, 5),
            (-3, 0),
            (9, 5),
            (2.9, 2),
            (9.7, 5),
            (None, 0),
            (math.nan, 0),
            (math.inf, 5),
            (-math.inf, 0),
        ],
    )
    def test_clamp_when_target_given_then_snaps_into_bounds(self, target, expected):
        assert clamp_target(target, 5) == expected

    def test_clamp_when_out_of_range_then_logs_warning(self, caplog):
        with caplog.at_level("WARNING"):
            clamp_target(42, 3)
        assert "clamped to 3" in caplog.text


class TestInsertionModeParse:
    """Tests for InsertionMode.parse()."""

    @pytest.mark.parametrize(
        "text, mode",
        [
            ("append", InsertionMode.APPEND),
            ("end", InsertionMode.APPEND),
            ("start", InsertionMode.PREPEND),
            ("Interleave", InsertionMode.INTERLEAVE),
            ("after_page", InsertionMode.AFTER_INDEX),
            ("after-index", InsertionMode.AFTER_INDEX),
        ],
    )
    def test_parse_when_known_alias_then_returns_mode(self, text, mode):
        assert InsertionMode.parse(text) is mode

    def test_parse_when_unknown_then_raises(self):
        with pytest.raises(ValueError, match="Unknown insertion mode"):
            InsertionMode.parse("sideways")
