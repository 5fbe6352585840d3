"""
Unit Tests for SelectionEngine

Click, shift-click, range and global selection over the store order.
"""

import pytest

from page_assembler.assembler.selection import SelectionEngine
from page_assembler.assembler.store import NodeStore
from page_assembler.core.errors import EmptyRangeError


@pytest.fixture
def engine(make_nodes):
    return SelectionEngine(NodeStore(make_nodes(["a", "b", "c", "d"])))


class TestClick:
    """Tests for plain click toggling."""

    def test_click_when_unselected_then_added_and_anchored(self, engine):
        engine.click("b")
        assert engine.selection.ids == {"b"}
        assert engine.selection.anchor == "b"

    def test_click_when_selected_anchor_then_removed_and_anchor_cleared(self, engine):
        engine.click("b")
        engine.click("b")
        assert engine.selection.ids == set()
        assert engine.selection.anchor is None

    def test_click_when_selected_non_anchor_then_anchor_kept(self, engine):
        engine.click("a")
        engine.click("c")
        engine.click("a")
        assert engine.selection.ids == {"c"}
        assert engine.selection.anchor == "c"

    def test_click_when_unknown_id_then_ignored(self, engine):
        engine.click("zz")
        assert engine.selection.ids == set()


class TestShiftClick:
    """Tests for shift-click range extension."""

    def test_shift_click_when_anchor_set_then_adds_inclusive_range(self, engine):
        engine.click("b")
        engine.shift_click("d")
        assert engine.selection.ids == {"b", "c", "d"}
        assert engine.selection.anchor == "b"

    def test_shift_click_when_target_before_anchor_then_range_by_position(self, engine):
        engine.click("c")
        engine.shift_click("a")
        assert engine.selection.ids == {"a", "b", "c"}

    def test_shift_click_when_no_anchor_then_acts_like_add(self, engine):
        engine.shift_click("c")
        assert engine.selection.ids == {"c"}
        assert engine.selection.anchor == "c"

    def test_shift_click_when_range_then_existing_selection_kept(self, engine):
        engine.click("a")
        engine.click("c")
        engine.shift_click("d")
        assert engine.selection.ids == {"a", "c", "d"}

    def test_shift_click_when_order_changed_then_uses_current_positions(self, engine):
        engine.click("a")
        engine.store.move_range(0, 3)  # b c d a
        engine.shift_click("c")
        assert engine.selection.ids == {"a", "c", "d"}


class TestGlobalSelection:
    """Tests for select_all / select_none / select_range / prune."""

    def test_select_all_when_called_then_every_id_and_no_anchor(self, engine):
        engine.click("a")
        engine.select_all()
        assert engine.selection.ids == {"a", "b", "c", "d"}
        assert engine.selection.anchor is None

    def test_select_none_when_called_then_empty(self, engine):
        engine.select_all()
        engine.select_none()
        assert len(engine.selection) == 0

    def test_select_range_when_valid_then_replaces_selection(self, engine):
        engine.click("a")
        engine.select_range("2-3")
        assert engine.selection.ids == {"b", "c"}
        assert engine.selection.anchor is None

    def test_select_range_when_empty_then_raises_and_unchanged(self, engine):
        engine.click("a")
        with pytest.raises(EmptyRangeError):
            engine.select_range("7-9")
        assert engine.selection.ids == {"a"}
        assert engine.selection.anchor == "a"

    def test_prune_when_nodes_removed_then_selection_subset_of_store(self, engine):
        engine.select_all()
        engine.store.remove(["b", "d"])
        engine.prune()
        assert engine.selection.ids <= set(engine.store.ids)
        assert engine.selection.ids == {"a", "c"}
