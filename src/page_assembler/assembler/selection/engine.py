"""
Module: assembler.selection.engine

Purpose:
    Click, shift-click, range and global selection semantics layered
    over the NodeStore order.

Key Classes:
    - SelectionEngine: Applies selection gestures to a Selection

Dependencies:
    - core.models.Selection
    - common.ranges: Range expressions for programmatic selection
    - assembler.store.NodeStore: Current order

Used By:
    - assembler.workspace: Session facade
    - page_assembler.cli: --select option
"""

from __future__ import annotations

import logging
from typing import Optional

from page_assembler.common.ranges import require_range
from page_assembler.core.models import Selection

from ..store import NodeStore

logger = logging.getLogger(__name__)


class SelectionEngine:
    """
    Selection gestures over a store.

    The engine holds no state of its own beyond references to the store
    and the Selection it edits.

    Example:
        >>> engine = SelectionEngine(store)
        >>> engine.click("b")
        >>> engine.shift_click("d")
        >>> sorted(engine.selection.ids)
        ['b', 'c', 'd']
    """

    def __init__(self, store: NodeStore, selection: Optional[Selection] = None) -> None:
        self.store = store
        self.selection = selection if selection is not None else Selection()

    def click(self, node_id: str) -> Selection:
        """
        Toggle one node.

        Added nodes become the anchor; removing the anchor unsets it.
        Ids not in the store are ignored.
        """
        if node_id not in self.store:
            logger.debug(f"Ignoring click on unknown node {node_id!r}")
            return self.selection

        selection = self.selection
        if node_id in selection.ids:
            selection.ids.discard(node_id)
            if selection.anchor == node_id:
                selection.anchor = None
        else:
            selection.ids.add(node_id)
            selection.anchor = node_id
        return selection

    def shift_click(self, node_id: str) -> Selection:
        """
        Add the inclusive range between the anchor and ``node_id``.

        Range endpoints come from the current positions (smaller index to
        larger), not click order. Without an anchor, only ``node_id`` is
        added and it becomes the anchor.
        """
        target = self.store.index_of(node_id)
        if target is None:
            logger.debug(f"Ignoring shift-click on unknown node {node_id!r}")
            return self.selection

        selection = self.selection
        anchor = None if selection.anchor is None else self.store.index_of(selection.anchor)
        if anchor is None:
            selection.ids.add(node_id)
            selection.anchor = node_id
            return selection

        start, end = sorted((anchor, target))
        ids = self.store.ids
        selection.ids.update(ids[start:end + 1])
        return selection

    def select_all(self) -> Selection:
        """Select every node, anchor cleared."""
        self.selection.replace(self.store.ids)
        return self.selection

    def select_none(self) -> Selection:
        """Clear the selection and the anchor."""
        self.selection.clear()
        return self.selection

    def select_range(self, expression: str) -> Selection:
        """
        Replace the selection with the nodes at 1-based positions.

        Args:
            expression: Range expression such as "1-3, 7" or "all"

        Raises:
            EmptyRangeError: If the expression selects no position
                (selection unchanged)
        """
        positions = require_range(expression, len(self.store))
        ids = self.store.ids
        self.selection.replace(ids[p - 1] for p in positions)
        logger.debug(f"Range {expression!r} selected {len(positions)} nodes")
        return self.selection

    def prune(self) -> Selection:
        """Drop ids that are no longer in the store."""
        self.selection.retain(self.store.ids)
        return self.selection
