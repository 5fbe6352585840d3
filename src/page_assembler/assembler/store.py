"""
Module: assembler.store

Purpose:
    The ordered collection of placed nodes. Order is the sole source of
    truth for output page order. Owns every mutation: insert, drag
    reorder, batch move, delete and rotate.

Key Classes:
    - NodeStore: Ordered nodes with mutation operations
    - Edge: Target edge for move_to_edge

Dependencies:
    - core.models.Node
    - assembler.insertion: merge strategies

Used By:
    - assembler.importing.coordinator: Commits imported nodes
    - assembler.selection.engine: Reads order for range selection
    - assembler.output.exporter: Reads final order
    - assembler.workspace: Session facade

Atomicity:
    Every operation validates its input before touching the list, then
    swaps in the new order in a single assignment. A failed call leaves
    the store exactly as it was.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence, Set, Tuple, Union

from page_assembler.core.models import Node

from .insertion import InsertionMode, merge_nodes

logger = logging.getLogger(__name__)


class Edge(str, Enum):
    """Edge of the sequence for batch moves."""
    START = "start"
    END = "end"

    def __str__(self) -> str:
        return self.value


class NodeStore:
    """
    Ordered sequence of unique nodes.

    Invariants:
        - Every id in the sequence is unique
        - An id never reappears once removed

    Example:
        >>> store = NodeStore()
        >>> store.insert_at(0, [a, b, c])
        >>> store.move_to_edge({"c"}, Edge.START)
        >>> store.ids
        ('c', 'a', 'b')
    """

    def __init__(self, nodes: Iterable[Node] = ()) -> None:
        self._nodes: List[Node] = []
        self._retired: Set[str] = set()
        initial = list(nodes)
        if initial:
            self.insert_at(0, initial)

    # ─────────────────────────────────────────────────────────────────────────
    # Read access
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def nodes(self) -> Tuple[Node, ...]:
        """Snapshot of the current order."""
        return tuple(self._nodes)

    @property
    def ids(self) -> Tuple[str, ...]:
        """Node ids in order."""
        return tuple(node.id for node in self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(tuple(self._nodes))

    def __getitem__(self, index: int) -> Node:
        return self._nodes[index]

    def __contains__(self, node_id: object) -> bool:
        return any(node.id == node_id for node in self._nodes)

    def index_of(self, node_id: str) -> Optional[int]:
        """Zero-based position of a node, or None if absent."""
        for i, node in enumerate(self._nodes):
            if node.id == node_id:
                return i
        return None

    def get(self, node_id: str) -> Optional[Node]:
        """Node by id, or None if absent."""
        index = self.index_of(node_id)
        return None if index is None else self._nodes[index]

    def source_refs(self) -> Set[str]:
        """Source ids referenced by at least one node."""
        return {node.source_ref for node in self._nodes}

    # ─────────────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────────────

    def insert_at(self, index: int, nodes: Sequence[Node]) -> None:
        """
        Insert nodes as a block before position ``index``.

        Args:
            index: Zero-based position, clamped to ``[0, len]``
            nodes: Nodes to insert, in order

        Raises:
            ValueError: If any id is already present, was removed before,
                or repeats within ``nodes``
        """
        self._check_new_ids(nodes)
        index = max(0, min(index, len(self._nodes)))
        self._nodes = self._nodes[:index] + list(nodes) + self._nodes[index:]
        logger.debug(f"Inserted {len(nodes)} nodes at {index}")

    def apply_insertion(
        self,
        incoming: Sequence[Node],
        mode: InsertionMode,
        target: Optional[Union[int, float]] = None,
    ) -> None:
        """
        Merge incoming nodes using an insertion strategy.

        Raises:
            ValueError: If any incoming id clashes (store unchanged)
        """
        self._check_new_ids(incoming)
        self._nodes = merge_nodes(self._nodes, incoming, mode, target)
        logger.debug(f"Merged {len(incoming)} nodes with {mode}")

    def move_range(self, source: int, destination: int) -> bool:
        """
        Drag one node from ``source`` to ``destination``.

        Intervening nodes shift by one position.

        Returns:
            False (and no change) if either index is out of range
        """
        size = len(self._nodes)
        if not (0 <= source < size and 0 <= destination < size):
            logger.debug(f"Ignoring move {source} -> {destination} (size {size})")
            return False
        if source == destination:
            return True
        reordered = list(self._nodes)
        node = reordered.pop(source)
        reordered.insert(destination, node)
        self._nodes = reordered
        return True

    def remove(self, ids: Iterable[str]) -> List[Node]:
        """
        Delete nodes by id. Unknown ids are ignored.

        The caller prunes any Selection; Workspace.remove does both.

        Returns:
            Removed nodes in their former order
        """
        targets = set(ids)
        removed = [node for node in self._nodes if node.id in targets]
        if removed:
            self._nodes = [node for node in self._nodes if node.id not in targets]
            self._retired.update(node.id for node in removed)
            logger.debug(f"Removed {len(removed)} nodes")
        return removed

    def rotate(self, ids: Iterable[str], delta: int) -> int:
        """
        Rotate nodes by ``delta`` degrees (accumulated modulo 360).

        Raises:
            ValueError: If delta is not a multiple of 90

        Returns:
            Number of nodes rotated
        """
        if delta % 90 != 0:
            raise ValueError(f"Rotation must be a multiple of 90 degrees: {delta}")
        targets = set(ids)
        count = 0
        rotated: List[Node] = []
        for node in self._nodes:
            if node.id in targets:
                node = node.rotated(delta)
                count += 1
            rotated.append(node)
        self._nodes = rotated
        return count

    def move_to_edge(self, ids: Iterable[str], edge: Union[Edge, str]) -> None:
        """
        Move nodes to the start or end, keeping relative order.

        Stable partition: members keep their current relative order, and
        so do non-members.
        """
        edge = Edge(edge)
        targets = set(ids)
        members = [node for node in self._nodes if node.id in targets]
        others = [node for node in self._nodes if node.id not in targets]
        if edge is Edge.START:
            self._nodes = members + others
        else:
            self._nodes = others + members

    def clear(self) -> List[Node]:
        """Remove every node."""
        return self.remove(self.ids)

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _check_new_ids(self, nodes: Sequence[Node]) -> None:
        present = {node.id for node in self._nodes}
        seen: Set[str] = set()
        for node in nodes:
            if node.id in present:
                raise ValueError(f"Node id already present: {node.id!r}")
            if node.id in self._retired:
                raise ValueError(f"Node id was removed and cannot be reused: {node.id!r}")
            if node.id in seen:
                raise ValueError(f"Duplicate node id in batch: {node.id!r}")
            seen.add(node.id)
