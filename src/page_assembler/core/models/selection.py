"""
Module: selection

Purpose:
    Provides the Selection state object: the set of selected node ids
    plus the anchor used for shift-click range selection.

Dependencies:
    - dataclasses (std)

Used By:
    - assembler.selection.engine: Applies click/range semantics
    - assembler.workspace: Prunes selection on removal
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Set


@dataclass
class Selection:
    """
    Selected node ids and range-select anchor.

    Mutable on purpose: the selection engine updates it in place so the
    caller keeps a single object for the whole editing session.

    Attributes:
        ids: Selected node ids
        anchor: Id most recently added by a plain click, or None
    """
    ids: Set[str] = field(default_factory=set)
    anchor: Optional[str] = None

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.ids

    def __len__(self) -> int:
        return len(self.ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids)

    def replace(self, ids: Iterable[str]) -> None:
        """Replace the selection wholesale and drop the anchor."""
        self.ids = set(ids)
        self.anchor = None

    def clear(self) -> None:
        """Select nothing."""
        self.replace(())

    def retain(self, live_ids: Iterable[str]) -> None:
        """Intersect with the ids still present; clear a stale anchor."""
        live = set(live_ids)
        self.ids &= live
        if self.anchor is not None and self.anchor not in self.ids:
            self.anchor = None

    def ordered(self, order: Iterable[str]) -> List[str]:
        """Selected ids in the given order."""
        return [node_id for node_id in order if node_id in self.ids]
