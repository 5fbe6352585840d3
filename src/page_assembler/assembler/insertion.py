"""
Module: assembler.insertion

Purpose:
    Insertion strategies for splicing newly imported nodes into the
    existing order. Every strategy is a pure function of
    (existing, incoming, target); selection plays no part.

Key Classes:
    - InsertionMode: APPEND / PREPEND / INTERLEAVE / AFTER_INDEX

Key Functions:
    - merge_nodes(): Apply a strategy and return the new order
    - clamp_target(): Normalise an AFTER_INDEX target

Used By:
    - assembler.store.NodeStore.apply_insertion
    - assembler.importing.coordinator: Commit step
    - page_assembler.cli: --mode option
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import List, Optional, Sequence, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InsertionMode(str, Enum):
    """
    Merge rule for incoming nodes.

    Attributes:
        APPEND: existing ++ incoming
        PREPEND: incoming ++ existing
        INTERLEAVE: existing[0], incoming[0], existing[1], ... then the
            remainder of the longer side
        AFTER_INDEX: incoming as one block after the first ``target``
            existing nodes
    """
    APPEND = "append"
    PREPEND = "prepend"
    INTERLEAVE = "interleave"
    AFTER_INDEX = "after-index"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> InsertionMode:
        """
        Parse a mode name, accepting the short aliases.

        Raises:
            ValueError: If the name is unknown

        Example:
            >>> InsertionMode.parse("end")
            <InsertionMode.APPEND: 'append'>
        """
        key = (text or "").strip().lower().replace("_", "-")
        try:
            return _ALIASES[key]
        except KeyError:
            valid = ", ".join(sorted(_ALIASES))
            raise ValueError(f"Unknown insertion mode {text!r} (expected one of: {valid})") from None


_ALIASES = {
    "append": InsertionMode.APPEND,
    "end": InsertionMode.APPEND,
    "prepend": InsertionMode.PREPEND,
    "start": InsertionMode.PREPEND,
    "interleave": InsertionMode.INTERLEAVE,
    "after-index": InsertionMode.AFTER_INDEX,
    "after-page": InsertionMode.AFTER_INDEX,
    "after": InsertionMode.AFTER_INDEX,
}


def clamp_target(target: Optional[Union[int, float]], length: int) -> int:
    """
    Clamp an AFTER_INDEX target to ``[0, length]``.

    Fractional targets are floored, None/NaN become 0. Out-of-range
    targets snap to the nearest bound and are logged, never rejected.

    Examples:
        >>> clamp_target(2, 5)
        2
        >>> clamp_target(-3, 5)
        0
        >>> clamp_target(9.7, 5)
        5
        >>> clamp_target(2.9, 5)
        2
    """
    if target is None or (isinstance(target, float) and math.isnan(target)):
        logger.warning("No insertion target given, inserting at the start")
        return 0
    if isinstance(target, float):
        if math.isinf(target):
            return length if target > 0 else 0
        target = math.floor(target)
    clamped = max(0, min(int(target), length))
    if clamped != target:
        logger.warning(f"Insertion target {target} out of bounds, clamped to {clamped}")
    return clamped


def merge_nodes(
    existing: Sequence[T],
    incoming: Sequence[T],
    mode: InsertionMode,
    target: Optional[Union[int, float]] = None,
) -> List[T]:
    """
    Merge incoming items into existing ones.

    Args:
        existing: Current order
        incoming: Newly imported items, in order
        mode: Insertion strategy
        target: Number of existing items to keep before the block
            (AFTER_INDEX only; 1-based page position)

    Returns:
        New list; inputs are not modified

    Example:
        >>> merge_nodes(["a", "b", "c"], ["x", "y"], InsertionMode.INTERLEAVE)
        ['a', 'x', 'b', 'y', 'c']
        >>> merge_nodes(["a", "b", "c"], ["x"], InsertionMode.AFTER_INDEX, 1)
        ['a', 'x', 'b', 'c']
    """
    existing = list(existing)
    incoming = list(incoming)

    if mode is InsertionMode.APPEND:
        return existing + incoming
    if mode is InsertionMode.PREPEND:
        return incoming + existing
    if mode is InsertionMode.INTERLEAVE:
        merged: List[T] = []
        for i in range(max(len(existing), len(incoming))):
            if i < len(existing):
                merged.append(existing[i])
            if i < len(incoming):
                merged.append(incoming[i])
        return merged
    if mode is InsertionMode.AFTER_INDEX:
        index = clamp_target(target, len(existing))
        return existing[:index] + incoming + existing[index:]

    raise ValueError(f"Unknown insertion mode: {mode!r}")
