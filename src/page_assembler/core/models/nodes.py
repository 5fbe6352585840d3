"""
Module: nodes

Purpose:
    Provides the Node dataclass - the atomic placeable unit of an
    assembly. A node is either one page extracted from a paginated
    source or one whole standalone image.

Key Functions:
    - Node.rotated(delta): Copy with accumulated rotation, same id
    - new_node_id(): Generate an opaque node identifier

Dependencies:
    - dataclasses (std)
    - PIL: Preview image type

Used By:
    - assembler.store.NodeStore
    - assembler.importing: Creates nodes
    - assembler.output: Reads nodes in order

Identity:
    `id` is the only identity. Rotation goes through dataclasses.replace
    which keeps the id, so a node survives reorder and rotation unchanged.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from PIL import Image

VALID_ROTATIONS = (0, 90, 180, 270)


class NodeKind(str, Enum):
    """Type of placed unit."""
    PAGE = "page"    # Page extracted from a paginated source
    IMAGE = "image"  # Whole standalone image

    def __str__(self) -> str:
        return self.value


def new_node_id(source_name: str, page_number: Optional[int] = None) -> str:
    """
    Generate a node id.

    Readable prefix from the source name and page number, random suffix
    for uniqueness.

    Example:
        >>> new_node_id("report.pdf", 3)  # doctest: +SKIP
        'report.pdf-p3-5f1c2a9be'
    """
    suffix = uuid.uuid4().hex[:9]
    if page_number is None:
        return f"img-{source_name}-{suffix}"
    return f"{source_name}-p{page_number}-{suffix}"


@dataclass(frozen=True)
class Node:
    """
    Placed page or image (immutable).

    Attributes:
        id: Opaque unique identifier, stable for the node's lifetime
        source_ref: source_id of the originating SourceAsset
        kind: PAGE or IMAGE
        original_index: Zero-based page index in the source (0 for images)
        preview: Raster preview for display only, never an export source
            for PAGE nodes
        rotation: Degrees, one of 0/90/180/270

    Invariants:
        - rotation is in VALID_ROTATIONS
        - original_index is 0 for IMAGE nodes
    """
    id: str
    source_ref: str
    kind: NodeKind
    original_index: int = 0
    preview: Optional[Image.Image] = field(default=None, compare=False, repr=False)
    rotation: int = 0

    def __post_init__(self) -> None:
        """Validate node on construction."""
        if self.rotation not in VALID_ROTATIONS:
            raise ValueError(f"rotation must be one of {VALID_ROTATIONS}: {self.rotation}")
        if self.original_index < 0:
            raise ValueError(f"original_index must be non-negative: {self.original_index}")
        if self.kind is NodeKind.IMAGE and self.original_index != 0:
            raise ValueError(f"Image nodes have original_index 0: {self.original_index}")

    def rotated(self, delta: int) -> Node:
        """Return a copy rotated by delta degrees (same id)."""
        return replace(self, rotation=(self.rotation + delta) % 360)

    @property
    def page_number(self) -> int:
        """1-based page number within the source."""
        return self.original_index + 1
