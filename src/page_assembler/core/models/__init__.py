"""
Core Models Package

Data models shared by every stage of the assembly pipeline.

| Type | Role |
|------|------|
| `SourceAsset` | Raw bytes of an uploaded document or image |
| `Node` | One placed page/image unit, keyed by `id` |
| `Selection` | Selected node ids plus the range-select anchor |
"""

from .sources import SourceAsset, SourceKind
from .nodes import Node, NodeKind, VALID_ROTATIONS
from .selection import Selection

__all__ = [
    "SourceAsset",
    "SourceKind",
    "Node",
    "NodeKind",
    "VALID_ROTATIONS",
    "Selection",
]
