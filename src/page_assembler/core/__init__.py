"""
Page Assembler Core Package

Shared data models for the assembly pipeline. Every other subpackage
imports its node, source and selection types from here.

**DESIGN NOTES:**

1. **Immutable Nodes**
   - A Node never changes in place; rotation produces a copy with the same id
   - Identity is the `id` field, never object identity

2. **Sources By Reference**
   - Nodes hold a `source_ref` key, not the source bytes
   - The SourceRegistry owns the bytes, so one decoded document backs many nodes

3. **Explicit State**
   - Selection is a plain object passed to the selection engine,
     not ambient state inside the store
"""

from .models import Node, NodeKind, SourceAsset, SourceKind, Selection
from .errors import (
    AssemblyError,
    DecodeError,
    EmptyRangeError,
    ImportBatchError,
    ImportStateError,
    ExportError,
    ExportSourceMissingError,
    WorkspaceBusyError,
)

__all__ = [
    # Models
    "Node",
    "NodeKind",
    "SourceAsset",
    "SourceKind",
    "Selection",
    # Errors
    "AssemblyError",
    "DecodeError",
    "EmptyRangeError",
    "ImportBatchError",
    "ImportStateError",
    "ExportError",
    "ExportSourceMissingError",
    "WorkspaceBusyError",
]
