"""
Module: core.errors

Purpose:
    Exception hierarchy for the assembly pipeline. Every error carries a
    short message suitable for showing to the user as a status line.

Key Classes:
    - AssemblyError: Base class for all pipeline errors
    - DecodeError: One source asset could not be opened (recoverable per asset)
    - EmptyRangeError: A page-range expression selected nothing
    - ImportBatchError: Nothing importable, or batch too large
    - ImportStateError: Pending import used after commit/cancel
    - ExportError: Export aborted, no output written
    - ExportSourceMissingError: A node's source is gone at export time
    - WorkspaceBusyError: Import/export already in flight

Used By:
    - assembler.decoding, assembler.importing, assembler.output
    - page_assembler.cli: Maps errors to status messages and exit codes
"""

from __future__ import annotations

from typing import Optional


class AssemblyError(Exception):
    """Base error for the assembly pipeline."""
    pass


class DecodeError(AssemblyError):
    """
    Source asset cannot be decoded.

    Scoped to a single asset: the import batch records it as a warning
    and carries on with the remaining assets.

    Attributes:
        source_name: Name of the asset that failed
    """

    def __init__(self, message: str, *, source_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.source_name = source_name


class EmptyRangeError(AssemblyError):
    """Range expression yielded no valid pages."""

    def __init__(self, expression: str, maximum: int) -> None:
        super().__init__(f"No valid pages in range {expression!r} (max {maximum})")
        self.expression = expression
        self.maximum = maximum


class ImportBatchError(AssemblyError):
    """Import batch cannot be staged (empty or oversized)."""
    pass


class ImportStateError(AssemblyError):
    """Pending import is not in a state that allows the requested step."""
    pass


class ExportError(AssemblyError):
    """Export failed; no partial output is kept."""
    pass


class ExportSourceMissingError(ExportError):
    """A source needed at export time is no longer available."""

    def __init__(self, source_ref: str, node_id: str) -> None:
        super().__init__(f"Source {source_ref!r} for node {node_id!r} is no longer available")
        self.source_ref = source_ref
        self.node_id = node_id


class WorkspaceBusyError(AssemblyError):
    """An import or export pass is already running on this workspace."""
    pass
