"""
Module: assembler.importing

Purpose:
    Import batches: staging, sequential decoding, range filtering and
    merging into the NodeStore.

Key Classes:
    - ImportCoordinator: Stage / integrate / cancel
    - PendingImport: Staging object for one batch
    - ImportResult: Outcome of a committed batch
    - ProgressEvent: Progress report per asset/page
"""

from .coordinator import (
    ImportCoordinator,
    ImportResult,
    ImportState,
    PendingImport,
    ProgressCallback,
    ProgressEvent,
)

__all__ = [
    "ImportCoordinator",
    "ImportResult",
    "ImportState",
    "PendingImport",
    "ProgressCallback",
    "ProgressEvent",
]
