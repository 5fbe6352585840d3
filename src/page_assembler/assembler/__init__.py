"""
Module: assembler

Purpose:
    Assembly pipeline: stage source files, decode pages to previews,
    merge them into an ordered store, edit the order and selection, and
    export one combined PDF.

    Stage → Integrate → Edit → Export

Key Classes:
    - Workspace: Session facade for callers
    - AssemblyConfig: Configuration for the pipeline
    - NodeStore: Ordered page nodes
    - SelectionEngine: Click / shift-click / range selection
    - ImportCoordinator: Stage / integrate / cancel
    - AssemblyExporter: Output PDF writer

Dependencies:
    - fitz (PyMuPDF): PDF reading, rendering and page copying
    - PIL: Image decoding and previews
    - reportlab: Image pages

Used By:
    - page_assembler.cli: Command-line interface
"""

from .config import AssemblyConfig
from .decoding import SourceDecoder, SourceRegistry
from .importing import ImportCoordinator, ImportResult, PendingImport, ProgressEvent
from .insertion import InsertionMode
from .output import AssemblyExporter, ExportResult
from .selection import SelectionEngine
from .store import Edge, NodeStore
from .workspace import Workspace

__all__ = [
    # Config
    "AssemblyConfig",
    # Decoding
    "SourceDecoder",
    "SourceRegistry",
    # Import
    "ImportCoordinator",
    "ImportResult",
    "PendingImport",
    "ProgressEvent",
    "InsertionMode",
    # Order and selection
    "NodeStore",
    "Edge",
    "SelectionEngine",
    # Output
    "AssemblyExporter",
    "ExportResult",
    # Session
    "Workspace",
]
