"""
Module: assembler.workspace

Purpose:
    Session facade bundling the store, selection, source registry and
    the import/export stages. Callers (the CLI, or an embedding UI)
    drive one workspace per assembly session.

Key Classes:
    - Workspace: Session state and operations

Dependencies:
    - assembler.store, assembler.selection, assembler.importing,
      assembler.output, assembler.decoding

Used By:
    - page_assembler.cli

Concurrency:
    One logical worker. Imports and exports set a busy flag for their
    duration; a second long-running call while busy raises
    WorkspaceBusyError.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Union

from page_assembler.common.ranges import ALL_KEYWORD
from page_assembler.core.errors import WorkspaceBusyError
from page_assembler.core.models import Node, Selection, SourceAsset

from .config import AssemblyConfig
from .decoding import SourceDecoder, SourceRegistry
from .importing import ImportCoordinator, ImportResult, PendingImport, ProgressCallback
from .insertion import InsertionMode
from .output import AssemblyExporter, ExportProgressCallback, ExportResult
from .selection import SelectionEngine
from .store import Edge, NodeStore

logger = logging.getLogger(__name__)


class Workspace:
    """
    One assembly session.

    Example:
        >>> ws = Workspace()
        >>> pending = ws.stage([SourceAsset.from_path(Path("report.pdf"))])
        >>> ws.integrate(pending, page_range="1-3")
        >>> ws.selection_engine.select_range("2")
        >>> ws.rotate_selected(90)
        >>> ws.export(Path("out"), name="merged")
    """

    def __init__(self, config: Optional[AssemblyConfig] = None) -> None:
        self.config = config or AssemblyConfig()
        self.store = NodeStore()
        self.registry = SourceRegistry()
        self.selection_engine = SelectionEngine(self.store)
        self.decoder = SourceDecoder(self.config)
        self.coordinator = ImportCoordinator(self.registry, self.config, self.decoder)
        self.exporter = AssemblyExporter(self.config)
        self._busy: Optional[str] = None

    @property
    def selection(self) -> Selection:
        return self.selection_engine.selection

    @property
    def busy(self) -> bool:
        """True while an import or export is running."""
        return self._busy is not None

    @contextmanager
    def _running(self, operation: str) -> Iterator[None]:
        if self._busy is not None:
            raise WorkspaceBusyError(f"Cannot start {operation}: {self._busy} in progress")
        self._busy = operation
        try:
            yield
        finally:
            self._busy = None

    # ─────────────────────────────────────────────────────────────────────────
    # Import
    # ─────────────────────────────────────────────────────────────────────────

    def stage(self, sources: Sequence[SourceAsset]) -> PendingImport:
        """Stage a batch. See ImportCoordinator.stage."""
        with self._running("import"):
            return self.coordinator.stage(sources)

    def integrate(
        self,
        pending: PendingImport,
        *,
        page_range: Optional[str] = ALL_KEYWORD,
        mode: InsertionMode = InsertionMode.APPEND,
        target: Optional[Union[int, float]] = 1,
        progress: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        """Commit a staged batch to the store. See ImportCoordinator.integrate."""
        with self._running("import"):
            return self.coordinator.integrate(
                pending,
                self.store,
                page_range=page_range,
                mode=mode,
                target=target,
                progress=progress,
            )

    def cancel(self, pending: PendingImport) -> None:
        self.coordinator.cancel(pending)

    def add_sources(
        self,
        sources: Sequence[SourceAsset],
        *,
        page_range: Optional[str] = ALL_KEYWORD,
        mode: InsertionMode = InsertionMode.APPEND,
        target: Optional[Union[int, float]] = 1,
        progress: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        """Stage and integrate in one call."""
        pending = self.stage(sources)
        return self.integrate(
            pending, page_range=page_range, mode=mode, target=target, progress=progress
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Editing
    # ─────────────────────────────────────────────────────────────────────────

    def remove(self, ids: Iterable[str]) -> List[Node]:
        """Delete nodes and drop them from the selection in one step."""
        removed = self.store.remove(ids)
        self.selection_engine.prune()
        if removed:
            self.registry.prune(self.store.source_refs())
        return removed

    def delete_selected(self) -> List[Node]:
        removed = self.remove(self.selection.ordered(self.store.ids))
        logger.info(f"Deleted {len(removed)} nodes")
        return removed

    def rotate_selected(self, delta: int = 90) -> int:
        """Rotate every selected node by ``delta`` degrees clockwise."""
        return self.store.rotate(self.selection.ids, delta)

    def move_selected(self, edge: Union[Edge, str]) -> None:
        """Move the selection to the start or end, keeping relative order."""
        self.store.move_to_edge(self.selection.ids, edge)

    def move(self, source: int, destination: int) -> bool:
        """Drag one node between zero-based positions."""
        return self.store.move_range(source, destination)

    def clear(self) -> None:
        """Drop every node, the selection and all sources."""
        removed = self.store.clear()
        self.selection_engine.select_none()
        self.registry.clear()
        logger.info(f"Cleared workspace ({len(removed)} nodes)")

    # ─────────────────────────────────────────────────────────────────────────
    # Export
    # ─────────────────────────────────────────────────────────────────────────

    def export(
        self,
        output_dir: Path,
        name: Optional[str] = None,
        progress: Optional[ExportProgressCallback] = None,
    ) -> ExportResult:
        """Write the current order as one PDF. See AssemblyExporter.export."""
        with self._running("export"):
            return self.exporter.export(self.store, self.registry, output_dir, name, progress)

    def export_bytes(self, progress: Optional[ExportProgressCallback] = None) -> bytes:
        with self._running("export"):
            return self.exporter.export_bytes(self.store, self.registry, progress)
