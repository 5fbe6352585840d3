"""
Module: assembler.output.exporter

Purpose:
    Walk the final node order and write one output PDF. Page nodes copy
    the original page content from their source document (vector and
    text stay intact) and carry rotation as the page /Rotate value.
    Image nodes become new pages drawn with ReportLab.

Key Classes:
    - AssemblyExporter: Compose and write the output
    - ExportResult: Output path, page count and manifest

Dependencies:
    - fitz (PyMuPDF): Page copying, rotation and saving
    - assembler.output.image_page: ReportLab image pages
    - assembler.decoding: Source registry and openers

Used By:
    - assembler.workspace: Session facade
    - page_assembler.cli

All-or-nothing:
    Every source is resolved before composing starts, the PDF is
    written to a temporary file in the output directory and moved into
    place only after a successful save. Any failure leaves no output.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import fitz

from page_assembler.common.path_utils import output_filename, unique_path
from page_assembler.core.errors import DecodeError, ExportError, ExportSourceMissingError
from page_assembler.core.models import Node, NodeKind, SourceAsset

from ..config import AssemblyConfig
from ..decoding import SourceRegistry, open_document, open_image
from ..store import NodeStore
from ..timing import TimingLog, timed_phase
from .image_page import render_image_page

logger = logging.getLogger(__name__)

ExportProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class ExportResult:
    """
    Export result (immutable).

    Attributes:
        output_path: Path of the written PDF
        page_count: Pages in the output (equals the store length)
        manifest: One entry per output page, in order
        warnings: Non-fatal notes (renamed output, sanitized name)
        manifest_path: Path of the JSON manifest, if written
        timing: Phase timings for the pass
    """
    output_path: Path
    page_count: int
    manifest: Tuple[Dict[str, Any], ...]
    warnings: Tuple[str, ...] = ()
    manifest_path: Optional[Path] = None
    timing: Optional[TimingLog] = None


class AssemblyExporter:
    """
    Writes the store's current order as one PDF.

    Example:
        >>> exporter = AssemblyExporter()
        >>> result = exporter.export(store, registry, Path("out"), name="merged")
        >>> result.output_path.name
        'merged.pdf'
    """

    def __init__(self, config: Optional[AssemblyConfig] = None) -> None:
        self.config = config or AssemblyConfig()

    def export(
        self,
        store: NodeStore,
        registry: SourceRegistry,
        output_dir: Path,
        name: Optional[str] = None,
        progress: Optional[ExportProgressCallback] = None,
    ) -> ExportResult:
        """
        Export the store to ``output_dir``.

        Args:
            store: Nodes in output order
            registry: Sources referenced by the nodes
            output_dir: Directory for the PDF (created if needed)
            name: Output name; config.default_output_name if omitted
            progress: Called with (current, total) per node

        Returns:
            ExportResult

        Raises:
            ExportSourceMissingError: If a node's source is gone
            ExportError: If the store is empty, a source is unreadable,
                or the file cannot be written
        """
        nodes = store.nodes
        timing = TimingLog("export")
        pdf_bytes = self._compose_bytes(nodes, registry, progress, timing)

        output_dir = Path(output_dir)
        filename = output_filename(name, self.config.default_output_name, self.config.output_extension)
        output_path = output_dir / filename
        warnings: List[str] = []
        if name and filename not in (name, f"{name}{self.config.output_extension}"):
            warnings.append(f"Output name {name!r} written as {filename!r}")
        if not self.config.overwrite:
            requested = output_path
            output_path = unique_path(output_path)
            if output_path != requested:
                msg = f"{requested.name} exists, writing {output_path.name}"
                logger.warning(msg)
                warnings.append(msg)

        with timed_phase(timing, "write"):
            self._write_atomic(output_path, pdf_bytes)

        manifest = self._build_manifest(nodes, registry)
        manifest_path = None
        if self.config.write_manifest:
            manifest_path = output_path.with_suffix(".manifest.json")
            try:
                self._write_manifest(manifest_path, output_path, manifest)
            except OSError as e:
                output_path.unlink(missing_ok=True)
                raise ExportError(f"Failed to write manifest: {e}") from e

        logger.info(f"Exported {len(nodes)} pages to {output_path}")
        logger.debug(timing.summary())

        return ExportResult(
            output_path=output_path,
            page_count=len(nodes),
            manifest=tuple(manifest),
            warnings=tuple(warnings),
            manifest_path=manifest_path,
            timing=timing,
        )

    def export_bytes(
        self,
        store: NodeStore,
        registry: SourceRegistry,
        progress: Optional[ExportProgressCallback] = None,
    ) -> bytes:
        """
        Export the store to in-memory PDF bytes.

        Raises:
            ExportSourceMissingError, ExportError: As for export()
        """
        return self._compose_bytes(store.nodes, registry, progress, TimingLog("export"))

    # ─────────────────────────────────────────────────────────────────────────
    # Composition
    # ─────────────────────────────────────────────────────────────────────────

    def _compose_bytes(
        self,
        nodes: Sequence[Node],
        registry: SourceRegistry,
        progress: Optional[ExportProgressCallback],
        timing: TimingLog,
    ) -> bytes:
        if not nodes:
            raise ExportError("Nothing to export")

        sources = self._resolve_sources(nodes, registry)

        documents: Dict[str, fitz.Document] = {}
        output = fitz.open()
        try:
            with timed_phase(timing, "load_sources"):
                for source_id, source in sources.items():
                    if any(n.source_ref == source_id and n.kind is NodeKind.PAGE for n in nodes):
                        documents[source_id] = self._open_source(source)

            with timed_phase(timing, "compose"):
                total = len(nodes)
                for index, node in enumerate(nodes, start=1):
                    logger.debug(f"Processing Node {index}/{total}")
                    if progress is not None:
                        progress(index, total)
                    if node.kind is NodeKind.PAGE:
                        self._append_page(output, documents[node.source_ref], node, sources[node.source_ref])
                    else:
                        self._append_image(output, sources[node.source_ref], node)

            if output.page_count != len(nodes):
                raise ExportError(f"Composed {output.page_count} pages for {len(nodes)} nodes")

            with timed_phase(timing, "save"):
                return output.tobytes(garbage=3, deflate=True)
        finally:
            output.close()
            for doc in documents.values():
                doc.close()

    @staticmethod
    def _resolve_sources(
        nodes: Sequence[Node],
        registry: SourceRegistry,
    ) -> Dict[str, SourceAsset]:
        """Look up every source before any page is composed."""
        sources: Dict[str, SourceAsset] = {}
        for node in nodes:
            if node.source_ref in sources:
                continue
            try:
                sources[node.source_ref] = registry.get(node.source_ref)
            except KeyError:
                raise ExportSourceMissingError(node.source_ref, node.id) from None
        return sources

    @staticmethod
    def _open_source(source: SourceAsset) -> fitz.Document:
        try:
            return open_document(source)
        except DecodeError as e:
            raise ExportError(f"Source {source.name} is unreadable: {e}") from e

    @staticmethod
    def _append_page(
        output: fitz.Document,
        doc: fitz.Document,
        node: Node,
        source: SourceAsset,
    ) -> None:
        """Copy the original page and add the node rotation to its /Rotate."""
        index = node.original_index
        if index >= doc.page_count:
            raise ExportError(
                f"{source.name} has {doc.page_count} pages, node {node.id} needs page {index + 1}"
            )
        output.insert_pdf(doc, from_page=index, to_page=index)
        page = output[output.page_count - 1]
        if node.rotation:
            page.set_rotation((page.rotation + node.rotation) % 360)

    @staticmethod
    def _append_image(output: fitz.Document, source: SourceAsset, node: Node) -> None:
        """Draw the image on a new page and append it."""
        try:
            image = open_image(source)
        except DecodeError as e:
            raise ExportError(f"Source {source.name} is unreadable: {e}") from e

        page_pdf = fitz.open(stream=render_image_page(image, node.rotation), filetype="pdf")
        try:
            output.insert_pdf(page_pdf)
        finally:
            page_pdf.close()

    # ─────────────────────────────────────────────────────────────────────────
    # Output
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def _write_atomic(output_path: Path, data: bytes) -> None:
        """Write to a temporary sibling, then move into place."""
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{output_path.stem}-", suffix=".part", dir=output_path.parent
            )
        except OSError as e:
            raise ExportError(f"Cannot write to {output_path.parent}: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, output_path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise ExportError(f"Failed to write {output_path}: {e}") from e

    @staticmethod
    def _build_manifest(nodes: Sequence[Node], registry: SourceRegistry) -> List[Dict[str, Any]]:
        """One entry per output page, 1-indexed for humans."""
        manifest: List[Dict[str, Any]] = []
        for position, node in enumerate(nodes, start=1):
            source = registry.get(node.source_ref)
            manifest.append({
                "page": position,
                "node_id": node.id,
                "source": source.name,
                "kind": str(node.kind),
                "original_index": node.original_index,
                "source_page": node.page_number if node.kind is NodeKind.PAGE else None,
                "rotation": node.rotation,
            })
        return manifest

    @staticmethod
    def _write_manifest(
        manifest_path: Path,
        output_path: Path,
        manifest: List[Dict[str, Any]],
    ) -> None:
        payload = {
            "generated_at": datetime.now().isoformat(),
            "output": output_path.name,
            "page_count": len(manifest),
            "pages": manifest,
        }
        with open(manifest_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        logger.debug(f"Wrote manifest to {manifest_path}")
