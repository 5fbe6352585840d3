"""
Module: assembler.importing.coordinator

Purpose:
    Orchestrate one import batch: stage the incoming assets, decode them
    one at a time, filter pages by range and merge the new nodes into the
    store with the chosen insertion strategy.

    Staged → Integrating → Committed | Aborted

Key Classes:
    - ImportCoordinator: Stage / integrate / cancel
    - PendingImport: Staging object for one batch
    - ImportResult: Outcome of a committed batch
    - ProgressEvent: Progress report per asset/page

Dependencies:
    - assembler.decoding: SourceDecoder, SourceRegistry
    - assembler.store: NodeStore
    - common.ranges: Page-range filter

Used By:
    - assembler.workspace: Session facade
    - page_assembler.cli
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

from page_assembler.common.ranges import ALL_KEYWORD, require_range
from page_assembler.core.errors import (
    DecodeError,
    ImportBatchError,
    ImportStateError,
)
from page_assembler.core.models import Node, NodeKind, SourceAsset, SourceKind
from page_assembler.core.models.nodes import new_node_id

from ..config import AssemblyConfig
from ..decoding import DecodedPage, SourceDecoder, SourceRegistry
from ..insertion import InsertionMode
from ..store import NodeStore
from ..timing import TimingLog, timed_phase

logger = logging.getLogger(__name__)


class ImportState(str, Enum):
    """Lifecycle of a pending import."""
    STAGED = "staged"
    INTEGRATING = "integrating"
    COMMITTED = "committed"
    ABORTED = "aborted"

    def __str__(self) -> str:
        return self.value


@dataclass
class PendingImport:
    """
    Staging object for one import batch.

    Nothing here touches the store until integrate() commits.

    Attributes:
        sources: Supported assets in the order supplied
        is_multi_page_document: True when the batch is exactly one
            document, so a page range may be chosen before decoding
        total_pages: Page count of that document (0 otherwise)
        warnings: Messages for assets dropped while staging
        state: Lifecycle state
    """
    sources: Tuple[SourceAsset, ...]
    is_multi_page_document: bool = False
    total_pages: int = 0
    warnings: List[str] = field(default_factory=list)
    state: ImportState = ImportState.STAGED

    @property
    def default_range(self) -> str:
        """Initial range offered to the user."""
        if self.is_multi_page_document:
            return f"1-{self.total_pages}"
        return ALL_KEYWORD


@dataclass(frozen=True)
class ProgressEvent:
    """
    Progress report.

    Attributes:
        source_name: Asset being processed
        index: 1-based position of the asset in the batch
        total: Number of assets in the batch
        page: 1-based page being rendered (None for images)
    """
    source_name: str
    index: int
    total: int
    page: Optional[int] = None

    @property
    def message(self) -> str:
        if self.page is None:
            return f"Integrating: {self.source_name} ({self.index}/{self.total})"
        return f"Slicing: {self.source_name} (Pg {self.page})"


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass(frozen=True)
class ImportResult:
    """
    Result of a committed import (immutable).

    Attributes:
        nodes: New nodes in source-then-page order
        failed_sources: Names of assets that could not be decoded
        warnings: Staging and decode warnings, in order
        mode: Insertion strategy used
        timing: Per-source decode timings
    """
    nodes: Tuple[Node, ...]
    failed_sources: Tuple[str, ...]
    warnings: Tuple[str, ...]
    mode: InsertionMode
    timing: Optional[TimingLog] = None

    @property
    def node_count(self) -> int:
        return len(self.nodes)


class ImportCoordinator:
    """
    Runs import batches against a store.

    Example:
        >>> coordinator = ImportCoordinator(registry)
        >>> pending = coordinator.stage([SourceAsset.from_path(Path("d.pdf"))])
        >>> pending.total_pages
        5
        >>> result = coordinator.integrate(pending, store, page_range="2-4")
        >>> [n.original_index for n in result.nodes]
        [1, 2, 3]
    """

    def __init__(
        self,
        registry: SourceRegistry,
        config: Optional[AssemblyConfig] = None,
        decoder: Optional[SourceDecoder] = None,
    ) -> None:
        self.config = config or AssemblyConfig()
        self.registry = registry
        self.decoder = decoder or SourceDecoder(self.config)

    def stage(self, sources: Sequence[SourceAsset]) -> PendingImport:
        """
        Stage a batch of assets.

        Unsupported media types are dropped with a warning. When exactly
        one source is supplied and it is a document, its page count is
        read so the caller can choose a range; no page is rendered yet.

        Raises:
            ImportBatchError: If the batch is too large or nothing
                supported remains
            DecodeError: If the single staged document cannot be opened
        """
        if len(sources) > self.config.max_batch_sources:
            raise ImportBatchError(
                f"Batch of {len(sources)} files exceeds limit of {self.config.max_batch_sources}"
            )

        warnings: List[str] = []
        supported: List[SourceAsset] = []
        for source in sources:
            if source.kind is SourceKind.UNSUPPORTED:
                msg = f"Skipped {source.name}: unsupported type {source.media_type}"
                logger.warning(msg)
                warnings.append(msg)
            else:
                supported.append(source)

        if not supported:
            raise ImportBatchError("No supported files to import")

        pending = PendingImport(sources=tuple(supported), warnings=warnings)
        if len(sources) == 1 and supported[0].kind is SourceKind.DOCUMENT:
            pending.is_multi_page_document = True
            pending.total_pages = self.decoder.page_count(supported[0])
            logger.info(f"Staged {supported[0].name} with {pending.total_pages} pages")
        else:
            logger.info(f"Staged {len(supported)} sources")
        return pending

    def cancel(self, pending: PendingImport) -> None:
        """
        Abort a staged import. The store is never touched.

        Raises:
            ImportStateError: If the import is not STAGED
        """
        self._require_staged(pending)
        pending.state = ImportState.ABORTED
        logger.info("Import cancelled")

    def integrate(
        self,
        pending: PendingImport,
        store: NodeStore,
        *,
        page_range: Optional[str] = ALL_KEYWORD,
        mode: InsertionMode = InsertionMode.APPEND,
        target: Optional[Union[int, float]] = 1,
        progress: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        """
        Decode a staged batch and commit it to the store.

        Args:
            pending: Staged import
            store: Store to merge into
            page_range: Range expression (single-document batches only;
                other batches always import every page)
            mode: Insertion strategy
            target: 1-based position for AFTER_INDEX
            progress: Optional callback per asset and page

        Returns:
            ImportResult with the new nodes and per-asset warnings

        Raises:
            ImportStateError: If the import is not STAGED
            EmptyRangeError: If the range selects no page (import stays
                STAGED, store untouched)
        """
        self._require_staged(pending)

        pages: Optional[List[int]] = None
        if pending.is_multi_page_document:
            pages = require_range(page_range, pending.total_pages)

        pending.state = ImportState.INTEGRATING
        timing = TimingLog("import")
        try:
            with timed_phase(timing, "decode"):
                incoming, decoded_sources, failed, warnings = self._decode_batch(
                    pending, pages, timing, progress
                )
            with timed_phase(timing, "merge"):
                store.apply_insertion(incoming, mode, target)
        except Exception:
            pending.state = ImportState.STAGED
            raise

        for source in decoded_sources:
            self.registry.register(source)
        pending.state = ImportState.COMMITTED

        logger.info(
            f"Imported {len(incoming)} nodes from {len(decoded_sources)} sources ({mode}); "
            f"{len(failed)} failed"
        )
        logger.debug(timing.summary())

        return ImportResult(
            nodes=tuple(incoming),
            failed_sources=tuple(failed),
            warnings=tuple(pending.warnings + warnings),
            mode=mode,
            timing=timing,
        )

    def _decode_batch(
        self,
        pending: PendingImport,
        pages: Optional[List[int]],
        timing: TimingLog,
        progress: Optional[ProgressCallback],
    ) -> Tuple[List[Node], List[SourceAsset], List[str], List[str]]:
        """Decode every source in order; per-asset failures are recorded and skipped."""
        incoming: List[Node] = []
        decoded_sources: List[SourceAsset] = []
        failed: List[str] = []
        warnings: List[str] = []
        total = len(pending.sources)

        for index, source in enumerate(pending.sources, start=1):
            if progress is not None:
                progress(ProgressEvent(source.name, index, total))

            def on_page(page_number: int, _source=source, _index=index) -> None:
                if progress is not None:
                    progress(ProgressEvent(_source.name, _index, total, page_number))

            try:
                with timed_phase(timing, "decode", source=source.name):
                    decoded = self.decoder.decode(source, pages, on_page=on_page)
            except DecodeError as e:
                msg = f"Failed to decode {source.name}: {e}"
                logger.warning(msg, extra={"source_name": source.name, "error": str(e)})
                failed.append(source.name)
                warnings.append(msg)
                continue

            incoming.extend(self._to_node(source, page) for page in decoded)
            decoded_sources.append(source)
            logger.debug(f"Decoded {len(decoded)} pages from {source.name}")

        return incoming, decoded_sources, failed, warnings

    @staticmethod
    def _to_node(source: SourceAsset, page: DecodedPage) -> Node:
        if source.kind is SourceKind.IMAGE:
            return Node(
                id=new_node_id(source.name),
                source_ref=source.source_id,
                kind=NodeKind.IMAGE,
                original_index=0,
                preview=page.preview,
            )
        return Node(
            id=new_node_id(source.name, page.original_index + 1),
            source_ref=source.source_id,
            kind=NodeKind.PAGE,
            original_index=page.original_index,
            preview=page.preview,
        )

    @staticmethod
    def _require_staged(pending: PendingImport) -> None:
        if pending.state is not ImportState.STAGED:
            raise ImportStateError(f"Import is {pending.state}, expected {ImportState.STAGED}")
