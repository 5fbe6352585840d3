"""
Module: assembler.decoding.registry

Purpose:
    Lookup table of source assets keyed by source_id. Nodes hold only
    the key, so many nodes can share one source without copies.

Key Classes:
    - SourceRegistry: Register, look up and evict source assets

Used By:
    - assembler.importing.coordinator: Registers decoded sources
    - assembler.output.exporter: Resolves node.source_ref
    - assembler.workspace: Prunes sources no node references
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List

from page_assembler.core.models import SourceAsset

logger = logging.getLogger(__name__)


class SourceRegistry:
    """
    Source assets by source_id.

    Example:
        >>> registry = SourceRegistry()
        >>> registry.register(asset)
        >>> registry.get(asset.source_id) is asset
        True
    """

    def __init__(self) -> None:
        self._sources: Dict[str, SourceAsset] = {}

    def register(self, source: SourceAsset) -> None:
        """Add a source; re-registering the same id replaces it."""
        self._sources[source.source_id] = source

    def get(self, source_id: str) -> SourceAsset:
        """
        Look up a source.

        Raises:
            KeyError: If the source is not registered
        """
        return self._sources[source_id]

    def evict(self, source_id: str) -> bool:
        """Drop a source. Returns False if it was not registered."""
        removed = self._sources.pop(source_id, None)
        if removed is not None:
            logger.debug(f"Evicted source {removed.name}")
        return removed is not None

    def prune(self, live_ids: Iterable[str]) -> List[str]:
        """
        Evict every source not in ``live_ids``.

        Returns:
            Evicted source ids
        """
        live = set(live_ids)
        stale = [source_id for source_id in self._sources if source_id not in live]
        for source_id in stale:
            self.evict(source_id)
        return stale

    def clear(self) -> None:
        self._sources.clear()

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._sources

    def __len__(self) -> int:
        return len(self._sources)

    def __iter__(self) -> Iterator[SourceAsset]:
        return iter(list(self._sources.values()))
