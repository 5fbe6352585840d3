"""
Unit tests for SourceRegistry.
"""

import pytest

from page_assembler.assembler.decoding import SourceRegistry
from page_assembler.core.models import SourceAsset


@pytest.fixture
def assets():
    return [SourceAsset.from_bytes(f"{n}.pdf", b"") for n in ("a", "b", "c")]


def test_get_when_registered_then_returns_same_asset(assets):
    registry = SourceRegistry()
    registry.register(assets[0])
    assert registry.get(assets[0].source_id) is assets[0]


def test_get_when_missing_then_raises_key_error():
    with pytest.raises(KeyError):
        SourceRegistry().get("nope")


def test_evict_when_missing_then_returns_false(assets):
    registry = SourceRegistry()
    assert registry.evict(assets[0].source_id) is False


def test_prune_when_some_unreferenced_then_evicts_them(assets):
    registry = SourceRegistry()
    for asset in assets:
        registry.register(asset)

    evicted = registry.prune([assets[1].source_id])

    assert set(evicted) == {assets[0].source_id, assets[2].source_id}
    assert len(registry) == 1
    assert assets[1].source_id in registry
