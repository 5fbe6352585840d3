"""
End-to-end assembly scenarios.

Each test drives a Workspace through stage → integrate → edit → export
with real PDFs and images written to tmp_path.
"""

import fitz
import pytest

from page_assembler.assembler import InsertionMode, Workspace
from page_assembler.assembler.config import AssemblyConfig
from page_assembler.assembler.store import Edge, NodeStore
from page_assembler.assembler.selection import SelectionEngine
from page_assembler.core.errors import ExportSourceMissingError


@pytest.fixture
def workspace():
    return Workspace(AssemblyConfig(preview_scale=0.25))


def test_range_import_when_pages_2_to_4_then_three_nodes(workspace, pdf_source):
    """A 5-page document imported with "2-4" yields pages 2, 3 and 4."""
    pending = workspace.stage([pdf_source(pages=5)])
    assert pending.total_pages == 5

    workspace.integrate(pending, page_range="2-4", mode=InsertionMode.APPEND)

    assert [n.original_index for n in workspace.store] == [1, 2, 3]


def test_interleave_when_two_documents_then_alternates_pages(workspace, pdf_source, tmp_path):
    """[a, b, c] interleaved with [x, y] gives a, x, b, y, c."""
    first = pdf_source("first.pdf", pages=3)
    second = pdf_source("second.pdf", pages=2)
    workspace.add_sources([first])
    workspace.add_sources([second], mode=InsertionMode.INTERLEAVE)

    sources = [workspace.registry.get(n.source_ref).name for n in workspace.store]
    assert sources == ["first.pdf", "second.pdf", "first.pdf", "second.pdf", "first.pdf"]

    result = workspace.export(tmp_path / "out")
    doc = fitz.open(result.output_path)
    try:
        texts = [page.get_text().strip() for page in doc]
    finally:
        doc.close()
    assert texts == ["Page 1", "Page 1", "Page 2", "Page 2", "Page 3"]


def test_shift_click_then_move_to_end_when_contiguous_then_order_kept(make_nodes):
    """Click b, shift-click d, move the selection to the end."""
    store = NodeStore(make_nodes(["a", "b", "c", "d"]))
    engine = SelectionEngine(store)

    engine.click("b")
    engine.shift_click("d")
    assert engine.selection.ids == {"b", "c", "d"}

    store.move_to_edge(engine.selection.ids, Edge.END)
    assert store.ids == ("a", "b", "c", "d")


def test_move_to_end_when_members_out_of_order_then_relative_order_kept(make_nodes):
    store = NodeStore(make_nodes(["a", "c", "b", "d"]))

    store.move_to_edge({"b", "c", "d"}, Edge.END)

    assert store.ids == ("a", "c", "b", "d")


def test_export_when_source_evicted_then_missing_error_and_no_file(workspace, pdf_source, tmp_path):
    """Export with a missing source fails without writing anything."""
    source = pdf_source(pages=2)
    workspace.add_sources([source])
    workspace.registry.evict(source.source_id)
    out_dir = tmp_path / "out"

    with pytest.raises(ExportSourceMissingError):
        workspace.export(out_dir)

    assert not out_dir.exists() or list(out_dir.iterdir()) == []


def test_mixed_session_when_edited_then_export_matches_store(
    workspace, pdf_source, image_source, tmp_path
):
    """Import, insert an image after page 1, rotate it, drag and export."""
    workspace.add_sources([pdf_source("report.pdf", pages=3)])
    image = workspace.add_sources(
        [image_source("photo.png", size=(300, 200))],
        mode=InsertionMode.AFTER_INDEX,
        target=1,
    ).nodes[0]

    workspace.selection_engine.click(image.id)
    workspace.rotate_selected(90)
    workspace.move(3, 0)

    result = workspace.export(tmp_path / "out", name="mixed")

    assert result.page_count == len(workspace.store) == 4
    doc = fitz.open(result.output_path)
    try:
        assert "Page 3" in doc[0].get_text()
        assert "Page 1" in doc[1].get_text()
        assert (doc[2].rect.width, doc[2].rect.height) == (200, 300)
        assert "Page 2" in doc[3].get_text()
    finally:
        doc.close()
