"""
Unit Tests for Workspace

Session-level wiring: selection pruning on removal, busy flag and clear.
"""

import pytest

from page_assembler.assembler import Workspace
from page_assembler.assembler.config import AssemblyConfig
from page_assembler.assembler.store import Edge
from page_assembler.core.errors import WorkspaceBusyError


@pytest.fixture
def workspace(pdf_source):
    ws = Workspace(AssemblyConfig(preview_scale=0.25))
    ws.add_sources([pdf_source(pages=4)])
    return ws


class TestWorkspaceEditing:
    """Tests for selection-driven edits."""

    def test_delete_selected_when_called_then_selection_pruned(self, workspace):
        workspace.selection_engine.select_range("2-3")

        removed = workspace.delete_selected()

        assert len(removed) == 2
        assert len(workspace.store) == 2
        assert workspace.selection.ids <= set(workspace.store.ids)
        assert len(workspace.selection) == 0

    def test_remove_when_anchor_removed_then_anchor_cleared(self, workspace):
        target = workspace.store.ids[1]
        workspace.selection_engine.click(target)

        workspace.remove([target])

        assert workspace.selection.anchor is None

    def test_remove_when_last_node_of_source_then_source_evicted(self, workspace, image_source):
        image = image_source()
        result = workspace.add_sources([image])

        workspace.remove([result.nodes[0].id])

        assert image.source_id not in workspace.registry
        assert len(workspace.registry) == 1

    def test_rotate_selected_when_called_then_only_selection_rotated(self, workspace):
        workspace.selection_engine.select_range("1")

        count = workspace.rotate_selected(90)

        assert count == 1
        assert [n.rotation for n in workspace.store] == [90, 0, 0, 0]

    def test_move_selected_when_start_then_selection_first(self, workspace):
        ids = workspace.store.ids
        workspace.selection_engine.select_range("3-4")

        workspace.move_selected(Edge.START)

        assert workspace.store.ids == (ids[2], ids[3], ids[0], ids[1])

    def test_clear_when_called_then_everything_empty(self, workspace):
        workspace.selection_engine.select_all()

        workspace.clear()

        assert len(workspace.store) == 0
        assert len(workspace.selection) == 0
        assert len(workspace.registry) == 0


class TestWorkspaceBusy:
    """Tests for the single-worker busy flag."""

    def test_export_when_import_in_progress_then_raises_busy(self, workspace, tmp_path, pdf_source):
        pending = workspace.stage([pdf_source("second.pdf", pages=1)])

        def export_during_progress(event):
            workspace.export(tmp_path / "out")

        with pytest.raises(WorkspaceBusyError):
            workspace.integrate(pending, progress=export_during_progress)

        assert workspace.busy is False
        assert len(workspace.store) == 4

    def test_busy_when_idle_then_false(self, workspace):
        assert workspace.busy is False

    def test_export_when_idle_then_writes_pdf(self, workspace, tmp_path):
        result = workspace.export(tmp_path / "out", name="session")
        assert result.output_path.name == "session.pdf"
        assert result.page_count == 4
