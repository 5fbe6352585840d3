import pytest
import sys
from pathlib import Path
from typing import List, Sequence, Tuple

import fitz
from PIL import Image

# Add src to sys.path so we can import page_assembler
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from page_assembler.core.models import Node, NodeKind, SourceAsset  # noqa: E402


# Common test fixtures
@pytest.fixture
def make_pdf(tmp_path: Path):
    """Factory writing a PDF whose pages are labelled "Page n"."""

    def _make(
        name: str = "doc.pdf",
        pages: int = 3,
        size: Tuple[float, float] = (200, 300),
        rotation: int = 0,
    ) -> Path:
        doc = fitz.open()
        for i in range(pages):
            page = doc.new_page(width=size[0], height=size[1])
            page.insert_text((20, 40), f"Page {i + 1}", fontsize=14)
            if rotation:
                page.set_rotation(rotation)
        path = tmp_path / name
        doc.save(path)
        doc.close()
        return path

    return _make


@pytest.fixture
def make_image(tmp_path: Path):
    """Factory writing a solid-colour image."""

    def _make(
        name: str = "image.png",
        size: Tuple[int, int] = (200, 100),
        color: str = "red",
        mode: str = "RGB",
    ) -> Path:
        img = Image.new(mode, size, color=color)
        path = tmp_path / name
        img.save(path)
        return path

    return _make


@pytest.fixture
def pdf_source(make_pdf):
    """Factory returning a PDF SourceAsset."""

    def _make(name: str = "doc.pdf", pages: int = 3, **kwargs) -> SourceAsset:
        return SourceAsset.from_path(make_pdf(name, pages, **kwargs))

    return _make


@pytest.fixture
def image_source(make_image):
    """Factory returning an image SourceAsset."""

    def _make(name: str = "image.png", **kwargs) -> SourceAsset:
        return SourceAsset.from_path(make_image(name, **kwargs))

    return _make


@pytest.fixture
def make_nodes():
    """Factory building PAGE nodes with the given ids."""

    def _make(ids: Sequence[str], source_ref: str = "src") -> List[Node]:
        return [
            Node(id=node_id, source_ref=source_ref, kind=NodeKind.PAGE, original_index=i)
            for i, node_id in enumerate(ids)
        ]

    return _make


@pytest.fixture
def sample_image():
    """A small in-memory image."""
    return Image.new("RGB", (200, 100), color="white")
