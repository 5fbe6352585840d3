"""
Module: assembler.decoding.decoder

Purpose:
    Decode source assets into per-page raster previews. PDF pages are
    rendered with PyMuPDF; images are opened with Pillow and used as
    their own preview. Decoded pages keep only the source key and page
    index, so the exporter can copy the original page content later.

Key Functions:
    - open_document(): Open PDF bytes as a PyMuPDF document
    - open_image(): Open image bytes as a loaded Pillow image

Key Classes:
    - SourceDecoder: Page counting and preview rendering
    - DecodedPage: One decoded page/image with its preview

Dependencies:
    - fitz (PyMuPDF): PDF parsing and rendering
    - PIL.Image: Image decoding and JPEG encoding

Used By:
    - assembler.importing.coordinator: Decodes staged assets
    - assembler.output.exporter: Re-opens sources at export time
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

import fitz
from PIL import Image

from page_assembler.core.errors import DecodeError
from page_assembler.core.models import SourceAsset, SourceKind

from ..config import AssemblyConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedPage:
    """
    Decoded page ready to become a Node (immutable).

    Attributes:
        source_id: Key of the SourceAsset this page came from
        original_index: Zero-based page index in the source (0 for images)
        preview: Raster preview for display
        width: Source page width (points for PDFs, pixels for images)
        height: Source page height (points for PDFs, pixels for images)
    """
    source_id: str
    original_index: int
    preview: Image.Image = field(repr=False)
    width: float
    height: float


def open_document(source: SourceAsset) -> fitz.Document:
    """
    Open a PDF source as a PyMuPDF document.

    Args:
        source: Source asset with PDF bytes

    Returns:
        Open fitz.Document (caller closes it)

    Raises:
        DecodeError: If the bytes are not a readable, unlocked PDF with pages
    """
    try:
        doc = fitz.open(stream=source.data, filetype="pdf")
    except Exception as e:
        raise DecodeError(
            f"Cannot open {source.name}: {e}", source_name=source.name
        ) from e

    if doc.needs_pass:
        doc.close()
        raise DecodeError(f"{source.name} is password protected", source_name=source.name)
    if doc.page_count == 0:
        doc.close()
        raise DecodeError(f"{source.name} has no pages", source_name=source.name)
    return doc


def open_image(source: SourceAsset) -> Image.Image:
    """
    Open an image source with Pillow and force a full decode.

    Raises:
        DecodeError: If Pillow cannot identify or decode the bytes
    """
    try:
        image = Image.open(io.BytesIO(source.data))
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(
            f"Cannot decode image {source.name}: {e}", source_name=source.name
        ) from e
    return image


class SourceDecoder:
    """
    Decoder for document and image sources.

    One decoder is shared by the whole import pass; sources are decoded
    one at a time and each document is closed before the next opens.

    Example:
        >>> decoder = SourceDecoder(AssemblyConfig(preview_scale=0.25))
        >>> decoder.page_count(pdf_source)
        5
        >>> pages = decoder.decode(pdf_source, [2, 3, 4])
        >>> [p.original_index for p in pages]
        [1, 2, 3]
    """

    def __init__(self, config: Optional[AssemblyConfig] = None) -> None:
        self.config = config or AssemblyConfig()

    def page_count(self, source: SourceAsset) -> int:
        """
        Count pages without rendering anything.

        Returns:
            Page count for documents, 1 for images

        Raises:
            DecodeError: If the source cannot be opened
            ValueError: If the source type is unsupported
        """
        kind = source.kind
        if kind is SourceKind.IMAGE:
            return 1
        if kind is SourceKind.DOCUMENT:
            doc = open_document(source)
            try:
                return doc.page_count
            finally:
                doc.close()
        raise ValueError(f"Unsupported source type {source.media_type!r} for {source.name}")

    def decode(
        self,
        source: SourceAsset,
        pages: Optional[Sequence[int]] = None,
        on_page: Optional[Callable[[int], None]] = None,
    ) -> List[DecodedPage]:
        """
        Decode a source into previews.

        Args:
            source: Asset to decode
            pages: 1-based page numbers to render (documents only). None
                means every page. Numbers beyond the page count are skipped.
            on_page: Called with each 1-based page number before it renders

        Returns:
            Decoded pages in the order of ``pages``

        Raises:
            DecodeError: If the source cannot be decoded
            ValueError: If the source type is unsupported
        """
        kind = source.kind
        if kind is SourceKind.IMAGE:
            return [self._decode_image(source)]
        if kind is SourceKind.DOCUMENT:
            return self._decode_document(source, pages, on_page)
        raise ValueError(f"Unsupported source type {source.media_type!r} for {source.name}")

    def encode_preview(self, image: Image.Image) -> bytes:
        """
        JPEG-encode a preview at the configured quality.

        Args:
            image: Preview image (any mode)

        Returns:
            JPEG bytes
        """
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        buf = io.BytesIO()
        image.save(buf, format="JPEG", quality=self.config.preview_quality)
        return buf.getvalue()

    def _decode_document(
        self,
        source: SourceAsset,
        pages: Optional[Sequence[int]],
        on_page: Optional[Callable[[int], None]] = None,
    ) -> List[DecodedPage]:
        doc = open_document(source)
        try:
            if pages is None:
                pages = range(1, doc.page_count + 1)
            matrix = fitz.Matrix(self.config.preview_scale, self.config.preview_scale)

            decoded: List[DecodedPage] = []
            for page_number in pages:
                if not 1 <= page_number <= doc.page_count:
                    logger.debug(f"Skipping page {page_number} beyond {source.name} ({doc.page_count} pages)")
                    continue
                if on_page is not None:
                    on_page(page_number)
                try:
                    page = doc[page_number - 1]
                    pix = page.get_pixmap(matrix=matrix, alpha=False)
                except Exception as e:
                    raise DecodeError(
                        f"Cannot render {source.name} page {page_number}: {e}",
                        source_name=source.name,
                    ) from e
                preview = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
                decoded.append(
                    DecodedPage(
                        source_id=source.source_id,
                        original_index=page_number - 1,
                        preview=preview,
                        width=page.rect.width,
                        height=page.rect.height,
                    )
                )
            return decoded
        finally:
            doc.close()

    def _decode_image(self, source: SourceAsset) -> DecodedPage:
        image = open_image(source)
        return DecodedPage(
            source_id=source.source_id,
            original_index=0,
            preview=image,
            width=image.width,
            height=image.height,
        )
