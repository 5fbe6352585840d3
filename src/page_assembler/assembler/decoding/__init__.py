"""
Module: assembler.decoding

Purpose:
    Turns source assets into decoded pages with previews, and keeps the
    lookup table that lets nodes reference their sources by key.

Key Classes:
    - SourceDecoder: Page counting and preview rendering
    - DecodedPage: One decoded page/image
    - SourceRegistry: Source assets by source_id
"""

from .decoder import SourceDecoder, DecodedPage, open_document, open_image
from .registry import SourceRegistry

__all__ = [
    "SourceDecoder",
    "DecodedPage",
    "open_document",
    "open_image",
    "SourceRegistry",
]
